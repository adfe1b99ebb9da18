# SPDX-License-Identifier: Apache-2.0

"""
API route blueprints.
"""

from .auth import auth_bp
from .health import health_bp
from .help_requests import help_requests_bp
from .resources import resources_bp
from .volunteers import volunteers_bp

blueprints = [
    auth_bp,
    help_requests_bp,
    volunteers_bp,
    resources_bp,
    health_bp
]

__all__ = ["blueprints"]
