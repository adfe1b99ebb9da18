# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Middleware package for the disaster relief API.
"""

from .error_handler import (
    ErrorHandlerMiddleware,
    CustomException,
    ValidationException,
    AuthenticationException,
    AuthorizationException,
    NotFoundException,
    ConflictException,
    RateLimitException
)
from .auth import AuthMiddleware, require_auth
from .rate_limit import RateLimiter
from .security import SecurityMiddleware
from .validation import parse_json_body, parse_query

__all__ = [
    "ErrorHandlerMiddleware",
    "CustomException",
    "ValidationException",
    "AuthenticationException",
    "AuthorizationException",
    "NotFoundException",
    "ConflictException",
    "RateLimitException",
    "AuthMiddleware",
    "require_auth",
    "RateLimiter",
    "SecurityMiddleware",
    "parse_json_body",
    "parse_query"
]
