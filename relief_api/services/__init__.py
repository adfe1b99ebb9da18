# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Services package - External integrations and side effects.
"""

from .mongodb import MongoDBService, DuplicateDocumentError
from .redis import RedisService
from .auth import AuthService, AuthenticationError, TokenValidationError

__all__ = [
    "MongoDBService",
    "DuplicateDocumentError",
    "RedisService",
    "AuthService",
    "AuthenticationError",
    "TokenValidationError"
]
