# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
CORS and security header middleware.
"""

from flask import Flask, request, make_response
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'Referrer-Policy': 'no-referrer',
    'Cross-Origin-Resource-Policy': 'same-origin',
}


class SecurityMiddleware:
    """CORS and baseline security headers for Flask applications."""

    def __init__(
        self,
        app: Flask,
        allowed_origins: Optional[List[str]] = None,
        allowed_methods: Optional[List[str]] = None,
        allowed_headers: Optional[List[str]] = None,
        max_age: int = 86400
    ):
        """
        Initialize security middleware.

        Args:
            app: Flask application
            allowed_origins: Allowed origins; '*' allows any, a trailing '*' matches a prefix
            allowed_methods: List of allowed HTTP methods
            allowed_headers: List of allowed headers
            max_age: Preflight cache duration in seconds
        """
        self.app = app
        self.allowed_origins = allowed_origins if allowed_origins is not None else ['*']
        self.allowed_methods = allowed_methods or ['GET', 'POST', 'PATCH', 'OPTIONS']
        self.allowed_headers = allowed_headers or [
            'Accept',
            'Authorization',
            'Content-Type',
            'X-Requested-With'
        ]
        self.expose_headers = [
            'X-Trace-Id',
            'X-RateLimit-Limit',
            'X-RateLimit-Remaining',
            'X-RateLimit-Reset',
            'Retry-After'
        ]
        self.max_age = max_age

        self.register_handlers()

    def is_origin_allowed(self, origin: Optional[str]) -> bool:
        if not origin:
            return False

        for allowed_origin in self.allowed_origins:
            if allowed_origin == '*' or allowed_origin == origin:
                return True
            if allowed_origin.endswith('*') and origin.startswith(allowed_origin[:-1]):
                return True

        return False

    def add_cors_headers(self, response, origin: str):
        response.headers['Access-Control-Allow-Origin'] = origin
        response.headers['Vary'] = 'Origin'
        response.headers['Access-Control-Allow-Methods'] = ', '.join(self.allowed_methods)
        response.headers['Access-Control-Allow-Headers'] = ', '.join(self.allowed_headers)
        response.headers['Access-Control-Expose-Headers'] = ', '.join(self.expose_headers)
        response.headers['Access-Control-Max-Age'] = str(self.max_age)
        return response

    def register_handlers(self):
        """Register preflight and response header hooks."""

        @self.app.before_request
        def handle_preflight():
            if request.method != 'OPTIONS':
                return None

            origin = request.headers.get('Origin')
            if not self.is_origin_allowed(origin):
                logger.warning(f"CORS preflight rejected for origin: {origin}")
                return make_response('', 403)

            return self.add_cors_headers(make_response('', 204), origin)

        @self.app.after_request
        def add_response_headers(response):
            origin = request.headers.get('Origin')
            if self.is_origin_allowed(origin):
                self.add_cors_headers(response, origin)
            elif origin:
                logger.warning(f"CORS rejected for origin: {origin}")

            for header, value in SECURITY_HEADERS.items():
                response.headers.setdefault(header, value)
            return response
