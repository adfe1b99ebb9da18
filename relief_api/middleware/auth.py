# SPDX-License-Identifier: Apache-2.0

"""
Authentication middleware for JWT token validation and user context extraction.

This module provides Flask middleware for validating bearer tokens and
building the user context used by protected endpoints.
"""

from functools import wraps
from flask import request, g, current_app
from typing import Optional, Dict, Any, Callable
from opentelemetry import trace
import logging

from ..models.entities import UserContext
from ..services.auth import TokenValidationError
from .error_handler import AuthenticationException

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


class AuthMiddleware:
    """
    JWT authentication middleware for Flask applications.

    Handles token extraction, validation and user context building for
    protected endpoints.
    """

    def __init__(self, auth_service):
        """
        Initialize the authentication middleware.

        Args:
            auth_service: JWT authentication service
        """
        self.auth_service = auth_service

    def extract_token_from_request(self) -> Optional[str]:
        """
        Extract JWT token from the Authorization header.

        Returns:
            JWT token string or None if not found
        """
        auth_header = request.headers.get('Authorization', '')

        if not auth_header.startswith('Bearer '):
            return None

        token = auth_header[7:].strip()
        return token or None

    def build_user_context(self, token_payload: Dict[str, Any]) -> UserContext:
        """Build user context from a validated token payload."""
        return UserContext(
            user_id=token_payload["sub"],
            email=token_payload.get("email"),
            name=token_payload.get("name"),
            token_payload=token_payload,
            ip_address=request.remote_addr,
            user_agent=request.headers.get('User-Agent', '')
        )

    def authenticate(self) -> UserContext:
        """
        Authenticate the current request.

        Returns:
            UserContext for the token's subject

        Raises:
            AuthenticationException: If the token is missing, invalid or expired
        """
        with tracer.start_as_current_span("auth.middleware.validate_request") as span:
            token = self.extract_token_from_request()
            if not token:
                span.set_attribute("auth.result", "missing_token")
                logger.warning("Authentication failed: missing token")
                raise AuthenticationException("Missing authorization token")

            try:
                token_payload = self.auth_service.validate_token(token)
            except TokenValidationError as e:
                span.set_attribute("auth.result", "invalid_token")
                logger.warning(f"Authentication failed: {str(e)}")
                raise AuthenticationException(str(e))

            user_context = self.build_user_context(token_payload)

            span.set_attributes({
                "auth.result": "success",
                "user.id": user_context.user_id
            })
            logger.debug(
                "Authentication successful",
                extra={
                    "user_id": user_context.user_id,
                    "ip_address": user_context.ip_address
                }
            )
            return user_context


def require_auth(f: Callable) -> Callable:
    """
    Decorator to require JWT authentication for Flask routes.

    The authenticated user is stored in ``g.user_context``.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.user_context = current_app.auth_middleware.authenticate()
        return f(*args, **kwargs)
    return decorated_function
