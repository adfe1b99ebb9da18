# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Error handling middleware with RFC 7807 problem responses.
Provides centralized error handling and formatting for Flask applications.
"""

from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException
from pydantic import ValidationError
from typing import Dict, Any, List, Optional
from opentelemetry import trace
import logging

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

PROBLEM_TYPE_BASE = "https://api.disaster-relief.org/problems"

HTTP_ERROR_TYPES = {
    400: ("bad-request", "Bad Request"),
    401: ("authentication-required", "Authentication Required"),
    403: ("insufficient-permissions", "Insufficient Permissions"),
    404: ("resource-not-found", "Resource Not Found"),
    405: ("method-not-allowed", "Method Not Allowed"),
    409: ("resource-conflict", "Resource Conflict"),
    422: ("validation-error", "Validation Error"),
    429: ("rate-limit-exceeded", "Rate Limit Exceeded"),
}


def build_problem(error_type: str, title: str, status: int, detail: str,
                  instance: Optional[str] = None, **extra) -> Dict[str, Any]:
    """
    Build a problem details body.

    Args:
        error_type: Problem type slug
        title: Short summary of the problem type
        status: HTTP status code
        detail: Explanation specific to this occurrence
        instance: Request path the problem occurred on

    Returns:
        Problem details dictionary
    """
    problem = {
        "type": f"{PROBLEM_TYPE_BASE}/{error_type}",
        "title": title,
        "status": status,
        "detail": detail,
        "instance": instance if instance is not None else request.path
    }
    problem.update(extra)
    return problem


def format_validation_errors(validation_error: ValidationError) -> List[Dict[str, Any]]:
    """Flatten pydantic validation errors for API responses."""
    errors = []

    for error in validation_error.errors():
        field_path = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field_path,
            "message": error["msg"],
            "type": error["type"]
        })

    return errors


class CustomException(Exception):
    """Base class for custom application exceptions."""

    def __init__(self, message: str, status_code: int = 500, error_type: str = "application-error",
                 title: str = "Application Error"):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        self.title = title

    def to_problem(self) -> Dict[str, Any]:
        return build_problem(self.error_type, self.title, self.status_code, self.message)


class ValidationException(CustomException):
    """Exception for validation errors."""

    def __init__(self, message: str, validation_errors: list = None):
        super().__init__(message, 400, "validation-error", "Validation Error")
        self.validation_errors = validation_errors or []

    def to_problem(self) -> Dict[str, Any]:
        return build_problem(self.error_type, self.title, self.status_code, self.message,
                             errors=self.validation_errors)


class AuthenticationException(CustomException):
    """Exception for authentication errors."""

    def __init__(self, message: str):
        super().__init__(message, 401, "authentication-required", "Authentication Required")


class AuthorizationException(CustomException):
    """Exception for authorization errors."""

    def __init__(self, message: str):
        super().__init__(message, 403, "insufficient-permissions", "Insufficient Permissions")


class NotFoundException(CustomException):
    """Exception for resource not found errors."""

    def __init__(self, message: str):
        super().__init__(message, 404, "resource-not-found", "Resource Not Found")


class ConflictException(CustomException):
    """Exception for resource conflict errors."""

    def __init__(self, message: str):
        super().__init__(message, 409, "resource-conflict", "Resource Conflict")


class RateLimitException(CustomException):
    """Exception for exceeded rate limits."""

    def __init__(self, message: str, retry_after: int = 0):
        super().__init__(message, 429, "rate-limit-exceeded", "Rate Limit Exceeded")
        self.retry_after = retry_after


class ErrorHandlerMiddleware:
    """Centralized error handling middleware."""

    def __init__(self, app: Flask, expose_details: bool = False):
        self.app = app
        self.expose_details = expose_details
        self.register_error_handlers()

    def register_error_handlers(self):
        """Register error handlers with Flask application."""
        self.app.register_error_handler(CustomException, self.handle_custom_exception)
        self.app.register_error_handler(ValidationError, self.handle_validation_error)
        self.app.register_error_handler(HTTPException, self.handle_http_exception)
        self.app.register_error_handler(Exception, self.handle_unexpected_error)

    def handle_custom_exception(self, error: CustomException):
        with tracer.start_as_current_span("error_handler.custom_exception") as span:
            span.set_attributes({
                "error.type": error.error_type,
                "error.status": error.status_code,
                "http.method": request.method,
                "http.path": request.path
            })

            logger.warning(
                f"Request rejected: {error.error_type}",
                extra={
                    "error_type": error.error_type,
                    "status_code": error.status_code,
                    "detail": error.message,
                    "path": request.path,
                    "method": request.method
                }
            )

            response = jsonify(error.to_problem())
            response.status_code = error.status_code
            if isinstance(error, RateLimitException) and error.retry_after > 0:
                response.headers['Retry-After'] = str(error.retry_after)
            return response

    def handle_validation_error(self, error: ValidationError):
        """Pydantic errors that escape route-level parsing are client errors."""
        return self.handle_custom_exception(
            ValidationException("Request validation failed", format_validation_errors(error))
        )

    def handle_http_exception(self, error: HTTPException):
        error_type, title = HTTP_ERROR_TYPES.get(error.code, ("http-error", error.name))
        detail = error.description or title

        if error.code >= 500:
            logger.error(f"Server error: {title}", extra={"path": request.path, "status_code": error.code})
        else:
            logger.warning(f"Client error: {title}", extra={"path": request.path, "status_code": error.code})

        return jsonify(build_problem(error_type, title, error.code, detail)), error.code

    def handle_unexpected_error(self, error: Exception):
        """
        Handle unexpected exceptions not caught by specific handlers.

        Details are only exposed in development.
        """
        with tracer.start_as_current_span("error_handler.unexpected_error") as span:
            span.record_exception(error)
            span.set_attributes({
                "error.class": error.__class__.__name__,
                "http.method": request.method,
                "http.path": request.path
            })

            logger.error(
                f"Unexpected error: {error.__class__.__name__}",
                extra={
                    "error_class": error.__class__.__name__,
                    "path": request.path,
                    "method": request.method
                },
                exc_info=True
            )

            detail = "An unexpected error occurred"
            if self.expose_details:
                detail = f"{error.__class__.__name__}: {str(error)}"

            return jsonify(build_problem("internal-server-error", "Internal Server Error", 500, detail)), 500
