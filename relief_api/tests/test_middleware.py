# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for middleware functionality.
"""

import pytest
from unittest.mock import Mock
from flask import Flask, g, jsonify
from pydantic import BaseModel

from relief_api.middleware.error_handler import (
    ErrorHandlerMiddleware, ValidationException, AuthenticationException,
    AuthorizationException, NotFoundException, ConflictException, RateLimitException,
    format_validation_errors
)
from relief_api.middleware.auth import AuthMiddleware, require_auth
from relief_api.middleware.rate_limit import RateLimiter
from relief_api.middleware.security import SecurityMiddleware
from relief_api.middleware.validation import parse_json_body
from relief_api.services.auth import TokenValidationError


class TestErrorHandlerMiddleware:
    """Test problem responses."""

    def setup_method(self):
        self.app = Flask(__name__)
        ErrorHandlerMiddleware(self.app)

    @pytest.mark.parametrize("exception,status", [
        (ValidationException("bad input"), 400),
        (AuthenticationException("no token"), 401),
        (AuthorizationException("not yours"), 403),
        (NotFoundException("missing"), 404),
        (ConflictException("duplicate"), 409),
    ])
    def test_custom_exceptions_map_to_status(self, exception, status):
        @self.app.route('/fail')
        def fail():
            raise exception

        response = self.app.test_client().get('/fail')
        body = response.get_json()

        assert response.status_code == status
        assert body["status"] == status
        assert body["detail"] == exception.message
        assert body["instance"] == "/fail"
        assert body["type"].endswith(exception.error_type)

    def test_validation_errors_are_listed(self):
        @self.app.route('/fail')
        def fail():
            raise ValidationException("Request validation failed", [{"field": "name", "message": "required", "type": "missing"}])

        body = self.app.test_client().get('/fail').get_json()

        assert body["errors"][0]["field"] == "name"

    def test_rate_limit_sets_retry_after(self):
        @self.app.route('/fail')
        def fail():
            raise RateLimitException("slow down", retry_after=30)

        response = self.app.test_client().get('/fail')

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "30"

    def test_unknown_route_is_problem_json(self):
        response = self.app.test_client().get('/nowhere')

        assert response.status_code == 404
        assert response.get_json()["title"] == "Resource Not Found"

    def test_unexpected_error_hides_details(self):
        @self.app.route('/boom')
        def boom():
            raise RuntimeError("database password is hunter2")

        response = self.app.test_client().get('/boom')

        assert response.status_code == 500
        assert "hunter2" not in response.get_json()["detail"]

    def test_format_validation_errors(self):
        validation_error = Mock()
        validation_error.errors.return_value = [
            {"loc": ("privateData", "phone"), "msg": "Field required", "type": "missing"}
        ]

        result = format_validation_errors(validation_error)

        assert result == [{"field": "privateData.phone", "message": "Field required", "type": "missing"}]


class TestAuthMiddleware:
    """Test bearer token authentication."""

    def setup_method(self):
        self.app = Flask(__name__)
        ErrorHandlerMiddleware(self.app)
        self.auth_service = Mock()
        self.app.auth_middleware = AuthMiddleware(self.auth_service)

        @self.app.route('/protected/<item_id>')
        @require_auth
        def protected(item_id):
            return jsonify({"user": g.user_context.user_id, "item": item_id})

    def test_valid_token_sets_user_context(self):
        self.auth_service.validate_token.return_value = {"sub": "user-1", "email": "a@b.co", "name": "A"}

        response = self.app.test_client().get('/protected/7', headers={"Authorization": "Bearer good"})

        assert response.status_code == 200
        assert response.get_json() == {"user": "user-1", "item": "7"}
        self.auth_service.validate_token.assert_called_once_with("good")

    def test_missing_token(self):
        response = self.app.test_client().get('/protected/7')

        assert response.status_code == 401
        assert response.get_json()["detail"] == "Missing authorization token"

    def test_non_bearer_header_is_missing_token(self):
        response = self.app.test_client().get('/protected/7', headers={"Authorization": "Basic abc"})

        assert response.status_code == 401

    def test_invalid_token(self):
        self.auth_service.validate_token.side_effect = TokenValidationError("Token has expired")

        response = self.app.test_client().get('/protected/7', headers={"Authorization": "Bearer old"})

        assert response.status_code == 401
        assert response.get_json()["detail"] == "Token has expired"


class TestRateLimiter:
    """Test fixed-window rate limiting."""

    def setup_method(self):
        self.app = Flask(__name__)
        ErrorHandlerMiddleware(self.app)
        self.redis_service = Mock()
        RateLimiter(self.redis_service, limit=2, window_seconds=60).init_app(self.app)

        @self.app.route('/api/ping')
        def ping():
            return jsonify({"ok": True})

        @self.app.route('/other')
        def other():
            return jsonify({"ok": True})

    def test_under_limit_sets_headers(self):
        self.redis_service.increment_window.return_value = 1

        response = self.app.test_client().get('/api/ping')

        assert response.status_code == 200
        assert response.headers["X-RateLimit-Limit"] == "2"
        assert response.headers["X-RateLimit-Remaining"] == "1"

    def test_over_limit_is_rejected(self):
        self.redis_service.increment_window.return_value = 3

        response = self.app.test_client().get('/api/ping')

        assert response.status_code == 429
        assert response.headers["X-RateLimit-Remaining"] == "0"
        assert int(response.headers["Retry-After"]) >= 1

    def test_fails_open_without_redis(self):
        self.redis_service.increment_window.return_value = None

        response = self.app.test_client().get('/api/ping')

        assert response.status_code == 200
        assert "X-RateLimit-Limit" not in response.headers

    def test_only_api_routes_are_limited(self):
        self.app.test_client().get('/other')

        self.redis_service.increment_window.assert_not_called()

    def test_key_uses_window_ttl(self):
        self.redis_service.increment_window.return_value = 1

        self.app.test_client().get('/api/ping')

        key, ttl = self.redis_service.increment_window.call_args[0]
        assert key.startswith("rate_limit:ip:")
        assert ttl == 60


class TestSecurityMiddleware:
    """Test CORS and security headers."""

    def setup_method(self):
        self.app = Flask(__name__)
        SecurityMiddleware(self.app, allowed_origins=["http://localhost:5173"])

        @self.app.route('/api/ping', methods=['GET', 'POST'])
        def ping():
            return jsonify({"ok": True})

    def test_security_headers_always_set(self):
        response = self.app.test_client().get('/api/ping')

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Access-Control-Allow-Origin" not in response.headers

    def test_allowed_origin(self):
        response = self.app.test_client().get('/api/ping', headers={"Origin": "http://localhost:5173"})

        assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"

    def test_disallowed_origin(self):
        response = self.app.test_client().get('/api/ping', headers={"Origin": "http://evil.example"})

        assert "Access-Control-Allow-Origin" not in response.headers

    def test_preflight(self):
        client = self.app.test_client()

        allowed = client.options('/api/ping', headers={"Origin": "http://localhost:5173"})
        rejected = client.options('/api/ping', headers={"Origin": "http://evil.example"})

        assert allowed.status_code == 204
        assert "PATCH" in allowed.headers["Access-Control-Allow-Methods"]
        assert rejected.status_code == 403


class TestParseJsonBody:
    """Test request body validation."""

    class Payload(BaseModel):
        title: str
        count: int

    def setup_method(self):
        self.app = Flask(__name__)

    def test_valid_body(self):
        with self.app.test_request_context('/x', method='POST', json={"title": "a", "count": 2}):
            payload = parse_json_body(self.Payload)

        assert payload.count == 2

    def test_invalid_body(self):
        with self.app.test_request_context('/x', method='POST', json={"title": "a"}):
            with pytest.raises(ValidationException) as exc_info:
                parse_json_body(self.Payload)

        assert exc_info.value.validation_errors[0]["field"] == "count"

    def test_non_object_body(self):
        with self.app.test_request_context('/x', method='POST', data="nope", content_type="text/plain"):
            with pytest.raises(ValidationException):
                parse_json_body(self.Payload)
