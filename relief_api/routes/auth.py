# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Authentication endpoints for signup and login.
"""

from flask import request, jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
import logging

from ..models.entities import User
from ..models.requests import SignupRequest, LoginRequest
from ..services.mongodb import DuplicateDocumentError
from ..middleware.error_handler import AuthenticationException, ConflictException
from ..middleware.validation import parse_json_body

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

auth_tag = Tag(name="Authentication", description="Account signup and login")
auth_bp = APIBlueprint(
    'auth',
    __name__,
    url_prefix='/api/auth',
    abp_tags=[auth_tag]
)


def _session_response(user: User, status_code: int):
    token = current_app.auth_service.generate_token(user)
    return jsonify({"token": token, "user": user.to_public()}), status_code


@auth_bp.post('/signup')
def signup():
    """
    Register a new account and return a session token.

    Responds 409 when the email is already registered.
    """
    with tracer.start_as_current_span(
        "auth.signup",
        attributes={"operation": "signup", "ip_address": request.remote_addr}
    ) as span:
        signup_request = parse_json_body(SignupRequest)
        mongodb_service = current_app.mongodb_service

        if mongodb_service.find_user_by_email(signup_request.email):
            span.set_status(Status(StatusCode.ERROR, "Email already registered"))
            logger.info("Signup rejected for existing email", extra={"ip_address": request.remote_addr})
            raise ConflictException("Email already registered")

        user = User(
            name=signup_request.name,
            email=signup_request.email,
            phone=signup_request.phone,
            password_hash=current_app.auth_service.hash_password(signup_request.password)
        )

        try:
            mongodb_service.create_user(user)
        except DuplicateDocumentError:
            # Lost a race with a concurrent signup
            raise ConflictException("Email already registered")

        span.set_attribute("user.id", user.id)
        logger.info("User registered", extra={"user_id": user.id})
        return _session_response(user, 201)


@auth_bp.post('/login')
def login():
    """
    Authenticate with email and password.

    The same 401 is returned for an unknown email and a wrong password.
    """
    with tracer.start_as_current_span(
        "auth.login",
        attributes={"operation": "login", "ip_address": request.remote_addr}
    ) as span:
        login_request = parse_json_body(LoginRequest)

        with tracer.start_as_current_span("db.user.find_by_email") as db_span:
            user = current_app.mongodb_service.find_user_by_email(login_request.email)
            db_span.set_attributes({
                "db.collection": "users",
                "db.operation": "find_by_email",
                "db.found": user is not None
            })

        if user is None or not current_app.auth_service.verify_password(
                login_request.password, user.password_hash):
            span.set_status(Status(StatusCode.ERROR, "Invalid credentials"))
            logger.warning("Login failed", extra={"ip_address": request.remote_addr})
            raise AuthenticationException("Invalid email or password")

        span.set_attribute("user.id", user.id)
        logger.info("User logged in", extra={"user_id": user.id})
        return _session_response(user, 200)
