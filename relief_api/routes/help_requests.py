# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Help request endpoints.

Every response that carries a help request goes through the disclosure
functions, so each viewer gets either the private or the masked contact tier.
"""

from flask import jsonify, current_app, g
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
import logging

from ..domain import disclosure, workflow
from ..models.requests import (
    CreateHelpRequestRequest,
    HelpRequestFilters,
    UpdateHelpRequestStatusRequest,
    HelpRequestPath
)
from ..middleware.auth import require_auth
from ..middleware.error_handler import (
    AuthorizationException,
    NotFoundException,
    ValidationException
)
from ..middleware.validation import parse_json_body, parse_query

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

help_requests_tag = Tag(name="Help Requests", description="Help request submission and listing")
help_requests_bp = APIBlueprint(
    'help_requests',
    __name__,
    url_prefix='/api/requests',
    abp_tags=[help_requests_tag]
)


def _viewer_response_ids(viewer_id: str):
    responses = current_app.mongodb_service.list_volunteer_responses(viewer_id)
    return disclosure.collect_authorized_request_ids(responses)


def _get_help_request_or_404(request_id: str):
    help_request = current_app.mongodb_service.find_help_request(request_id)
    if help_request is None:
        raise NotFoundException(f"Help request {request_id} not found")
    return help_request


@help_requests_bp.post('')
@require_auth
def create_help_request():
    """
    Submit a help request.

    The masked contact tier is derived from the submitted details.
    """
    user_context = g.user_context

    with tracer.start_as_current_span(
        "help_request.create",
        attributes={"user.id": user_context.user_id, "operation": "create"}
    ) as span:
        payload = parse_json_body(CreateHelpRequestRequest)
        help_request = workflow.build_help_request(payload, user_context.user_id)
        current_app.mongodb_service.create_help_request(help_request)

        span.set_attributes({
            "help_request.id": help_request.id,
            "help_request.urgency": help_request.urgency
        })
        logger.info(
            "Help request created",
            extra={
                "request_id": help_request.id,
                "user_id": user_context.user_id,
                "urgency": help_request.urgency
            }
        )
        return jsonify(disclosure.project(user_context.user_id, help_request)), 201


@help_requests_bp.get('')
@require_auth
def list_help_requests():
    """List help requests, most urgent first."""
    user_context = g.user_context

    with tracer.start_as_current_span(
        "help_request.list",
        attributes={"user.id": user_context.user_id, "operation": "list"}
    ) as span:
        filters = parse_query(HelpRequestFilters)
        mongodb_service = current_app.mongodb_service

        help_requests = mongodb_service.list_help_requests(
            status=filters.status,
            help_type=filters.help_type
        )
        viewer_responses = mongodb_service.list_volunteer_responses(user_context.user_id)

        records = disclosure.project_listing(user_context.user_id, help_requests, viewer_responses)
        span.set_attribute("help_request.count", len(records))
        return jsonify(records), 200


@help_requests_bp.get('/<request_id>')
@require_auth
def get_help_request(path: HelpRequestPath):
    """Get one help request."""
    user_context = g.user_context

    with tracer.start_as_current_span(
        "help_request.detail",
        attributes={
            "user.id": user_context.user_id,
            "help_request.id": path.request_id,
            "operation": "detail"
        }
    ):
        help_request = _get_help_request_or_404(path.request_id)
        record = disclosure.project(
            user_context.user_id,
            help_request,
            _viewer_response_ids(user_context.user_id)
        )
        return jsonify(record), 200


@help_requests_bp.patch('/<request_id>/status')
@require_auth
def update_help_request_status(path: HelpRequestPath):
    """
    Move a help request forward in its lifecycle.

    Only the owner may change status. Disclosure is unaffected by status.
    """
    user_context = g.user_context

    with tracer.start_as_current_span(
        "help_request.update_status",
        attributes={
            "user.id": user_context.user_id,
            "help_request.id": path.request_id,
            "operation": "update_status"
        }
    ) as span:
        payload = parse_json_body(UpdateHelpRequestStatusRequest)
        help_request = _get_help_request_or_404(path.request_id)

        if help_request.user_id != user_context.user_id:
            raise AuthorizationException("Only the requester can change the status of a help request")

        result = workflow.check_request_transition(help_request.status, payload.status)
        if not result.allowed:
            raise ValidationException(result.reason)

        previous_status = help_request.status
        current_app.mongodb_service.update_help_request_status(help_request.id, payload.status)
        help_request.status = payload.status

        span.set_attributes({
            "help_request.previous_status": previous_status,
            "help_request.status": help_request.status
        })
        logger.info(
            "Help request status changed",
            extra={
                "request_id": help_request.id,
                "from_status": previous_status,
                "to_status": help_request.status
            }
        )
        return jsonify(disclosure.project(user_context.user_id, help_request)), 200
