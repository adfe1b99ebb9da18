# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Volunteer commitment endpoints.
"""

from flask import jsonify, current_app, g
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
import logging

from ..domain import disclosure, workflow
from ..models.requests import (
    VolunteerCommitRequest,
    UpdateVolunteerResponseRequest,
    VolunteerResponsePath
)
from ..services.mongodb import DuplicateDocumentError
from ..middleware.auth import require_auth
from ..middleware.error_handler import (
    AuthorizationException,
    ConflictException,
    NotFoundException,
    ValidationException
)
from ..middleware.validation import parse_json_body

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

volunteers_tag = Tag(name="Volunteers", description="Volunteer commitments to help requests")
volunteers_bp = APIBlueprint(
    'volunteers',
    __name__,
    url_prefix='/api',
    abp_tags=[volunteers_tag]
)


def _commitment_record(help_request, volunteer_response):
    """Help request record for a volunteer, tagged with their response."""
    record = disclosure.project_commitment(help_request)
    record["responseId"] = volunteer_response.id
    record["responseStatus"] = volunteer_response.status
    return record


@volunteers_bp.post('/volunteer')
@require_auth
def commit_to_request():
    """
    Commit the caller as a volunteer for a help request.

    The commitment grants the caller access to the request's private contact
    details from then on.
    """
    user_context = g.user_context

    with tracer.start_as_current_span(
        "volunteer.commit",
        attributes={"user.id": user_context.user_id, "operation": "commit"}
    ) as span:
        payload = parse_json_body(VolunteerCommitRequest)
        mongodb_service = current_app.mongodb_service

        help_request = mongodb_service.find_help_request(payload.request_id)
        if help_request is None:
            raise NotFoundException(f"Help request {payload.request_id} not found")

        existing = mongodb_service.find_volunteer_response_for(help_request.id, user_context.user_id)
        eligibility = workflow.check_volunteer_eligibility(help_request, user_context.user_id, existing)
        if not eligibility.allowed:
            span.set_status(Status(StatusCode.ERROR, eligibility.reason))
            if eligibility.conflict:
                raise ConflictException(eligibility.reason)
            raise ValidationException(eligibility.reason)

        volunteer_response = workflow.build_volunteer_response(help_request, user_context.user_id)
        try:
            mongodb_service.create_volunteer_response(volunteer_response)
        except DuplicateDocumentError:
            raise ConflictException("Already volunteered for this request")

        updated_request = mongodb_service.increment_volunteer_count(help_request.id) or help_request

        span.set_attributes({
            "help_request.id": help_request.id,
            "volunteer_response.id": volunteer_response.id,
            "help_request.volunteer_count": updated_request.volunteer_count
        })
        logger.info(
            "Volunteer committed to help request",
            extra={
                "request_id": help_request.id,
                "response_id": volunteer_response.id,
                "volunteer_id": user_context.user_id
            }
        )

        return jsonify(_commitment_record(updated_request, volunteer_response)), 201


@volunteers_bp.patch('/volunteer/<response_id>')
@require_auth
def update_volunteer_response(path: VolunteerResponsePath):
    """Change the status of the caller's own volunteer response."""
    user_context = g.user_context

    with tracer.start_as_current_span(
        "volunteer.update_status",
        attributes={
            "user.id": user_context.user_id,
            "volunteer_response.id": path.response_id,
            "operation": "update_status"
        }
    ):
        payload = parse_json_body(UpdateVolunteerResponseRequest)
        mongodb_service = current_app.mongodb_service

        volunteer_response = mongodb_service.find_volunteer_response(path.response_id)
        if volunteer_response is None:
            raise NotFoundException(f"Volunteer response {path.response_id} not found")

        if volunteer_response.volunteer_id != user_context.user_id:
            raise AuthorizationException("Only the volunteer can update this response")

        result = workflow.check_response_transition(volunteer_response.status, payload.status)
        if not result.allowed:
            raise ValidationException(result.reason)

        mongodb_service.update_volunteer_response_status(volunteer_response.id, payload.status)
        updated = mongodb_service.find_volunteer_response(volunteer_response.id) or volunteer_response

        logger.info(
            "Volunteer response status changed",
            extra={
                "response_id": volunteer_response.id,
                "from_status": volunteer_response.status,
                "to_status": payload.status
            }
        )
        return jsonify(updated.model_dump(mode="json", by_alias=True)), 200


@volunteers_bp.get('/my-volunteers')
@require_auth
def list_my_commitments():
    """
    List the caller's volunteer commitments, newest first.

    Each entry is the help request itself with the private tier disclosed.
    """
    user_context = g.user_context

    with tracer.start_as_current_span(
        "volunteer.list_mine",
        attributes={"user.id": user_context.user_id, "operation": "list_mine"}
    ) as span:
        mongodb_service = current_app.mongodb_service

        responses = mongodb_service.list_volunteer_responses(user_context.user_id)
        help_requests = mongodb_service.find_help_requests_by_ids(
            response.request_id for response in responses
        )

        commitments = []
        for response in responses:
            help_request = help_requests.get(response.request_id)
            if help_request is None:
                logger.warning(
                    "Volunteer response references a missing help request",
                    extra={"response_id": response.id, "request_id": response.request_id}
                )
                continue

            commitments.append(_commitment_record(help_request, response))

        span.set_attribute("volunteer_response.count", len(commitments))
        return jsonify(commitments), 200
