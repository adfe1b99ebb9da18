# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Donated resource endpoints.
"""

from flask import jsonify, current_app, g
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
import logging

from ..domain import workflow
from ..models.requests import CreateResourceRequest, UpdateResourceStatusRequest, ResourcePath
from ..middleware.auth import require_auth
from ..middleware.error_handler import AuthorizationException, NotFoundException
from ..middleware.validation import parse_json_body

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

resources_tag = Tag(name="Resources", description="Donated resources")
resources_bp = APIBlueprint(
    'resources',
    __name__,
    url_prefix='/api/resources',
    abp_tags=[resources_tag]
)


@resources_bp.post('')
@require_auth
def donate_resource():
    """Offer a resource for relief efforts."""
    user_context = g.user_context

    with tracer.start_as_current_span(
        "resource.create",
        attributes={"user.id": user_context.user_id, "operation": "create"}
    ) as span:
        payload = parse_json_body(CreateResourceRequest)
        resource = workflow.build_resource(payload, user_context.user_id)
        current_app.mongodb_service.create_resource(resource)

        span.set_attribute("resource.id", resource.id)
        logger.info(
            "Resource donated",
            extra={"resource_id": resource.id, "user_id": user_context.user_id, "type": resource.type}
        )
        return jsonify(resource.model_dump(mode="json", by_alias=True)), 201


@resources_bp.get('')
@require_auth
def list_resources():
    """
    List available resources, newest first.

    Each resource carries its donor's name and email.
    """
    user_context = g.user_context

    with tracer.start_as_current_span(
        "resource.list",
        attributes={"user.id": user_context.user_id, "operation": "list"}
    ) as span:
        mongodb_service = current_app.mongodb_service

        resources = mongodb_service.list_available_resources()
        donors = mongodb_service.find_users_by_ids(resource.user_id for resource in resources)

        records = []
        for resource in resources:
            record = resource.model_dump(mode="json", by_alias=True)
            donor = donors.get(resource.user_id)
            record["donor"] = {"name": donor.name, "email": donor.email} if donor else None
            records.append(record)

        span.set_attribute("resource.count", len(records))
        return jsonify(records), 200


@resources_bp.patch('/<resource_id>')
@require_auth
def update_resource_status(path: ResourcePath):
    """Change a resource's status; only its donor may do so."""
    user_context = g.user_context

    with tracer.start_as_current_span(
        "resource.update_status",
        attributes={
            "user.id": user_context.user_id,
            "resource.id": path.resource_id,
            "operation": "update_status"
        }
    ):
        payload = parse_json_body(UpdateResourceStatusRequest)
        mongodb_service = current_app.mongodb_service

        resource = mongodb_service.find_resource(path.resource_id)
        if resource is None:
            raise NotFoundException(f"Resource {path.resource_id} not found")

        if resource.user_id != user_context.user_id:
            raise AuthorizationException("Only the donor can update this resource")

        mongodb_service.update_resource_status(resource.id, payload.status)
        resource.status = payload.status

        logger.info(
            "Resource status changed",
            extra={"resource_id": resource.id, "status": resource.status}
        )
        return jsonify(resource.model_dump(mode="json", by_alias=True)), 200
