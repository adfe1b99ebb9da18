# SPDX-License-Identifier: Apache-2.0

"""
Workflow rules for help requests, volunteer responses and resources.

This module contains pure functions for entity construction and status
transition checks. Nothing here touches storage.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Set

from ..models.entities import ContactInfo, HelpRequest, Resource, VolunteerResponse
from ..models.enums import RequestStatus, ResponseStatus
from ..models.requests import CreateHelpRequestRequest, CreateResourceRequest

# Allowed forward moves for each help request status
REQUEST_TRANSITIONS: Dict[str, Set[str]] = {
    RequestStatus.OPEN.value: {RequestStatus.IN_PROGRESS.value, RequestStatus.CLOSED.value},
    RequestStatus.IN_PROGRESS.value: {RequestStatus.CLOSED.value},
    RequestStatus.CLOSED.value: set(),
}

RESPONSE_TRANSITIONS: Dict[str, Set[str]] = {
    ResponseStatus.PENDING.value: {ResponseStatus.ACCEPTED.value, ResponseStatus.CANCELLED.value},
    ResponseStatus.ACCEPTED.value: {ResponseStatus.COMPLETED.value, ResponseStatus.CANCELLED.value},
    ResponseStatus.COMPLETED.value: set(),
    ResponseStatus.CANCELLED.value: set(),
}


@dataclass
class TransitionResult:
    """Result of a workflow rule check."""
    allowed: bool
    reason: Optional[str] = None
    conflict: bool = False


def _status_value(status) -> str:
    return getattr(status, "value", status)


def build_help_request(payload: CreateHelpRequestRequest, owner_id: str) -> HelpRequest:
    """
    Create a new open help request from a validated submission.

    Args:
        payload: Validated request body
        owner_id: Submitting user's ID

    Returns:
        HelpRequest with no volunteers yet
    """
    private_data = ContactInfo(
        name=payload.name,
        address=payload.address,
        phone=payload.phone,
        email=payload.email
    )
    return HelpRequest(
        user_id=owner_id,
        private_data=private_data,
        help_type=payload.help_type,
        urgency=payload.urgency,
        description=payload.description,
        status=RequestStatus.OPEN,
        volunteer_count=0
    )


def build_resource(payload: CreateResourceRequest, donor_id: str) -> Resource:
    """Create a new available resource from a validated donation."""
    return Resource(
        user_id=donor_id,
        type=payload.type,
        quantity=payload.quantity,
        location=payload.location,
        description=payload.description,
        expiration_date=payload.expiration_date
    )


def check_request_transition(current, target) -> TransitionResult:
    """
    Check a help request status change.

    Status only moves forward: open, in-progress, closed.
    """
    current, target = _status_value(current), _status_value(target)
    if target in REQUEST_TRANSITIONS.get(current, set()):
        return TransitionResult(allowed=True)
    return TransitionResult(
        allowed=False,
        reason=f"Cannot move help request from '{current}' to '{target}'"
    )


def check_response_transition(current, target) -> TransitionResult:
    """
    Check a volunteer response status change.

    Completed and cancelled responses are final.
    """
    current, target = _status_value(current), _status_value(target)
    if target in RESPONSE_TRANSITIONS.get(current, set()):
        return TransitionResult(allowed=True)
    return TransitionResult(
        allowed=False,
        reason=f"Cannot move volunteer response from '{current}' to '{target}'"
    )


def check_volunteer_eligibility(request: HelpRequest, volunteer_id: str,
                                existing: Optional[VolunteerResponse] = None) -> TransitionResult:
    """
    Check whether a user may commit to a help request.

    Args:
        request: Help request being volunteered for
        volunteer_id: Volunteering user's ID
        existing: The user's existing response for this request, if any

    Returns:
        TransitionResult; a duplicate commitment is flagged as a conflict
    """
    if request.user_id == volunteer_id:
        return TransitionResult(allowed=False, reason="Cannot volunteer for your own request")

    if existing is not None:
        return TransitionResult(
            allowed=False,
            reason="Already volunteered for this request",
            conflict=True
        )

    if request.status == RequestStatus.CLOSED:
        return TransitionResult(allowed=False, reason="Help request is closed")

    return TransitionResult(allowed=True)


def build_volunteer_response(request: HelpRequest, volunteer_id: str) -> VolunteerResponse:
    """Create the response recorded when a volunteer commits."""
    return VolunteerResponse(
        request_id=request.id,
        volunteer_id=volunteer_id,
        status=ResponseStatus.ACCEPTED
    )
