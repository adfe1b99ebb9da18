# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for workflow rules.
"""

import pytest

from relief_api.domain import workflow
from relief_api.models.entities import VolunteerResponse
from relief_api.models.requests import CreateHelpRequestRequest, CreateResourceRequest


class TestBuildHelpRequest:
    """Test building help requests from submissions."""

    def test_new_request_is_open_without_volunteers(self):
        payload = CreateHelpRequestRequest(
            name="Maria Santos",
            phone="5551234567",
            helpType="Medical",
            urgency="high",
            description="Insulin needed"
        )

        request = workflow.build_help_request(payload, "owner-1")

        assert request.user_id == "owner-1"
        assert request.status == "open"
        assert request.volunteer_count == 0
        assert request.urgency == "High"
        assert request.private_data.name == "Maria Santos"
        assert request.public_data.name == "Maria S."
        assert request.public_data.address == ""


class TestBuildResource:
    """Test building resources from donations."""

    def test_new_resource_is_available(self):
        payload = CreateResourceRequest(type="Water", quantity=20, location="Shelter 3")

        resource = workflow.build_resource(payload, "donor-1")

        assert resource.user_id == "donor-1"
        assert resource.status == "available"
        assert resource.quantity == 20


class TestRequestTransitions:
    """Test help request status transitions."""

    @pytest.mark.parametrize("current,target", [
        ("open", "in-progress"),
        ("in-progress", "closed"),
        ("open", "closed"),
    ])
    def test_forward_moves_allowed(self, current, target):
        assert workflow.check_request_transition(current, target).allowed is True

    @pytest.mark.parametrize("current,target", [
        ("in-progress", "open"),
        ("closed", "open"),
        ("closed", "in-progress"),
        ("open", "open"),
    ])
    def test_backward_and_same_state_rejected(self, current, target):
        result = workflow.check_request_transition(current, target)

        assert result.allowed is False
        assert current in result.reason


class TestResponseTransitions:
    """Test volunteer response status transitions."""

    @pytest.mark.parametrize("current,target", [
        ("pending", "accepted"),
        ("pending", "cancelled"),
        ("accepted", "completed"),
        ("accepted", "cancelled"),
    ])
    def test_allowed(self, current, target):
        assert workflow.check_response_transition(current, target).allowed is True

    @pytest.mark.parametrize("current,target", [
        ("completed", "cancelled"),
        ("cancelled", "accepted"),
        ("pending", "completed"),
        ("accepted", "pending"),
    ])
    def test_rejected(self, current, target):
        assert workflow.check_response_transition(current, target).allowed is False


class TestVolunteerEligibility:
    """Test who may commit to a help request."""

    def test_other_user_may_volunteer(self, make_help_request):
        request = make_help_request(user_id="owner-1")

        assert workflow.check_volunteer_eligibility(request, "volunteer-1").allowed is True

    def test_owner_may_not_volunteer(self, make_help_request):
        request = make_help_request(user_id="owner-1")

        result = workflow.check_volunteer_eligibility(request, "owner-1")

        assert result.allowed is False
        assert result.conflict is False

    def test_duplicate_commit_is_conflict(self, make_help_request):
        request = make_help_request(user_id="owner-1")
        existing = VolunteerResponse(request_id=request.id, volunteer_id="volunteer-1")

        result = workflow.check_volunteer_eligibility(request, "volunteer-1", existing)

        assert result.allowed is False
        assert result.conflict is True

    def test_closed_request_rejects_volunteers(self, make_help_request):
        request = make_help_request(user_id="owner-1", status="closed")

        result = workflow.check_volunteer_eligibility(request, "volunteer-1")

        assert result.allowed is False
        assert result.reason == "Help request is closed"

    def test_commitment_is_accepted(self, make_help_request):
        request = make_help_request(user_id="owner-1")

        response = workflow.build_volunteer_response(request, "volunteer-1")

        assert response.request_id == request.id
        assert response.status == "accepted"
