# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for Pydantic models.
"""

import pytest
from bson import ObjectId
from pydantic import ValidationError

from relief_api.models.entities import User, HelpRequest, ContactInfo, Resource
from relief_api.models.enums import Urgency
from relief_api.models.requests import (
    SignupRequest, CreateHelpRequestRequest, HelpRequestFilters, VolunteerCommitRequest
)


class TestUrgency:
    """Test urgency ranks."""

    def test_ranks_are_ordered(self):
        assert Urgency.CRITICAL.rank > Urgency.HIGH.rank > Urgency.MEDIUM.rank > Urgency.LOW.rank


class TestHelpRequest:
    """Test the help request entity."""

    def test_public_tier_is_derived(self, make_help_request):
        request = make_help_request()

        assert request.public_data == ContactInfo(
            name="Maria S.",
            address="Main St area, Springfield",
            phone="555-***-**67",
            email="ma***@example.com"
        )

    def test_private_tier_is_immutable(self, make_help_request):
        request = make_help_request()

        with pytest.raises(ValidationError):
            request.private_data = ContactInfo(name="Someone Else")

        with pytest.raises(ValidationError):
            request.private_data.phone = "0000000000"

    def test_document_stores_private_tier_only(self, make_help_request):
        request = make_help_request()

        document = request.to_document()

        assert "publicData" not in document
        assert "id" not in document
        assert document["_id"] == ObjectId(request.id)
        assert document["privateData"]["phone"] == "5551234567"
        assert document["helpType"] == "Food"
        assert document["status"] == "open"

    def test_document_round_trip_recomputes_public_tier(self, make_help_request):
        request = make_help_request()

        restored = HelpRequest.from_document(request.to_document())

        assert restored.id == request.id
        assert restored.public_data == request.public_data

    def test_serialized_record_uses_camel_case(self, make_help_request):
        record = make_help_request().model_dump(mode="json", by_alias=True)

        assert {"id", "userId", "privateData", "publicData", "helpType", "volunteerCount", "createdAt"} <= set(record)

    def test_rejects_unknown_urgency(self, contact_info):
        with pytest.raises(ValidationError):
            HelpRequest(
                user_id="owner-1",
                private_data=contact_info,
                help_type="Food",
                urgency="Whenever",
                description="Need supplies"
            )


class TestUser:
    """Test the user entity."""

    def test_email_is_lowercased(self):
        user = User(name="Jane Doe", email="Jane@Example.COM", phone="555", password_hash="x")

        assert user.email == "jane@example.com"

    def test_public_view_omits_password_hash(self):
        user = User(name="Jane Doe", email="jane@example.com", phone="555", password_hash="secret")

        assert user.to_public() == {"id": user.id, "name": "Jane Doe", "email": "jane@example.com"}


class TestRequestModels:
    """Test request validation at the creation boundary."""

    def test_help_request_requires_name_and_phone(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateHelpRequestRequest(helpType="Food", urgency="Low", description="Need supplies")

        fields = {error["loc"][0] for error in exc_info.value.errors()}
        assert {"name", "phone"} <= fields

    def test_help_request_rejects_malformed_email(self):
        with pytest.raises(ValidationError):
            CreateHelpRequestRequest(
                name="Maria Santos",
                phone="5551234567",
                email="not-an-email",
                helpType="Food",
                urgency="Low",
                description="Need supplies"
            )

    def test_help_request_accepts_missing_email_and_address(self):
        payload = CreateHelpRequestRequest(
            name="Maria Santos",
            phone="5551234567",
            helpType="Food",
            urgency="CRITICAL",
            description="Need supplies"
        )

        assert payload.email == ""
        assert payload.address == ""
        assert payload.urgency == "Critical"

    def test_signup_requires_long_password(self):
        with pytest.raises(ValidationError):
            SignupRequest(name="Jane", email="jane@example.com", phone="555", password="short")

    def test_filters_accept_camel_case(self):
        filters = HelpRequestFilters.model_validate({"status": "open", "helpType": "Food"})

        assert filters.status == "open"
        assert filters.help_type == "Food"

    def test_commit_accepts_camel_case(self):
        assert VolunteerCommitRequest.model_validate({"requestId": "abc"}).request_id == "abc"

    def test_resource_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            Resource(user_id="donor", type="Water", quantity=0, location="Shelter")
