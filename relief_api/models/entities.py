# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Core entity models for the disaster relief platform.
"""

import re
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict, computed_field, field_validator

from .base import BaseEntity, CamelModel
from .enums import Urgency, RequestStatus, ResponseStatus, ResourceStatus
from ..domain.masking import mask_data

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


class ContactInfo(CamelModel):
    """One tier (public or private) of a requester's contact details."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Contact name")
    address: str = Field(default="", description="Contact address")
    phone: str = Field(default="", description="Contact phone number")
    email: str = Field(default="", description="Contact email")

    @field_validator('name', 'address', 'phone', 'email', mode='before')
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v


class User(BaseEntity):
    """Registered user account."""

    name: str = Field(..., min_length=1, max_length=200, description="User full name")
    email: str = Field(..., description="User email address")
    phone: str = Field(..., min_length=1, description="User phone number")
    password_hash: str = Field(..., description="Hashed password")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        """Validate email format."""
        if not re.match(EMAIL_PATTERN, v.lower()):
            raise ValueError('Invalid email format')
        return v.lower()

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate user name."""
        if not v.strip():
            raise ValueError('User name cannot be empty')
        return v.strip()

    def to_public(self) -> Dict[str, str]:
        """User summary safe to return to clients."""
        return {"id": self.id, "name": self.name, "email": self.email}


class HelpRequest(BaseEntity):
    """
    Help request with two contact tiers.

    Only the private tier is stored. The public tier is recomputed from it on
    every read, so the two can never disagree.
    """

    document_excluded_keys = ("publicData",)

    user_id: str = Field(..., description="Owning user ID")
    private_data: ContactInfo = Field(..., frozen=True, description="Unmasked contact details")
    help_type: str = Field(..., min_length=1, description="Kind of help needed")
    urgency: Urgency = Field(..., description="Request urgency")
    description: str = Field(..., min_length=1, description="Free-text description")
    status: RequestStatus = Field(default=RequestStatus.OPEN, description="Lifecycle status")
    volunteer_count: int = Field(default=0, ge=0, description="Number of volunteer commitments")

    @computed_field(alias="publicData")
    @property
    def public_data(self) -> ContactInfo:
        """Masked contact details."""
        return ContactInfo(**mask_data(self.private_data.model_dump()))


class VolunteerResponse(BaseEntity):
    """A volunteer's commitment to a help request."""

    request_id: str = Field(..., description="Help request ID")
    volunteer_id: str = Field(..., description="Volunteering user ID")
    status: ResponseStatus = Field(default=ResponseStatus.PENDING, description="Response status")
    updated_at: Optional[datetime] = Field(None, description="Last status change")


class Resource(BaseEntity):
    """Donated resource offered to relief efforts."""

    user_id: str = Field(..., description="Donor user ID")
    type: str = Field(..., min_length=1, description="Resource type")
    quantity: int = Field(..., gt=0, description="Available quantity")
    location: str = Field(..., min_length=1, description="Pickup location")
    description: Optional[str] = Field(None, description="Resource description")
    status: ResourceStatus = Field(default=ResourceStatus.AVAILABLE, description="Resource status")
    expiration_date: Optional[datetime] = Field(None, description="Expiration date")


class UserContext(BaseModel):
    """Authenticated caller for request processing."""

    user_id: str = Field(..., description="Authenticated user ID")
    email: Optional[str] = Field(None, description="User email")
    name: Optional[str] = Field(None, description="User display name")
    token_payload: Optional[Dict[str, Any]] = Field(None, description="Decoded JWT payload")
    ip_address: Optional[str] = Field(None, description="Client IP address")
    user_agent: Optional[str] = Field(None, description="Client user agent")
