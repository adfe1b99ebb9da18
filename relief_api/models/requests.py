# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request models for API endpoints.

Required-field and format validation for every write happens here, before
any domain function runs.
"""

import re
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .base import CamelModel
from .entities import EMAIL_PATTERN
from .enums import Urgency, RequestStatus, ResponseStatus, ResourceStatus


def _normalize_email(v: str) -> str:
    v = v.strip().lower()
    if not re.match(EMAIL_PATTERN, v):
        raise ValueError('Invalid email format')
    return v


class SignupRequest(CamelModel):
    """Request model for account signup."""

    name: str = Field(..., min_length=1, max_length=200, description="User full name")
    email: str = Field(..., description="User email address")
    phone: str = Field(..., min_length=1, description="User phone number")
    password: str = Field(..., min_length=8, description="User password")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        """Validate email format."""
        return _normalize_email(v)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name cannot be empty')
        return v.strip()


class LoginRequest(CamelModel):
    """Request model for login."""

    email: str = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")

    @field_validator('email')
    @classmethod
    def lower_email(cls, v):
        return v.strip().lower()


class CreateHelpRequestRequest(CamelModel):
    """Request model for submitting a help request."""

    name: str = Field(..., min_length=1, max_length=200, description="Contact name")
    address: str = Field(default="", max_length=500, description="Contact address")
    phone: str = Field(..., min_length=1, max_length=50, description="Contact phone number")
    email: str = Field(default="", description="Contact email")
    help_type: str = Field(..., min_length=1, max_length=100, description="Kind of help needed")
    urgency: Urgency = Field(..., description="Critical, High, Medium or Low")
    description: str = Field(..., min_length=1, max_length=2000, description="What is needed")

    @field_validator('name', 'help_type', 'description')
    @classmethod
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError('Field cannot be empty')
        return v.strip()

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        """Email is optional but must be well formed when given."""
        if not v.strip():
            return ""
        return _normalize_email(v)

    @field_validator('urgency', mode='before')
    @classmethod
    def normalize_urgency(cls, v):
        """Accept urgency in any letter case."""
        if isinstance(v, str):
            return v.strip().capitalize()
        return v


class HelpRequestFilters(CamelModel):
    """Query filters for help request listings."""

    status: Optional[RequestStatus] = Field(None, description="Filter by status")
    help_type: Optional[str] = Field(None, description="Filter by help type")


class UpdateHelpRequestStatusRequest(CamelModel):
    """Request model for moving a help request along its lifecycle."""

    status: RequestStatus = Field(..., description="Target status")


class VolunteerCommitRequest(CamelModel):
    """Request model for volunteering on a help request."""

    request_id: str = Field(..., min_length=1, description="Help request ID")


class UpdateVolunteerResponseRequest(CamelModel):
    """Request model for updating a volunteer response."""

    status: ResponseStatus = Field(..., description="Target status")


class CreateResourceRequest(CamelModel):
    """Request model for donating a resource."""

    type: str = Field(..., min_length=1, max_length=100, description="Resource type")
    quantity: int = Field(..., gt=0, description="Available quantity")
    location: str = Field(..., min_length=1, max_length=500, description="Pickup location")
    description: Optional[str] = Field(None, max_length=2000, description="Resource description")
    expiration_date: Optional[datetime] = Field(None, description="Expiration date")


class UpdateResourceStatusRequest(CamelModel):
    """Request model for changing a resource's status."""

    status: ResourceStatus = Field(..., description="Target status")


class HelpRequestPath(BaseModel):
    request_id: str = Field(..., description="Help request ID")


class VolunteerResponsePath(BaseModel):
    response_id: str = Field(..., description="Volunteer response ID")


class ResourcePath(BaseModel):
    resource_id: str = Field(..., description="Resource ID")
