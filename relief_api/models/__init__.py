# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - Pydantic schemas and data models for the relief platform.
"""

# Base models
from .base import BaseEntity, CamelModel

# Enumerations
from .enums import (
    Urgency,
    RequestStatus,
    ResponseStatus,
    ResourceStatus
)

# Core entities
from .entities import (
    ContactInfo,
    User,
    HelpRequest,
    VolunteerResponse,
    Resource,
    UserContext
)

# Request models
from .requests import (
    SignupRequest,
    LoginRequest,
    CreateHelpRequestRequest,
    HelpRequestFilters,
    UpdateHelpRequestStatusRequest,
    VolunteerCommitRequest,
    UpdateVolunteerResponseRequest,
    CreateResourceRequest,
    UpdateResourceStatusRequest,
    HelpRequestPath,
    VolunteerResponsePath,
    ResourcePath
)

__all__ = [
    # Base models
    "BaseEntity",
    "CamelModel",

    # Enumerations
    "Urgency",
    "RequestStatus",
    "ResponseStatus",
    "ResourceStatus",

    # Core entities
    "ContactInfo",
    "User",
    "HelpRequest",
    "VolunteerResponse",
    "Resource",
    "UserContext",

    # Request models
    "SignupRequest",
    "LoginRequest",
    "CreateHelpRequestRequest",
    "HelpRequestFilters",
    "UpdateHelpRequestStatusRequest",
    "VolunteerCommitRequest",
    "UpdateVolunteerResponseRequest",
    "CreateResourceRequest",
    "UpdateResourceStatusRequest",
    "HelpRequestPath",
    "VolunteerResponsePath",
    "ResourcePath"
]
