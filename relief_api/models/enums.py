# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Enumeration types for the disaster relief platform.
"""

from enum import Enum


class Urgency(str, Enum):
    """Help request urgency, ordered by severity."""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        """Severity rank, higher is more urgent."""
        return _URGENCY_RANKS[self]


_URGENCY_RANKS = {
    Urgency.CRITICAL: 3,
    Urgency.HIGH: 2,
    Urgency.MEDIUM: 1,
    Urgency.LOW: 0,
}


class RequestStatus(str, Enum):
    """Help request lifecycle status."""
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    CLOSED = "closed"


class ResponseStatus(str, Enum):
    """Volunteer response status enumeration."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ResourceStatus(str, Enum):
    """Donated resource status enumeration."""
    AVAILABLE = "available"
    RESERVED = "reserved"
    DISTRIBUTED = "distributed"
    EXPIRED = "expired"
