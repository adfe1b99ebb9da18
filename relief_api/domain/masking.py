# SPDX-License-Identifier: Apache-2.0

"""
Contact masking for the public tier of help requests.

Every function here is pure and total: any input, including None or
malformed values, produces a string. Masking is one-directional and lossy;
nothing in the platform ever attempts to reverse it.
"""

import re
from typing import Any, Dict, Mapping

PHONE_SENTINEL = "***-***-****"
ADDRESS_SENTINEL = "General area"
EMAIL_SENTINEL = "***@***"

_NON_DIGITS = re.compile(r"\D")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def mask_phone(phone: Any) -> str:
    """
    Mask a phone number, keeping the area code and the last two digits.

    Args:
        phone: Raw phone number in any formatting

    Returns:
        "555-***-**67" style mask for 10+ digits, the fixed sentinel for
        shorter numbers, "" for empty input
    """
    phone = _as_text(phone)
    if not phone:
        return ""

    digits = _NON_DIGITS.sub("", phone)
    if len(digits) >= 10:
        return f"{digits[:3]}-***-**{digits[-2:]}"
    return PHONE_SENTINEL


def mask_name(name: Any) -> str:
    """
    Mask a personal name.

    "Jane Doe" becomes "Jane D."; a single token loses its last character,
    so "Jane" becomes "Jan*".
    """
    name = _as_text(name)
    tokens = name.split()
    if not tokens:
        return ""

    if len(tokens) > 1:
        return f"{tokens[0]} {tokens[-1][0]}."
    return f"{tokens[0][:-1]}*"


def mask_address(address: Any) -> str:
    """
    Reduce an address to its street name and locality.

    "123 Main St, Springfield" becomes "Main St area, Springfield". Addresses
    without a comma collapse to "General area".
    """
    address = _as_text(address)
    if not address:
        return ""

    parts = address.split(",")
    if len(parts) < 2:
        return ADDRESS_SENTINEL

    street = " ".join(parts[0].split()[1:]) or "Street"
    return f"{street} area, {parts[-1].strip()}"


def mask_email(email: Any) -> str:
    """
    Mask the local part of an email address, keeping the domain.

    Args:
        email: Raw email address

    Returns:
        "ja***@example.com" style mask, "**@domain" for local parts of two
        characters or fewer, "***@***" when there is no domain
    """
    email = _as_text(email)
    if not email:
        return ""

    local, _, domain = email.partition("@")
    domain = domain.split("@")[0]
    if not domain:
        return EMAIL_SENTINEL
    if len(local) <= 2:
        return f"**@{domain}"
    return f"{local[:2]}***@{domain}"


def _get_field(raw: Any, field: str) -> Any:
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return raw.get(field)
    return getattr(raw, field, None)


def mask_data(raw: Any) -> Dict[str, str]:
    """
    Derive the public tier from raw contact details.

    This is the only place public contact data is produced.

    Args:
        raw: Mapping or object exposing name, address, phone and email;
            missing fields are treated as empty

    Returns:
        Dictionary with the masked name, address, phone and email
    """
    return {
        "name": mask_name(_get_field(raw, "name")),
        "address": mask_address(_get_field(raw, "address")),
        "phone": mask_phone(_get_field(raw, "phone")),
        "email": mask_email(_get_field(raw, "email")),
    }
