# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Base entity models with common fields and document mapping.
"""

from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Tuple
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from bson import ObjectId


def generate_object_id() -> str:
    """Generate a new MongoDB ObjectId as string."""
    return str(ObjectId())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Model serialized with camelCase keys, populated by either name."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_assignment=True,
        validate_default=True
    )


class BaseEntity(CamelModel):
    """Base entity with common fields for all stored documents."""

    # Derived keys that are never persisted
    document_excluded_keys: ClassVar[Tuple[str, ...]] = ()

    id: str = Field(default_factory=generate_object_id, description="Unique identifier")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")

    def to_document(self) -> Dict[str, Any]:
        """Convert to a MongoDB document (camelCase keys, `_id` as ObjectId)."""
        document = self.model_dump(by_alias=True)
        for key in self.document_excluded_keys:
            document.pop(key, None)
        document["_id"] = ObjectId(document.pop("id"))
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]):
        """Build an entity from a MongoDB document."""
        data = dict(document)
        if "_id" in data:
            data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)