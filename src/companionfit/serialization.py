"""Versioned JSON document format for the user aggregate.

    {"schema_version": "companionfit.user.v1", "user": {...}}

Validation and encoding go through pydantic over the plain dataclasses, so
a dump/load cycle reproduces every field, including workout order and
timestamps.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel

from companionfit.models import User

SCHEMA_VERSION_V1 = "companionfit.user.v1"


class UserDocumentV1(BaseModel):
    schema_version: Literal["companionfit.user.v1"] = SCHEMA_VERSION_V1
    user: User


def dump_user(user: User) -> dict[str, Any]:
    """Encode a user as a JSON-compatible dict."""
    return UserDocumentV1(user=user).model_dump(mode="json")


def load_user(payload: dict[str, Any]) -> User:
    """Decode a user document.

    Raises pydantic.ValidationError on an unknown schema version or a
    malformed payload.
    """
    return UserDocumentV1.model_validate(payload).user


def dumps_user(user: User) -> str:
    return UserDocumentV1(user=user).model_dump_json(indent=2)


def loads_user(raw: str | bytes) -> User:
    return UserDocumentV1.model_validate_json(raw).user

