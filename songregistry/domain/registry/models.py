#!/usr/bin/env python
"""
Pydantic records for registry entries and permissions.

Bounds live on the models so that every write path (create, update, store
round-trips) is checked by the same rules. Records are frozen; partial
updates go through ``model_copy(update=...)`` so untouched fields are carried
over as-is.
"""

from __future__ import annotations

from typing import Annotated, Any, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError

from .errors import InvalidInputError


TITLE_MAX_LENGTH = 64
ARTIST_MAX_LENGTH = 32
GENRE_MAX_LENGTH = 32
TAG_MAX_LENGTH = 24
MAX_TAGS = 8
DURATION_LIMIT = 10000  # exclusive

Title = Annotated[str, StringConstraints(strict=True, min_length=1, max_length=TITLE_MAX_LENGTH)]
Artist = Annotated[str, StringConstraints(strict=True, min_length=1, max_length=ARTIST_MAX_LENGTH)]
Genre = Annotated[str, StringConstraints(strict=True, min_length=1, max_length=GENRE_MAX_LENGTH)]
Tag = Annotated[str, StringConstraints(strict=True, min_length=1, max_length=TAG_MAX_LENGTH)]
# Identities are opaque; only emptiness is rejected
Identity = Annotated[str, StringConstraints(strict=True, min_length=1)]

ModelT = TypeVar("ModelT", bound=BaseModel)


class SongDetails(BaseModel):
    """Fields an owner may replace through ``update_details``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: Title
    duration: int = Field(strict=True, gt=0, lt=DURATION_LIMIT)
    genre: Genre
    tags: Tuple[Tag, ...] = Field(min_length=1, max_length=MAX_TAGS)


class SongRegistration(SongDetails):
    """Everything a caller supplies when registering a song."""

    artist: Artist


class SongEntry(SongRegistration):
    """A committed registry entry."""

    id: int = Field(strict=True, gt=0)
    owner: Identity
    creation_height: int = Field(strict=True, ge=0)


class SongPermissionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    authorized: bool = Field(strict=True)


def validate_record(model: Type[ModelT], **values: Any) -> ModelT:
    """Build ``model`` from ``values`` or raise InvalidInputError for the first bad field."""
    try:
        return model.model_validate(values)
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = first.get("loc") or ("payload",)
        field = str(loc[0])
        raise InvalidInputError(f"Invalid {field}: {first.get('msg')}", field=field) from exc


def validate_identity(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidInputError(f"Invalid {field}: expected a non-empty identity", field=field)
    return value


__all__ = [
    "SongDetails",
    "SongRegistration",
    "SongEntry",
    "SongPermissionRecord",
    "validate_record",
    "validate_identity",
    "TITLE_MAX_LENGTH",
    "ARTIST_MAX_LENGTH",
    "GENRE_MAX_LENGTH",
    "TAG_MAX_LENGTH",
    "MAX_TAGS",
    "DURATION_LIMIT",
]
