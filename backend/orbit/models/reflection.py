"""Reflection model: daily mood/energy journaling entries."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Annotated
from uuid import uuid4

from pydantic import BaseModel, Field as PydanticField, StringConstraints, field_validator, model_validator
from pydantic.alias_generators import to_camel
from sqlmodel import Field, SQLModel

MOOD_MIN, MOOD_MAX = 1, 10
ENERGY_MIN, ENERGY_MAX = 0, 100
MAX_TAGS = 20

TagName = Annotated[str, StringConstraints(min_length=1, max_length=50)]


class Reflection(SQLModel, table=True):
    __tablename__ = "reflections"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    owner_id: str = Field(index=True)
    mood: int
    energy: int
    wins: str
    challenges: str
    journal_entry: str
    tags: str = Field(default="[]")  # JSON array, insertion order kept
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), index=True
    )
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# --- Pydantic schemas (camelCase on the wire) ---

_WIRE_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "from_attributes": True,
}
# Request bodies: unknown keys (ownerId, createdAt, typos) are an error
_INPUT_CONFIG = {**_WIRE_CONFIG, "extra": "forbid"}


def _as_utc(value: datetime) -> datetime:
    # SQLite hands datetimes back without tzinfo; everything is stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ReflectionCreate(BaseModel):
    wins: str = PydanticField(max_length=5000)
    challenges: str = PydanticField(max_length=5000)
    journal_entry: str = PydanticField(max_length=10000)
    mood: int = PydanticField(ge=MOOD_MIN, le=MOOD_MAX)
    energy: int = PydanticField(ge=ENERGY_MIN, le=ENERGY_MAX)
    tags: list[TagName] = PydanticField(default_factory=list, max_length=MAX_TAGS)

    model_config = _INPUT_CONFIG


class ReflectionUpdate(BaseModel):
    wins: str | None = PydanticField(default=None, max_length=5000)
    challenges: str | None = PydanticField(default=None, max_length=5000)
    journal_entry: str | None = PydanticField(default=None, max_length=10000)
    mood: int | None = PydanticField(default=None, ge=MOOD_MIN, le=MOOD_MAX)
    energy: int | None = PydanticField(default=None, ge=ENERGY_MIN, le=ENERGY_MAX)
    tags: list[TagName] | None = PydanticField(default=None, max_length=MAX_TAGS)

    model_config = _INPUT_CONFIG

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "ReflectionUpdate":
        """Every reflection field is required, so null can never be a new value."""
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self


class ReflectionRead(BaseModel):
    id: str
    owner_id: str
    mood: int
    energy: int
    wins: str
    challenges: str
    journal_entry: str
    tags: list[str] = []
    created_at: datetime
    updated_at: datetime

    model_config = _WIRE_CONFIG

    @field_validator("tags", mode="before")
    @classmethod
    def deserialize_tags(cls, v: str | list | None) -> list[str]:
        if v is None:
            return []
        if isinstance(v, list):
            return v
        try:
            parsed = json.loads(v)
            return parsed if isinstance(parsed, list) else []
        except (json.JSONDecodeError, TypeError):
            return []

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class MoodSample(BaseModel):
    """One point of a mood/energy trend, stamped with the reflection's creation time."""

    timestamp: datetime
    mood: int
    energy: int

    model_config = _WIRE_CONFIG

    @field_validator("timestamp")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class DeleteResult(BaseModel):
    id: str
    deleted: bool = True

    model_config = _WIRE_CONFIG
