"""
Typed entity identifiers.

Every entity in a game is addressed by an ``EntityId``: an entity-type tag
plus an opaque unique value. The string form ``"{type}:{raw_id}"`` is what
crosses the boundary (storage, UI, CLI); inside the engine IDs are always
parsed ``EntityId`` values.
"""

from __future__ import annotations

from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

ID_SEPARATOR = ":"


class EntityType(str, Enum):
    """Kinds of entity that can be referenced by a typed ID."""

    QUEST = "quest"
    INSIGHT = "insight"
    ITEM = "item"
    PERSON = "person"
    PLACE = "place"
    MAP = "map"
    PATH = "path"
    THREAD = "thread"


class EntityId(BaseModel):
    """
    Tagged identifier for a game entity.

    Immutable and hashable, so it can be used as a dict key and set member.
    Accepts either a mapping (``{"type": ..., "raw_id": ...}``) or the
    ``"type:raw_id"`` string form when validated.
    """

    model_config = ConfigDict(frozen=True)

    type: EntityType
    raw_id: str = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _accept_string_form(cls, data: Any) -> Any:
        if isinstance(data, str):
            type_tag, raw_id = _split(data)
            return {"type": type_tag, "raw_id": raw_id}
        return data

    @classmethod
    def new(cls, entity_type: EntityType) -> EntityId:
        """Generate a fresh ID for an entity of the given type."""
        return cls(type=entity_type, raw_id=str(uuid4()))

    @classmethod
    def from_string(cls, value: str) -> EntityId:
        """Parse ``"type:raw_id"``, raising ValueError when malformed."""
        parsed = parse_entity_id(value)
        if parsed is None:
            raise ValueError(f"Invalid entity ID: {value!r}")
        return parsed

    def is_type(self, *types: EntityType) -> bool:
        """Check whether this ID belongs to one of the given entity types."""
        return self.type in types

    def __str__(self) -> str:
        return f"{self.type.value}{ID_SEPARATOR}{self.raw_id}"


def _split(value: str) -> tuple[str, str]:
    type_tag, sep, raw_id = value.partition(ID_SEPARATOR)
    if not sep or not type_tag or not raw_id:
        raise ValueError(f"Invalid entity ID: {value!r}")
    return type_tag, raw_id


_TYPES_BY_TAG: dict[str, EntityType] = {t.value: t for t in EntityType}


def parse_entity_id(value: object) -> EntityId | None:
    """
    Parse a typed entity ID.

    Returns None for anything that is not a well-formed ID: a non-string,
    a missing separator, an empty or unknown type tag, or an empty raw ID.
    Already-parsed ``EntityId`` values are returned unchanged.
    """
    if isinstance(value, EntityId):
        return value
    if not isinstance(value, str):
        return None
    try:
        type_tag, raw_id = _split(value)
    except ValueError:
        return None
    entity_type = _TYPES_BY_TAG.get(type_tag)
    if entity_type is None:
        return None
    return EntityId(type=entity_type, raw_id=raw_id)


def get_entity_type(value: object) -> EntityType | None:
    """Entity type of a typed ID, or None if the ID is invalid."""
    parsed = parse_entity_id(value)
    return parsed.type if parsed else None
