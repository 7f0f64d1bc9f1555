"""
Thread models.

A thread is a directed, labelled relationship between two typed entities.
Game-authored threads (``playthrough_id is None``) apply to every
playthrough; threads carrying a playthrough ID are the player's own
investigation notes for that run only.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.models.ids import EntityId, EntityType


class ThreadSubtype(str, Enum):
    """Relationship kinds. Only some are interpreted by the progression engine."""

    CUSTOM = "custom"  # Free-form, display uses the thread label
    GIVER = "giver"  # Quest -> Person | Place
    LOCATION = "location"  # Entity -> Place where it can be found
    MAP = "map"  # Place -> Map
    REQUIRES = "requires"  # Source unavailable until target is satisfied
    OBJECTIVE_REQUIRES = "objective_requires"  # Quest objective gated on target
    CONNECTS = "connects"  # Place <-> Place, or Place <-> Path endpoint


_SUBTYPE_LABELS: dict[ThreadSubtype, str] = {
    ThreadSubtype.GIVER: "Giver",
    ThreadSubtype.LOCATION: "Location",
    ThreadSubtype.MAP: "Map",
    ThreadSubtype.REQUIRES: "Requires",
    ThreadSubtype.OBJECTIVE_REQUIRES: "Objective",
    ThreadSubtype.CONNECTS: "Connects",
}


class Thread(BaseModel):
    """A directed, labelled edge between two entities of the same game."""

    id: EntityId = Field(default_factory=lambda: EntityId.new(EntityType.THREAD))
    game_id: UUID
    playthrough_id: UUID | None = Field(
        default=None, description="Set for playthrough-scoped threads"
    )
    source_id: EntityId
    target_id: EntityId
    subtype: ThreadSubtype = ThreadSubtype.CUSTOM
    label: str = ""

    allowed_statuses: list[str] = Field(
        default_factory=list,
        description="For requirement threads: target statuses that satisfy it",
    )
    objective_index: int | None = Field(
        default=None, ge=0, description="For objective_requires: which objective it gates"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator("id")
    @classmethod
    def _is_thread_id(cls, value: EntityId) -> EntityId:
        if value.type != EntityType.THREAD:
            raise ValueError("Thread IDs must use the thread type tag")
        return value

    def touches(self, entity_id: EntityId) -> bool:
        """Check whether the entity is either endpoint of this thread."""
        return self.source_id == entity_id or self.target_id == entity_id

    def other_end(self, entity_id: EntityId) -> EntityId | None:
        """The endpoint opposite ``entity_id``, or None if it is not an endpoint."""
        if self.source_id == entity_id:
            return self.target_id
        if self.target_id == entity_id:
            return self.source_id
        return None

    def applies_to(self, playthrough_id: UUID | None) -> bool:
        """Game-level threads apply everywhere; scoped threads only to their own run."""
        return self.playthrough_id is None or self.playthrough_id == playthrough_id


def thread_display_label(thread: Thread) -> str:
    """User-facing label for a thread edge."""
    if thread.subtype == ThreadSubtype.CUSTOM:
        return thread.label.strip()
    return _SUBTYPE_LABELS[thread.subtype]


def create_thread(
    game_id: UUID,
    source_id: EntityId,
    target_id: EntityId,
    subtype: ThreadSubtype = ThreadSubtype.CUSTOM,
    label: str = "",
    playthrough_id: UUID | None = None,
    allowed_statuses: list[str] | None = None,
    objective_index: int | None = None,
) -> Thread:
    """Factory function to create a thread."""
    return Thread(
        game_id=game_id,
        playthrough_id=playthrough_id,
        source_id=source_id,
        target_id=target_id,
        subtype=subtype,
        label=label or subtype.value,
        allowed_statuses=allowed_statuses or [],
        objective_index=objective_index,
    )


def create_requirement(
    game_id: UUID,
    source_id: EntityId,
    target_id: EntityId,
    allowed_statuses: list[str] | None = None,
) -> Thread:
    """Factory for "source requires target"."""
    return create_thread(
        game_id,
        source_id,
        target_id,
        subtype=ThreadSubtype.REQUIRES,
        allowed_statuses=allowed_statuses,
    )


def create_connection(game_id: UUID, source_id: EntityId, target_id: EntityId) -> Thread:
    """Factory for a connects thread (place-place, or place-path endpoint)."""
    return create_thread(game_id, source_id, target_id, subtype=ThreadSubtype.CONNECTS)


def create_location(game_id: UUID, entity_id: EntityId, place_id: EntityId) -> Thread:
    """Factory for "entity can be found at place"."""
    return create_thread(game_id, entity_id, place_id, subtype=ThreadSubtype.LOCATION)
