"""
Per-playthrough progress rows.

One ``EntityProgress`` row records the status of one stateful entity
in one playthrough. A missing row means the type's default status.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from src.models.ids import EntityId
from src.models.status import EntityStatus, coerce_status


class EntityProgress(BaseModel):
    """Status of one entity in one playthrough."""

    playthrough_id: UUID
    entity_id: EntityId
    status: EntityStatus
    completed_objective_indexes: list[int] = Field(
        default_factory=list, description="Quests only: objectives marked done"
    )
    notes: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def _status_matches_type(cls, value: object, info: ValidationInfo) -> EntityStatus:
        # Plain strings are ambiguous across enums ("unknown"), so resolve
        # against the entity's own type.
        entity_id = info.data.get("entity_id")
        if entity_id is None:
            raise ValueError("entity_id is required to interpret status")
        return coerce_status(entity_id.type, value)


def create_progress(
    playthrough_id: UUID,
    entity_id: EntityId,
    status: EntityStatus | str,
    completed_objective_indexes: list[int] | None = None,
) -> EntityProgress:
    """Factory function to create a progress row."""
    return EntityProgress(
        playthrough_id=playthrough_id,
        entity_id=entity_id,
        status=status,
        completed_objective_indexes=completed_objective_indexes or [],
    )
