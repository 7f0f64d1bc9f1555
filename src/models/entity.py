"""
Entity Models.

Defines the game-scoped records the progression engine reads:
games, playthroughs, and the entities that live in a game
(quests, insights, items, people, places, maps and paths).

Per-playthrough state lives in ``EntityProgress`` (see progress.py);
these records never change between playthroughs.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from src.models.ids import EntityId, EntityType


class Game(BaseModel):
    """A game: the container for entities and threads."""

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Playthrough(BaseModel):
    """One player's run through a game. Scopes all mutable status."""

    id: UUID = Field(default_factory=uuid4)
    game_id: UUID
    name: str = "Playthrough"
    current_position: EntityId | None = Field(
        default=None, description="Place the player is currently at"
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator("current_position")
    @classmethod
    def _position_is_place(cls, value: EntityId | None) -> EntityId | None:
        if value is not None and value.type != EntityType.PLACE:
            raise ValueError("current_position must be a place ID")
        return value


class QuestObjective(BaseModel):
    """
    A sub-objective of a quest.

    Completion is recorded per playthrough (``EntityProgress.completed_objective_indexes``).
    When ``entity_id`` is set the objective only becomes completable once
    that entity reaches one of ``allowed_statuses`` (or its type's default
    satisfying statuses when the list is empty).
    """

    label: str = Field(min_length=1)
    entity_id: EntityId | None = None
    allowed_statuses: list[str] = Field(default_factory=list)


class Entity(BaseModel):
    """
    Core entity model.

    ``type`` is derived from the typed ID, so an entity can never
    disagree with its own identifier.
    """

    id: EntityId
    game_id: UUID = Field(description="Game this entity belongs to")
    name: str = Field(min_length=1, max_length=255)
    description: str = ""

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator("id")
    @classmethod
    def _not_a_thread(cls, value: EntityId) -> EntityId:
        if value.type == EntityType.THREAD:
            raise ValueError("Threads are not entities; use Thread")
        return value

    @property
    def type(self) -> EntityType:
        """Entity type, taken from the ID tag."""
        return self.id.type

    def is_place(self) -> bool:
        """Check if this is a place entity."""
        return self.type == EntityType.PLACE

    def is_path(self) -> bool:
        """Check if this is a path entity."""
        return self.type == EntityType.PATH


class Quest(Entity):
    """A quest, optionally split into objectives."""

    objectives: list[QuestObjective] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def _is_quest(cls, value: EntityId) -> EntityId:
        if value.type != EntityType.QUEST:
            raise ValueError("Quest IDs must use the quest type tag")
        return value


def _create(entity_type: EntityType, game_id: UUID, name: str, description: str) -> Entity:
    return Entity(
        id=EntityId.new(entity_type),
        game_id=game_id,
        name=name,
        description=description,
    )


def create_quest(
    game_id: UUID,
    name: str,
    description: str = "",
    objectives: list[QuestObjective] | None = None,
) -> Quest:
    """Factory function to create a quest."""
    return Quest(
        id=EntityId.new(EntityType.QUEST),
        game_id=game_id,
        name=name,
        description=description,
        objectives=objectives or [],
    )


def create_objective(
    label: str,
    entity_id: EntityId | None = None,
    allowed_statuses: list[str] | None = None,
) -> QuestObjective:
    """Factory function to create a quest objective."""
    return QuestObjective(
        label=label,
        entity_id=entity_id,
        allowed_statuses=allowed_statuses or [],
    )


def create_insight(game_id: UUID, name: str, description: str = "") -> Entity:
    """Factory function to create an insight (a piece of lore)."""
    return _create(EntityType.INSIGHT, game_id, name, description)


def create_item(game_id: UUID, name: str, description: str = "") -> Entity:
    """Factory function to create an item."""
    return _create(EntityType.ITEM, game_id, name, description)


def create_person(game_id: UUID, name: str, description: str = "") -> Entity:
    """Factory function to create a person."""
    return _create(EntityType.PERSON, game_id, name, description)


def create_place(game_id: UUID, name: str, description: str = "") -> Entity:
    """Factory function to create a place."""
    return _create(EntityType.PLACE, game_id, name, description)


def create_map(game_id: UUID, name: str, description: str = "") -> Entity:
    """Factory function to create a map."""
    return _create(EntityType.MAP, game_id, name, description)


def create_path(game_id: UUID, name: str, description: str = "") -> Entity:
    """Factory function to create a path between places."""
    return _create(EntityType.PATH, game_id, name, description)
