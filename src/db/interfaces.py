"""
Store interface definitions for the progression tracker.

Uses Protocol classes to define the contract for data access.
The engine only ever calls the read methods; the write methods exist for
the CRUD layer (and for seeding fixtures and sample content).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from src.models import (
        Entity,
        EntityId,
        EntityProgress,
        EntityType,
        Game,
        Playthrough,
        Thread,
        ThreadSubtype,
    )


class EntityReader(Protocol):
    """Read access to games, playthroughs and game-scoped entities."""

    def get_game(self, game_id: UUID) -> Game | None:
        """Get a game by ID."""
        ...

    def get_playthrough(self, playthrough_id: UUID) -> Playthrough | None:
        """Get a playthrough by ID."""
        ...

    def get_entity(self, entity_id: EntityId) -> Entity | None:
        """Get an entity by its typed ID."""
        ...

    def get_entities(
        self, game_id: UUID, entity_type: EntityType | None = None
    ) -> list[Entity]:
        """Get all entities of a game in creation order, optionally of one type."""
        ...


class ThreadReader(Protocol):
    """Read access to threads."""

    def get_threads(
        self,
        game_id: UUID,
        playthrough_id: UUID | None = None,
        subtype: ThreadSubtype | None = None,
    ) -> list[Thread]:
        """
        Get the threads of a game in creation order.

        Game-level threads are always included; playthrough-scoped threads
        only when they belong to ``playthrough_id``.
        """
        ...


class ProgressReader(Protocol):
    """Read access to per-playthrough status rows."""

    def get_progress(
        self, playthrough_id: UUID, entity_type: EntityType | None = None
    ) -> list[EntityProgress]:
        """Get all progress rows of a playthrough, optionally for one entity type."""
        ...


class ProgressionRepository(EntityReader, ThreadReader, ProgressReader, Protocol):
    """
    Full store contract consumed by the progression service.

    Data-access failures raised by an implementation propagate to the
    caller unchanged.
    """

    def save_game(self, game: Game) -> None:
        """Insert or update a game."""
        ...

    def save_playthrough(self, playthrough: Playthrough) -> None:
        """Insert or update a playthrough."""
        ...

    def set_position(self, playthrough_id: UUID, place_id: EntityId | None) -> None:
        """Move the player of a playthrough to a place (or clear the position)."""
        ...

    def save_entity(self, entity: Entity) -> None:
        """Insert or update an entity."""
        ...

    def delete_entity(self, entity_id: EntityId) -> None:
        """Delete an entity together with its threads and progress rows."""
        ...

    def save_thread(self, thread: Thread) -> None:
        """Insert or update a thread."""
        ...

    def delete_thread(self, thread_id: EntityId) -> None:
        """Delete a thread."""
        ...

    def save_progress(self, progress: EntityProgress) -> None:
        """Insert or update the status row of an entity in a playthrough."""
        ...
