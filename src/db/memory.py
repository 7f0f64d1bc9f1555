"""
In-memory implementation of the store interfaces.

Stores everything in dictionaries, making tests fast and isolated
and giving the CLI a store to seed sample content into.
Dictionaries preserve insertion order, which is the "creation order"
the read methods promise.
"""

from __future__ import annotations

from copy import deepcopy
from datetime import datetime
from uuid import UUID

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


class InMemoryProgressionRepository:
    """
    In-memory implementation of ProgressionRepository.

    Validates writes the way the real data-access layer does:
    records must belong to a known game, and thread endpoints must be
    entities of the same game.
    """

    def __init__(self) -> None:
        self._games: dict[UUID, Game] = {}
        self._playthroughs: dict[UUID, Playthrough] = {}
        self._entities: dict[EntityId, Entity] = {}
        self._threads: dict[EntityId, Thread] = {}

        # (playthrough_id, entity_id) -> progress row
        self._progress: dict[tuple[UUID, EntityId], EntityProgress] = {}

    # Games and playthroughs
    def save_game(self, game: Game) -> None:
        """Insert or update a game."""
        self._games[game.id] = deepcopy(game)

    def get_game(self, game_id: UUID) -> Game | None:
        """Get a game by ID."""
        game = self._games.get(game_id)
        return deepcopy(game) if game else None

    def save_playthrough(self, playthrough: Playthrough) -> None:
        """Insert or update a playthrough."""
        self._require_game(playthrough.game_id)
        if playthrough.current_position is not None:
            self._require_entity(playthrough.current_position, playthrough.game_id)
        self._playthroughs[playthrough.id] = deepcopy(playthrough)

    def get_playthrough(self, playthrough_id: UUID) -> Playthrough | None:
        """Get a playthrough by ID."""
        playthrough = self._playthroughs.get(playthrough_id)
        return deepcopy(playthrough) if playthrough else None

    def set_position(self, playthrough_id: UUID, place_id: EntityId | None) -> None:
        """Move the player of a playthrough to a place (or clear the position)."""
        playthrough = self._playthroughs.get(playthrough_id)
        if playthrough is None:
            raise ValueError(f"Playthrough {playthrough_id} not found")
        if place_id is not None:
            self._require_entity(place_id, playthrough.game_id)
        self._playthroughs[playthrough_id] = playthrough.model_copy(
            update={"current_position": place_id}
        )

    # Entities
    def save_entity(self, entity: Entity) -> None:
        """Insert or update an entity."""
        self._require_game(entity.game_id)
        existing = self._entities.get(entity.id)
        if existing is not None and existing.game_id != entity.game_id:
            raise ValueError(f"Entity {entity.id} cannot move to another game")
        entity.updated_at = datetime.utcnow()
        self._entities[entity.id] = deepcopy(entity)

    def get_entity(self, entity_id: EntityId) -> Entity | None:
        """Get an entity by its typed ID."""
        entity = self._entities.get(entity_id)
        return deepcopy(entity) if entity else None

    def get_entities(
        self, game_id: UUID, entity_type: EntityType | None = None
    ) -> list[Entity]:
        """Get all entities of a game in creation order, optionally of one type."""
        return [
            deepcopy(e)
            for e in self._entities.values()
            if e.game_id == game_id and (entity_type is None or e.type == entity_type)
        ]

    def delete_entity(self, entity_id: EntityId) -> None:
        """Delete an entity together with its threads and progress rows."""
        self._entities.pop(entity_id, None)
        for thread_id in [t.id for t in self._threads.values() if t.touches(entity_id)]:
            del self._threads[thread_id]
        for key in [k for k in self._progress if k[1] == entity_id]:
            del self._progress[key]

    # Threads
    def save_thread(self, thread: Thread) -> None:
        """Insert or update a thread."""
        self._require_game(thread.game_id)
        self._require_entity(thread.source_id, thread.game_id)
        self._require_entity(thread.target_id, thread.game_id)
        if thread.playthrough_id is not None:
            playthrough = self._playthroughs.get(thread.playthrough_id)
            if playthrough is None or playthrough.game_id != thread.game_id:
                raise ValueError(
                    f"Playthrough {thread.playthrough_id} not found in game {thread.game_id}"
                )
        self._threads[thread.id] = deepcopy(thread)

    def get_threads(
        self,
        game_id: UUID,
        playthrough_id: UUID | None = None,
        subtype: ThreadSubtype | None = None,
    ) -> list[Thread]:
        """Get the threads of a game in creation order."""
        return [
            deepcopy(t)
            for t in self._threads.values()
            if t.game_id == game_id
            and t.applies_to(playthrough_id)
            and (subtype is None or t.subtype == subtype)
        ]

    def delete_thread(self, thread_id: EntityId) -> None:
        """Delete a thread."""
        self._threads.pop(thread_id, None)

    # Progress
    def save_progress(self, progress: EntityProgress) -> None:
        """Insert or update the status row of an entity in a playthrough."""
        playthrough = self._playthroughs.get(progress.playthrough_id)
        if playthrough is None:
            raise ValueError(f"Playthrough {progress.playthrough_id} not found")
        self._require_entity(progress.entity_id, playthrough.game_id)
        self._progress[(progress.playthrough_id, progress.entity_id)] = deepcopy(progress)

    def get_progress(
        self, playthrough_id: UUID, entity_type: EntityType | None = None
    ) -> list[EntityProgress]:
        """Get all progress rows of a playthrough, optionally for one entity type."""
        return [
            deepcopy(p)
            for (pid, entity_id), p in self._progress.items()
            if pid == playthrough_id and (entity_type is None or entity_id.type == entity_type)
        ]

    def _require_game(self, game_id: UUID) -> None:
        if game_id not in self._games:
            raise ValueError(f"Game {game_id} not found")

    def _require_entity(self, entity_id: EntityId, game_id: UUID) -> None:
        entity = self._entities.get(entity_id)
        if entity is None or entity.game_id != game_id:
            raise ValueError(f"Entity {entity_id} not found in game {game_id}")
