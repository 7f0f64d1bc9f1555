"""Shared fixtures: an in-memory store with one game and one playthrough."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from src.db.memory import InMemoryProgressionRepository
from src.engine import GameSnapshot, load_snapshot
from src.models import (
    Entity,
    EntityId,
    Game,
    Playthrough,
    QuestObjective,
    ThreadSubtype,
    create_connection,
    create_insight,
    create_item,
    create_location,
    create_path,
    create_person,
    create_place,
    create_progress,
    create_quest,
    create_requirement,
    create_thread,
)


@dataclass
class World:
    """Small builder over the store for writing scenarios tersely."""

    store: InMemoryProgressionRepository
    game: Game
    playthrough: Playthrough

    def _add(self, entity: Entity, at: EntityId | None = None, status: str | None = None) -> EntityId:
        self.store.save_entity(entity)
        if at is not None:
            self.locate(entity.id, at)
        if status is not None:
            self.set_status(entity.id, status)
        return entity.id

    def place(self, name: str) -> EntityId:
        return self._add(create_place(self.game.id, name))

    def item(self, name: str, at: EntityId | None = None, status: str | None = None) -> EntityId:
        return self._add(create_item(self.game.id, name), at, status)

    def insight(self, name: str, at: EntityId | None = None, status: str | None = None) -> EntityId:
        return self._add(create_insight(self.game.id, name), at, status)

    def person(self, name: str, at: EntityId | None = None, status: str | None = None) -> EntityId:
        return self._add(create_person(self.game.id, name), at, status)

    def quest(
        self,
        name: str,
        at: EntityId | None = None,
        status: str | None = None,
        objectives: list[QuestObjective] | None = None,
    ) -> EntityId:
        return self._add(create_quest(self.game.id, name, objectives=objectives), at, status)

    def link(self, a: EntityId, b: EntityId) -> EntityId:
        """Direct place-to-place connection; returns the thread ID."""
        thread = create_connection(self.game.id, a, b)
        self.store.save_thread(thread)
        return thread.id

    def path(
        self, name: str, a: EntityId, b: EntityId, status: str | None = None
    ) -> tuple[EntityId, EntityId, EntityId]:
        """Path between two places; returns (path ID, thread to a, thread to b)."""
        path_id = self._add(create_path(self.game.id, name), status=status)
        to_a = create_connection(self.game.id, a, path_id)
        to_b = create_connection(self.game.id, path_id, b)
        self.store.save_thread(to_a)
        self.store.save_thread(to_b)
        return path_id, to_a.id, to_b.id

    def requires(
        self, source: EntityId, target: EntityId, allowed: list[str] | None = None
    ) -> EntityId:
        thread = create_requirement(self.game.id, source, target, allowed)
        self.store.save_thread(thread)
        return thread.id

    def objective_requires(self, quest: EntityId, index: int, target: EntityId) -> EntityId:
        thread = create_thread(
            self.game.id,
            quest,
            target,
            subtype=ThreadSubtype.OBJECTIVE_REQUIRES,
            objective_index=index,
        )
        self.store.save_thread(thread)
        return thread.id

    def locate(self, entity_id: EntityId, place_id: EntityId) -> EntityId:
        thread = create_location(self.game.id, entity_id, place_id)
        self.store.save_thread(thread)
        return thread.id

    def set_status(self, entity_id: EntityId, status: str, completed: list[int] | None = None) -> None:
        self.store.save_progress(
            create_progress(self.playthrough.id, entity_id, status, completed)
        )

    def move_to(self, place_id: EntityId | None) -> None:
        self.store.set_position(self.playthrough.id, place_id)

    def snapshot(self) -> GameSnapshot:
        return load_snapshot(self.store, self.game.id, self.playthrough.id)


@pytest.fixture
def store() -> InMemoryProgressionRepository:
    """Empty in-memory store."""
    return InMemoryProgressionRepository()


@pytest.fixture
def world(store: InMemoryProgressionRepository) -> World:
    """A store holding one game and one playthrough with no position."""
    game = Game(name="Test Game")
    store.save_game(game)
    playthrough = Playthrough(game_id=game.id)
    store.save_playthrough(playthrough)
    return World(store=store, game=game, playthrough=playthrough)
