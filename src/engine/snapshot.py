"""
Read-only game snapshots.

A snapshot is everything one engine computation needs, loaded from the
store once: the game's entities, the threads visible to the playthrough,
and the playthrough's status rows. The engine never reads the store
directly, so each computation sees one consistent view.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from uuid import UUID

from src.db.interfaces import ProgressionRepository
from src.models import (
    DEFAULT_STATUSES,
    Entity,
    EntityId,
    EntityProgress,
    EntityStatus,
    EntityType,
    Thread,
    ThreadSubtype,
)


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable view of one game as seen by one playthrough."""

    game_id: UUID
    playthrough_id: UUID | None
    entities: Mapping[EntityId, Entity]
    threads: tuple[Thread, ...]
    progress: Mapping[EntityId, EntityProgress]
    current_position: EntityId | None = None

    _requires_by_source: Mapping[EntityId, tuple[Thread, ...]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        by_source: dict[EntityId, list[Thread]] = {}
        for thread in self.threads:
            if thread.subtype == ThreadSubtype.REQUIRES:
                by_source.setdefault(thread.source_id, []).append(thread)
        object.__setattr__(
            self,
            "_requires_by_source",
            MappingProxyType({k: tuple(v) for k, v in by_source.items()}),
        )

    @classmethod
    def build(
        cls,
        game_id: UUID,
        playthrough_id: UUID | None,
        entities: list[Entity],
        threads: list[Thread],
        progress: list[EntityProgress] | None = None,
        current_position: EntityId | None = None,
    ) -> GameSnapshot:
        """
        Assemble a snapshot from plain record lists.

        Threads scoped to another playthrough, and progress rows of other
        playthroughs, are dropped so the snapshot only holds what applies.
        """
        visible_threads = tuple(
            t for t in threads if t.game_id == game_id and t.applies_to(playthrough_id)
        )
        rows = {
            p.entity_id: p
            for p in (progress or [])
            if playthrough_id is not None and p.playthrough_id == playthrough_id
        }
        return cls(
            game_id=game_id,
            playthrough_id=playthrough_id,
            entities=MappingProxyType({e.id: e for e in entities if e.game_id == game_id}),
            threads=visible_threads,
            progress=MappingProxyType(rows),
            current_position=current_position,
        )

    def has_entity(self, entity_id: EntityId) -> bool:
        """Check whether the ID names an entity of this game."""
        return entity_id in self.entities

    def entities_of_type(self, entity_type: EntityType) -> list[Entity]:
        """Entities of one type, in store order."""
        return [e for e in self.entities.values() if e.type == entity_type]

    def place_ids(self) -> set[EntityId]:
        """IDs of every place in the game."""
        return {e.id for e in self.entities.values() if e.type == EntityType.PLACE}

    def threads_of(self, subtype: ThreadSubtype) -> list[Thread]:
        """Visible threads of one subtype, in store order."""
        return [t for t in self.threads if t.subtype == subtype]

    def requirement_threads(self, entity_id: EntityId) -> tuple[Thread, ...]:
        """Outgoing ``requires`` threads of an entity, in declaration order."""
        return self._requires_by_source.get(entity_id, ())

    def status_of(self, entity_id: EntityId) -> EntityStatus | None:
        """
        Current status of an entity in this playthrough.

        Falls back to the type default when there is no row. Returns None
        for entities that are unknown or whose type has no status.
        """
        if entity_id not in self.entities:
            return None
        row = self.progress.get(entity_id)
        if row is not None:
            return row.status
        return DEFAULT_STATUSES[entity_id.type]

    def completed_objectives(self, quest_id: EntityId) -> frozenset[int]:
        """Indexes of the objectives of a quest marked done in this playthrough."""
        row = self.progress.get(quest_id)
        return frozenset(row.completed_objective_indexes) if row else frozenset()


def load_snapshot(
    store: ProgressionRepository,
    game_id: UUID,
    playthrough_id: UUID | None,
) -> GameSnapshot:
    """
    Load a snapshot for (game, playthrough) from the store.

    A playthrough that does not exist, or belongs to another game, is
    treated as no playthrough: game-level data only, default statuses.
    Store errors propagate.
    """
    playthrough = store.get_playthrough(playthrough_id) if playthrough_id else None
    if playthrough is not None and playthrough.game_id != game_id:
        playthrough = None
    active_id = playthrough.id if playthrough else None

    return GameSnapshot.build(
        game_id=game_id,
        playthrough_id=active_id,
        entities=store.get_entities(game_id),
        threads=store.get_threads(game_id, active_id),
        progress=store.get_progress(active_id) if active_id else [],
        current_position=playthrough.current_position if playthrough else None,
    )
