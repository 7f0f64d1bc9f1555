"""
Progression Service.

The query surface consumed by UI-facing code: reachable places, entity
availability, actionable next steps and the routes to them. Each call
loads one snapshot from the store and runs the pure engine over it, so
results are plain values and calls never interfere with each other.

Malformed or unknown IDs degrade to empty/negative results. Only store
failures propagate.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from uuid import UUID

from pydantic import BaseModel, Field

from src.config import ProgressionConfig
from src.db.interfaces import ProgressionRepository
from src.engine import (
    ActionableEntity,
    AvailabilityResult,
    GameSnapshot,
    PlaceGraph,
    RequirementResolver,
    build_place_graph,
    compute_actionable,
    compute_route_thread_ids,
    load_snapshot,
    resolve_reachability,
)
from src.models import EntityId, EntityType, parse_entity_id

logger = logging.getLogger(__name__)

IdLike = EntityId | str


# =============================================================================
# Result Models
# =============================================================================


class ReachabilityResult(BaseModel):
    """Places reachable from a start place."""

    reachable_place_ids: set[EntityId] = Field(default_factory=set)


class NextSteps(BaseModel):
    """Everything the player-facing views need, computed from one snapshot."""

    position: EntityId | None = None
    reachable_place_ids: set[EntityId] = Field(default_factory=set)
    actionable: list[ActionableEntity] = Field(default_factory=list)
    route_thread_ids: set[EntityId] = Field(default_factory=set)

    @property
    def actionable_entity_ids(self) -> set[EntityId]:
        """IDs of the actionable entities, for map and loom styling."""
        return {step.entity_id for step in self.actionable}


# Sentinel: "use the playthrough's stored position".
STORED_POSITION = object()


def _parse(value: IdLike | None, *types: EntityType) -> EntityId | None:
    parsed = parse_entity_id(value)
    if parsed is None or (types and parsed.type not in types):
        if value is not None:
            logger.debug("Ignoring invalid ID %r", value)
        return None
    return parsed


def _parse_all(values: Iterable[IdLike], *types: EntityType) -> list[EntityId]:
    return [p for p in (_parse(v, *types) for v in values) if p is not None]


@dataclass
class _Computation:
    """Engine objects for one snapshot, built lazily and shared within a call."""

    snapshot: GameSnapshot
    config: ProgressionConfig
    resolver: RequirementResolver = field(init=False)
    _graph: PlaceGraph | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        self.resolver = RequirementResolver(self.snapshot)

    @property
    def graph(self) -> PlaceGraph:
        if self._graph is None:
            self._graph = build_place_graph(
                self.snapshot,
                self.resolver.is_available,
                self.config.restricted_paths_use_requirements,
            )
        return self._graph

    @property
    def has_playthrough(self) -> bool:
        return self.snapshot.playthrough_id is not None

    def reachable(self, start: EntityId | None) -> frozenset[EntityId]:
        if not self.has_playthrough:
            return frozenset()
        return resolve_reachability(self.graph, start)


@dataclass
class ProgressionService:
    """Answers progression queries for a (game, playthrough) pair."""

    store: ProgressionRepository
    config: ProgressionConfig = field(default_factory=ProgressionConfig)

    def _compute(self, game_id: UUID, playthrough_id: UUID | None) -> _Computation:
        snapshot = load_snapshot(self.store, game_id, playthrough_id)
        return _Computation(snapshot, self.config)

    def compute_reachable_places(
        self,
        game_id: UUID,
        playthrough_id: UUID | None,
        start_place_id: IdLike | None,
    ) -> ReachabilityResult:
        """
        Places reachable from a start place over open connections.

        Returns an empty set when there is no playthrough or the start is
        missing, malformed, or not a place of the game.
        """
        start = _parse(start_place_id, EntityType.PLACE)
        if playthrough_id is None or start is None:
            return ReachabilityResult()

        computation = self._compute(game_id, playthrough_id)
        reachable = computation.reachable(start)
        logger.debug("Reachable from %s: %d places", start, len(reachable))
        return ReachabilityResult(reachable_place_ids=set(reachable))

    def check_entity_availability(
        self,
        game_id: UUID,
        playthrough_id: UUID | None,
        entity_id: IdLike,
    ) -> AvailabilityResult:
        """Whether an entity's requirements are met, with its direct blockers."""
        parsed = _parse(entity_id)
        if parsed is None:
            return AvailabilityResult.unavailable()
        return self._compute(game_id, playthrough_id).resolver.resolve(parsed)

    def check_entities_availability(
        self,
        game_id: UUID,
        playthrough_id: UUID | None,
        entity_ids: Iterable[IdLike],
    ) -> dict[IdLike, AvailabilityResult]:
        """
        Batch form of ``check_entity_availability`` over one snapshot.

        Results are keyed by the values passed in, so every input has an
        entry; malformed IDs map to an unavailable result.
        """
        computation = self._compute(game_id, playthrough_id)
        results: dict[IdLike, AvailabilityResult] = {}
        for value in entity_ids:
            parsed = _parse(value)
            if parsed is None:
                results[value] = AvailabilityResult.unavailable()
            else:
                results[value] = computation.resolver.resolve(parsed)
        return results

    def get_actionable_entities(
        self,
        game_id: UUID,
        playthrough_id: UUID | None,
        reachable_place_ids: Iterable[IdLike],
    ) -> list[ActionableEntity]:
        """Entities that are reachable, available and not yet resolved."""
        if playthrough_id is None:
            return []
        computation = self._compute(game_id, playthrough_id)
        if not computation.has_playthrough:
            return []
        reachable = frozenset(_parse_all(reachable_place_ids, EntityType.PLACE))
        return compute_actionable(computation.snapshot, computation.resolver, reachable)

    def get_actionable_route_edge_ids(
        self,
        game_id: UUID,
        playthrough_id: UUID | None,
        current_position_place_id: IdLike | None,
        reachable_place_ids: Iterable[IdLike],
        actionable_entity_ids: Iterable[IdLike],
    ) -> set[EntityId]:
        """Thread IDs on shortest routes from the position to actionable entities."""
        start = _parse(current_position_place_id, EntityType.PLACE)
        targets = _parse_all(actionable_entity_ids)
        if playthrough_id is None or start is None or not targets:
            return set()

        computation = self._compute(game_id, playthrough_id)
        if not computation.has_playthrough:
            return set()
        reachable = frozenset(_parse_all(reachable_place_ids, EntityType.PLACE))
        return compute_route_thread_ids(
            computation.snapshot, computation.graph, start, reachable, targets
        )

    def get_next_steps(
        self,
        game_id: UUID,
        playthrough_id: UUID | None,
        position: IdLike | None | object = STORED_POSITION,
    ) -> NextSteps:
        """
        Reachable places, actionable steps and route threads in one pass.

        ``position`` defaults to the playthrough's stored current position.
        """
        if playthrough_id is None:
            return NextSteps()
        computation = self._compute(game_id, playthrough_id)
        if not computation.has_playthrough:
            return NextSteps()

        if position is STORED_POSITION:
            start = computation.snapshot.current_position
        else:
            start = _parse(position, EntityType.PLACE)  # type: ignore[arg-type]

        reachable = computation.reachable(start)
        actionable = compute_actionable(computation.snapshot, computation.resolver, reachable)
        routes = compute_route_thread_ids(
            computation.snapshot,
            computation.graph,
            start,
            reachable,
            [step.entity_id for step in actionable],
        )
        logger.debug(
            "Next steps from %s: %d reachable, %d actionable, %d route threads",
            start,
            len(reachable),
            len(actionable),
            len(routes),
        )
        return NextSteps(
            position=start,
            reachable_place_ids=set(reachable),
            actionable=actionable,
            route_thread_ids=routes,
        )
