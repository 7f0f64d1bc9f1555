"""
Place graph construction.

Builds the adjacency view over the places of a game from ``connects``
threads. Two places are adjacent when a connects thread links them
directly, or when both are endpoints of the same path (each endpoint
joined to the path by its own connects thread).

Every edge is kept, annotated with whether it can currently be
traversed; traversal code filters on that flag. Edges are bidirectional
and gated symmetrically: a closed path is closed in both directions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from src.engine.snapshot import GameSnapshot
from src.models import EntityId, EntityType, PathStatus, ThreadSubtype

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaceEdge:
    """One directed half of an adjacency between two places."""

    neighbor: EntityId
    thread_ids: tuple[EntityId, ...]
    traversable: bool
    path_id: EntityId | None = None
    """Gating path, or None for a direct place-to-place link."""


@dataclass
class PlaceGraph:
    """Adjacency lists keyed by place ID, in deterministic insertion order."""

    adjacency: dict[EntityId, list[PlaceEdge]] = field(default_factory=dict)
    path_gates: dict[EntityId, bool] = field(default_factory=dict)
    """Path ID -> whether the path is currently traversable."""

    def has_place(self, place_id: EntityId) -> bool:
        """Check whether the place is a node of this graph."""
        return place_id in self.adjacency

    def edges(self, place_id: EntityId) -> list[PlaceEdge]:
        """All edges leaving a place, open or closed."""
        return self.adjacency.get(place_id, [])

    def open_edges(self, place_id: EntityId) -> list[PlaceEdge]:
        """Traversable edges leaving a place."""
        return [e for e in self.edges(place_id) if e.traversable]

    def neighbors(self, place_id: EntityId) -> list[EntityId]:
        """Places one traversable edge away, without duplicates."""
        seen: list[EntityId] = []
        for edge in self.open_edges(place_id):
            if edge.neighbor not in seen:
                seen.append(edge.neighbor)
        return seen

    def add_edge(
        self,
        a: EntityId,
        b: EntityId,
        thread_ids: tuple[EntityId, ...],
        traversable: bool,
        path_id: EntityId | None = None,
    ) -> None:
        self.adjacency[a].append(PlaceEdge(b, thread_ids, traversable, path_id))
        self.adjacency[b].append(PlaceEdge(a, thread_ids, traversable, path_id))


def path_traversable(
    status: PathStatus | None,
    requirements_met: Callable[[], bool],
    restricted_uses_requirements: bool = True,
) -> bool:
    """
    Gate rule for a path.

    Opened paths are always traversable and blocked ones never are.
    A restricted path opens once its own requirements are met, unless
    ``restricted_uses_requirements`` is off, in which case it stays shut.
    """
    if status == PathStatus.OPENED:
        return True
    if status == PathStatus.BLOCKED:
        return False
    return restricted_uses_requirements and requirements_met()


def build_place_graph(
    snapshot: GameSnapshot,
    is_available: Callable[[EntityId], bool],
    restricted_uses_requirements: bool = True,
) -> PlaceGraph:
    """
    Build the place graph of a snapshot.

    Args:
        snapshot: The game as seen by the active playthrough.
        is_available: Requirement check for entities (used for restricted paths).
        restricted_uses_requirements: See ``path_traversable``.

    Returns:
        PlaceGraph with every place of the game as a node.
    """
    places = snapshot.place_ids()
    graph = PlaceGraph(adjacency={p: [] for p in snapshot.entities if p in places})

    # path ID -> [(endpoint place, connects thread)], in thread order
    endpoints: dict[EntityId, list[tuple[EntityId, EntityId]]] = {}

    for thread in snapshot.threads_of(ThreadSubtype.CONNECTS):
        source, target = thread.source_id, thread.target_id

        if source.type == EntityType.PLACE and target.type == EntityType.PLACE:
            if source in places and target in places and source != target:
                graph.add_edge(source, target, (thread.id,), traversable=True)
            continue

        if source.type == EntityType.PATH and target.type == EntityType.PLACE:
            path_id, place_id = source, target
        elif target.type == EntityType.PATH and source.type == EntityType.PLACE:
            path_id, place_id = target, source
        else:
            continue

        if place_id not in places or not snapshot.has_entity(path_id):
            continue
        members = endpoints.setdefault(path_id, [])
        if all(existing != place_id for existing, _ in members):
            members.append((place_id, thread.id))

    for path_id, members in endpoints.items():
        is_open = path_traversable(
            snapshot.status_of(path_id),  # type: ignore[arg-type]
            lambda pid=path_id: is_available(pid),
            restricted_uses_requirements,
        )
        graph.path_gates[path_id] = is_open
        for i, (a, thread_a) in enumerate(members):
            for b, thread_b in members[i + 1 :]:
                graph.add_edge(a, b, (thread_a, thread_b), traversable=is_open, path_id=path_id)

    logger.debug(
        "Built place graph: %d places, %d paths (%d open)",
        len(graph.adjacency),
        len(graph.path_gates),
        sum(graph.path_gates.values()),
    )
    return graph
