"""
Progression Engine.

Pure computations over a read-only game snapshot:
- Place graph construction (connects threads, path gates)
- Reachability (breadth-first search from the player's position)
- Requirement resolution (recursive, memoised, cycle safe)
- Actionable next steps and the routes leading to them

Nothing here reads the store or keeps state between calls.
"""

from __future__ import annotations

from src.engine.actionable import (
    ACTIONABLE_TYPES,
    ActionableEntity,
    compute_actionable,
    compute_route_thread_ids,
)
from src.engine.location import entity_location_place_ids, is_location_reachable
from src.engine.place_graph import PlaceEdge, PlaceGraph, build_place_graph, path_traversable
from src.engine.reachability import resolve_reachability, shortest_route_thread_ids
from src.engine.requirements import (
    AvailabilityResult,
    RequirementResolver,
    ResolutionContext,
    is_status_satisfying,
)
from src.engine.snapshot import GameSnapshot, load_snapshot

__all__ = [
    # Snapshot
    "GameSnapshot",
    "load_snapshot",
    # Place graph
    "PlaceEdge",
    "PlaceGraph",
    "build_place_graph",
    "path_traversable",
    # Reachability
    "resolve_reachability",
    "shortest_route_thread_ids",
    # Requirements
    "AvailabilityResult",
    "RequirementResolver",
    "ResolutionContext",
    "is_status_satisfying",
    # Location
    "entity_location_place_ids",
    "is_location_reachable",
    # Actionable
    "ACTIONABLE_TYPES",
    "ActionableEntity",
    "compute_actionable",
    "compute_route_thread_ids",
]
