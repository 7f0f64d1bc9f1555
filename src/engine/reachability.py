"""
Reachability over the place graph.

Breadth-first traversal from the player's position across traversable
edges only. The visited set bounds every traversal by the number of
places, whatever cycles the graph contains.
"""

from __future__ import annotations

from collections import deque

from src.engine.place_graph import PlaceGraph
from src.models import EntityId


def resolve_reachability(graph: PlaceGraph, start: EntityId | None) -> frozenset[EntityId]:
    """
    Places reachable from ``start``, including ``start`` itself.

    An absent start, or one that is not a place of the graph, reaches nothing.
    """
    if start is None or not graph.has_place(start):
        return frozenset()

    visited: set[EntityId] = {start}
    queue: deque[EntityId] = deque([start])
    while queue:
        current = queue.popleft()
        for neighbor in graph.neighbors(current):
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)
    return frozenset(visited)


def shortest_route_thread_ids(
    graph: PlaceGraph, start: EntityId | None
) -> dict[EntityId, frozenset[EntityId]]:
    """
    Thread IDs along one shortest route from ``start`` to every reachable place.

    Route length is the number of place-to-place edges. When several
    routes are equally short, the one found first in adjacency order wins.
    The start maps to an empty set.
    """
    if start is None or not graph.has_place(start):
        return {}

    routes: dict[EntityId, frozenset[EntityId]] = {start: frozenset()}
    queue: deque[EntityId] = deque([start])
    while queue:
        current = queue.popleft()
        for edge in graph.open_edges(current):
            if edge.neighbor in routes:
                continue
            routes[edge.neighbor] = routes[current] | frozenset(edge.thread_ids)
            queue.append(edge.neighbor)
    return routes
