"""Where entities can be found."""

from __future__ import annotations

from src.engine.snapshot import GameSnapshot
from src.models import EntityId, EntityType, ThreadSubtype


def entity_location_place_ids(snapshot: GameSnapshot, entity_id: EntityId) -> list[EntityId]:
    """
    Places an entity is located at, via ``location`` threads in either direction.

    A place is located at itself. Results are de-duplicated and keep thread
    order; an entity without location threads returns an empty list.
    """
    if entity_id.type == EntityType.PLACE:
        return [entity_id] if snapshot.has_entity(entity_id) else []

    place_ids: list[EntityId] = []
    for thread in snapshot.threads_of(ThreadSubtype.LOCATION):
        other = thread.other_end(entity_id)
        if other is None or other.type != EntityType.PLACE:
            continue
        if snapshot.has_entity(other) and other not in place_ids:
            place_ids.append(other)
    return place_ids


def is_location_reachable(
    snapshot: GameSnapshot, entity_id: EntityId, reachable: frozenset[EntityId] | set[EntityId]
) -> bool:
    """
    Check whether an entity can be reached.

    True when the entity has no location constraint, or when at least one
    of its places is in ``reachable``.
    """
    places = entity_location_place_ids(snapshot, entity_id)
    return not places or any(p in reachable for p in places)
