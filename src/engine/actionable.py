"""
Actionable next steps.

Combines reachability and requirement results into the list of things
the player can do next, and the set of thread IDs lying on shortest
routes to them (used to highlight routes on the map and in the loom).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import BaseModel, Field

from src.engine.location import entity_location_place_ids, is_location_reachable
from src.engine.place_graph import PlaceGraph
from src.engine.reachability import shortest_route_thread_ids
from src.engine.requirements import RequirementResolver
from src.engine.snapshot import GameSnapshot
from src.models import (
    ACTIONABLE_STATUSES,
    Entity,
    EntityId,
    EntityStatus,
    EntityType,
    InsightStatus,
    ItemStatus,
    PersonStatus,
    Quest,
    QuestStatus,
)

logger = logging.getLogger(__name__)

# Types that offer a next step, in the order they are listed.
ACTIONABLE_TYPES: tuple[EntityType, ...] = (
    EntityType.QUEST,
    EntityType.INSIGHT,
    EntityType.ITEM,
    EntityType.PERSON,
)

# Keyed by type as well: str-valued statuses of different types compare equal.
_ACTION_LABELS: dict[tuple[EntityType, EntityStatus], str] = {
    (EntityType.QUEST, QuestStatus.AVAILABLE): "Start quest",
    (EntityType.QUEST, QuestStatus.ACTIVE): "Complete quest",
    (EntityType.INSIGHT, InsightStatus.UNKNOWN): "Discover insight",
    (EntityType.ITEM, ItemStatus.NOT_ACQUIRED): "Acquire item",
    (EntityType.PERSON, PersonStatus.ALIVE): "Talk to person",
    (EntityType.PERSON, PersonStatus.UNKNOWN): "Find person",
}


class ActionableEntity(BaseModel):
    """One next step for display."""

    entity_id: EntityId
    entity_type: EntityType
    label: str = Field(description="Display name of the entity")
    action_label: str = Field(description="Short action text, e.g. 'Acquire item'")
    objective_index: int | None = Field(
        default=None, description="Set when the step is a quest objective"
    )


def compute_actionable(
    snapshot: GameSnapshot,
    resolver: RequirementResolver,
    reachable: frozenset[EntityId] | set[EntityId],
) -> list[ActionableEntity]:
    """
    Select the actionable entities of a snapshot.

    An entity qualifies when its type offers a next step, its status is
    still actionable, it has no location or a reachable one, and its
    requirements are available. Quests, insights, items and people are
    listed in that order, each in store order.
    """
    out: list[ActionableEntity] = []
    for entity_type in ACTIONABLE_TYPES:
        for entity in snapshot.entities_of_type(entity_type):
            status = snapshot.status_of(entity.id)
            if status not in ACTIONABLE_STATUSES[entity_type]:
                continue
            if not is_location_reachable(snapshot, entity.id, reachable):
                continue
            if not resolver.is_available(entity.id):
                continue
            if entity_type == EntityType.QUEST and status == QuestStatus.ACTIVE:
                out.extend(_active_quest_steps(snapshot, resolver, entity))
                continue
            out.append(_step(entity, _ACTION_LABELS[(entity_type, status)]))

    logger.debug("Found %d actionable steps", len(out))
    return out


def _active_quest_steps(
    snapshot: GameSnapshot, resolver: RequirementResolver, quest: Entity
) -> list[ActionableEntity]:
    objectives = quest.objectives if isinstance(quest, Quest) else []
    if not objectives:
        return [_step(quest, _ACTION_LABELS[(EntityType.QUEST, QuestStatus.ACTIVE)])]

    done = snapshot.completed_objectives(quest.id)
    steps = []
    for index, objective in enumerate(objectives):
        if index in done or not resolver.objective_completable(quest, index):
            continue
        steps.append(
            _step(quest, f"Complete objective: {objective.label}", objective_index=index)
        )
    return steps


def _step(entity: Entity, action_label: str, objective_index: int | None = None) -> ActionableEntity:
    return ActionableEntity(
        entity_id=entity.id,
        entity_type=entity.type,
        label=entity.name,
        action_label=action_label,
        objective_index=objective_index,
    )


def compute_route_thread_ids(
    snapshot: GameSnapshot,
    graph: PlaceGraph,
    start: EntityId | None,
    reachable: frozenset[EntityId] | set[EntityId],
    actionable_ids: Iterable[EntityId],
) -> set[EntityId]:
    """
    Thread IDs on shortest routes from ``start`` to each actionable entity.

    Every reachable location place of every actionable entity contributes
    the threads of one shortest route. Entities without a location, or
    whose places are not reachable, contribute nothing.
    """
    targets = list(dict.fromkeys(actionable_ids))
    if start is None or not targets or not graph.has_place(start):
        return set()

    routes = shortest_route_thread_ids(graph, start)
    thread_ids: set[EntityId] = set()
    for entity_id in targets:
        for place_id in entity_location_place_ids(snapshot, entity_id):
            if place_id in reachable and place_id in routes:
                thread_ids.update(routes[place_id])
    return thread_ids
