"""
Core Data Models for the progression tracker.

These models define the ontology the engine reads: typed entity IDs,
game-scoped entities and threads, and per-playthrough progress rows.

Models are supplied by a store (see src.db) and never mutated by the engine.
"""

from src.models.entity import (
    Entity,
    Game,
    Playthrough,
    Quest,
    QuestObjective,
    create_insight,
    create_item,
    create_map,
    create_objective,
    create_path,
    create_person,
    create_place,
    create_quest,
)
from src.models.ids import EntityId, EntityType, get_entity_type, parse_entity_id
from src.models.progress import EntityProgress, create_progress
from src.models.status import (
    ACTIONABLE_STATUSES,
    DEFAULT_STATUSES,
    SATISFYING_STATUSES,
    EntityStatus,
    InsightStatus,
    ItemStatus,
    PathStatus,
    PersonStatus,
    QuestStatus,
)
from src.models.thread import (
    Thread,
    ThreadSubtype,
    create_connection,
    create_location,
    create_requirement,
    create_thread,
    thread_display_label,
)

__all__ = [
    # IDs
    "EntityId",
    "EntityType",
    "parse_entity_id",
    "get_entity_type",
    # Entity
    "Game",
    "Playthrough",
    "Entity",
    "Quest",
    "QuestObjective",
    "create_quest",
    "create_objective",
    "create_insight",
    "create_item",
    "create_person",
    "create_place",
    "create_map",
    "create_path",
    # Status
    "EntityStatus",
    "QuestStatus",
    "InsightStatus",
    "ItemStatus",
    "PersonStatus",
    "PathStatus",
    "DEFAULT_STATUSES",
    "SATISFYING_STATUSES",
    "ACTIONABLE_STATUSES",
    # Progress
    "EntityProgress",
    "create_progress",
    # Thread
    "Thread",
    "ThreadSubtype",
    "create_thread",
    "create_requirement",
    "create_connection",
    "create_location",
    "thread_display_label",
]
