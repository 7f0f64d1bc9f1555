"""
Playthrough status enumerations and the per-type status tables.

Each stateful entity type has its own closed set of statuses. The tables
below are keyed by ``EntityType`` and cover every type, including the ones
without a status (empty entries), so a newly added entity type shows up as
a missing key rather than a silent default.
"""

from __future__ import annotations

from enum import Enum

from src.models.ids import EntityType


class QuestStatus(str, Enum):
    """Status of a quest in a playthrough."""

    AVAILABLE = "available"  # Not started yet
    ACTIVE = "active"  # Player is working on it
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class InsightStatus(str, Enum):
    """Whether the player has learned a piece of lore."""

    UNKNOWN = "unknown"
    KNOWN = "known"
    IRRELEVANT = "irrelevant"


class ItemStatus(str, Enum):
    """Possession state of an item."""

    NOT_ACQUIRED = "not_acquired"
    ACQUIRED = "acquired"
    USED = "used"
    LOST = "lost"


class PersonStatus(str, Enum):
    """What the player knows about a person's fate."""

    ALIVE = "alive"
    DEAD = "dead"
    UNKNOWN = "unknown"


class PathStatus(str, Enum):
    """Traversal gate of a path."""

    RESTRICTED = "restricted"  # Traversable once the path's requirements are met
    OPENED = "opened"  # Traversable regardless of requirements
    BLOCKED = "blocked"  # Never traversable


EntityStatus = QuestStatus | InsightStatus | ItemStatus | PersonStatus | PathStatus


STATUS_ENUMS: dict[EntityType, type[Enum] | None] = {
    EntityType.QUEST: QuestStatus,
    EntityType.INSIGHT: InsightStatus,
    EntityType.ITEM: ItemStatus,
    EntityType.PERSON: PersonStatus,
    EntityType.PATH: PathStatus,
    EntityType.PLACE: None,
    EntityType.MAP: None,
    EntityType.THREAD: None,
}

# Status assumed when a playthrough has no row for the entity.
DEFAULT_STATUSES: dict[EntityType, EntityStatus | None] = {
    EntityType.QUEST: QuestStatus.AVAILABLE,
    EntityType.INSIGHT: InsightStatus.UNKNOWN,
    EntityType.ITEM: ItemStatus.NOT_ACQUIRED,
    EntityType.PERSON: PersonStatus.ALIVE,
    EntityType.PATH: PathStatus.RESTRICTED,
    EntityType.PLACE: None,
    EntityType.MAP: None,
    EntityType.THREAD: None,
}

# Statuses that satisfy a "requires" thread when the thread names none.
SATISFYING_STATUSES: dict[EntityType, frozenset[EntityStatus]] = {
    EntityType.QUEST: frozenset({QuestStatus.COMPLETED}),
    EntityType.INSIGHT: frozenset({InsightStatus.KNOWN}),
    EntityType.ITEM: frozenset({ItemStatus.ACQUIRED, ItemStatus.USED}),
    EntityType.PERSON: frozenset({PersonStatus.ALIVE}),
    EntityType.PATH: frozenset({PathStatus.OPENED}),
    EntityType.PLACE: frozenset(),
    EntityType.MAP: frozenset(),
    EntityType.THREAD: frozenset(),
}

# Statuses in which an entity still offers the player a next step.
ACTIONABLE_STATUSES: dict[EntityType, frozenset[EntityStatus]] = {
    EntityType.QUEST: frozenset({QuestStatus.AVAILABLE, QuestStatus.ACTIVE}),
    EntityType.INSIGHT: frozenset({InsightStatus.UNKNOWN}),
    EntityType.ITEM: frozenset({ItemStatus.NOT_ACQUIRED}),
    EntityType.PERSON: frozenset({PersonStatus.ALIVE, PersonStatus.UNKNOWN}),
    EntityType.PATH: frozenset(),
    EntityType.PLACE: frozenset(),
    EntityType.MAP: frozenset(),
    EntityType.THREAD: frozenset(),
}


def has_status(entity_type: EntityType) -> bool:
    """Check whether entities of this type carry a playthrough status."""
    return STATUS_ENUMS[entity_type] is not None


def coerce_status(entity_type: EntityType, value: object) -> EntityStatus:
    """
    Convert a raw value into the status enumeration of ``entity_type``.

    Raises:
        ValueError: If the type has no status or the value is not one of its statuses.
    """
    enum_cls = STATUS_ENUMS[entity_type]
    if enum_cls is None:
        raise ValueError(f"Entities of type '{entity_type.value}' have no status")
    if isinstance(value, enum_cls):
        return value  # type: ignore[return-value]
    raw = value.value if isinstance(value, Enum) else value
    try:
        return enum_cls(raw)  # type: ignore[return-value]
    except ValueError:
        raise ValueError(
            f"Invalid {entity_type.value} status: {raw!r}"
        ) from None
