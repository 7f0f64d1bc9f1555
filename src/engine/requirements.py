"""
Requirement resolution.

Decides whether an entity is *available*: every ``requires`` thread it is
the source of must point at a target that is satisfied. A target is
satisfied when its status is one the thread accepts (or its type's
default satisfying statuses) and its own requirements are, recursively,
available as well.

Resolution state (memo and in-progress set) lives in a
``ResolutionContext`` owned by one resolver, which is bound to one
snapshot. Nothing survives the resolver, so results can never leak across
playthroughs or across snapshots.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from src.engine.snapshot import GameSnapshot
from src.models import (
    SATISFYING_STATUSES,
    EntityId,
    EntityStatus,
    EntityType,
    Quest,
    Thread,
    ThreadSubtype,
)
from src.models.status import coerce_status, has_status

logger = logging.getLogger(__name__)

# Requirement targets without a status of their own never block.
_STATUSLESS_TARGETS = frozenset({EntityType.PLACE, EntityType.MAP, EntityType.THREAD})


class AvailabilityResult(BaseModel):
    """Whether an entity's prerequisites are currently satisfied."""

    available: bool
    unmet_target_ids: list[EntityId] = Field(
        default_factory=list,
        description="Direct requirement targets that are not satisfied, in declaration order",
    )

    @classmethod
    def unavailable(cls) -> AvailabilityResult:
        """Result for an entity that cannot be resolved at all."""
        return cls(available=False)


@dataclass
class ResolutionContext:
    """Call-scoped memo and cycle guard for requirement resolution."""

    memo: dict[EntityId, AvailabilityResult] = field(default_factory=dict)
    in_progress: set[EntityId] = field(default_factory=set)


def allowed_statuses_for(
    target_type: EntityType, allowed: Iterable[str]
) -> frozenset[EntityStatus]:
    """
    The statuses that satisfy a requirement on a target of ``target_type``.

    Uses the explicit list when it names at least one valid status, the
    type's default satisfying set otherwise. Values that are not statuses
    of the target type are ignored.
    """
    explicit: set[EntityStatus] = set()
    for value in allowed:
        try:
            explicit.add(coerce_status(target_type, value))
        except ValueError:
            logger.debug("Ignoring status %r for %s target", value, target_type.value)
    return frozenset(explicit) if explicit else SATISFYING_STATUSES[target_type]


def is_status_satisfying(
    target_type: EntityType, status: EntityStatus | None, allowed: Iterable[str] = ()
) -> bool:
    """Check a status against a requirement's allowed set (or the type default)."""
    if status is None:
        return False
    return status in allowed_statuses_for(target_type, allowed)


class RequirementResolver:
    """
    Resolves entity availability over one snapshot.

    Create one per snapshot; ``resolve`` and ``resolve_many`` share the
    resolver's context, so every entity is evaluated at most once.
    """

    def __init__(self, snapshot: GameSnapshot) -> None:
        self.snapshot = snapshot
        self.context = ResolutionContext()

    def resolve(self, entity_id: EntityId) -> AvailabilityResult:
        """Availability of one entity."""
        if not self.snapshot.has_entity(entity_id):
            return AvailabilityResult.unavailable()
        return self._resolve(entity_id)

    def resolve_many(self, entity_ids: Iterable[EntityId]) -> dict[EntityId, AvailabilityResult]:
        """Availability of many entities sharing this resolver's snapshot."""
        return {entity_id: self.resolve(entity_id) for entity_id in entity_ids}

    def is_available(self, entity_id: EntityId) -> bool:
        """Shorthand for ``resolve(entity_id).available``."""
        return self.resolve(entity_id).available

    def _resolve(self, entity_id: EntityId) -> AvailabilityResult:
        cached = self.context.memo.get(entity_id)
        if cached is not None:
            return cached

        threads = self.snapshot.requirement_threads(entity_id)
        if not threads:
            result = AvailabilityResult(available=True)
            self.context.memo[entity_id] = result
            return result

        self.context.in_progress.add(entity_id)
        try:
            unmet: list[EntityId] = []
            for thread in threads:
                if not self._target_satisfied(thread) and thread.target_id not in unmet:
                    unmet.append(thread.target_id)
        finally:
            self.context.in_progress.discard(entity_id)

        # A node reached through an in-progress ancestor sits on a cycle of
        # satisfying statuses, so "unavailable" is its value from any entry point.
        result = AvailabilityResult(available=not unmet, unmet_target_ids=unmet)
        self.context.memo[entity_id] = result
        return result

    def _target_satisfied(self, thread: Thread) -> bool:
        target = thread.target_id
        if target.type in _STATUSLESS_TARGETS:
            return True
        if not self.snapshot.has_entity(target) or not has_status(target.type):
            return False
        if not is_status_satisfying(
            target.type, self.snapshot.status_of(target), thread.allowed_statuses
        ):
            return False
        if target in self.context.in_progress:
            logger.debug("Requirement cycle through %s", target)
            return False
        return self._resolve(target).available

    def objective_completable(self, quest: Quest, objective_index: int) -> bool:
        """
        Check whether a quest objective can be completed right now.

        The objective's own entity (if any) must be in an allowed status,
        and every ``objective_requires`` thread of the quest for that
        objective must point at a target in an allowed status.
        """
        if not 0 <= objective_index < len(quest.objectives):
            return False
        objective = quest.objectives[objective_index]

        if objective.entity_id is not None:
            target = objective.entity_id
            if not self.snapshot.has_entity(target) or not has_status(target.type):
                return False
            if not is_status_satisfying(
                target.type, self.snapshot.status_of(target), objective.allowed_statuses
            ):
                return False

        for thread in self.snapshot.threads_of(ThreadSubtype.OBJECTIVE_REQUIRES):
            if thread.source_id != quest.id or thread.objective_index != objective_index:
                continue
            target = thread.target_id
            if target.type in _STATUSLESS_TARGETS:
                continue
            if not self.snapshot.has_entity(target) or not is_status_satisfying(
                target.type, self.snapshot.status_of(target), thread.allowed_statuses
            ):
                return False
        return True
