"""
Asynchronous progression tracker.

Recomputes next steps whenever the player moves or the playthrough
changes. Computations run off the event loop and may overlap; each one is
tagged with a generation number, and only the newest generation's result
is ever published. Older results are dropped when they arrive.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import UUID

from pydantic import BaseModel, Field

from src.models import EntityId
from src.services.progression import STORED_POSITION, IdLike, NextSteps, ProgressionService

logger = logging.getLogger(__name__)


class TrackerState(BaseModel):
    """Latest published progression state."""

    next_steps: NextSteps = Field(default_factory=NextSteps)
    is_loading: bool = False
    error: str | None = Field(default=None, description="Message when the last refresh failed")
    generation: int = Field(default=0, description="Refresh that produced this state")


@dataclass
class ProgressionTracker:
    """
    Keeps next steps current for one game.

    ``position`` overrides the playthrough's stored position unless it is
    ``STORED_POSITION``; ``None`` means the player stands nowhere.
    ``on_update`` is called with every published state.
    """

    service: ProgressionService
    game_id: UUID
    playthrough_id: UUID | None = None
    position: IdLike | None | object = STORED_POSITION
    on_update: Callable[[TrackerState], None] | None = None

    state: TrackerState = field(default_factory=TrackerState)
    _generation: int = field(default=0, init=False)

    @property
    def reachable_place_ids(self) -> set[EntityId]:
        """Reachable places of the latest published state."""
        return self.state.next_steps.reachable_place_ids

    async def refresh(self) -> TrackerState:
        """
        Recompute next steps and publish them unless a newer refresh started.

        Returns the state current after this refresh finishes, which is the
        newer refresh's state when this one was superseded.
        """
        self._generation += 1
        generation = self._generation
        self._publish(self.state.model_copy(update={"is_loading": True, "error": None}))

        try:
            if self.position is STORED_POSITION:
                steps = await asyncio.to_thread(
                    self.service.get_next_steps, self.game_id, self.playthrough_id
                )
            else:
                steps = await asyncio.to_thread(
                    self.service.get_next_steps, self.game_id, self.playthrough_id, self.position
                )
        except Exception as e:
            if generation != self._generation:
                return self.state
            logger.error(f"Progression refresh failed: {e}")
            self._publish(TrackerState(error=str(e) or type(e).__name__, generation=generation))
            return self.state

        if generation != self._generation:
            logger.debug("Discarding superseded refresh %d", generation)
            return self.state

        self._publish(TrackerState(next_steps=steps, generation=generation))
        return self.state

    async def move_to(self, place_id: IdLike | None) -> TrackerState:
        """Set the position (None clears it) and refresh."""
        self.position = place_id
        return await self.refresh()

    async def select_playthrough(self, playthrough_id: UUID | None) -> TrackerState:
        """Switch playthrough (back to its stored position) and refresh."""
        self.playthrough_id = playthrough_id
        self.position = STORED_POSITION
        return await self.refresh()

    def _publish(self, state: TrackerState) -> None:
        self.state = state
        if self.on_update is not None:
            self.on_update(state)
