"""Tests for the asynchronous progression tracker."""

from __future__ import annotations

import asyncio
import threading
from uuid import uuid4

import pytest

from src.models import EntityId, EntityType
from src.services import STORED_POSITION, NextSteps, ProgressionService, ProgressionTracker


class GatedService:
    """Stands in for ProgressionService; each call can be held until released."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.gates: dict[object, threading.Event] = {}
        self.fail_with: Exception | None = None

    def hold(self, position: object) -> threading.Event:
        gate = threading.Event()
        self.gates[position] = gate
        return gate

    def get_next_steps(self, game_id, playthrough_id, position=STORED_POSITION):
        self.calls.append((game_id, playthrough_id, position))
        gate = self.gates.get(position)
        if gate is not None:
            gate.wait(timeout=5)
        if self.fail_with is not None:
            raise self.fail_with
        return NextSteps(position=None if position is STORED_POSITION else position)


@pytest.fixture
def place_ids():
    return [EntityId.new(EntityType.PLACE) for _ in range(2)]


class TestProgressionTracker:
    """Tests for ProgressionTracker."""

    @pytest.mark.asyncio
    async def test_refresh_publishes_result(self, world):
        harbor = world.place("Harbor")
        world.item("Net", at=harbor)
        world.move_to(harbor)
        updates = []
        tracker = ProgressionTracker(
            service=ProgressionService(store=world.store),
            game_id=world.game.id,
            playthrough_id=world.playthrough.id,
            on_update=updates.append,
        )

        state = await tracker.refresh()

        assert not state.is_loading
        assert state.error is None
        assert tracker.reachable_place_ids == {harbor}
        assert [u.is_loading for u in updates] == [True, False]

    @pytest.mark.asyncio
    async def test_stored_position_is_used_until_moved(self, place_ids):
        service = GatedService()
        tracker = ProgressionTracker(service=service, game_id=uuid4())

        await tracker.refresh()
        await tracker.move_to(place_ids[0])

        assert service.calls[0][2] is STORED_POSITION
        assert service.calls[1][2] == place_ids[0]

    @pytest.mark.asyncio
    async def test_superseded_result_is_discarded(self, place_ids):
        service = GatedService()
        slow = service.hold(place_ids[0])
        updates = []
        tracker = ProgressionTracker(service=service, game_id=uuid4(), on_update=updates.append)

        first = asyncio.create_task(tracker.move_to(place_ids[0]))
        while not service.calls:
            await asyncio.sleep(0.01)

        second = await tracker.move_to(place_ids[1])
        assert second.next_steps.position == place_ids[1]

        slow.set()
        await first

        assert tracker.state.next_steps.position == place_ids[1]
        assert tracker.state.generation == 2
        published = [u.next_steps.position for u in updates if not u.is_loading]
        assert published == [place_ids[1]]

    @pytest.mark.asyncio
    async def test_error_state(self):
        service = GatedService()
        service.fail_with = RuntimeError("store offline")
        tracker = ProgressionTracker(service=service, game_id=uuid4())

        state = await tracker.refresh()

        assert state.error == "store offline"
        assert not state.is_loading
        assert state.next_steps == NextSteps()

    @pytest.mark.asyncio
    async def test_superseded_error_is_dropped(self, place_ids):
        service = GatedService()
        slow = service.hold(place_ids[0])
        tracker = ProgressionTracker(service=service, game_id=uuid4())

        first = asyncio.create_task(tracker.move_to(place_ids[0]))
        while not service.calls:
            await asyncio.sleep(0.01)
        await tracker.move_to(place_ids[1])

        service.fail_with = RuntimeError("late failure")
        slow.set()
        await first

        assert tracker.state.error is None
        assert tracker.state.next_steps.position == place_ids[1]

    @pytest.mark.asyncio
    async def test_select_playthrough_resets_position(self, place_ids):
        service = GatedService()
        tracker = ProgressionTracker(service=service, game_id=uuid4(), position=place_ids[0])
        playthrough_id = uuid4()

        await tracker.select_playthrough(playthrough_id)

        assert tracker.position is STORED_POSITION
        assert service.calls[-1][1] == playthrough_id
        assert service.calls[-1][2] is STORED_POSITION

    @pytest.mark.asyncio
    async def test_move_to_none_passes_no_position(self, place_ids):
        service = GatedService()
        tracker = ProgressionTracker(service=service, game_id=uuid4(), position=place_ids[0])

        await tracker.move_to(None)

        assert tracker.position is None
        assert service.calls[-1][2] is None

    @pytest.mark.asyncio
    async def test_move_to_none_clears_stored_position(self, world):
        harbor = world.place("Harbor")
        world.item("Net", at=harbor)
        world.move_to(harbor)
        tracker = ProgressionTracker(
            service=ProgressionService(store=world.store),
            game_id=world.game.id,
            playthrough_id=world.playthrough.id,
        )
        await tracker.refresh()
        assert tracker.reachable_place_ids == {harbor}

        state = await tracker.move_to(None)

        assert state.next_steps.position is None
        assert state.next_steps.reachable_place_ids == set()
        assert state.next_steps.actionable == []
        assert state.next_steps.route_thread_ids == set()
