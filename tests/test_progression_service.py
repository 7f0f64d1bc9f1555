"""Tests for the progression service."""

from __future__ import annotations

from uuid import uuid4

import pytest

from src.config import ProgressionConfig
from src.models import Game, Playthrough, create_place
from src.services import NextSteps, ProgressionService


@pytest.fixture
def service(world):
    return ProgressionService(store=world.store, config=ProgressionConfig())


@pytest.fixture
def town(world):
    """Two places joined by a locked gate that needs a key found at the first."""
    square = world.place("Square")
    tower = world.place("Tower")
    key = world.item("Key", at=square)
    gate, to_square, to_tower = world.path("Gate", square, tower)
    world.requires(gate, key)
    bell = world.quest("Ring the bell", at=tower)
    world.move_to(square)
    return {
        "square": square,
        "tower": tower,
        "key": key,
        "gate": gate,
        "bell": bell,
        "gate_threads": {to_square, to_tower},
    }


class TestComputeReachablePlaces:
    """Tests for compute_reachable_places."""

    def test_accepts_string_ids(self, world, service, town):
        result = service.compute_reachable_places(
            world.game.id, world.playthrough.id, str(town["square"])
        )
        assert result.reachable_place_ids == {town["square"]}

    def test_opens_with_progress(self, world, service, town):
        world.set_status(town["key"], "acquired")
        result = service.compute_reachable_places(
            world.game.id, world.playthrough.id, town["square"]
        )
        assert result.reachable_place_ids == {town["square"], town["tower"]}

    @pytest.mark.parametrize("start", [None, "", "place", "item:x", "square"])
    def test_bad_start_is_empty(self, world, service, town, start):
        result = service.compute_reachable_places(world.game.id, world.playthrough.id, start)
        assert result.reachable_place_ids == set()

    def test_no_playthrough_is_empty(self, world, service, town):
        result = service.compute_reachable_places(world.game.id, None, town["square"])
        assert result.reachable_place_ids == set()

    def test_place_from_other_game_is_empty(self, world, service, town):
        other = Game(name="Other")
        world.store.save_game(other)
        foreign = create_place(other.id, "Elsewhere")
        world.store.save_entity(foreign)

        result = service.compute_reachable_places(world.game.id, world.playthrough.id, foreign.id)
        assert result.reachable_place_ids == set()

    def test_restricted_switch_from_config(self, world, town):
        world.set_status(town["key"], "acquired")
        strict = ProgressionService(
            store=world.store, config=ProgressionConfig(restricted_paths_use_requirements=False)
        )
        result = strict.compute_reachable_places(world.game.id, world.playthrough.id, town["square"])
        assert result.reachable_place_ids == {town["square"]}


class TestCheckAvailability:
    """Tests for check_entity_availability and its batch form."""

    def test_single(self, world, service, town):
        result = service.check_entity_availability(world.game.id, world.playthrough.id, town["gate"])
        assert not result.available
        assert result.unmet_target_ids == [town["key"]]

    def test_malformed_id(self, world, service, town):
        result = service.check_entity_availability(world.game.id, world.playthrough.id, "gate")
        assert not result.available
        assert result.unmet_target_ids == []

    def test_without_playthrough_uses_defaults(self, world, service, town):
        result = service.check_entity_availability(world.game.id, None, town["gate"])
        assert not result.available
        assert service.check_entity_availability(world.game.id, None, town["key"]).available

    def test_batch_is_keyed_by_input(self, world, service, town):
        bell = str(town["bell"])
        results = service.check_entities_availability(
            world.game.id, world.playthrough.id, [town["gate"], "nonsense", bell]
        )
        assert list(results) == [town["gate"], "nonsense", bell]
        assert results[bell].available
        assert results[town["gate"]].unmet_target_ids == [town["key"]]

    def test_batch_malformed_ids_are_unavailable(self, world, service, town):
        results = service.check_entities_availability(
            world.game.id, world.playthrough.id, ["nonsense", "item:"]
        )
        assert not results["nonsense"].available
        assert not results["item:"].available
        assert results["nonsense"].unmet_target_ids == []


class TestActionable:
    """Tests for get_actionable_entities and get_actionable_route_edge_ids."""

    def test_actionable_for_reachable_set(self, world, service, town):
        steps = service.get_actionable_entities(
            world.game.id, world.playthrough.id, [town["square"]]
        )
        assert [s.entity_id for s in steps] == [town["key"]]

    def test_no_playthrough(self, world, service, town):
        assert service.get_actionable_entities(world.game.id, None, [town["square"]]) == []
        assert service.get_actionable_entities(world.game.id, uuid4(), [town["square"]]) == []

    def test_malformed_reachable_ids_are_ignored(self, world, service, town):
        steps = service.get_actionable_entities(
            world.game.id, world.playthrough.id, ["junk", str(town["square"])]
        )
        assert [s.entity_id for s in steps] == [town["key"]]

    def test_route_edges(self, world, service, town):
        world.set_status(town["key"], "acquired")
        route = service.get_actionable_route_edge_ids(
            world.game.id,
            world.playthrough.id,
            town["square"],
            [town["square"], town["tower"]],
            [town["bell"]],
        )
        assert route == town["gate_threads"]

    def test_route_edges_respect_given_reachable_set(self, world, service, town):
        world.set_status(town["key"], "acquired")
        route = service.get_actionable_route_edge_ids(
            world.game.id, world.playthrough.id, town["square"], [town["square"]], [town["bell"]]
        )
        assert route == set()

    def test_route_edges_without_inputs(self, world, service, town):
        args = (world.game.id, world.playthrough.id)
        assert service.get_actionable_route_edge_ids(*args, None, [town["square"]], [town["key"]]) == set()
        assert service.get_actionable_route_edge_ids(*args, town["square"], [town["square"]], []) == set()
        assert (
            service.get_actionable_route_edge_ids(
                world.game.id, None, town["square"], [town["square"]], [town["key"]]
            )
            == set()
        )


class TestNextSteps:
    """Tests for get_next_steps."""

    def test_uses_stored_position(self, world, service, town):
        steps = service.get_next_steps(world.game.id, world.playthrough.id)
        assert steps.position == town["square"]
        assert steps.reachable_place_ids == {town["square"]}
        assert steps.actionable_entity_ids == {town["key"]}
        assert steps.route_thread_ids == set()

    def test_explicit_position(self, world, service, town):
        steps = service.get_next_steps(world.game.id, world.playthrough.id, town["tower"])
        assert steps.position == town["tower"]
        assert steps.reachable_place_ids == {town["tower"]}
        assert steps.actionable_entity_ids == {town["bell"]}

    def test_explicit_none_position_reaches_nothing(self, world, service, town):
        steps = service.get_next_steps(world.game.id, world.playthrough.id, None)
        assert steps.position is None
        assert steps.reachable_place_ids == set()
        assert town["key"] not in steps.actionable_entity_ids

    def test_after_progress(self, world, service, town):
        world.set_status(town["key"], "acquired")
        steps = service.get_next_steps(world.game.id, world.playthrough.id)
        assert steps.actionable_entity_ids == {town["bell"]}
        assert steps.route_thread_ids == town["gate_threads"]

    def test_no_playthrough(self, world, service, town):
        assert service.get_next_steps(world.game.id, None) == NextSteps()

    def test_playthrough_of_other_game(self, world, service, town):
        other = Game(name="Other")
        world.store.save_game(other)
        stranger = Playthrough(game_id=other.id)
        world.store.save_playthrough(stranger)
        assert service.get_next_steps(world.game.id, stranger.id) == NextSteps()

    def test_deterministic(self, world, service, town):
        first = service.get_next_steps(world.game.id, world.playthrough.id)
        second = service.get_next_steps(world.game.id, world.playthrough.id)
        assert first == second

    def test_matches_individual_operations(self, world, service, town):
        world.set_status(town["key"], "acquired")
        steps = service.get_next_steps(world.game.id, world.playthrough.id)

        reachable = service.compute_reachable_places(
            world.game.id, world.playthrough.id, town["square"]
        ).reachable_place_ids
        actionable = service.get_actionable_entities(
            world.game.id, world.playthrough.id, reachable
        )
        route = service.get_actionable_route_edge_ids(
            world.game.id,
            world.playthrough.id,
            town["square"],
            reachable,
            [s.entity_id for s in actionable],
        )

        assert steps.reachable_place_ids == reachable
        assert steps.actionable == actionable
        assert steps.route_thread_ids == route
