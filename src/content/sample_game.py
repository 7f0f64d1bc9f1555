"""
Sample Game.

Provides a small pre-built game with places, paths, items, people,
insights and quests wired together by threads, so the engine (and the
oracle CLI) have something to work on straight away.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.db.interfaces import ProgressionRepository
from src.models import (
    Entity,
    EntityId,
    Game,
    PathStatus,
    Playthrough,
    create_connection,
    create_insight,
    create_item,
    create_location,
    create_objective,
    create_path,
    create_person,
    create_place,
    create_progress,
    create_quest,
    create_requirement,
)


@dataclass
class SampleGameResult:
    """Result of creating the sample game."""

    game: Game
    playthrough: Playthrough
    places: dict[str, EntityId]  # key -> id
    paths: dict[str, EntityId]
    items: dict[str, EntityId]
    people: dict[str, EntityId]
    insights: dict[str, EntityId]
    quests: dict[str, EntityId]


def create_sample_game(store: ProgressionRepository) -> SampleGameResult:
    """
    Create "The Sunken Lantern" and a fresh playthrough standing at the harbor.

    Layout:
    - harbor <-> market (direct link)
    - harbor <-> lighthouse over the cliff stairs (restricted, needs the rusty key)
    - market <-> chapel over the chapel gate (opened)
    - lighthouse <-> sea cave over the tidal passage (blocked)

    Args:
        store: Store to write the game into

    Returns:
        SampleGameResult with all created entity IDs
    """
    game = Game(name="The Sunken Lantern", description="A drowned coast and a dark lighthouse.")
    store.save_game(game)

    def add(entity: Entity) -> EntityId:
        store.save_entity(entity)
        return entity.id

    # =========================================================================
    # Places and paths
    # =========================================================================
    places = {
        "harbor": add(create_place(game.id, "Harbor", "Fishing boats and gulls.")),
        "market": add(create_place(game.id, "Market", "Stalls crowd the quay.")),
        "lighthouse": add(create_place(game.id, "Lighthouse", "Its lamp has gone out.")),
        "chapel": add(create_place(game.id, "Old Chapel", "Salt-stained pews.")),
        "sea_cave": add(create_place(game.id, "Sea Cave", "Only reachable at low tide.")),
    }
    paths = {
        "cliff_stairs": add(create_path(game.id, "Cliff Stairs", "A locked iron gate.")),
        "chapel_gate": add(create_path(game.id, "Chapel Gate")),
        "tidal_passage": add(create_path(game.id, "Tidal Passage", "Flooded.")),
    }

    store.save_thread(create_connection(game.id, places["harbor"], places["market"]))
    for path_key, a, b in (
        ("cliff_stairs", "harbor", "lighthouse"),
        ("chapel_gate", "market", "chapel"),
        ("tidal_passage", "lighthouse", "sea_cave"),
    ):
        store.save_thread(create_connection(game.id, places[a], paths[path_key]))
        store.save_thread(create_connection(game.id, paths[path_key], places[b]))

    # =========================================================================
    # Items, people, insights
    # =========================================================================
    items = {
        "rusty_key": add(create_item(game.id, "Rusty Key")),
        "lantern_oil": add(create_item(game.id, "Lantern Oil")),
        "pearl": add(create_item(game.id, "Black Pearl")),
    }
    people = {
        "keeper": add(create_person(game.id, "Keeper Maren")),
        "fishmonger": add(create_person(game.id, "Old Tobin")),
    }
    insights = {
        "keepers_secret": add(create_insight(game.id, "The Keeper's Secret")),
    }

    for entity_id, place_key in (
        (items["rusty_key"], "market"),
        (items["lantern_oil"], "chapel"),
        (items["pearl"], "sea_cave"),
        (people["keeper"], "lighthouse"),
        (people["fishmonger"], "harbor"),
        (insights["keepers_secret"], "lighthouse"),
    ):
        store.save_thread(create_location(game.id, entity_id, places[place_key]))

    # =========================================================================
    # Quests
    # =========================================================================
    relight = create_quest(
        game.id,
        "Relight the Lantern",
        "Bring oil to the lighthouse and get the lamp burning again.",
        objectives=[
            create_objective("Find lantern oil", items["lantern_oil"], ["acquired"]),
            create_objective("Speak with the keeper", people["keeper"]),
        ],
    )
    rumors = create_quest(game.id, "Harbor Rumors", "Ask around about the dark lighthouse.")
    quests = {"relight": add(relight), "rumors": add(rumors)}
    store.save_thread(create_location(game.id, quests["relight"], places["lighthouse"]))
    store.save_thread(create_location(game.id, quests["rumors"], places["harbor"]))

    # =========================================================================
    # Requirements
    # =========================================================================
    store.save_thread(create_requirement(game.id, paths["cliff_stairs"], items["rusty_key"]))
    store.save_thread(create_requirement(game.id, quests["relight"], quests["rumors"]))
    store.save_thread(
        create_requirement(game.id, insights["keepers_secret"], quests["relight"])
    )

    # =========================================================================
    # Playthrough
    # =========================================================================
    playthrough = Playthrough(
        game_id=game.id, name="First run", current_position=places["harbor"]
    )
    store.save_playthrough(playthrough)
    store.save_progress(create_progress(playthrough.id, paths["chapel_gate"], PathStatus.OPENED))
    store.save_progress(create_progress(playthrough.id, paths["tidal_passage"], PathStatus.BLOCKED))

    return SampleGameResult(
        game=game,
        playthrough=playthrough,
        places=places,
        paths=paths,
        items=items,
        people=people,
        insights=insights,
        quests=quests,
    )
