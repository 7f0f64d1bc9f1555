"""
Oracle CLI.

Loads the sample game, applies status changes given on the command line,
and prints what the player can reach and do next.

    python -m src.cli.oracle --set rusty_key=acquired --position lighthouse
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass

from src.config import ProgressionConfig, configure_logging
from src.content import SampleGameResult, create_sample_game
from src.db.memory import InMemoryProgressionRepository
from src.models import EntityId, create_progress
from src.services import ProgressionService, ProgressionTracker, TrackerState


@dataclass
class OracleSession:
    """The sample game loaded into a fresh store."""

    store: InMemoryProgressionRepository
    world: SampleGameResult
    service: ProgressionService

    def lookup(self, key: str) -> EntityId | None:
        """Find a sample entity by its short key (e.g. 'rusty_key')."""
        for group in (
            self.world.places,
            self.world.paths,
            self.world.items,
            self.world.people,
            self.world.insights,
            self.world.quests,
        ):
            if key in group:
                return group[key]
        return None

    def name_of(self, entity_id: EntityId) -> str:
        """Display name for an entity or thread ID."""
        entity = self.store.get_entity(entity_id)
        return entity.name if entity else str(entity_id)


def create_session(config: ProgressionConfig | None = None) -> OracleSession:
    """Build a store holding the sample game and a service over it."""
    store = InMemoryProgressionRepository()
    world = create_sample_game(store)
    service = ProgressionService(store=store, config=config or ProgressionConfig())
    return OracleSession(store=store, world=world, service=service)


def apply_status(session: OracleSession, assignment: str) -> None:
    """
    Apply a ``key=status`` assignment to the sample playthrough.

    Raises:
        ValueError: If the key is unknown or the status invalid for its type.
    """
    key, sep, status = assignment.partition("=")
    if not sep:
        raise ValueError(f"Expected key=status, got {assignment!r}")
    entity_id = session.lookup(key.strip())
    if entity_id is None:
        raise ValueError(f"Unknown entity key: {key!r}")
    session.store.save_progress(
        create_progress(session.world.playthrough.id, entity_id, status.strip())
    )


def render(session: OracleSession, state: TrackerState) -> str:
    """Format a tracker state for the terminal."""
    if state.error:
        return f"Error: {state.error}"

    steps = state.next_steps
    lines = []
    position = session.name_of(steps.position) if steps.position else "nowhere"
    lines.append(f"You are at: {position}")

    lines.append("")
    lines.append("Reachable places:")
    for name in sorted(session.name_of(p) for p in steps.reachable_place_ids):
        lines.append(f"  - {name}")

    lines.append("")
    lines.append("Next steps:")
    if not steps.actionable:
        lines.append("  (nothing to do)")
    for step in steps.actionable:
        lines.append(f"  - {step.action_label}: {step.label}")

    lines.append("")
    lines.append(f"Route threads highlighted: {len(steps.route_thread_ids)}")
    return "\n".join(lines)


async def run_oracle(
    position: str | None = None,
    assignments: list[str] | None = None,
    config: ProgressionConfig | None = None,
) -> str:
    """
    Run one oracle query against the sample game.

    Args:
        position: Place key to stand at (defaults to the stored position)
        assignments: ``key=status`` changes applied before the query
        config: Engine configuration

    Returns:
        The rendered report
    """
    session = create_session(config)
    for assignment in assignments or []:
        apply_status(session, assignment)

    tracker = ProgressionTracker(
        service=session.service,
        game_id=session.world.game.id,
        playthrough_id=session.world.playthrough.id,
    )
    if position is not None:
        place_id = session.lookup(position)
        if place_id is None:
            raise ValueError(f"Unknown place key: {position!r}")
        state = await tracker.move_to(place_id)
    else:
        state = await tracker.refresh()
    return render(session, state)


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Progression oracle for the sample game")
    parser.add_argument("--position", default=None, help="Place key to stand at")
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="KEY=STATUS",
        help="Set an entity status, e.g. rusty_key=acquired (repeatable)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level")

    args = parser.parse_args(argv)
    config = ProgressionConfig(log_level=args.log_level)
    configure_logging(config.log_level)

    try:
        report = asyncio.run(run_oracle(args.position, args.assignments, config))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    print(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
