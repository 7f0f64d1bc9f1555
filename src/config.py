"""
Configuration for the progression tracker.

Configuration via environment variables:
    PROGRESSION_LOG_LEVEL: Logging level for the CLI (default: WARNING)
    PROGRESSION_RESTRICTED_PATHS_USE_REQUIREMENTS: "0"/"false" keeps restricted
        paths shut even when their requirements are met (default: true)

Precedence: an argument passed to ``ProgressionConfig`` wins, then the
environment variable, then the default.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ProgressionConfig:
    """Engine behaviour switches. Fields left as None are filled from the environment."""

    log_level: str | None = None
    restricted_paths_use_requirements: bool | None = None

    def __post_init__(self) -> None:
        """Fill unset fields from environment, then defaults."""
        if self.log_level is None:
            self.log_level = os.getenv("PROGRESSION_LOG_LEVEL") or "WARNING"
        self.log_level = self.log_level.upper()

        if self.restricted_paths_use_requirements is None:
            flag = os.getenv("PROGRESSION_RESTRICTED_PATHS_USE_REQUIREMENTS")
            self.restricted_paths_use_requirements = (
                flag is None or flag.strip().lower() not in _FALSE_VALUES
            )


def configure_logging(level: str = "WARNING") -> None:
    """Set up root logging for command-line use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
