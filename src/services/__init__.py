"""
Service layer for the progression tracker.

Services load snapshots from a store and run the engine over them.
"""

from __future__ import annotations

from src.services.progression import (
    STORED_POSITION,
    NextSteps,
    ProgressionService,
    ReachabilityResult,
)
from src.services.tracker import ProgressionTracker, TrackerState

__all__ = [
    "STORED_POSITION",
    "NextSteps",
    "ProgressionService",
    "ProgressionTracker",
    "ReachabilityResult",
    "TrackerState",
]
