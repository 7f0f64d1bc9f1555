"""
Data-access layer for the progression tracker.

Provides the store contract the engine reads from and an in-memory
implementation used by tests, the CLI and sample content.
"""

from __future__ import annotations

from src.db.interfaces import (
    EntityReader,
    ProgressionRepository,
    ProgressReader,
    ThreadReader,
)
from src.db.memory import InMemoryProgressionRepository

__all__ = [
    # Protocol interfaces
    "EntityReader",
    "ThreadReader",
    "ProgressReader",
    "ProgressionRepository",
    # In-memory implementation
    "InMemoryProgressionRepository",
]
