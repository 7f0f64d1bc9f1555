"""Pre-built content for the progression tracker."""

from __future__ import annotations

from src.content.sample_game import SampleGameResult, create_sample_game

__all__ = ["SampleGameResult", "create_sample_game"]
