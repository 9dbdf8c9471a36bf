"""Accessible box-pushing puzzle game."""

from __future__ import annotations

from .puzzle import LevelCatalog, PuzzleEngine, default_catalog
from .session import GameSession

__all__ = ["GameSession", "LevelCatalog", "PuzzleEngine", "default_catalog"]
