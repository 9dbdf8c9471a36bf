"""Grid box-pushing puzzle: level catalog, engine and presentation helpers."""

from __future__ import annotations

from .commands import Command, parse_command, parse_key, parse_voice
from .engine import (
    ACTION_SPACE,
    DIRECTION_DELTAS,
    BoxStatus,
    Direction,
    InvalidDirectionError,
    LevelAlreadyWonError,
    NoActiveLevelError,
    PuzzleEngine,
    PuzzleState,
)
from .feedback import (
    TONES,
    FeedbackCue,
    FeedbackPresenter,
    ToneCue,
    describe_outcome,
    help_text,
    hud_lines,
    status_announcement,
)
from .levels import (
    InvalidLevelDefinitionError,
    LevelCatalog,
    LevelDefinition,
    OutOfRangeError,
    PuzzleError,
    default_catalog,
    load_level_catalog,
    parse_level_catalog,
)
from .outcomes import (
    Blocked,
    BoxMoved,
    BoxPlaced,
    BoxRemoved,
    LevelLoaded,
    LevelWon,
    Outcome,
    PlayerMoved,
    Victory,
)
from .render import render_frame, state_to_text
from .vision import (
    StateImage,
    render_engine_image,
    render_puzzle_image,
    render_state_image,
)

__all__ = [
    "ACTION_SPACE",
    "Blocked",
    "BoxMoved",
    "BoxPlaced",
    "BoxRemoved",
    "BoxStatus",
    "Command",
    "DIRECTION_DELTAS",
    "Direction",
    "FeedbackCue",
    "FeedbackPresenter",
    "InvalidDirectionError",
    "InvalidLevelDefinitionError",
    "LevelAlreadyWonError",
    "LevelCatalog",
    "LevelDefinition",
    "LevelLoaded",
    "LevelWon",
    "NoActiveLevelError",
    "OutOfRangeError",
    "Outcome",
    "PlayerMoved",
    "PuzzleEngine",
    "PuzzleError",
    "PuzzleState",
    "StateImage",
    "TONES",
    "ToneCue",
    "Victory",
    "default_catalog",
    "describe_outcome",
    "help_text",
    "hud_lines",
    "load_level_catalog",
    "parse_command",
    "parse_key",
    "parse_level_catalog",
    "parse_voice",
    "render_engine_image",
    "render_frame",
    "render_puzzle_image",
    "render_state_image",
    "state_to_text",
    "status_announcement",
]
