from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Literal, TypeAlias

from .engine import Direction

logger = logging.getLogger(__name__)

CommandKind: TypeAlias = Literal[
    "move",
    "restart",
    "load_level",
    "help",
    "status",
    "toggle_voice",
    "toggle_instructions",
]


@dataclass(frozen=True, slots=True)
class Command:
    kind: CommandKind
    direction: Direction | None = None
    level_index: int | None = None

    def __post_init__(self) -> None:
        if self.kind == "move" and self.direction is None:
            raise ValueError("move command requires a direction")
        if self.kind == "load_level" and (
            self.level_index is None or self.level_index < 0
        ):
            raise ValueError("load_level command requires a non-negative level_index")


def move(direction: Direction) -> Command:
    return Command(kind="move", direction=direction)


KEY_BINDINGS: dict[str, Command] = {
    "up": move("up"),
    "down": move("down"),
    "left": move("left"),
    "right": move("right"),
    "arrowup": move("up"),
    "arrowdown": move("down"),
    "arrowleft": move("left"),
    "arrowright": move("right"),
    "w": move("up"),
    "s": move("down"),
    "a": move("left"),
    "d": move("right"),
    "r": Command(kind="restart"),
    "h": Command(kind="help"),
    "v": Command(kind="toggle_voice"),
    "i": Command(kind="toggle_instructions"),
}

# Checked in order; the first group with a matching word wins.
VOICE_KEYWORDS: tuple[tuple[frozenset[str], Command], ...] = (
    (frozenset({"up", "top"}), move("up")),
    (frozenset({"down", "bottom"}), move("down")),
    (frozenset({"left"}), move("left")),
    (frozenset({"right", "write", "bright"}), move("right")),
    (frozenset({"restart", "reset"}), Command(kind="restart")),
    (frozenset({"help", "instruction", "instructions"}), Command(kind="help")),
    (frozenset({"status", "where", "position"}), Command(kind="status")),
)

VOICE_TOGGLE_PHRASES = ("toggle voice", "voice off", "voice on")

_WORD_RE = re.compile(r"[a-z]+")
_LEVEL_RE = re.compile(r"^(?:level|load)\s+(\d+)$")


def parse_key(key: str) -> Command | None:
    return KEY_BINDINGS.get(key.strip().lower())


def parse_voice(transcript: str) -> Command | None:
    """Map a recognised utterance such as "move left" to a command."""
    normalized = " ".join(_WORD_RE.findall(transcript.lower()))
    words = set(normalized.split())
    for keywords, command in VOICE_KEYWORDS:
        if words & keywords:
            return command
    if any(phrase in normalized for phrase in VOICE_TOGGLE_PHRASES):
        return Command(kind="toggle_voice")
    logger.debug(f"Command not recognized: {transcript!r}")
    return None


def parse_command(text: str) -> Command | None:
    """Parse typed terminal input: a key name, ``level N`` or a spoken phrase."""
    stripped = text.strip().lower()
    if not stripped:
        return None
    command = parse_key(stripped)
    if command is not None:
        return command
    match = _LEVEL_RE.match(stripped)
    if match:
        number = int(match.group(1))
        if number < 1:
            return None
        return Command(kind="load_level", level_index=number - 1)
    return parse_voice(stripped)
