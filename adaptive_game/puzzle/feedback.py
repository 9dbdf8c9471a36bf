"""Spoken and tonal feedback for engine outcomes.

Nothing here decides gameplay. Outcomes and engine queries are turned into
``FeedbackCue`` values; speech and audio devices live outside the package and
receive them through the sinks given to ``FeedbackPresenter``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, TypeAlias

from .engine import PuzzleEngine
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

logger = logging.getLogger(__name__)

ToneName: TypeAlias = Literal["start", "move", "push", "success", "blocked", "win"]
Waveform: TypeAlias = Literal["sine", "sawtooth"]


@dataclass(frozen=True, slots=True)
class ToneCue:
    name: ToneName
    frequencies: tuple[int, ...]
    waveform: Waveform
    gain: float
    duration: float


TONES: dict[ToneName, ToneCue] = {
    "start": ToneCue("start", (659,), "sine", 0.2, 0.25),
    "move": ToneCue("move", (800,), "sine", 0.15, 0.08),
    "push": ToneCue("push", (400,), "sine", 0.2, 0.12),
    "success": ToneCue("success", (1000,), "sine", 0.25, 0.2),
    "blocked": ToneCue("blocked", (200,), "sawtooth", 0.1, 0.15),
    # Played as a melody, one note per frequency.
    "win": ToneCue("win", (523, 587, 659, 784, 880), "sine", 0.2, 0.15),
}


@dataclass(frozen=True, slots=True)
class FeedbackCue:
    tone: ToneCue | None = None
    speech: str | None = None
    quick: bool = False


def _plural(count: int, singular: str, plural: str | None = None) -> str:
    return singular if count == 1 else (plural or f"{singular}s")


def describe_outcome(outcome: Outcome) -> FeedbackCue:
    if isinstance(outcome, LevelLoaded):
        boxes = _plural(outcome.box_count, "box", "boxes")
        return FeedbackCue(
            tone=TONES["start"],
            speech=(
                f"Level {outcome.level_index + 1}: {outcome.level_name}. "
                f"You have {outcome.box_count} {boxes} to push onto targets. Good luck!"
            ),
        )
    if isinstance(outcome, PlayerMoved):
        row, col = outcome.to_position
        return FeedbackCue(
            tone=TONES["move"],
            speech=f"Moved to row {row + 1}, column {col + 1}",
            quick=True,
        )
    if isinstance(outcome, BoxMoved):
        return FeedbackCue(tone=TONES["push"], speech="Box pushed", quick=True)
    if isinstance(outcome, BoxPlaced):
        boxes = _plural(outcome.total_boxes, "box", "boxes")
        return FeedbackCue(
            tone=TONES["success"],
            speech=(
                f"Excellent! Box on target. {outcome.boxes_on_target} of "
                f"{outcome.total_boxes} {boxes} placed."
            ),
        )
    if isinstance(outcome, BoxRemoved):
        return FeedbackCue(speech="Box moved off target")
    if isinstance(outcome, Blocked):
        if outcome.reason == "edge_of_grid":
            speech = "Cannot move there. Edge of grid."
        else:
            speech = "Cannot push box. Blocked."
        return FeedbackCue(tone=TONES["blocked"], speech=speech)
    if isinstance(outcome, LevelWon):
        moves = _plural(outcome.move_count, "move")
        return FeedbackCue(
            tone=TONES["win"],
            speech=(
                f"Congratulations! Level complete! You won in "
                f"{outcome.move_count} {moves}. Well done!"
            ),
        )
    if isinstance(outcome, Victory):
        return FeedbackCue(tone=TONES["win"], speech=victory_text(outcome.total_levels))
    raise TypeError(f"unknown outcome: {outcome!r}")


def victory_text(total_levels: int) -> str:
    return (
        f"Amazing! You have completed all {total_levels} "
        f"{_plural(total_levels, 'level')}! You are a puzzle master! "
        "Press R to play again from level 1."
    )


def help_text() -> str:
    return " ".join(
        [
            "Welcome to Adaptive Game.",
            "This is a puzzle game where you push orange boxes onto blue targets.",
            "Controls: Use arrow keys or W, A, S, D keys to move your green character.",
            "Press R to restart the current level.",
            "Press H to hear these instructions again.",
            "Press V to toggle voice assistance on or off.",
            "Press I to show or hide the instruction panel.",
            'Voice commands: Say "move up", "move down", "move left", or "move right" to move.',
            'Say "restart" to restart the level.',
            'Say "status" to hear your current position and progress.',
            'Say "help" to hear these instructions.',
            "Every move makes a beep sound. Pushing a box makes a boop sound.",
            "Getting a box on target makes a ding sound.",
            "Winning a level plays a victory melody.",
            "Good luck and have fun!",
        ]
    )


def status_announcement(engine: PuzzleEngine) -> str:
    if engine.status == "all_levels_complete":
        return victory_text(engine.level_count)

    row, col = engine.player_position
    boxes = engine.boxes()
    targets = engine.targets()
    parts = [f"Player is at row {row + 1}, column {col + 1}."]

    is_one = len(boxes) == 1
    parts.append(
        f"There {'is' if is_one else 'are'} {len(boxes)} {_plural(len(boxes), 'box', 'boxes')}."
    )
    for box in boxes:
        box_row, box_col = box.position
        where = "on target" if box.on_target else "not on target"
        parts.append(f"Box {box.index + 1} is at row {box_row + 1}, column {box_col + 1}, {where}.")

    is_one = len(targets) == 1
    parts.append(
        f"There {'is' if is_one else 'are'} {len(targets)} {_plural(len(targets), 'target')}."
    )
    for index, (target_row, target_col) in enumerate(targets, start=1):
        parts.append(f"Target {index} is at row {target_row + 1}, column {target_col + 1}.")

    on_target = engine.boxes_on_target_count
    parts.append(
        f"Progress: {on_target} of {len(boxes)} {_plural(len(boxes), 'box', 'boxes')} "
        f"on {_plural(len(boxes), 'target')}."
    )
    moves = engine.move_count
    parts.append(f"You have made {moves} {_plural(moves, 'move')}.")
    return " ".join(parts)


def hud_lines(engine: PuzzleEngine) -> list[str]:
    if engine.status in {"uninitialized", "all_levels_complete"}:
        return [f"Levels: {engine.level_count}"]
    return [
        f"Level {engine.current_level_index + 1}/{engine.level_count}",
        f"Moves: {engine.move_count}",
        f"Boxes: {engine.boxes_on_target_count}/{engine.box_count}",
    ]


class FeedbackPresenter:
    """Engine subscriber that forwards cues to speech and tone sinks."""

    def __init__(
        self,
        speak: Callable[[str, bool], None],
        play_tone: Callable[[ToneCue], None] | None = None,
        *,
        voice_enabled: bool = True,
    ) -> None:
        self._speak = speak
        self._play_tone = play_tone
        self.voice_enabled = voice_enabled

    def attach(self, engine: PuzzleEngine) -> Callable[[], None]:
        return engine.subscribe(self.handle)

    def handle(self, outcome: Outcome) -> None:
        self.present(describe_outcome(outcome))

    def present(self, cue: FeedbackCue) -> None:
        if cue.tone is not None and self._play_tone is not None:
            self._play_tone(cue.tone)
        if cue.speech:
            self.say(cue.speech, quick=cue.quick)

    def say(self, text: str, *, quick: bool = False) -> None:
        logger.debug(f"Speaking: {text}")
        if self.voice_enabled:
            self._speak(text, quick)

    def toggle_voice(self) -> bool:
        self.voice_enabled = not self.voice_enabled
        state = "enabled" if self.voice_enabled else "disabled"
        # Announced even when turning off so the player hears the change.
        self._speak(f"Voice assistance {state}", False)
        return self.voice_enabled
