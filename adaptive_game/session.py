from __future__ import annotations

import logging
import queue
import time
from dataclasses import dataclass
from typing import Callable, Literal, TypeAlias

from adaptive_game.config import GameSettings
from adaptive_game.puzzle.commands import Command
from adaptive_game.puzzle.engine import PuzzleEngine
from adaptive_game.puzzle.feedback import (
    FeedbackPresenter,
    help_text,
    status_announcement,
)
from adaptive_game.puzzle.levels import PuzzleError
from adaptive_game.puzzle.outcomes import LevelWon, Outcome, Victory

logger = logging.getLogger(__name__)

TransitionReason: TypeAlias = Literal["advance", "replay"]


@dataclass(frozen=True, slots=True)
class PendingTransition:
    level_index: int
    due_at: float
    reason: TransitionReason


@dataclass(frozen=True, slots=True)
class CommandResult:
    command: Command
    outcomes: tuple[Outcome, ...] = ()
    message: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class GameSession:
    """Caller side of the engine: one command queue plus timed level changes.

    Keyboard and voice input both go through ``submit``; ``pump`` must be
    called from the thread that owns the engine. After a win the next level
    is scheduled, not loaded, so a restart or explicit level load can still
    cancel it.
    """

    def __init__(
        self,
        engine: PuzzleEngine,
        settings: GameSettings | None = None,
        presenter: FeedbackPresenter | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.engine = engine
        self.settings = settings or GameSettings()
        self.presenter = presenter
        self.instructions_visible = self.settings.show_instructions
        self._clock = clock
        self._commands: queue.Queue[Command] = queue.Queue()
        self._pending: PendingTransition | None = None

        engine.subscribe(self._on_outcome)
        if presenter is not None:
            presenter.voice_enabled = self.settings.voice_assistance
            presenter.attach(engine)

    @property
    def pending(self) -> PendingTransition | None:
        return self._pending

    def start(self, level_index: int = 0) -> tuple[Outcome, ...]:
        self.cancel_pending()
        return self.engine.load_level(level_index)

    def submit(self, command: Command) -> None:
        self._commands.put(command)

    def pump(self) -> list[CommandResult]:
        results: list[CommandResult] = []
        while True:
            try:
                command = self._commands.get_nowait()
            except queue.Empty:
                break
            results.append(self.handle(command))
        self.run_due()
        return results

    def cancel_pending(self) -> PendingTransition | None:
        pending = self._pending
        if pending is not None:
            logger.debug(f"Cancelled pending transition to level {pending.level_index}")
        self._pending = None
        return pending

    def run_due(self) -> tuple[Outcome, ...]:
        pending = self._pending
        if pending is None or self._clock() < pending.due_at:
            return ()
        self._pending = None
        return self.engine.load_level(pending.level_index)

    def handle(self, command: Command) -> CommandResult:
        try:
            return self._dispatch(command)
        except PuzzleError as exc:
            logger.warning(f"Command {command.kind} rejected: {exc}")
            return CommandResult(command=command, error=str(exc))

    def _dispatch(self, command: Command) -> CommandResult:
        if command.kind == "move":
            if command.direction is None:
                raise ValueError("move command has no direction")
            return CommandResult(command, outcomes=self.engine.move(command.direction))

        if command.kind == "restart":
            if self.engine.status == "all_levels_complete":
                # R after the final level replays from the first one.
                return CommandResult(
                    command, outcomes=self._reload(lambda: self.engine.load_level(0))
                )
            if self.presenter is not None and self.engine.status in {"playing", "won"}:
                self.presenter.say("Restarting level")
            return CommandResult(command, outcomes=self._reload(self.engine.restart))

        if command.kind == "load_level":
            level_index = command.level_index
            if level_index is None:
                raise ValueError("load_level command has no level_index")
            return CommandResult(
                command,
                outcomes=self._reload(lambda: self.engine.load_level(level_index)),
            )

        if command.kind == "help":
            return self._announce(command, help_text())

        if command.kind == "status":
            return self._announce(command, status_announcement(self.engine))

        if command.kind == "toggle_voice":
            if self.presenter is None:
                return CommandResult(command, error="no presenter attached")
            enabled = self.presenter.toggle_voice()
            return CommandResult(
                command,
                message=f"Voice assistance {'enabled' if enabled else 'disabled'}",
            )

        if command.kind == "toggle_instructions":
            self.instructions_visible = not self.instructions_visible
            state = "shown" if self.instructions_visible else "hidden"
            return CommandResult(command, message=f"Instructions {state}")

        raise ValueError(f"unknown command kind: {command.kind}")

    def _announce(self, command: Command, text: str) -> CommandResult:
        if self.presenter is not None:
            self.presenter.say(text)
        return CommandResult(command, message=text)

    def _on_outcome(self, outcome: Outcome) -> None:
        if isinstance(outcome, LevelWon):
            self._schedule(
                outcome.level_index + 1,
                self.settings.advance_delay_seconds,
                "advance",
            )
        elif isinstance(outcome, Victory):
            self._schedule(0, self.settings.victory_restart_delay_seconds, "replay")

    def _schedule(self, level_index: int, delay: float, reason: TransitionReason) -> None:
        self._pending = PendingTransition(
            level_index=level_index,
            due_at=self._clock() + delay,
            reason=reason,
        )
        logger.info(f"Level {level_index + 1} scheduled in {delay:.1f}s ({reason})")

    def _reload(self, load: Callable[[], tuple[Outcome, ...]]) -> tuple[Outcome, ...]:
        previous = self.cancel_pending()
        try:
            return load()
        except PuzzleError:
            self._pending = previous
            raise
