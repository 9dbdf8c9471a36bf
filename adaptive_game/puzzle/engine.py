from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Literal, TypeAlias

from .levels import (
    BOX,
    PLAYER,
    TARGET,
    LevelCatalog,
    LevelDefinition,
    Position,
    PuzzleError,
)
from .outcomes import (
    Blocked,
    BlockReason,
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

Direction: TypeAlias = Literal["up", "down", "left", "right"]
EngineStatus: TypeAlias = Literal[
    "uninitialized", "playing", "won", "all_levels_complete"
]
Subscriber: TypeAlias = Callable[[Outcome], None]

ACTION_SPACE: tuple[Direction, ...] = ("up", "down", "left", "right")

DIRECTION_DELTAS: dict[Direction, tuple[int, int]] = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}


class NoActiveLevelError(PuzzleError):
    """Raised when an operation needs a playable level and none is loaded."""


class LevelAlreadyWonError(NoActiveLevelError):
    """Raised when moving after the current level has been won."""


class InvalidDirectionError(PuzzleError, ValueError):
    """Raised when a direction cannot be parsed."""


def _is_position_in_bounds(width: int, height: int, pos: Position) -> bool:
    row, col = pos
    return 0 <= row < height and 0 <= col < width


def _offset(pos: Position, direction: Direction) -> Position:
    dr, dc = DIRECTION_DELTAS[direction]
    return (pos[0] + dr, pos[1] + dc)


def parse_direction(direction: object) -> Direction:
    if isinstance(direction, str):
        normalized = direction.strip().lower()
        if normalized in DIRECTION_DELTAS:
            return normalized  # type: ignore[return-value]
    raise InvalidDirectionError(
        f"direction must be one of up/down/left/right, got {direction!r}"
    )


@dataclass(slots=True)
class Box:
    position: Position
    on_target: bool = False


@dataclass(frozen=True, slots=True)
class BoxStatus:
    index: int
    position: Position
    on_target: bool


@dataclass(slots=True)
class LevelState:
    level_index: int
    definition: LevelDefinition
    player: Position
    boxes: list[Box]
    targets: tuple[Position, ...]
    target_set: frozenset[Position]
    move_count: int = 0


@dataclass(frozen=True, slots=True)
class PuzzleState:
    level_index: int
    level_name: str
    width: int
    height: int
    player: Position
    boxes: tuple[Position, ...]
    targets: tuple[Position, ...]
    move_count: int

    @property
    def boxes_on_target(self) -> int:
        targets = set(self.targets)
        return sum(1 for box in self.boxes if box in targets)

    def to_text(self) -> str:
        board = [["-" for _ in range(self.width)] for _ in range(self.height)]
        for row, col in self.targets:
            board[row][col] = "."
        for row, col in self.boxes:
            board[row][col] = "*" if board[row][col] == "." else "$"
        player_row, player_col = self.player
        board[player_row][player_col] = (
            "+" if board[player_row][player_col] == "." else "@"
        )
        return "\n".join("".join(row) for row in board)

    def to_dict(self) -> dict[str, Any]:
        return {
            "level_index": self.level_index,
            "level_name": self.level_name,
            "width": self.width,
            "height": self.height,
            "player": list(self.player),
            "boxes": [list(pos) for pos in self.boxes],
            "targets": [list(pos) for pos in self.targets],
            "move_count": self.move_count,
            "boxes_on_target": self.boxes_on_target,
            "text": self.to_text(),
        }


def build_level_state(level_index: int, definition: LevelDefinition) -> LevelState:
    player: Position | None = None
    boxes: list[Box] = []
    targets: list[Position] = []
    for pos, code in definition.cells():
        if code == PLAYER:
            player = pos
        elif code == BOX:
            boxes.append(Box(position=pos))
        elif code == TARGET:
            targets.append(pos)
    if player is None:
        # The catalog validates this; only reachable with an unvalidated definition.
        raise PuzzleError(f"level {definition.name!r} has no player cell")

    target_set = frozenset(targets)
    for box in boxes:
        box.on_target = box.position in target_set
    return LevelState(
        level_index=level_index,
        definition=definition,
        player=player,
        boxes=boxes,
        targets=tuple(targets),
        target_set=target_set,
    )


class PuzzleEngine:
    """Owns the live state of one level and resolves moves, pushes and wins.

    Every command returns the outcomes it produced, in order, and hands each
    of them to the registered subscribers. The engine never schedules anything
    on its own: after ``LevelWon`` the caller decides when to load the next
    level.
    """

    def __init__(self, catalog: LevelCatalog) -> None:
        self.catalog = catalog
        self._state: LevelState | None = None
        self._status: EngineStatus = "uninitialized"
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def _emit(self, outcomes: list[Outcome]) -> tuple[Outcome, ...]:
        # Every subscriber sees every outcome; the first failure is re-raised after.
        first_error: Exception | None = None
        for outcome in outcomes:
            for callback in list(self._subscribers):
                try:
                    callback(outcome)
                except Exception as exc:
                    logger.exception(f"Subscriber failed on {outcome.kind}")
                    if first_error is None:
                        first_error = exc
        if first_error is not None:
            raise first_error
        return tuple(outcomes)

    @property
    def status(self) -> EngineStatus:
        return self._status

    @property
    def level_count(self) -> int:
        return self.catalog.count()

    def _require_state(self) -> LevelState:
        if self._state is None:
            if self._status == "all_levels_complete":
                raise NoActiveLevelError("all levels are complete; load level 0 to play again")
            raise NoActiveLevelError("no level loaded; call load_level first")
        return self._state

    def load_level(self, index: int) -> tuple[Outcome, ...]:
        if self._status == "all_levels_complete" and 0 < index < self.level_count:
            raise NoActiveLevelError(
                "all levels are complete; only level 0 can be loaded"
            )
        if index >= self.level_count:
            self._state = None
            self._status = "all_levels_complete"
            logger.info(f"All {self.level_count} levels complete")
            return self._emit([Victory(total_levels=self.level_count)])

        definition = self.catalog.get(index)
        state = build_level_state(index, definition)
        self._state = state
        self._status = "playing"
        logger.info(
            f"Loaded level {index + 1}/{self.level_count} {definition.name!r} "
            f"with {len(state.boxes)} boxes"
        )

        outcomes: list[Outcome] = [
            LevelLoaded(
                level_index=index,
                level_name=definition.name,
                box_count=len(state.boxes),
            )
        ]
        if not state.boxes:
            outcomes.append(self._win(state))
        return self._emit(outcomes)

    def restart(self) -> tuple[Outcome, ...]:
        state = self._require_state()
        return self.load_level(state.level_index)

    def _win(self, state: LevelState) -> LevelWon:
        self._status = "won"
        logger.info(
            f"Level {state.level_index + 1} won in {state.move_count} moves"
        )
        return LevelWon(level_index=state.level_index, move_count=state.move_count)

    def _box_at(self, state: LevelState, pos: Position) -> int | None:
        for index, box in enumerate(state.boxes):
            if box.position == pos:
                return index
        return None

    def _blocked_reason(
        self, state: LevelState, direction: Direction
    ) -> BlockReason | None:
        width = state.definition.width
        height = state.definition.height
        target = _offset(state.player, direction)
        if not _is_position_in_bounds(width, height, target):
            return "edge_of_grid"
        if self._box_at(state, target) is not None:
            beyond = _offset(target, direction)
            if not _is_position_in_bounds(width, height, beyond):
                return "box_obstructed"
            if self._box_at(state, beyond) is not None:
                return "box_obstructed"
        return None

    def move(self, direction: str) -> tuple[Outcome, ...]:
        parsed = parse_direction(direction)
        state = self._require_state()
        if self._status == "won":
            raise LevelAlreadyWonError(
                f"level {state.level_index + 1} is already won; load the next level"
            )

        reason = self._blocked_reason(state, parsed)
        if reason is not None:
            logger.debug(f"Move {parsed} blocked: {reason}")
            return self._emit([Blocked(reason=reason, direction=parsed)])

        origin = state.player
        target = _offset(origin, parsed)
        outcomes: list[Outcome] = []

        box_index = self._box_at(state, target)
        if box_index is None:
            state.player = target
            state.move_count += 1
            outcomes.append(
                PlayerMoved(
                    from_position=origin,
                    to_position=target,
                    move_count=state.move_count,
                )
            )
            return self._emit(outcomes)

        box = state.boxes[box_index]
        beyond = _offset(target, parsed)
        was_on_target = box.on_target
        box.position = beyond
        state.player = target
        state.move_count += 1
        box.on_target = beyond in state.target_set

        outcomes.append(
            BoxMoved(
                box_index=box_index,
                from_position=target,
                to_position=beyond,
                from_on_target=was_on_target,
                to_on_target=box.on_target,
            )
        )
        outcomes.append(
            PlayerMoved(
                from_position=origin,
                to_position=target,
                move_count=state.move_count,
            )
        )

        if box.on_target and not was_on_target:
            outcomes.append(
                BoxPlaced(
                    boxes_on_target=self._count_on_target(state),
                    total_boxes=len(state.boxes),
                )
            )
            if all(item.on_target for item in state.boxes):
                outcomes.append(self._win(state))
        elif was_on_target and not box.on_target:
            outcomes.append(
                BoxRemoved(
                    boxes_on_target=self._count_on_target(state),
                    total_boxes=len(state.boxes),
                )
            )
        return self._emit(outcomes)

    @staticmethod
    def _count_on_target(state: LevelState) -> int:
        return sum(1 for box in state.boxes if box.on_target)

    def legal_moves(self) -> list[Direction]:
        state = self._require_state()
        if self._status == "won":
            return []
        return [
            direction
            for direction in ACTION_SPACE
            if self._blocked_reason(state, direction) is None
        ]

    @property
    def current_level_index(self) -> int:
        return self._require_state().level_index

    @property
    def current_level_name(self) -> str:
        return self._require_state().definition.name

    @property
    def move_count(self) -> int:
        return self._require_state().move_count

    @property
    def box_count(self) -> int:
        return len(self._require_state().boxes)

    @property
    def boxes_on_target_count(self) -> int:
        return self._count_on_target(self._require_state())

    @property
    def player_position(self) -> Position:
        return self._require_state().player

    def boxes(self) -> tuple[BoxStatus, ...]:
        state = self._require_state()
        return tuple(
            BoxStatus(index=index, position=box.position, on_target=box.on_target)
            for index, box in enumerate(state.boxes)
        )

    def targets(self) -> tuple[Position, ...]:
        return self._require_state().targets

    def is_won(self) -> bool:
        return self._status == "won"

    def snapshot(self) -> PuzzleState:
        state = self._require_state()
        return PuzzleState(
            level_index=state.level_index,
            level_name=state.definition.name,
            width=state.definition.width,
            height=state.definition.height,
            player=state.player,
            boxes=tuple(box.position for box in state.boxes),
            targets=state.targets,
            move_count=state.move_count,
        )
