from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Literal, TypeAlias, Union

from .levels import Position

BlockReason: TypeAlias = Literal["edge_of_grid", "box_obstructed"]


class _OutcomeBase:
    __slots__ = ()

    kind: ClassVar[str]

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)  # type: ignore[call-overload]
        for key, value in payload.items():
            if isinstance(value, tuple):
                payload[key] = list(value)
        return {"kind": self.kind, **payload}


@dataclass(frozen=True, slots=True)
class LevelLoaded(_OutcomeBase):
    kind: ClassVar[str] = "level_loaded"

    level_index: int
    level_name: str
    box_count: int


@dataclass(frozen=True, slots=True)
class PlayerMoved(_OutcomeBase):
    kind: ClassVar[str] = "player_moved"

    from_position: Position
    to_position: Position
    move_count: int


@dataclass(frozen=True, slots=True)
class BoxMoved(_OutcomeBase):
    kind: ClassVar[str] = "box_moved"

    box_index: int
    from_position: Position
    to_position: Position
    from_on_target: bool
    to_on_target: bool


@dataclass(frozen=True, slots=True)
class BoxPlaced(_OutcomeBase):
    kind: ClassVar[str] = "box_placed"

    boxes_on_target: int
    total_boxes: int


@dataclass(frozen=True, slots=True)
class BoxRemoved(_OutcomeBase):
    kind: ClassVar[str] = "box_removed"

    boxes_on_target: int
    total_boxes: int


@dataclass(frozen=True, slots=True)
class Blocked(_OutcomeBase):
    kind: ClassVar[str] = "blocked"

    reason: BlockReason
    direction: str


@dataclass(frozen=True, slots=True)
class LevelWon(_OutcomeBase):
    kind: ClassVar[str] = "level_won"

    level_index: int
    move_count: int


@dataclass(frozen=True, slots=True)
class Victory(_OutcomeBase):
    kind: ClassVar[str] = "victory"

    total_levels: int


Outcome: TypeAlias = Union[
    LevelLoaded,
    PlayerMoved,
    BoxMoved,
    BoxPlaced,
    BoxRemoved,
    Blocked,
    LevelWon,
    Victory,
]
