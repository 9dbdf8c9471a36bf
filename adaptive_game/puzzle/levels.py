from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeAlias

logger = logging.getLogger(__name__)

Position: TypeAlias = tuple[int, int]

EMPTY = 0
PLAYER = 1
BOX = 2
TARGET = 3

_VALID_CODES = {EMPTY, PLAYER, BOX, TARGET}


class PuzzleError(Exception):
    """Base exception for puzzle errors."""


class InvalidLevelDefinitionError(PuzzleError, ValueError):
    """Raised when a level grid is malformed."""


class OutOfRangeError(PuzzleError, IndexError):
    """Raised when a level index does not exist in the catalog."""


@dataclass(frozen=True, slots=True)
class LevelDefinition:
    name: str
    grid: tuple[tuple[int, ...], ...]

    def __post_init__(self) -> None:
        # Snapshot caller-owned rows so later edits cannot reach the catalog.
        if isinstance(self.grid, (list, tuple)):
            object.__setattr__(
                self,
                "grid",
                tuple(
                    tuple(row) if isinstance(row, (list, tuple)) else row
                    for row in self.grid
                ),
            )

    @classmethod
    def from_rows(cls, name: str, rows: Iterable[Iterable[int]]) -> LevelDefinition:
        return cls(name=name, grid=tuple(tuple(row) for row in rows))

    @property
    def height(self) -> int:
        return len(self.grid)

    @property
    def width(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    def cells(self) -> Iterator[tuple[Position, int]]:
        for row_idx, row in enumerate(self.grid):
            for col_idx, code in enumerate(row):
                yield (row_idx, col_idx), code

    def positions_of(self, code: int) -> tuple[Position, ...]:
        return tuple(pos for pos, cell in self.cells() if cell == code)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "grid": [list(row) for row in self.grid]}


def validate_level_definition(level: LevelDefinition) -> None:
    if not isinstance(level.name, str) or not level.name.strip():
        raise InvalidLevelDefinitionError("level name must be a non-empty string")
    if not isinstance(level.grid, tuple) or not level.grid:
        raise InvalidLevelDefinitionError(f"level {level.name!r} has no rows")
    for row_idx, row in enumerate(level.grid):
        if not isinstance(row, tuple):
            raise InvalidLevelDefinitionError(
                f"level {level.name!r} row {row_idx} must be a list of cell codes"
            )

    width = len(level.grid[0])
    if width == 0:
        raise InvalidLevelDefinitionError(f"level {level.name!r} has an empty row")

    players = 0
    for row_idx, row in enumerate(level.grid):
        if len(row) != width:
            raise InvalidLevelDefinitionError(
                f"level {level.name!r} row {row_idx} has {len(row)} cells, expected {width}"
            )
        for col_idx, code in enumerate(row):
            if isinstance(code, bool) or code not in _VALID_CODES:
                raise InvalidLevelDefinitionError(
                    f"level {level.name!r} has invalid cell code {code!r} at ({row_idx}, {col_idx})"
                )
            if code == PLAYER:
                players += 1

    if players != 1:
        raise InvalidLevelDefinitionError(
            f"level {level.name!r} must have exactly one player cell, found {players}"
        )


class LevelCatalog:
    """Fixed, ordered sequence of validated level definitions."""

    def __init__(self, levels: Iterable[LevelDefinition]) -> None:
        resolved = tuple(levels)
        for level in resolved:
            validate_level_definition(level)
        self._levels = resolved

    def get(self, index: int) -> LevelDefinition:
        if index < 0 or index >= len(self._levels):
            raise OutOfRangeError(
                f"level index {index} out of range [0, {len(self._levels) - 1}]"
            )
        return self._levels[index]

    def count(self) -> int:
        return len(self._levels)

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self) -> Iterator[LevelDefinition]:
        return iter(self._levels)


_DEFAULT_LEVELS: tuple[tuple[str, tuple[tuple[int, ...], ...]], ...] = (
    (
        "Getting Started",
        (
            (0, 0, 0, 0, 0, 0, 0, 0),
            (0, 0, 0, 0, 0, 0, 0, 0),
            (0, 0, 1, 0, 0, 0, 0, 0),
            (0, 0, 0, 0, 0, 3, 0, 0),
            (0, 0, 0, 2, 0, 0, 0, 0),
            (0, 0, 0, 0, 0, 0, 0, 0),
            (0, 0, 0, 0, 0, 0, 0, 0),
            (0, 0, 0, 0, 0, 0, 0, 0),
        ),
    ),
    (
        "Double Trouble",
        (
            (0, 0, 0, 0, 0, 0, 0, 0),
            (0, 1, 0, 0, 0, 0, 0, 0),
            (0, 0, 2, 0, 0, 3, 0, 0),
            (0, 0, 0, 0, 0, 0, 0, 0),
            (0, 0, 0, 2, 0, 0, 0, 0),
            (0, 0, 0, 0, 0, 3, 0, 0),
            (0, 0, 0, 0, 0, 0, 0, 0),
            (0, 0, 0, 0, 0, 0, 0, 0),
        ),
    ),
    (
        "The Puzzle",
        (
            (0, 0, 0, 0, 0, 0, 0, 0),
            (0, 0, 1, 0, 0, 0, 0, 0),
            (0, 0, 2, 0, 0, 0, 0, 0),
            (0, 0, 0, 0, 2, 0, 0, 0),
            (0, 0, 0, 0, 0, 2, 0, 0),
            (0, 3, 0, 0, 0, 0, 0, 0),
            (0, 0, 3, 0, 0, 0, 3, 0),
            (0, 0, 0, 0, 0, 0, 0, 0),
        ),
    ),
)


def default_catalog() -> LevelCatalog:
    return LevelCatalog(
        LevelDefinition(name=name, grid=grid) for name, grid in _DEFAULT_LEVELS
    )


def _parse_level_entry(index: int, entry: object) -> LevelDefinition:
    if not isinstance(entry, Mapping):
        raise InvalidLevelDefinitionError(f"levels[{index}] must be an object")
    name = entry.get("name")
    grid = entry.get("grid")
    if not isinstance(name, str):
        raise InvalidLevelDefinitionError(f"levels[{index}].name must be a string")
    if not isinstance(grid, Sequence) or isinstance(grid, str):
        raise InvalidLevelDefinitionError(f"levels[{index}].grid must be an array")
    rows: list[tuple[int, ...]] = []
    for row_idx, row in enumerate(grid):
        if not isinstance(row, Sequence) or isinstance(row, str):
            raise InvalidLevelDefinitionError(
                f"levels[{index}].grid[{row_idx}] must be an array of integers"
            )
        rows.append(tuple(row))
    return LevelDefinition(name=name, grid=tuple(rows))


def parse_level_catalog(data: Mapping[str, Any] | Sequence[Any]) -> LevelCatalog:
    """Build a catalog from ``{"levels": [...]}`` or a bare list of levels."""
    entries = data.get("levels") if isinstance(data, Mapping) else data
    if not isinstance(entries, Sequence) or isinstance(entries, str) or not entries:
        raise InvalidLevelDefinitionError("levels must be a non-empty array")
    return LevelCatalog(
        _parse_level_entry(index, entry) for index, entry in enumerate(entries)
    )


def load_level_catalog(path: str | Path) -> LevelCatalog:
    path_obj = Path(path)
    if not path_obj.exists():
        raise FileNotFoundError(path_obj)
    try:
        raw = json.loads(path_obj.read_text())
    except json.JSONDecodeError as exc:
        raise InvalidLevelDefinitionError(f"invalid JSON in {path_obj}: {exc}") from exc
    catalog = parse_level_catalog(raw)
    logger.info(f"Loaded {catalog.count()} levels from {path_obj}")
    return catalog
