from __future__ import annotations

from .engine import PuzzleEngine, PuzzleState
from .feedback import hud_lines

LEGEND = "@ player  $ box  * box on target  . target  + player on target  - floor"


def state_to_text(state: PuzzleState, *, label_grid: bool = False) -> str:
    board = state.to_text()
    if not label_grid:
        return board
    header = "   " + "".join(str(col % 10) for col in range(state.width))
    rows = [
        f"{row_idx % 100:>2} {line}"
        for row_idx, line in enumerate(board.splitlines())
    ]
    return "\n".join([header, *rows])


def render_frame(
    engine: PuzzleEngine,
    *,
    label_grid: bool = True,
    show_legend: bool = False,
) -> str:
    lines = [" | ".join(hud_lines(engine))]
    if engine.status in {"playing", "won"}:
        lines.append(engine.current_level_name)
        lines.append(state_to_text(engine.snapshot(), label_grid=label_grid))
        if engine.is_won():
            lines.append("Level complete!")
    elif engine.status == "all_levels_complete":
        lines.append("All levels complete!")
    if show_legend:
        lines.append(LEGEND)
    return "\n".join(lines)
