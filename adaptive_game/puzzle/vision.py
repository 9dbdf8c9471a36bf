from __future__ import annotations

import base64
import io
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .engine import PuzzleEngine, PuzzleState

COLORS = {
    "background": "#1a1a2e",
    "floor": "#16213e",
    "grid": "#0f3460",
    "target": "#4ecdc4",
    "box": "#ff6b35",
    "box_outline": "#ff4500",
    "box_on_target": "#00ff00",
    "player": "#00ff00",
    "player_outline": "#ffff00",
    "text": "#4ecdc4",
}


@dataclass(frozen=True, slots=True)
class StateImage:
    mime_type: str
    data_base64: str
    data_url: str
    width: int
    height: int

    def png_bytes(self) -> bytes:
        return base64.b64decode(self.data_base64)


def _coerce_position(value: object, *, field_name: str) -> tuple[int, int]:
    if not isinstance(value, Iterable):
        raise ValueError(f"{field_name} must contain [row, col] integer pairs")
    parts = list(value)
    if len(parts) != 2 or not all(isinstance(part, int) for part in parts):
        raise ValueError(f"{field_name} must contain [row, col] integer pairs")
    return (parts[0], parts[1])


def _coerce_positions(value: object, *, field_name: str) -> tuple[tuple[int, int], ...]:
    if not isinstance(value, Iterable):
        raise ValueError(f"{field_name} must be an iterable of [row, col] pairs")
    return tuple(_coerce_position(position, field_name=field_name) for position in value)


def _state_from_mapping(state: Mapping[str, object]) -> PuzzleState:
    width = state.get("width")
    height = state.get("height")
    if not isinstance(width, int) or width < 1:
        raise ValueError("state.width must be a positive integer")
    if not isinstance(height, int) or height < 1:
        raise ValueError("state.height must be a positive integer")
    level_index = state.get("level_index", 0)
    move_count = state.get("move_count", 0)
    if not isinstance(level_index, int) or not isinstance(move_count, int):
        raise ValueError("state.level_index and state.move_count must be integers")

    return PuzzleState(
        level_index=level_index,
        level_name=str(state.get("level_name", "")),
        width=width,
        height=height,
        player=_coerce_position(state.get("player"), field_name="state.player"),
        boxes=_coerce_positions(state.get("boxes", ()), field_name="state.boxes"),
        targets=_coerce_positions(state.get("targets", ()), field_name="state.targets"),
        move_count=move_count,
    )


def _safe_inset(tile_size: int, desired: int) -> int:
    # Keep inner geometry non-inverted for small tiles.
    return min(max(desired, 0), max(0, (tile_size - 1) // 2))


def render_puzzle_image(
    state: PuzzleState,
    *,
    tile_size: int = 80,
    label_grid: bool = False,
    background: str = COLORS["background"],
) -> StateImage:
    if tile_size < 8:
        raise ValueError("tile_size must be >= 8")

    try:
        from PIL import Image, ImageDraw, ImageFont
    except ImportError as exc:  # pragma: no cover
        raise RuntimeError(
            "Missing pillow. Install with: pip install pillow"
        ) from exc

    board_width = state.width * tile_size
    board_height = state.height * tile_size
    outer_pad = max(2, tile_size // 12)
    top_gutter = tile_size // 2 if label_grid else 0
    left_gutter = tile_size // 2 if label_grid else 0

    width = left_gutter + board_width + outer_pad * 2
    height = top_gutter + board_height + outer_pad * 2
    origin_x = left_gutter + outer_pad
    origin_y = top_gutter + outer_pad

    img = Image.new("RGB", (width, height), background)
    draw = ImageDraw.Draw(img)

    def tile(row: int, col: int) -> tuple[int, int, int, int]:
        x0 = origin_x + col * tile_size
        y0 = origin_y + row * tile_size
        return (x0, y0, x0 + tile_size - 1, y0 + tile_size - 1)

    for row in range(state.height):
        for col in range(state.width):
            x0, y0, x1, y1 = tile(row, col)
            draw.rectangle(
                (x0 + 1, y0 + 1, x1 - 1, y1 - 1),
                fill=COLORS["floor"],
                outline=COLORS["grid"],
            )

    targets = set(state.targets)
    for row, col in sorted(targets):
        x0, y0, x1, y1 = tile(row, col)
        inset = _safe_inset(tile_size, tile_size // 6)
        draw.ellipse(
            (x0 + inset, y0 + inset, x1 - inset, y1 - inset),
            fill=COLORS["target"],
        )

    for row, col in sorted(state.boxes):
        x0, y0, x1, y1 = tile(row, col)
        inset = _safe_inset(tile_size, max(2, tile_size * 15 // 160))
        on_target = (row, col) in targets
        draw.rectangle(
            (x0 + inset, y0 + inset, x1 - inset, y1 - inset),
            fill=COLORS["box_on_target"] if on_target else COLORS["box"],
            outline=COLORS["box_on_target"] if on_target else COLORS["box_outline"],
            width=max(1, tile_size // 27),
        )

    player_row, player_col = state.player
    px0, py0, px1, py1 = tile(player_row, player_col)
    player_inset = _safe_inset(tile_size, max(3, tile_size // 16))
    draw.rectangle(
        (
            px0 + player_inset,
            py0 + player_inset,
            px1 - player_inset,
            py1 - player_inset,
        ),
        fill=COLORS["player"],
        outline=COLORS["player_outline"],
        width=max(1, tile_size // 20),
    )

    if label_grid:
        font = ImageFont.load_default()
        for col in range(state.width):
            draw.text(
                (origin_x + col * tile_size + tile_size // 2, outer_pad),
                str(col + 1),
                fill=COLORS["text"],
                font=font,
            )
        for row in range(state.height):
            draw.text(
                (outer_pad, origin_y + row * tile_size + tile_size // 2),
                str(row + 1),
                fill=COLORS["text"],
                font=font,
            )

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    data = buffer.getvalue()
    data_base64 = base64.b64encode(data).decode("ascii")
    return StateImage(
        mime_type="image/png",
        data_base64=data_base64,
        data_url=f"data:image/png;base64,{data_base64}",
        width=width,
        height=height,
    )


def render_state_image(
    state: PuzzleState | Mapping[str, object],
    **kwargs: object,
) -> StateImage:
    resolved_state = (
        state if isinstance(state, PuzzleState) else _state_from_mapping(state)
    )
    return render_puzzle_image(resolved_state, **kwargs)


def render_engine_image(engine: PuzzleEngine, **kwargs: object) -> StateImage:
    return render_state_image(engine.snapshot(), **kwargs)
