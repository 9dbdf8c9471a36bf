from __future__ import annotations

import argparse
import json
import logging
import queue
import sys
import threading
import time
from pathlib import Path
from typing import Any, Callable

from adaptive_game.config import (
    ConfigError,
    GameSettings,
    build_catalog,
    load_config,
    merge_dicts,
    settings_from_config,
)
from adaptive_game.puzzle.commands import parse_command
from adaptive_game.puzzle.engine import PuzzleEngine
from adaptive_game.puzzle.feedback import FeedbackPresenter, ToneCue
from adaptive_game.puzzle.levels import BOX, PLAYER, TARGET, LevelCatalog, PuzzleError
from adaptive_game.puzzle.render import render_frame
from adaptive_game.puzzle.vision import render_state_image
from adaptive_game.session import GameSession

logger = logging.getLogger(__name__)

_QUIT_WORDS = {"q", "quit", "exit"}


def configure_logging(verbose: bool = False) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print(obj: object) -> None:
    print(obj, flush=True)


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        action="append",
        default=None,
        help="JSON config file; repeat to layer later files over earlier ones.",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging.")


def _load(args: argparse.Namespace) -> tuple[LevelCatalog, GameSettings]:
    config: dict[str, Any] = {}
    for path in args.config or []:
        config = merge_dicts(config, load_config(path))
    return build_catalog(config), settings_from_config(config)


def _level_index(args: argparse.Namespace, catalog: LevelCatalog) -> int:
    if args.level < 1 or args.level > catalog.count():
        raise ConfigError(f"--level must be in [1, {catalog.count()}]")
    return args.level - 1


def _speak(text: str, quick: bool) -> None:
    _print(f"  {'~' if quick else '>'} {text}")


def _play_tone(cue: ToneCue) -> None:
    logger.debug(f"Tone {cue.name}: {cue.frequencies} Hz {cue.waveform}")


def _read_lines(lines: queue.Queue[str | None], ready: threading.Event) -> None:
    while True:
        ready.wait()
        ready.clear()
        try:
            raw = input("> ")
        except EOFError:
            lines.put(None)
            return
        lines.put(raw)
        if raw.strip().lower() in _QUIT_WORDS:
            return


def _seconds_until_due(session: GameSession) -> float | None:
    pending = session.pending
    if pending is None:
        return None
    return max(0.0, pending.due_at - time.monotonic())


def play_main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="adaptive-game play", description="Play in the terminal."
    )
    _add_common_args(parser)
    parser.add_argument("--level", type=int, default=1, help="1-based start level.")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    catalog, settings = _load(args)
    start_index = _level_index(args, catalog)
    engine = PuzzleEngine(catalog)
    presenter = FeedbackPresenter(_speak, _play_tone)
    session = GameSession(engine, settings, presenter)

    _print("Keys: w/a/s/d or up/down/left/right, r restart, h help, v voice, q quit.")
    _print('Phrases such as "move left", "status" or "level 2" also work.')
    session.start(start_index)
    _print(render_frame(engine))

    # Pending level changes fire while the reader thread waits at the prompt.
    lines: queue.Queue[str | None] = queue.Queue()
    ready = threading.Event()
    reader = threading.Thread(target=_read_lines, args=(lines, ready), daemon=True)
    reader.start()
    ready.set()

    while True:
        if session.run_due():
            _print(render_frame(engine))
        try:
            raw = lines.get(timeout=_seconds_until_due(session))
        except queue.Empty:
            continue
        if raw is None:
            break
        raw = raw.strip()
        if raw.lower() in _QUIT_WORDS:
            break
        command = parse_command(raw)
        if command is None:
            if raw:
                _print(f"Unrecognized command: {raw}")
        else:
            session.submit(command)
            for result in session.pump():
                if result.error:
                    _print(f"Error: {result.error}")
            _print(render_frame(engine))
        ready.set()
    reader.join(timeout=1.0)
    return 0


def render_main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="adaptive-game render",
        description="Write a PNG of a level's starting layout.",
    )
    _add_common_args(parser)
    parser.add_argument("--level", type=int, default=1, help="1-based level number.")
    parser.add_argument("--out", default="level.png")
    parser.add_argument("--tile-size", type=int, default=None)
    parser.add_argument("--label-grid", action="store_true")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    catalog, settings = _load(args)
    index = _level_index(args, catalog)
    engine = PuzzleEngine(catalog)
    engine.load_level(index)
    image = render_state_image(
        engine.snapshot(),
        tile_size=args.tile_size or settings.tile_size,
        label_grid=args.label_grid,
    )
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(image.png_bytes())
    _print(f"Rendered level {index + 1} ({image.width}x{image.height}) to: {out_path}")
    return 0


def levels_main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="adaptive-game levels", description="List the level catalog."
    )
    _add_common_args(parser)
    parser.add_argument("--json", action="store_true", help="Print JSON.")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    catalog, _settings = _load(args)
    rows: list[dict[str, Any]] = []
    for index, level in enumerate(catalog):
        rows.append(
            {
                "level": index + 1,
                "name": level.name,
                "width": level.width,
                "height": level.height,
                "boxes": len(level.positions_of(BOX)),
                "targets": len(level.positions_of(TARGET)),
                "player": list(level.positions_of(PLAYER)[0]),
            }
        )

    if args.json:
        _print(json.dumps(rows, indent=2))
        return 0
    for row in rows:
        _print(
            f"{row['level']:>3}  {row['name']:<24} {row['width']}x{row['height']}  "
            f"boxes={row['boxes']} targets={row['targets']}"
        )
    return 0


COMMANDS: dict[str, tuple[str, Callable[[list[str]], int]]] = {
    "play": ("Play in the terminal", play_main),
    "render": ("Render a level to PNG", render_main),
    "levels": ("List the level catalog", levels_main),
}


def _print_help() -> None:
    _print("adaptive-game <command> [args]\n")
    _print("Commands:")
    for name, (desc, _) in COMMANDS.items():
        _print(f"  {name:20s} {desc}")


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args or args[0] in {"-h", "--help"}:
        _print_help()
        return 0

    command = args.pop(0)
    if command not in COMMANDS:
        _print(f"Unknown command: {command}\n")
        _print_help()
        return 2

    _, handler = COMMANDS[command]
    try:
        return handler(args)
    except (ConfigError, PuzzleError, FileNotFoundError, json.JSONDecodeError) as exc:
        _print(f"Error: {exc}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
