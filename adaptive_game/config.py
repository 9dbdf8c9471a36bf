from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from adaptive_game.puzzle.levels import (
    LevelCatalog,
    default_catalog,
    load_level_catalog,
    parse_level_catalog,
)


class ConfigError(ValueError):
    """Raised when a configuration file has invalid settings."""


def load_config(path: str) -> dict[str, Any]:
    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must be a JSON object")
    config = _expand_env_vars(data)
    levels = config.get("levels")
    if isinstance(levels, str) and not Path(levels).is_absolute():
        # Level files are relative to the config file that names them.
        config["levels"] = str(Path(path).resolve().parent / levels)
    return config


def _expand_env_vars(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    if isinstance(value, dict):
        return {str(k): _expand_env_vars(v) for k, v in value.items()}
    return value


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {**base}
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


@dataclass(frozen=True, slots=True)
class GameSettings:
    advance_delay_seconds: float = 3.0
    victory_restart_delay_seconds: float = 5.0
    voice_assistance: bool = True
    tile_size: int = 80
    show_instructions: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> GameSettings:
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigError("settings must be a JSON object")
        data = dict(data)
        known = {field.name for field in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown settings: {', '.join(unknown)}")

        for name in ("advance_delay_seconds", "victory_restart_delay_seconds"):
            if name in data:
                data[name] = _non_negative_float(name, data[name])
        for name in ("voice_assistance", "show_instructions"):
            if name in data and not isinstance(data[name], bool):
                raise ConfigError(f"{name} must be a boolean")
        if "tile_size" in data:
            tile_size = data["tile_size"]
            if isinstance(tile_size, bool) or not isinstance(tile_size, int):
                raise ConfigError("tile_size must be an integer")
            if tile_size < 8:
                raise ConfigError("tile_size must be >= 8")
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return {field.name: getattr(self, field.name) for field in fields(self)}


def _non_negative_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number")
    if value < 0:
        raise ConfigError(f"{name} must be >= 0")
    return float(value)


def settings_from_config(config: dict[str, Any]) -> GameSettings:
    return GameSettings.from_mapping(config.get("settings"))


def build_catalog(config: dict[str, Any]) -> LevelCatalog:
    """Return the configured catalog; ``levels`` is an inline list or a JSON path."""
    levels = config.get("levels")
    if levels is None:
        return default_catalog()
    if isinstance(levels, str):
        return load_level_catalog(levels)
    if isinstance(levels, list):
        return parse_level_catalog(levels)
    raise ConfigError("levels must be a list of levels or a path to a JSON file")
