from __future__ import annotations

import json
import os
import tempfile
import unittest
from pathlib import Path

from adaptive_game.config import (
    ConfigError,
    GameSettings,
    build_catalog,
    load_config,
    merge_dicts,
    settings_from_config,
)


class TestConfig(unittest.TestCase):
    def test_load_config_expands_env_vars(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "config.json")
            os.environ["AG_TEST_DELAY"] = "1.5"
            os.environ["AG_TEST_LEVELS"] = "/srv/levels/custom.json"
            with open(path, "w", encoding="utf-8") as f:
                json.dump({"levels": "$AG_TEST_LEVELS", "note": "${AG_TEST_DELAY}s"}, f)
            loaded = load_config(path)
            self.assertEqual(loaded["levels"], "/srv/levels/custom.json")
            self.assertEqual(loaded["note"], "1.5s")

    def test_load_config_resolves_levels_next_to_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp)
            (base / "levels.json").write_text(
                json.dumps([{"name": "From file", "grid": [[3, 2, 1]]}])
            )
            path = base / "config.json"
            path.write_text(json.dumps({"levels": "levels.json"}))
            loaded = load_config(str(path))
            self.assertEqual(Path(loaded["levels"]), (base / "levels.json").resolve())
            catalog = build_catalog(loaded)
        self.assertEqual(catalog.get(0).name, "From file")

    def test_load_config_rejects_non_object(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "config.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump([1, 2], f)
            with self.assertRaises(ConfigError):
                load_config(path)

    def test_merge_dicts_nested(self) -> None:
        base = {"levels": None, "settings": {"tile_size": 80, "voice_assistance": True}}
        override = {"settings": {"tile_size": 40}}
        merged = merge_dicts(base, override)
        self.assertEqual(
            merged,
            {"levels": None, "settings": {"tile_size": 40, "voice_assistance": True}},
        )


class TestGameSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = settings_from_config({})
        self.assertEqual(settings, GameSettings())
        self.assertEqual(settings.advance_delay_seconds, 3.0)
        self.assertEqual(settings.victory_restart_delay_seconds, 5.0)

    def test_from_mapping_coerces_numbers(self) -> None:
        settings = GameSettings.from_mapping(
            {"advance_delay_seconds": 0, "tile_size": 40, "voice_assistance": False}
        )
        self.assertIsInstance(settings.advance_delay_seconds, float)
        self.assertEqual(settings.advance_delay_seconds, 0.0)
        self.assertFalse(settings.voice_assistance)
        self.assertEqual(settings.to_dict()["tile_size"], 40)

    def test_from_mapping_rejects_invalid_values(self) -> None:
        bad_values = [
            {"advance_delay_seconds": -1},
            {"victory_restart_delay_seconds": "soon"},
            {"voice_assistance": "yes"},
            {"tile_size": 4},
            {"tile_size": True},
            {"speech_rate": 1.3},
        ]
        for data in bad_values:
            with self.subTest(data=data):
                with self.assertRaises(ConfigError):
                    GameSettings.from_mapping(data)

    def test_settings_must_be_an_object(self) -> None:
        for value in (5, "fast", [["tile_size", 40]]):
            with self.subTest(value=value):
                with self.assertRaises(ConfigError):
                    settings_from_config({"settings": value})


class TestBuildCatalog(unittest.TestCase):
    def test_default_when_levels_missing(self) -> None:
        self.assertEqual(build_catalog({}).count(), 3)

    def test_inline_levels(self) -> None:
        catalog = build_catalog({"levels": [{"name": "Inline", "grid": [[1, 2, 3]]}]})
        self.assertEqual(catalog.get(0).name, "Inline")

    def test_rejects_other_level_types(self) -> None:
        with self.assertRaises(ConfigError):
            build_catalog({"levels": 3})


if __name__ == "__main__":
    unittest.main()
