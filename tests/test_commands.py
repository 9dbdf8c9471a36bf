from __future__ import annotations

import unittest

from adaptive_game.puzzle.commands import (
    Command,
    parse_command,
    parse_key,
    parse_voice,
)


class TestParseKey(unittest.TestCase):
    def test_arrow_and_wasd_keys_move(self) -> None:
        cases = {
            "ArrowUp": "up",
            "arrowdown": "down",
            "LEFT": "left",
            "right": "right",
            "w": "up",
            "S": "down",
            "a": "left",
            "D": "right",
        }
        for key, direction in cases.items():
            with self.subTest(key=key):
                self.assertEqual(parse_key(key), Command(kind="move", direction=direction))

    def test_shortcut_keys(self) -> None:
        self.assertEqual(parse_key("r"), Command(kind="restart"))
        self.assertEqual(parse_key("H"), Command(kind="help"))
        self.assertEqual(parse_key("v"), Command(kind="toggle_voice"))
        self.assertEqual(parse_key("i"), Command(kind="toggle_instructions"))

    def test_unknown_key(self) -> None:
        self.assertIsNone(parse_key("x"))


class TestParseVoice(unittest.TestCase):
    def test_direction_phrases_and_mishearings(self) -> None:
        cases = {
            "move up": "up",
            "go to the top": "up",
            "Move Down!": "down",
            "bottom": "down",
            "move left": "left",
            "move right": "right",
            "move write": "right",
            "bright": "right",
        }
        for transcript, direction in cases.items():
            with self.subTest(transcript=transcript):
                self.assertEqual(
                    parse_voice(transcript), Command(kind="move", direction=direction)
                )

    def test_control_phrases(self) -> None:
        self.assertEqual(parse_voice("restart please"), Command(kind="restart"))
        self.assertEqual(parse_voice("reset"), Command(kind="restart"))
        self.assertEqual(parse_voice("help"), Command(kind="help"))
        self.assertEqual(parse_voice("read the instructions"), Command(kind="help"))
        self.assertEqual(parse_voice("status"), Command(kind="status"))
        self.assertEqual(parse_voice("where am I"), Command(kind="status"))
        self.assertEqual(parse_voice("toggle voice"), Command(kind="toggle_voice"))
        self.assertEqual(parse_voice("voice off"), Command(kind="toggle_voice"))

    def test_directions_take_precedence(self) -> None:
        self.assertEqual(
            parse_voice("restart and move up"), Command(kind="move", direction="up")
        )

    def test_words_are_matched_whole(self) -> None:
        # "stop" contains "top" but is not a direction.
        self.assertIsNone(parse_voice("stop"))
        self.assertIsNone(parse_voice("something else"))
        self.assertIsNone(parse_voice(""))


class TestParseCommand(unittest.TestCase):
    def test_keys_levels_and_phrases(self) -> None:
        self.assertEqual(parse_command("w"), Command(kind="move", direction="up"))
        self.assertEqual(parse_command("level 2"), Command(kind="load_level", level_index=1))
        self.assertEqual(parse_command("Load 1"), Command(kind="load_level", level_index=0))
        self.assertEqual(parse_command("move left"), Command(kind="move", direction="left"))
        self.assertIsNone(parse_command("level 0"))
        self.assertIsNone(parse_command("   "))

    def test_command_validation(self) -> None:
        with self.assertRaises(ValueError):
            Command(kind="move")
        with self.assertRaises(ValueError):
            Command(kind="load_level", level_index=-1)


if __name__ == "__main__":
    unittest.main()
