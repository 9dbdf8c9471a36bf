from __future__ import annotations

import unittest

from adaptive_game.puzzle import (
    TONES,
    Blocked,
    BoxMoved,
    BoxPlaced,
    BoxRemoved,
    FeedbackPresenter,
    LevelLoaded,
    LevelWon,
    PlayerMoved,
    PuzzleEngine,
    Victory,
    default_catalog,
    describe_outcome,
    help_text,
    hud_lines,
    status_announcement,
)


class TestDescribeOutcome(unittest.TestCase):
    def test_level_loaded(self) -> None:
        cue = describe_outcome(LevelLoaded(level_index=0, level_name="Getting Started", box_count=1))
        self.assertEqual(cue.tone, TONES["start"])
        self.assertEqual(
            cue.speech,
            "Level 1: Getting Started. You have 1 box to push onto targets. Good luck!",
        )

    def test_player_moved_is_quick_and_one_based(self) -> None:
        cue = describe_outcome(PlayerMoved(from_position=(2, 2), to_position=(3, 2), move_count=1))
        self.assertEqual(cue.tone, TONES["move"])
        self.assertEqual(cue.speech, "Moved to row 4, column 3")
        self.assertTrue(cue.quick)

    def test_box_events(self) -> None:
        pushed = describe_outcome(
            BoxMoved(
                box_index=0,
                from_position=(4, 3),
                to_position=(4, 4),
                from_on_target=False,
                to_on_target=False,
            )
        )
        self.assertEqual(pushed.tone, TONES["push"])
        placed = describe_outcome(BoxPlaced(boxes_on_target=1, total_boxes=2))
        self.assertEqual(placed.tone, TONES["success"])
        self.assertEqual(placed.speech, "Excellent! Box on target. 1 of 2 boxes placed.")
        removed = describe_outcome(BoxRemoved(boxes_on_target=0, total_boxes=2))
        self.assertIsNone(removed.tone)
        self.assertEqual(removed.speech, "Box moved off target")

    def test_blocked_reasons(self) -> None:
        edge = describe_outcome(Blocked(reason="edge_of_grid", direction="up"))
        self.assertEqual(edge.speech, "Cannot move there. Edge of grid.")
        self.assertEqual(edge.tone, TONES["blocked"])
        box = describe_outcome(Blocked(reason="box_obstructed", direction="up"))
        self.assertEqual(box.speech, "Cannot push box. Blocked.")

    def test_win_and_victory(self) -> None:
        won = describe_outcome(LevelWon(level_index=0, move_count=1))
        self.assertEqual(won.tone, TONES["win"])
        self.assertIn("You won in 1 move.", won.speech)
        victory = describe_outcome(Victory(total_levels=3))
        self.assertIn("completed all 3 levels", victory.speech)

    def test_win_melody(self) -> None:
        self.assertEqual(TONES["win"].frequencies, (523, 587, 659, 784, 880))


class TestStatusText(unittest.TestCase):
    def test_status_announcement(self) -> None:
        engine = PuzzleEngine(default_catalog())
        engine.load_level(0)
        engine.move("down")
        text = status_announcement(engine)
        self.assertIn("Player is at row 4, column 3.", text)
        self.assertIn("There is 1 box.", text)
        self.assertIn("Box 1 is at row 5, column 4, not on target.", text)
        self.assertIn("Target 1 is at row 4, column 6.", text)
        self.assertIn("Progress: 0 of 1 box on target.", text)
        self.assertIn("You have made 1 move.", text)

    def test_hud_lines(self) -> None:
        engine = PuzzleEngine(default_catalog())
        self.assertEqual(hud_lines(engine), ["Levels: 3"])
        engine.load_level(1)
        engine.move("right")
        self.assertEqual(hud_lines(engine), ["Level 2/3", "Moves: 1", "Boxes: 0/2"])

    def test_help_mentions_controls(self) -> None:
        text = help_text()
        self.assertIn("Press R to restart", text)
        self.assertIn('"move up"', text)


class TestFeedbackPresenter(unittest.TestCase):
    def test_presenter_forwards_speech_and_tones(self) -> None:
        spoken: list[tuple[str, bool]] = []
        tones: list[str] = []
        presenter = FeedbackPresenter(
            lambda text, quick: spoken.append((text, quick)),
            lambda cue: tones.append(cue.name),
        )
        engine = PuzzleEngine(default_catalog())
        presenter.attach(engine)
        engine.load_level(0)
        engine.move("up")
        engine.move("up")
        engine.move("up")

        self.assertEqual(tones, ["start", "move", "move", "blocked"])
        self.assertEqual(spoken[-1], ("Cannot move there. Edge of grid.", False))

    def test_voice_toggle_silences_speech_but_not_tones(self) -> None:
        spoken: list[str] = []
        tones: list[str] = []
        presenter = FeedbackPresenter(
            lambda text, _quick: spoken.append(text),
            lambda cue: tones.append(cue.name),
        )
        self.assertFalse(presenter.toggle_voice())
        self.assertEqual(spoken, ["Voice assistance disabled"])

        presenter.handle(Blocked(reason="edge_of_grid", direction="up"))
        self.assertEqual(spoken, ["Voice assistance disabled"])
        self.assertEqual(tones, ["blocked"])

        self.assertTrue(presenter.toggle_voice())
        self.assertEqual(spoken[-1], "Voice assistance enabled")


if __name__ == "__main__":
    unittest.main()
