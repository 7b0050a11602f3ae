from __future__ import annotations

import unittest

from nexplore.config import Config
from nexplore.keys import DEFAULT_KEYMAP, Action, InputDispatcher


class DefaultBindingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.dispatcher = InputDispatcher()

    def test_arrow_and_vi_keys_share_actions(self) -> None:
        pairs = [
            ("up", "k", Action.MOVE_UP),
            ("down", "j", Action.MOVE_DOWN),
            ("left", "h", Action.COLLAPSE_LEFT),
            ("right", "l", Action.EXPAND_RIGHT),
            ("home", "g", Action.HOME),
            ("end", "G", Action.END),
        ]
        for arrow, letter, action in pairs:
            self.assertIs(self.dispatcher.dispatch(arrow), action)
            self.assertIs(self.dispatcher.dispatch(letter), action)

    def test_escape_and_q_quit(self) -> None:
        self.assertEqual(self.dispatcher.keys_for(Action.QUIT), ["escape", "q"])

    def test_page_keys(self) -> None:
        self.assertIs(self.dispatcher.dispatch("pageup"), Action.PAGE_UP)
        self.assertIs(self.dispatcher.dispatch("pagedown"), Action.PAGE_DOWN)

    def test_unbound_key_dispatches_nothing(self) -> None:
        self.assertIsNone(self.dispatcher.dispatch("x"))
        self.assertIsNone(self.dispatcher.dispatch("ctrl+z"))

    def test_every_action_has_a_default_key(self) -> None:
        bound = set(DEFAULT_KEYMAP.values())
        self.assertEqual(bound, set(Action))

    def test_description_is_readable(self) -> None:
        self.assertEqual(Action.EXPAND_ALL.description, "Expand all")
        self.assertEqual(Action.YANK_PATH.description, "Yank path")


class ConfiguredBindingTests(unittest.TestCase):
    def test_config_binding_is_laid_over_defaults(self) -> None:
        dispatcher = InputDispatcher.from_config(Config(keys={"n": "move_down", "k": "page_up"}))

        self.assertIs(dispatcher.dispatch("n"), Action.MOVE_DOWN)
        self.assertIs(dispatcher.dispatch("k"), Action.PAGE_UP)
        self.assertIs(dispatcher.dispatch("j"), Action.MOVE_DOWN)

    def test_none_unbinds_a_key(self) -> None:
        dispatcher = InputDispatcher.from_config(Config(keys={"escape": "none", "q": ""}))

        self.assertIsNone(dispatcher.dispatch("escape"))
        self.assertIsNone(dispatcher.dispatch("q"))
        self.assertEqual(dispatcher.keys_for(Action.QUIT), [])

    def test_unknown_action_is_ignored_with_warning(self) -> None:
        with self.assertLogs("nexplore.keys", level="WARNING") as logs:
            dispatcher = InputDispatcher.from_config(Config(keys={"z": "teleport"}))

        self.assertIsNone(dispatcher.dispatch("z"))
        self.assertIn("teleport", logs.output[0])

    def test_explicit_keymap_replaces_defaults(self) -> None:
        dispatcher = InputDispatcher({"w": Action.MOVE_UP})

        self.assertIs(dispatcher.dispatch("w"), Action.MOVE_UP)
        self.assertIsNone(dispatcher.dispatch("up"))


if __name__ == "__main__":
    unittest.main()
