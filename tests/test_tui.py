"""End-to-end key handling in the Textual app, driven headless."""

from __future__ import annotations

import unittest
from unittest import mock

from fake_reader import SCENARIO_LAYOUT, FakeReader
from nexplore.config import Config
from nexplore.tui import HelpScreen, NexploreApp, SearchScreen


class NexploreAppTests(unittest.IsolatedAsyncioTestCase):
    async def test_keys_drive_the_tree(self) -> None:
        app = NexploreApp(FakeReader(SCENARIO_LAYOUT), Config())
        async with app.run_test(size=(100, 20)) as pilot:
            await pilot.press("right")
            await pilot.pause()
            self.assertEqual(app.navigator.selected_id, "/A")

            await pilot.press("l", "j")
            await pilot.pause()
            self.assertEqual([row.node_id for row in app.navigator.rows], ["/", "/A", "/A/C", "/B"])
            self.assertEqual(app.navigator.selected_id, "/A/C")

            await pilot.press("H")
            await pilot.pause()
            self.assertEqual(app.navigator.selected_id, "/")

    async def test_theme_and_title(self) -> None:
        app = NexploreApp(FakeReader(SCENARIO_LAYOUT), Config(theme="nexplore-nord"))
        async with app.run_test() as pilot:
            await pilot.pause()
            self.assertEqual(app.theme, "nexplore-nord")
            self.assertEqual(app.title, "sample.nxs")
            self.assertEqual(app.sub_title, "4.0 KiB")

    async def test_unknown_theme_falls_back(self) -> None:
        app = NexploreApp(FakeReader(SCENARIO_LAYOUT), Config(theme="no-such-theme"))
        async with app.run_test() as pilot:
            await pilot.pause()
            self.assertEqual(app.theme, "nexplore-tokyo-night")

    async def test_help_screen_opens_and_closes(self) -> None:
        app = NexploreApp(FakeReader(SCENARIO_LAYOUT), Config())
        async with app.run_test() as pilot:
            await pilot.press("question_mark")
            await pilot.pause()
            self.assertIsInstance(app.screen, HelpScreen)

            await pilot.press("escape")
            await pilot.pause()
            self.assertNotIsInstance(app.screen, HelpScreen)

    async def test_search_selects_loaded_node(self) -> None:
        app = NexploreApp(FakeReader(SCENARIO_LAYOUT), Config())
        async with app.run_test() as pilot:
            await pilot.press("L")
            await pilot.press("home")
            await pilot.press("slash")
            await pilot.pause()
            self.assertIsInstance(app.screen, SearchScreen)

            await pilot.press("c", "enter")
            await pilot.pause()
            self.assertEqual(app.navigator.selected_id, "/A/C")

    async def test_yank_copies_selected_path(self) -> None:
        app = NexploreApp(FakeReader(SCENARIO_LAYOUT), Config())
        with mock.patch("nexplore.tui.pyperclip.copy") as copy:
            async with app.run_test() as pilot:
                await pilot.press("right", "y")
                await pilot.pause()
        copy.assert_called_once_with("/A")

    async def test_read_error_is_notified(self) -> None:
        reader = FakeReader(SCENARIO_LAYOUT)
        reader.fail_children.add("/")
        app = NexploreApp(reader, Config())
        with mock.patch.object(app, "notify") as notify:
            async with app.run_test() as pilot:
                await pilot.press("right")
                await pilot.pause()
        notify.assert_called_once()
        self.assertIn("corrupt group", notify.call_args.args[0])

    async def test_quit_key_exits(self) -> None:
        app = NexploreApp(FakeReader(SCENARIO_LAYOUT), Config())
        async with app.run_test() as pilot:
            await pilot.press("q")
            await pilot.pause()
        self.assertFalse(app.is_running)


if __name__ == "__main__":
    unittest.main()
