"""Command-line behavior: print mode, open errors and TUI hand-off."""

from __future__ import annotations

import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import h5py
from click.testing import CliRunner

from nexplore import cli


def reset_logging() -> None:
    logger = logging.getLogger("nexplore")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        env = mock.patch.dict(os.environ, {"NEXPLORE_DIR": str(self.root / "home")})
        env.start()
        self.addCleanup(env.stop)

        self.path = self.root / "scan.nxs"
        with h5py.File(self.path, "w") as f:
            entry = f.create_group("entry")
            entry.attrs["NX_class"] = "NXentry"
            entry.create_group("instrument").create_dataset("distance", data=1.5)
            f.create_dataset("title", data="run 42")
        self.runner = CliRunner()
        self.addCleanup(reset_logging)

    def test_missing_file_exits_with_error(self) -> None:
        result = self.runner.invoke(cli.cli, [str(self.root / "absent.h5")])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Cannot open", result.output)

    def test_not_hdf5_exits_with_error(self) -> None:
        text = self.root / "notes.txt"
        text.write_text("hello\n", encoding="utf-8")

        result = self.runner.invoke(cli.cli, [str(text)])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("not an HDF5 file", result.output)

    def test_print_mode_dumps_tree(self) -> None:
        result = self.runner.invoke(cli.cli, ["--print", str(self.path)])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("scan.nxs", result.output)
        self.assertIn("entry", result.output)
        self.assertIn("NXentry", result.output)
        self.assertIn("distance", result.output)
        self.assertIn("title", result.output)

    def test_print_depth_limit(self) -> None:
        result = self.runner.invoke(cli.cli, ["-p", "-d", "1", str(self.path)])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("entry", result.output)
        self.assertNotIn("instrument", result.output)

    def test_default_starts_tui_with_config_overrides(self) -> None:
        with mock.patch("nexplore.tui.run_tui") as run_tui:
            result = self.runner.invoke(cli.cli, ["--theme", "nexplore-nord", str(self.path)])

        self.assertEqual(result.exit_code, 0, result.output)
        run_tui.assert_called_once()
        reader, config = run_tui.call_args.args
        self.assertEqual(reader.file_name, "scan.nxs")
        self.assertEqual(config.theme, "nexplore-nord")
        reader.close()

    def test_log_file_receives_records(self) -> None:
        log_path = self.root / "nexplore.log"

        with mock.patch("nexplore.tui.run_tui"):
            result = self.runner.invoke(cli.cli, ["-v", "--log-file", str(log_path), str(self.path)])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("opened", log_path.read_text(encoding="utf-8"))

    def test_bad_config_warning_reaches_log_file(self) -> None:
        home = self.root / "home"
        home.mkdir()
        (home / "config.json").write_text("{not json", encoding="utf-8")
        log_path = self.root / "nexplore.log"

        with mock.patch("nexplore.tui.run_tui"):
            result = self.runner.invoke(cli.cli, ["--log-file", str(log_path), str(self.path)])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("ignoring unreadable config", log_path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
