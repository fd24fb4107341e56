"""CLI argument handling and startup error reporting."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazydiff import cli
from lazydiff.errors import StartupError


class CliTests(unittest.TestCase):
    def test_passes_options_to_viewer(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with (
                mock.patch("lazydiff.cli.run_viewer") as run_viewer,
                mock.patch("lazydiff.cli.configure_logging") as configure_logging,
            ):
                cli.main([tmp, "--base", "develop", "--style", "default", "--theme", "ocean", "--no-color"])

        run_viewer.assert_called_once_with(
            Path(tmp),
            base="develop",
            style="default",
            theme_name="ocean",
            no_color=True,
        )
        configure_logging.assert_called_once_with(None, debug=False)

    def test_defaults_to_given_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with (
                mock.patch("lazydiff.cli.run_viewer") as run_viewer,
                mock.patch("lazydiff.cli.configure_logging"),
            ):
                cli.main([], default_path=Path(tmp))

        self.assertEqual(run_viewer.call_args.args[0], Path(tmp))
        self.assertIsNone(run_viewer.call_args.kwargs["base"])

    def test_debug_without_log_file_uses_default_log(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with (
                mock.patch("lazydiff.cli.run_viewer"),
                mock.patch("lazydiff.cli.configure_logging") as configure_logging,
                mock.patch("lazydiff.runtime.config.DEFAULT_LOG_PATH", Path(tmp) / "x.log"),
            ):
                cli.main([tmp, "--debug"])

        configure_logging.assert_called_once_with(Path(tmp) / "x.log", debug=True)

    def test_startup_error_exits_with_message(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with (
                mock.patch("lazydiff.cli.run_viewer", side_effect=StartupError("not a git repository: /x")),
                mock.patch("lazydiff.cli.configure_logging"),
            ):
                with self.assertRaises(SystemExit) as ctx:
                    cli.main([tmp])

        self.assertEqual(str(ctx.exception.code), "lazydiff: not a git repository: /x")

    def test_missing_path_exits(self) -> None:
        with mock.patch("lazydiff.cli.run_viewer") as run_viewer, mock.patch("lazydiff.cli.configure_logging"):
            with self.assertRaises(SystemExit):
                cli.main(["/definitely/not/here"])

        run_viewer.assert_not_called()

    def test_help_lists_themes(self) -> None:
        help_text = cli.build_parser().format_help()

        self.assertIn("ocean", help_text)
        self.assertIn("--no-color", help_text)


if __name__ == "__main__":
    unittest.main()
