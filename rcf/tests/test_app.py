"""Tests for the Textual app and the command-line entry point."""

import asyncio
import io
import json
from pathlib import Path

import pytest

from rcf.app import FinderApp, Services, build_parser, main, settings_from_args
from rcf.models.keys import CommitMode
from rcf.screens.finder import FinderScreen
from rcf.services.commit import SinkKind
from rcf.services.ranker import ParallelRanker, rank
from rcf.services.session import CommitResult
from rcf.widgets.query_line import QueryLine


def _drive(app: FinderApp, *keys: str):
    """Run the app headlessly, press keys, return the app's exit value."""

    async def run():
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press(*keys)
            await pilot.pause()
        return app.return_value

    return asyncio.run(run())


class TestFinderApp:
    """Smoke and interaction tests."""

    def test_app_instantiation(self, sample_store):
        app = FinderApp(sample_store, window=5)
        assert app.session.window == 5
        assert app.session.total == 3

    def test_type_and_commit(self, sample_store):
        app = FinderApp(sample_store, window=5, ranker=ParallelRanker(workers=2))
        assert _drive(app, "g", "c", "enter") == CommitResult("git commit -m x", CommitMode.RUN)

    def test_navigate_and_edit(self, sample_store):
        app = FinderApp(sample_store, window=5)
        assert _drive(app, "down", "down", "up", "tab") == CommitResult("git commit -m x", CommitMode.EDIT)

    def test_escape_cancels(self, sample_store):
        app = FinderApp(sample_store, window=5)
        assert _drive(app, "g", "escape") is None

    def test_ctrl_c_cancels(self, sample_store):
        app = FinderApp(sample_store, window=5)
        assert _drive(app, "ctrl+c") is None
        assert app.session.finished

    def test_initial_query(self, sample_store):
        app = FinderApp(sample_store, window=5, initial_query="ls")
        assert _drive(app, "enter") == CommitResult("ls -la")

    def test_empty_store_commits_empty(self):
        app = FinderApp([], window=5)
        assert _drive(app, "x", "enter") == CommitResult("")

    def test_screen_tracks_query(self, sample_store):
        app = FinderApp(sample_store, window=5)

        async def run():
            async with app.run_test() as pilot:
                await pilot.pause()
                await pilot.press("g", "i", "x", "backspace")
                screen = app.screen
                assert isinstance(screen, FinderScreen)
                return screen.session.state.query, len(screen.session.state.ranked_view)

        assert asyncio.run(run()) == ("gi", 2)


    def test_query_line_counts_all_matches(self, large_store):
        """The status suffix counts matches beyond the visible rows."""
        app = FinderApp(large_store, window=5, ranker=ParallelRanker(workers=2))

        async def run():
            async with app.run_test() as pilot:
                await pilot.pause()
                await pilot.press("g", "i", "t")
                await pilot.pause()
                line = app.screen.query_one("#query", QueryLine)
                return line.matches, line.total

        matches, total = asyncio.run(run())
        assert total == 300
        assert matches == rank(large_store, "git", 300).matches
        assert matches > 5


class TestCommandLine:
    """Argument parsing and startup errors."""

    def test_settings_from_args(self, tmp_path: Path):
        args = build_parser().parse_args(["git", "-n", "4", "--sink", "clipboard", "--output", str(tmp_path / "o")])
        settings = settings_from_args(args)
        assert args.query == "git"
        assert settings.window_size == 4
        assert settings.sink is SinkKind.CLIPBOARD
        assert settings.output_path == tmp_path / "o"
        assert settings.history_file is None

    def test_services_create(self, tmp_path: Path):
        services = Services.create(tmp_path / "cfg", settings_from_args(build_parser().parse_args(["--workers", "2"])))
        assert services.ranker.workers == 2
        assert services.settings.window_size == 10

    def test_missing_history_is_fatal(self, tmp_path: Path, capsys):
        code = main(["--config-dir", str(tmp_path / "cfg"), "--history-file", str(tmp_path / "missing")])
        assert code == 1
        assert "History file not found" in capsys.readouterr().err

    def test_invalid_window_is_fatal(self, tmp_path: Path, capsys):
        code = main(["--config-dir", str(tmp_path / "cfg"), "-n", "0"])
        assert code == 1
        assert "window_size" in capsys.readouterr().err

    def test_unwritable_log_file_is_fatal(self, tmp_path: Path, capsys):
        log_file = tmp_path / "no-such-dir" / "rcf.log"
        code = main(["--config-dir", str(tmp_path / "cfg"), "--log-file", str(log_file)])
        assert code == 1
        err = capsys.readouterr().err
        assert err.startswith("rcf: Cannot open log file")
        assert str(log_file) in err

    def test_no_terminal_is_fatal(self, tmp_path: Path, zsh_history: Path, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO())
        code = main(["--config-dir", str(tmp_path / "cfg"), "--history-file", str(zsh_history)])
        assert code == 1
        assert "interactive terminal" in capsys.readouterr().err

    def test_write_config(self, tmp_path: Path):
        config_dir = tmp_path / "cfg"
        code = main(["--config-dir", str(config_dir), "-n", "6", "--sink", "stdout", "--write-config"])
        assert code == 0
        data = json.loads((config_dir / "config.json").read_text())
        assert data["window_size"] == 6
        assert data["sink"] == "stdout"
