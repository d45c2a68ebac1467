"""rcf: fuzzy-find a command from shell history.

Main Textual application and command-line entry point.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from textual.app import App
from textual.binding import Binding
from textual.logging import TextualHandler

from rcf import __version__
from rcf.models.exceptions import (
    CommitSinkError,
    ConfigError,
    RcfError,
    SourceUnavailableError,
    TerminalUnavailableError,
)
from rcf.models.keys import KeyEvent
from rcf.models.record import Record
from rcf.screens.finder import FinderScreen
from rcf.services.commit import CommitSink, SinkKind, create_sink
from rcf.services.config import ConfigManager, LOG_LEVELS, Settings
from rcf.services.history import HistoryFormat, HistorySource
from rcf.services.ranker import ParallelRanker
from rcf.services.session import CommitResult, InteractionSession
from rcf.services.terminal import terminal_control
from rcf.styles import BASE_CSS

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Application service container for dependency injection."""

    config: ConfigManager
    settings: Settings
    history: HistorySource
    ranker: ParallelRanker
    sink: CommitSink

    @classmethod
    def create(
        cls,
        config_dir: Path | None = None,
        override: Settings | None = None,
    ) -> "Services":
        """Resolve settings and wire up services.

        Raises:
            ConfigError: Invalid settings
        """
        config = ConfigManager(config_dir)
        settings = config.resolve(override)
        return cls(
            config=config,
            settings=settings,
            history=HistorySource(settings.history_file, settings.history_format),
            ranker=ParallelRanker(settings.workers),
            sink=create_sink(settings.sink, settings.output_path),
        )


class FinderApp(App[CommitResult | None]):
    """Inline finder: one query line and a fixed number of result rows."""

    TITLE = "rcf"
    CSS = BASE_CSS
    ENABLE_COMMAND_PALETTE = False

    # Priority: replaces Textual's built-in quit keys
    BINDINGS = [
        Binding("ctrl+c", "cancel", "Cancel", show=False, priority=True),
        Binding("ctrl+q", "cancel", "Cancel", show=False, priority=True),
    ]

    def __init__(
        self,
        records: Sequence[Record],
        window: int = ConfigManager.DEFAULT_WINDOW_SIZE,
        margin: int = ConfigManager.DEFAULT_MARGIN,
        ranker: ParallelRanker | None = None,
        initial_query: str = "",
        **kwargs,
    ):
        """Initialize the app.

        Args:
            records: Record store to search
            window: Number of result rows
            margin: Columns kept free at the right edge
            ranker: Ranker to use (default: one thread per CPU)
            initial_query: Text typed before the first key press
            **kwargs: Additional Textual app arguments
        """
        super().__init__(**kwargs)
        self.session = InteractionSession(records, window, ranker or ParallelRanker())
        self._margin = margin
        self._initial_query = initial_query

    def on_mount(self) -> None:
        self.push_screen(FinderScreen(self.session, self._margin, self._initial_query))

    def action_cancel(self) -> None:
        """Cancel through the session so it ends in a consistent state."""
        if isinstance(self.screen, FinderScreen):
            self.screen.feed(KeyEvent.cancel())
        else:
            self.exit(None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rcf",
        description="Fuzzy-find a command from your shell history",
    )
    parser.add_argument("query", nargs="?", default="", help="Initial query (e.g. the current command line)")
    parser.add_argument("-n", "--window", type=int, default=None, help="Number of result rows")
    parser.add_argument("--history-file", type=Path, default=None, help="History file (default: $HISTFILE)")
    parser.add_argument("--format", choices=[f.value for f in HistoryFormat], default=None, help="History file format")
    parser.add_argument("--sink", choices=[s.value for s in SinkKind], default=None, help="Where the selection goes")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Output file for the file sink")
    parser.add_argument("--workers", type=int, default=None, help="Ranking threads (default: CPU count)")
    parser.add_argument("--log-file", type=Path, default=None)
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=None)
    parser.add_argument("--config-dir", type=Path, default=None)
    parser.add_argument("--write-config", action="store_true", help="Save the effective settings and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Command-line tier of the settings."""
    return Settings(
        window_size=args.window,
        history_file=args.history_file,
        history_format=HistoryFormat(args.format) if args.format else None,
        sink=SinkKind(args.sink) if args.sink else None,
        output_path=args.output,
        workers=args.workers,
        log_file=args.log_file,
        log_level=args.log_level,
    )


def configure_logging(settings: Settings) -> None:
    """Log to a file when asked, otherwise through Textual's handler.

    Raises:
        ConfigError: The log file cannot be opened
    """
    level = getattr(logging, (settings.log_level or "WARNING").upper())
    if settings.log_file is not None:
        try:
            handler: logging.Handler = logging.FileHandler(settings.log_file)
        except OSError as e:
            raise ConfigError(
                f"Cannot open log file {settings.log_file}: {e.strerror or e}",
                suggestion="check --log-file",
            ) from e
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    else:
        handler = TextualHandler()
    logging.basicConfig(level=level, handlers=[handler], force=True)


def _report(error: RcfError) -> int:
    print(f"rcf: {error}", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    """Run the finder and hand the selection to the commit sink.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    try:
        services = Services.create(args.config_dir, settings_from_args(args))
    except (ConfigError, ValueError) as e:
        return _report(e if isinstance(e, RcfError) else ConfigError(str(e)))

    settings = services.settings
    try:
        configure_logging(settings)
    except ConfigError as e:
        return _report(e)

    if args.write_config:
        services.config.save(settings)
        print(f"Wrote {services.config.config_file}")
        return 0

    try:
        records = services.history.load()
    except SourceUnavailableError as e:
        return _report(e)

    try:
        with terminal_control():
            app = FinderApp(
                records,
                window=settings.window_size,
                margin=settings.margin,
                ranker=services.ranker,
                initial_query=args.query,
            )
            result = app.run(inline=True)
    except TerminalUnavailableError as e:
        return _report(e)

    if result is None:
        logger.info("Cancelled")
        return 0

    try:
        services.sink.commit(result.text, result.mode)
    except CommitSinkError as e:
        logger.error(f"Commit failed: {e}")
        return _report(e)
    return 0


if __name__ == "__main__":
    sys.exit(main())
