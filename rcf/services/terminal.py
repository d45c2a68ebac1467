"""Scoped access to the controlling terminal.

Textual switches the terminal to raw mode while the finder runs. The
context manager here checks a terminal is present before that happens and
puts the saved tty attributes back on every exit path, including errors.
"""

from __future__ import annotations

import logging
import shutil
import sys
import termios
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TextIO

from ..models.exceptions import TerminalUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class TerminalInfo:
    """Terminal size at acquisition time."""

    columns: int
    lines: int


@contextmanager
def terminal_control(
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> Iterator[TerminalInfo]:
    """Acquire the terminal for the duration of the block.

    Raises:
        TerminalUnavailableError: stdin or stdout is not a terminal
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    if not (stdin.isatty() and stdout.isatty()):
        raise TerminalUnavailableError(
            "rcf needs an interactive terminal",
            suggestion="run it from a shell, not a pipe",
        )

    fd = stdin.fileno()
    try:
        saved = termios.tcgetattr(fd)
    except termios.error as e:
        raise TerminalUnavailableError(f"Cannot read terminal attributes: {e}") from e

    size = shutil.get_terminal_size()
    logger.debug(f"Acquired terminal {size.columns}x{size.lines}")
    try:
        yield TerminalInfo(columns=size.columns, lines=size.lines)
    finally:
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        except termios.error as e:
            logger.warning(f"Failed to restore terminal attributes: {e}")
        logger.debug("Released terminal")
