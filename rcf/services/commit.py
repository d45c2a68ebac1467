"""Commit sinks: where the selected command goes after the finder exits."""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from enum import Enum
from pathlib import Path
from typing import TextIO

from ..models.exceptions import CommitSinkError
from ..models.keys import CommitMode

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATH = Path("/tmp/rcf.cmd")

# Tried in order; first one on PATH wins
CLIPBOARD_COMMANDS: list[list[str]] = [
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
]


class SinkKind(Enum):
    """Available commit sinks."""

    FILE = "file"
    CLIPBOARD = "clipboard"
    STDOUT = "stdout"


class CommitSink:
    """Receives the committed command exactly once."""

    def commit(self, text: str, mode: CommitMode = CommitMode.RUN) -> None:
        raise NotImplementedError


class FileCommitSink(CommitSink):
    """Writes ``<mode> <command>`` for the zsh widget to ``read`` back."""

    def __init__(self, path: Path | None = None):
        self.path = path or DEFAULT_OUTPUT_PATH

    def commit(self, text: str, mode: CommitMode = CommitMode.RUN) -> None:
        try:
            self.path.write_text(f"{mode.value} {text}\n")
        except OSError as e:
            raise CommitSinkError(f"Cannot write {self.path}: {e}") from e
        logger.info(f"Committed {len(text)} chars to {self.path} ({mode.value})")


class ClipboardCommitSink(CommitSink):
    """Copies the command to the system clipboard."""

    DEFAULT_TIMEOUT = 5

    def __init__(self, command: list[str] | None = None):
        self._command = command

    def _resolve_command(self) -> list[str]:
        if self._command:
            return self._command
        for candidate in CLIPBOARD_COMMANDS:
            if shutil.which(candidate[0]):
                return candidate
        raise CommitSinkError(
            "No clipboard tool found",
            suggestion="install pbcopy, wl-copy, xclip or xsel",
        )

    def commit(self, text: str, mode: CommitMode = CommitMode.RUN) -> None:
        cmd = self._resolve_command()
        try:
            result = subprocess.run(
                cmd,
                input=text,
                text=True,
                capture_output=True,
                timeout=self.DEFAULT_TIMEOUT,
            )
        except subprocess.TimeoutExpired as e:
            raise CommitSinkError(f"{cmd[0]} timed out") from e
        except OSError as e:
            raise CommitSinkError(f"Cannot run {cmd[0]}: {e}") from e

        if result.returncode != 0:
            raise CommitSinkError(f"{cmd[0]} failed: {result.stderr.strip()}")
        logger.info(f"Copied {len(text)} chars with {cmd[0]}")


class StdoutCommitSink(CommitSink):
    """Prints the command, for use as ``$(rcf --sink stdout)``."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    def commit(self, text: str, mode: CommitMode = CommitMode.RUN) -> None:
        stream = self._stream or sys.stdout
        try:
            stream.write(text + "\n")
            stream.flush()
        except OSError as e:
            raise CommitSinkError(f"Cannot write to stdout: {e}") from e


def create_sink(kind: SinkKind, output_path: Path | None = None) -> CommitSink:
    """Build the sink selected in config."""
    if kind is SinkKind.CLIPBOARD:
        return ClipboardCommitSink()
    if kind is SinkKind.STDOUT:
        return StdoutCommitSink()
    return FileCommitSink(output_path)
