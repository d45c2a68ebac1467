"""HistorySource: read shell history into records.

Supports zsh extended history (``: <start>:<elapsed>;<command>``, where any
line without a header continues the previous command) and plain
one-command-per-line files such as bash history.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from enum import Enum
from pathlib import Path

from ..models.exceptions import MalformedRecordError, SourceUnavailableError
from ..models.record import Record, RecordStore

logger = logging.getLogger(__name__)

ZSH_META = 0x83
ZSH_HEADER = re.compile(r"^: (\d+):(\d+);")
ZSH_ENTRY = re.compile(r"^: (\d+):(\d+);(.*)$", re.DOTALL)


class HistoryFormat(Enum):
    """On-disk history layout."""

    AUTO = "auto"
    ZSH = "zsh"
    PLAIN = "plain"


def default_history_path() -> Path:
    """$HISTFILE, falling back to ~/.zsh_history."""
    hist_file = os.environ.get("HISTFILE")
    if hist_file:
        return Path(hist_file).expanduser()
    return Path.home() / ".zsh_history"


def unmetafy(data: bytes) -> bytes:
    """Undo zsh metafication: 0x83 escapes the next byte XOR 32."""
    if ZSH_META not in data:
        return data
    out = bytearray()
    it = iter(data)
    for byte in it:
        if byte == ZSH_META:
            nxt = next(it, None)
            if nxt is None:
                break
            out.append(nxt ^ 32)
        else:
            out.append(byte)
    return bytes(out)


def detect_format(lines: list[str]) -> HistoryFormat:
    """ZSH if the first non-blank line carries an extended-history header."""
    for line in lines:
        if line.strip():
            return HistoryFormat.ZSH if ZSH_HEADER.match(line) else HistoryFormat.PLAIN
    return HistoryFormat.PLAIN


def split_blocks(lines: Iterable[str], fmt: HistoryFormat) -> list[tuple[int, str]]:
    """Group lines into one raw block per logical command.

    Returns:
        (id, raw_text) pairs, ids in order of appearance.
    """
    raw: list[str] = []
    if fmt is HistoryFormat.PLAIN:
        raw = [line for line in lines if line.strip()]
    else:
        current: str | None = None
        for line in lines:
            if ZSH_HEADER.match(line):
                if current is not None:
                    raw.append(current)
                current = line
            elif current is None:
                # Lines before the first header end up malformed
                current = line
            else:
                if current.endswith("\\"):
                    current = current[:-1]
                current = current + "\n" + line
        if current is not None:
            raw.append(current)
    return list(enumerate(raw))


def parse_block(block_id: int, raw: str, fmt: HistoryFormat) -> Record:
    """Turn one raw block into a Record.

    Raises:
        MalformedRecordError: Block fails the structural check or is blank
    """
    timestamp: int | None = None
    text = raw
    if fmt is HistoryFormat.ZSH:
        match = ZSH_ENTRY.match(raw)
        if match is None:
            raise MalformedRecordError(f"Block {block_id} has no extended-history header")
        timestamp = int(match.group(1))
        text = match.group(3)

    text = text.strip()
    if not text:
        raise MalformedRecordError(f"Block {block_id} is empty")
    return Record(id=block_id, text=text, timestamp=timestamp)


def build_store(blocks: Iterable[tuple[int, str]], fmt: HistoryFormat) -> RecordStore:
    """Build a newest-first store, silently dropping malformed blocks."""
    records: list[Record] = []
    dropped = 0
    for block_id, raw in blocks:
        try:
            records.append(parse_block(block_id, raw, fmt))
        except MalformedRecordError as e:
            dropped += 1
            logger.debug(f"Dropping history block: {e}")

    store = RecordStore(reversed(records))
    logger.info(
        f"Loaded {len(store)} unique commands "
        f"({len(records)} parsed, {dropped} malformed)"
    )
    return store


class HistorySource:
    """Reads a history file into a RecordStore."""

    def __init__(self, path: Path | None = None, fmt: HistoryFormat = HistoryFormat.AUTO):
        self.path = path or default_history_path()
        self.format = fmt

    def read_lines(self) -> list[str]:
        """Read and decode the file.

        Raises:
            SourceUnavailableError: File missing or unreadable
        """
        try:
            data = self.path.read_bytes()
        except FileNotFoundError as e:
            raise SourceUnavailableError(
                f"History file not found: {self.path}",
                suggestion="set HISTFILE or pass --history-file",
            ) from e
        except OSError as e:
            raise SourceUnavailableError(f"Cannot read history file {self.path}: {e}") from e

        text = unmetafy(data).decode("utf-8", errors="replace")
        return text.replace("\r\n", "\n").split("\n")

    def load(self) -> RecordStore:
        """Read, split and parse the history file."""
        lines = self.read_lines()
        fmt = self.format
        if fmt is HistoryFormat.AUTO:
            fmt = detect_format(lines)
        logger.debug(f"Reading {self.path} as {fmt.value} history")
        return build_store(split_blocks(lines, fmt), fmt)
