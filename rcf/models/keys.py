"""Abstract key events consumed by the interaction session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class KeyKind(Enum):
    """What a key press means to the session."""

    CHARACTER = "character"  # Printable character appended to query
    ERASE = "erase"  # Remove last query character
    UP = "up"
    DOWN = "down"
    COMMIT = "commit"
    CANCEL = "cancel"
    OTHER = "other"  # Anything else, ignored


class CommitMode(Enum):
    """What the shell should do with a committed command."""

    RUN = "run"  # Execute immediately
    EDIT = "edit"  # Place on the command line only


@dataclass(frozen=True)
class KeyEvent:
    """One key press, already decoded from the terminal encoding."""

    kind: KeyKind
    character: str = ""
    mode: CommitMode = CommitMode.RUN

    @classmethod
    def char(cls, character: str) -> KeyEvent:
        return cls(KeyKind.CHARACTER, character=character)

    @classmethod
    def erase(cls) -> KeyEvent:
        return cls(KeyKind.ERASE)

    @classmethod
    def up(cls) -> KeyEvent:
        return cls(KeyKind.UP)

    @classmethod
    def down(cls) -> KeyEvent:
        return cls(KeyKind.DOWN)

    @classmethod
    def commit(cls, mode: CommitMode = CommitMode.RUN) -> KeyEvent:
        return cls(KeyKind.COMMIT, mode=mode)

    @classmethod
    def cancel(cls) -> KeyEvent:
        return cls(KeyKind.CANCEL)

    @classmethod
    def other(cls) -> KeyEvent:
        return cls(KeyKind.OTHER)
