"""Data models for rcf."""

from .record import Record, RecordStore, ScoredCandidate
from .keys import CommitMode, KeyEvent, KeyKind
from .exceptions import (
    RcfError,
    SourceUnavailableError,
    MalformedRecordError,
    TerminalUnavailableError,
    CommitSinkError,
    ConfigError,
    ConfigValidationError,
)

__all__ = [
    # Records
    "Record",
    "RecordStore",
    "ScoredCandidate",
    # Keys
    "CommitMode",
    "KeyEvent",
    "KeyKind",
    # Exceptions
    "RcfError",
    "SourceUnavailableError",
    "MalformedRecordError",
    "TerminalUnavailableError",
    "CommitSinkError",
    "ConfigError",
    "ConfigValidationError",
]
