"""Record model: one searchable history entry and the store holding them."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import overload


@dataclass(frozen=True)
class Record:
    """A single history command.

    ``id`` is the position in the source (order of appearance), ``timestamp``
    the zsh start time when the source records one.
    """

    id: int
    text: str
    timestamp: int | None = None


@dataclass(frozen=True)
class ScoredCandidate:
    """A record paired with its score for one rank pass."""

    record: Record
    score: int

    @property
    def text(self) -> str:
        return self.record.text


class RecordStore(Sequence[Record]):
    """Immutable, deduplicated, ordered collection of records.

    The first record seen for a given text is kept; later duplicates are
    dropped. Callers that want the most recent instance to win pass the
    records newest-first.
    """

    def __init__(self, records: Iterable[Record] = ()) -> None:
        seen: set[str] = set()
        kept: list[Record] = []
        for record in records:
            if record.text in seen:
                continue
            seen.add(record.text)
            kept.append(record)
        self._records: tuple[Record, ...] = tuple(kept)

    @overload
    def __getitem__(self, index: int) -> Record: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Record, ...]: ...

    def __getitem__(self, index):
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"RecordStore({len(self._records)} records)"

    @property
    def texts(self) -> list[str]:
        """Texts in store order."""
        return [r.text for r in self._records]
