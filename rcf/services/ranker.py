"""ParallelRanker: score every record against a query and keep the best.

Each rank pass is a one-shot fork-join: the records are split into
contiguous chunks, each chunk is scored on its own worker thread, and the
results are concatenated in chunk order before sorting. Workers only read
the records and the query, so no locking is needed.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from ..models.record import Record, ScoredCandidate
from .fuzzy import score

logger = logging.getLogger(__name__)


def default_workers() -> int:
    """Worker count derived from available CPUs."""
    return os.cpu_count() or 1


def partition(records: Sequence[Record], count: int) -> list[Sequence[Record]]:
    """Split records into at most ``count`` contiguous, non-empty chunks."""
    if not records:
        return []
    count = max(1, min(count, len(records)))
    size, extra = divmod(len(records), count)

    chunks: list[Sequence[Record]] = []
    start = 0
    for i in range(count):
        end = start + size + (1 if i < extra else 0)
        chunks.append(records[start:end])
        start = end
    return chunks


class RankedView(list[ScoredCandidate]):
    """Ranked candidates plus how many records matched before truncation."""

    def __init__(self, candidates=(), matches: int = 0) -> None:
        super().__init__(candidates)
        self.matches = matches


def _score_chunk(chunk: Sequence[Record], query: str) -> list[ScoredCandidate]:
    results: list[ScoredCandidate] = []
    for record in chunk:
        value = score(record.text, query)
        if value is not None:
            results.append(ScoredCandidate(record, value))
    return results


def rank(
    records: Sequence[Record],
    query: str,
    window: int,
    workers: int | None = None,
) -> RankedView:
    """Rank records for query.

    Args:
        records: Candidates, typically a RecordStore ordered newest-first
        query: Current query text
        window: Maximum number of results to return
        workers: Number of chunks/threads (defaults to CPU count)

    Returns:
        Matches sorted by descending score, equal scores kept in record
        order, one entry per distinct text, at most ``window`` long.
        ``matches`` counts the distinct matching texts before truncation.
    """
    if window < 0:
        raise ValueError(f"window must be >= 0, got {window}")
    if window == 0 or not records:
        return RankedView()

    started = time.perf_counter()
    chunks = partition(records, workers or default_workers())

    if len(chunks) == 1:
        scored = _score_chunk(chunks[0], query)
    else:
        with ThreadPoolExecutor(max_workers=len(chunks)) as pool:
            # map() yields in submission order, keeping the merge deterministic
            scored = [
                candidate
                for chunk_result in pool.map(_score_chunk, chunks, [query] * len(chunks))
                for candidate in chunk_result
            ]

    # list.sort is stable: ties keep chunk-concatenation order
    scored.sort(key=lambda c: -c.score)

    view = RankedView()
    seen: set[str] = set()
    for candidate in scored:
        if candidate.text in seen:
            continue
        seen.add(candidate.text)
        if len(view) < window:
            view.append(candidate)
    view.matches = len(seen)

    logger.debug(
        f"Ranked {len(records)} records in {len(chunks)} chunks for {query!r}: "
        f"{len(scored)} matches, {(time.perf_counter() - started) * 1000:.1f}ms"
    )
    return view


class ParallelRanker:
    """Ranker with a fixed worker count, injectable into the session."""

    def __init__(self, workers: int | None = None) -> None:
        if workers is not None and workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.workers = workers or default_workers()

    def __call__(
        self, records: Sequence[Record], query: str, window: int
    ) -> RankedView:
        return rank(records, query, window, workers=self.workers)
