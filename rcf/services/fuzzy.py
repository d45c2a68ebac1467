"""Fuzzy matching for history commands.

Case-sensitive subsequence matching with tiered scoring:
- Exact match: highest tier
- Contiguous substring: middle tier
- Scattered subsequence: lowest tier

Within a tier the score rewards consecutive runs, word-boundary starts
and shorter commands. ``None`` means the query does not match at all.
"""

from __future__ import annotations

# Characters after which a match counts as a word start
BOUNDARY_CHARS = frozenset(" \t\n/._-:=;|&()'\"")

TIER_WEIGHT = 1_000_000
_FINE_LIMIT = TIER_WEIGHT // 2 - 1

TIER_SCATTERED = 0
TIER_SUBSTRING = 1
TIER_EXACT = 2

MATCH_SCORE = 16
CONSECUTIVE_BONUS = 16  # Multiplied by the current run length
BOUNDARY_BONUS = 32
START_BONUS = 48  # First character of the command
GAP_PENALTY = 3  # Per skipped character between two matches
LEADING_PENALTY = 1  # Per character before the first match
MAX_LEADING_PENALTY = 15
LENGTH_PENALTY = 1  # Per command character


def score(candidate: str, query: str) -> int | None:
    """Score how well query matches candidate.

    Returns:
        Integer score (higher = better), or None if query is not a
        subsequence of candidate. An empty query scores 0 for everything.
    """
    if not query:
        return 0

    alignment = _align(candidate, query)
    if alignment is None:
        return None

    tier, fine, _ = alignment
    fine -= len(candidate) * LENGTH_PENALTY
    fine = max(-_FINE_LIMIT, min(_FINE_LIMIT, fine))
    return tier * TIER_WEIGHT + fine


def match_positions(candidate: str, query: str) -> list[int] | None:
    """Indexes of candidate characters matched by query, for highlighting."""
    if not query:
        return []
    alignment = _align(candidate, query)
    if alignment is None:
        return None
    return alignment[2]


def _align(text: str, pattern: str) -> tuple[int, int, list[int]] | None:
    """Find the best alignment of query in candidate.

    Returns (tier, fine score, positions) or None.
    """
    if len(pattern) > len(text):
        return None

    if pattern == text:
        positions = list(range(len(text)))
        return TIER_EXACT, _alignment_score(text, positions), positions

    if pattern in text:
        fine, positions = _best_substring(text, pattern)
        return TIER_SUBSTRING, fine, positions

    best_scattered = _best_subsequence(text, pattern)
    if best_scattered is None:
        return None
    return TIER_SCATTERED, best_scattered[0], best_scattered[1]


def _best_substring(text: str, pattern: str) -> tuple[int, list[int]]:
    """Best scoring contiguous occurrence of pattern, which must occur in text."""
    start = text.find(pattern)
    positions = list(range(start, start + len(pattern)))
    best = (_alignment_score(text, positions), positions)
    start = text.find(pattern, start + 1)
    while start != -1:
        positions = list(range(start, start + len(pattern)))
        fine = _alignment_score(text, positions)
        if fine > best[0]:
            best = (fine, positions)
        start = text.find(pattern, start + 1)
    return best


def _best_subsequence(text: str, pattern: str) -> tuple[int, list[int]] | None:
    """Best scoring greedy alignment over every possible start."""
    best: tuple[int, list[int]] | None = None
    start = text.find(pattern[0])
    while start != -1:
        positions = _greedy_from(text, pattern, start)
        if positions is None:
            # Later starts can only see a shorter suffix
            break
        fine = _alignment_score(text, positions)
        if best is None or fine > best[0]:
            best = (fine, positions)
        start = text.find(pattern[0], start + 1)
    return best


def _greedy_from(text: str, pattern: str, start: int) -> list[int] | None:
    positions = [start]
    at = start + 1
    for ch in pattern[1:]:
        idx = text.find(ch, at)
        if idx == -1:
            return None
        positions.append(idx)
        at = idx + 1
    return positions


def _alignment_score(text: str, positions: list[int]) -> int:
    """Score matched positions, ignoring candidate length."""
    fine = 0
    run = 0
    prev = -2  # -2 so the first match isn't "consecutive"

    for pos in positions:
        fine += MATCH_SCORE
        if pos == prev + 1:
            run += 1
            fine += CONSECUTIVE_BONUS * run
        else:
            run = 0
            if prev >= 0:
                fine -= GAP_PENALTY * (pos - prev - 1)

        if pos == 0:
            fine += START_BONUS
        elif text[pos - 1] in BOUNDARY_CHARS:
            fine += BOUNDARY_BONUS
        prev = pos

    fine -= min(positions[0], MAX_LEADING_PENALTY) * LEADING_PENALTY
    return fine
