"""Tests for the fuzzy match scorer."""

import pytest

from rcf.services.fuzzy import (
    TIER_WEIGHT,
    match_positions,
    score,
)


def _is_subsequence(query: str, text: str) -> bool:
    it = iter(text)
    return all(ch in it for ch in query)


CANDIDATES = [
    "git status",
    "git commit -m x",
    "ls -la",
    "docker compose up -d",
    "kubectl get pods -n kube-system",
    "",
    "a",
    "echo 'hello world' | tr a-z A-Z",
    "Git status",
    "ls -LA",
]

QUERIES = ["", "g", "G", "gc", "git", "ls", "la", "LA", "dcu", "kgp", "zz", "hello", "a", "AZ", "-"]


class TestEmptyQuery:
    """Empty query matches everything with a neutral score."""

    @pytest.mark.parametrize("candidate", CANDIDATES)
    def test_empty_query_matches(self, candidate):
        assert score(candidate, "") == 0

    def test_empty_query_positions(self):
        assert match_positions("git status", "") == []


class TestSubsequence:
    """Matching requires every query character, in order."""

    @pytest.mark.parametrize("candidate", CANDIDATES)
    @pytest.mark.parametrize("query", QUERIES)
    def test_match_implies_subsequence(self, candidate, query):
        """Any match is an in-order subsequence."""
        if score(candidate, query) is not None:
            assert _is_subsequence(query, candidate)

    @pytest.mark.parametrize("candidate", CANDIDATES)
    @pytest.mark.parametrize("query", QUERIES)
    def test_subsequence_implies_match(self, candidate, query):
        """Any in-order subsequence matches."""
        if _is_subsequence(query, candidate):
            assert score(candidate, query) is not None

    def test_missing_character(self):
        """A query character absent from the candidate is no match."""
        assert score("ls -la", "gc") is None

    def test_wrong_order(self):
        """Characters present but out of order don't match."""
        assert score("git", "tg") is None

    def test_query_longer_than_candidate(self):
        assert score("ls", "ls -la") is None

    def test_case_mismatch_is_no_match(self):
        """Characters are compared literally."""
        assert score("Git status", "g") is None
        assert score("ls -LA", "la") is None
        assert score("git status", "GS") is None

    def test_matching_case(self):
        assert score("Git status", "G") is not None
        assert score("ls -LA", "LA") is not None

    def test_appending_absent_character_eliminates(self):
        """Extending the query with a character the candidate lacks drops it."""
        assert score("git status", "gi") is not None
        assert score("git status", "giz") is None


class TestOrdering:
    """Relative ordering of scores."""

    def test_exact_beats_substring(self):
        assert score("ls", "ls") > score("ls -la", "ls")

    def test_substring_beats_scattered(self):
        """Contiguous match outranks a scattered one for the same query."""
        assert score("xx commit", "commit") > score("cxoxmxmxixt", "commit")

    def test_substring_beats_scattered_regardless_of_length(self):
        """Tiering holds even against a much shorter scattered candidate."""
        long_substring = "x" * 500 + "abc"
        assert score(long_substring, "abc") > score("axbxc", "abc")

    def test_word_boundary_bonus(self):
        """Matching word starts beats matching mid-word."""
        assert score("git commit", "gc") > score("gaaac", "gc")

    def test_shorter_candidate_wins(self):
        """Same alignment, shorter command ranks higher."""
        assert score("git st", "gs") > score("git status --short --branch", "gs")

    def test_consecutive_run_bonus(self):
        """Longer contiguous runs score higher among scattered matches."""
        assert score("gitxxs", "gits") > score("gxixtxs", "gits")

    def test_tiers_are_separated(self):
        assert score("ls", "ls") >= 2 * TIER_WEIGHT - TIER_WEIGHT // 2
        assert score("xls", "ls") < 2 * TIER_WEIGHT - TIER_WEIGHT // 2

    def test_gc_scenario(self):
        """Boundary subsequence "g", "c" matches git commit only."""
        assert score("git commit -m x", "gc") is not None
        assert score("git status", "gc") is None
        assert score("ls -la", "gc") is None

    def test_pure(self):
        """Repeated calls give identical results."""
        results = {score("docker compose up -d", "dcu") for _ in range(5)}
        assert len(results) == 1


class TestMatchPositions:
    """Positions used for highlighting."""

    def test_boundary_positions(self):
        assert match_positions("git commit -m x", "gc") == [0, 4]

    def test_no_match(self):
        assert match_positions("ls -la", "gc") is None

    def test_prefers_contiguous_occurrence(self):
        """Best alignment is chosen, not the leftmost greedy one."""
        assert match_positions("a_xab", "ab") == [3, 4]

    def test_prefers_word_start_occurrence(self):
        """Among substrings the one at a word start wins."""
        assert match_positions("xstatus status", "status") == [8, 9, 10, 11, 12, 13]

    def test_positions_follow_case(self):
        """Only the literally equal characters are highlighted."""
        assert match_positions("Git Status", "GS") == [0, 4]
        assert match_positions("Git Status", "gs") is None


class TestSubstringAlignment:
    """Best occurrence among several contiguous ones."""

    def test_single_occurrence(self):
        assert match_positions("xx commit", "commit") == [3, 4, 5, 6, 7, 8]

    def test_repeated_occurrence_picks_word_start(self):
        assert match_positions("lsls ls", "ls") == [0, 1]
        assert match_positions("xlsx ls", "ls") == [5, 6]
