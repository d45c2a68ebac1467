"""Services for rcf."""

from rcf.services.fuzzy import score, match_positions
from rcf.services.ranker import ParallelRanker, rank
from rcf.services.session import (
    CommitResult,
    InteractionSession,
    Outcome,
    RenderSnapshot,
    SessionState,
    step,
)
from rcf.services.history import HistoryFormat, HistorySource

__all__ = [
    "score",
    "match_positions",
    "ParallelRanker",
    "rank",
    "CommitResult",
    "InteractionSession",
    "Outcome",
    "RenderSnapshot",
    "SessionState",
    "step",
    "HistoryFormat",
    "HistorySource",
]
