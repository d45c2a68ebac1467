"""Interaction session: key events in, new state and render snapshot out.

The transition function ``step`` is pure and knows nothing about the
terminal. ``InteractionSession`` binds it to a record store, a window size
and a ranker, and can drive any blocking iterable of key events.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum

from ..models.keys import CommitMode, KeyEvent, KeyKind
from ..models.record import Record, ScoredCandidate
from .ranker import ParallelRanker

logger = logging.getLogger(__name__)

# (records, query, window) -> ranked view, optionally with a ``matches`` count
Ranker = Callable[[Sequence[Record], str, int], list[ScoredCandidate]]


class Outcome(Enum):
    """What the caller should do after a transition."""

    CONTINUE = "continue"  # Render the snapshot, read the next key
    IGNORED = "ignored"  # Nothing changed, no redraw
    COMMIT = "commit"
    CANCEL = "cancel"


@dataclass(frozen=True)
class SessionState:
    """Query, selection and current ranked view."""

    query: str = ""
    selection_index: int = 0
    ranked_view: tuple[ScoredCandidate, ...] = ()
    matches: int = 0  # Matching texts before truncation to the window

    @property
    def selected(self) -> ScoredCandidate | None:
        if 0 <= self.selection_index < len(self.ranked_view):
            return self.ranked_view[self.selection_index]
        return None


@dataclass(frozen=True)
class RenderSnapshot:
    """Everything the renderer needs for one frame."""

    query: str
    lines: tuple[str, ...]
    selection_index: int
    total: int = 0  # Size of the record store
    matches: int = 0

    @classmethod
    def of(cls, state: SessionState, total: int = 0) -> RenderSnapshot:
        return cls(
            query=state.query,
            lines=tuple(c.text for c in state.ranked_view),
            selection_index=state.selection_index,
            total=total,
            matches=state.matches,
        )


@dataclass(frozen=True)
class CommitResult:
    """Committed text and how the shell should use it."""

    text: str
    mode: CommitMode = CommitMode.RUN


@dataclass(frozen=True)
class Transition:
    """Result of feeding one key event to the state machine."""

    state: SessionState
    outcome: Outcome
    snapshot: RenderSnapshot | None = None
    commit: CommitResult | None = field(default=None)


def clamp_selection(index: int, view_length: int) -> int:
    """Keep index inside ``0 .. max(1, view_length) - 1``."""
    return max(0, min(index, max(1, view_length) - 1))


def _match_count(view: Sequence[ScoredCandidate]) -> int:
    """Pre-truncation match count when the ranker reports one."""
    return getattr(view, "matches", len(view))


def step(
    state: SessionState,
    event: KeyEvent,
    rerank: Callable[[str], Sequence[ScoredCandidate]],
    window: int,
) -> Transition:
    """Apply one key event.

    Args:
        state: Current session state
        event: Decoded key event
        rerank: Returns the ranked view for a query
        window: Visible window size

    Returns:
        Transition with the new state. ``snapshot`` is set for CONTINUE
        and is None when the event was ignored or ended the session.
    """
    kind = event.kind

    if kind is KeyKind.CHARACTER and event.character:
        query = state.query + event.character
        view = rerank(query)
        return _continue(
            SessionState(query=query, selection_index=0, ranked_view=tuple(view), matches=_match_count(view))
        )

    if kind is KeyKind.ERASE:
        query = state.query[:-1]
        view = rerank(query)
        index = clamp_selection(state.selection_index, len(view))
        return _continue(
            SessionState(query=query, selection_index=index, ranked_view=tuple(view), matches=_match_count(view))
        )

    if kind is KeyKind.UP:
        return _continue(replace(state, selection_index=max(0, state.selection_index - 1)))

    if kind is KeyKind.DOWN:
        last = max(0, min(window, len(state.ranked_view)) - 1)
        return _continue(replace(state, selection_index=min(state.selection_index + 1, last)))

    if kind is KeyKind.COMMIT:
        selected = state.selected
        text = selected.text if selected is not None else ""
        return Transition(state, Outcome.COMMIT, commit=CommitResult(text, event.mode))

    if kind is KeyKind.CANCEL:
        return Transition(state, Outcome.CANCEL)

    return Transition(state, Outcome.IGNORED)


def _continue(state: SessionState) -> Transition:
    return Transition(state, Outcome.CONTINUE, snapshot=RenderSnapshot.of(state))


class InteractionSession:
    """Stateful wrapper around ``step`` for one run of the finder."""

    def __init__(
        self,
        records: Sequence[Record],
        window: int,
        ranker: Ranker | None = None,
    ) -> None:
        if window < 0:
            raise ValueError(f"window must be >= 0, got {window}")
        self._records = records
        self._window = window
        self._ranker: Ranker = ranker or ParallelRanker()
        self._state = SessionState()
        self._finished = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def window(self) -> int:
        return self._window

    @property
    def total(self) -> int:
        return len(self._records)

    @property
    def finished(self) -> bool:
        return self._finished

    def _rerank(self, query: str) -> list[ScoredCandidate]:
        return self._ranker(self._records, query, self._window)

    def _snapshot(self) -> RenderSnapshot:
        return RenderSnapshot.of(self._state, total=self.total)

    def start(self, initial_query: str = "") -> RenderSnapshot:
        """Rank for the empty query, then type ``initial_query`` if given."""
        view = self._rerank("")
        self._state = SessionState(ranked_view=tuple(view), matches=_match_count(view))
        for ch in initial_query:
            if ch.isprintable():
                self.handle(KeyEvent.char(ch))
        return self._snapshot()

    def handle(self, event: KeyEvent) -> Transition:
        """Feed one key event and keep the resulting state."""
        if self._finished:
            raise RuntimeError("session already finished")

        transition = step(self._state, event, self._rerank, self._window)
        self._state = transition.state

        if transition.outcome in (Outcome.COMMIT, Outcome.CANCEL):
            self._finished = True
            logger.info(f"Session ended with {transition.outcome.value}")
        if transition.snapshot is not None:
            transition = replace(transition, snapshot=self._snapshot())
        return transition

    def run(
        self,
        events: Iterable[KeyEvent],
        render: Callable[[RenderSnapshot], None],
        initial_query: str = "",
    ) -> CommitResult | None:
        """Drive the session from a key-event stream until commit or cancel.

        Renders once at start and once per state-changing event. Returns the
        commit result, or None on cancel or when the stream runs out.
        """
        render(self.start(initial_query))
        for event in events:
            transition = self.handle(event)
            if transition.outcome is Outcome.COMMIT:
                return transition.commit
            if transition.outcome is Outcome.CANCEL:
                return None
            if transition.snapshot is not None:
                render(transition.snapshot)
        return None
