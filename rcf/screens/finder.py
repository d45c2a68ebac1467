"""FinderScreen: query line plus ranked results, driven by key events."""

from __future__ import annotations

import logging

from textual.app import ComposeResult
from textual.events import Key
from textual.screen import Screen

from ..models.keys import KeyEvent
from ..services.keys import translate_key
from ..services.session import InteractionSession, Outcome, RenderSnapshot, Transition
from ..widgets.query_line import QueryLine
from ..widgets.result_list import ResultList

logger = logging.getLogger(__name__)


class FinderScreen(Screen):
    """Feeds every key press to the interaction session and redraws."""

    DEFAULT_CSS = """
    FinderScreen {
        height: auto;
        layout: vertical;
    }
    """

    def __init__(
        self,
        session: InteractionSession,
        margin: int = 4,
        initial_query: str = "",
    ) -> None:
        super().__init__()
        self._session = session
        self._margin = margin
        self._initial_query = initial_query

    @property
    def session(self) -> InteractionSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield QueryLine(id="query")
        yield ResultList(self._session.window, margin=self._margin, id="results")

    def on_mount(self) -> None:
        self._show(self._session.start(self._initial_query))

    def on_key(self, event: Key) -> None:
        """Route all keys through the session state machine."""
        event.prevent_default()
        event.stop()
        self.feed(translate_key(event.key, event.character, event.is_printable))

    def feed(self, key_event: KeyEvent) -> Transition | None:
        """Apply one key event; exits the app on commit or cancel."""
        if self._session.finished:
            return None

        transition = self._session.handle(key_event)
        if transition.outcome is Outcome.COMMIT:
            self.app.exit(transition.commit)
        elif transition.outcome is Outcome.CANCEL:
            self.app.exit(None)
        elif transition.snapshot is not None:
            self._show(transition.snapshot)
        return transition

    def _show(self, snapshot: RenderSnapshot) -> None:
        query_line = self.query_one("#query", QueryLine)
        query_line.query = snapshot.query
        query_line.matches = snapshot.matches
        query_line.total = snapshot.total
        self.query_one("#results", ResultList).show(snapshot)
