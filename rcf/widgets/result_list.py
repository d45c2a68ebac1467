"""Result list: the ranked commands below the query line.

Always exactly ``window`` rows high so the inline block never changes
size while typing.
"""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from ..services.fuzzy import match_positions
from ..services.session import RenderSnapshot

ELLIPSIS = "…"


def flatten(text: str) -> str:
    """Replace each line break with a single space."""
    return text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")


def format_candidate(text: str, width: int) -> str:
    """Flatten text and fit it into ``width`` columns."""
    line = flatten(text)
    if width <= 0:
        return ""
    if len(line) <= width:
        return line
    return line[: width - 1] + ELLIPSIS


class ResultList(Static):
    """Renders the ranked view with the selection highlighted."""

    DEFAULT_CSS = """
    ResultList {
        width: 100%;
    }
    """

    def __init__(self, window: int, margin: int = 4, **kwargs) -> None:
        super().__init__(**kwargs)
        self._window = window
        self._margin = margin
        self._snapshot: RenderSnapshot | None = None

    def on_mount(self) -> None:
        self.styles.height = self._window

    @property
    def snapshot(self) -> RenderSnapshot | None:
        return self._snapshot

    def show(self, snapshot: RenderSnapshot) -> None:
        """Replace the displayed snapshot and redraw."""
        self._snapshot = snapshot
        self.refresh()

    def visible_lines(self, columns: int) -> list[str]:
        """Formatted candidate lines for a terminal ``columns`` wide."""
        if self._snapshot is None:
            return []
        width = columns - self._margin
        return [format_candidate(line, width) for line in self._snapshot.lines[: self._window]]

    def render(self) -> Text:
        snapshot = self._snapshot
        if snapshot is None:
            return Text()

        rows: list[Text] = []
        lines = self.visible_lines(self.size.width)
        for i, (raw, shown) in enumerate(zip(snapshot.lines, lines)):
            row = Text("  " if i != snapshot.selection_index else "› ")
            body = Text(shown)
            flat = flatten(raw)
            visible = len(shown) if len(shown) == len(flat) else len(shown) - 1
            for pos in match_positions(flat, snapshot.query) or []:
                if pos < visible:
                    body.stylize("bold underline", pos, pos + 1)
            row.append_text(body)
            if i == snapshot.selection_index:
                row.stylize("reverse")
            rows.append(row)

        # Pad to a fixed height
        rows.extend(Text("") for _ in range(self._window - len(rows)))
        return Text("\n").join(rows)
