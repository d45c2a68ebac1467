"""Query line: prompt, typed query and match count."""

from rich.text import Text
from textual.reactive import reactive
from textual.widgets import Static


class QueryLine(Static):
    """First line of the finder, always one row high."""

    DEFAULT_CSS = """
    QueryLine {
        height: 1;
        width: 100%;
    }
    """

    PROMPT = "> "

    query = reactive("")
    matches = reactive(0)
    total = reactive(0)

    def render(self) -> Text:
        line = Text(self.PROMPT, style="bold")
        line.append(self.query)
        line.append("▏", style="blink")
        line.append(f"  {self.matches}/{self.total}", style="dim")
        return line
