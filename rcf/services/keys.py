"""Translate Textual key names into session key events."""

from __future__ import annotations

from ..models.keys import CommitMode, KeyEvent

KEYMAP: dict[str, KeyEvent] = {
    "enter": KeyEvent.commit(CommitMode.RUN),
    "tab": KeyEvent.commit(CommitMode.EDIT),
    "escape": KeyEvent.cancel(),
    "ctrl+c": KeyEvent.cancel(),
    "ctrl+g": KeyEvent.cancel(),
    "ctrl+q": KeyEvent.cancel(),
    "backspace": KeyEvent.erase(),
    "ctrl+h": KeyEvent.erase(),
    "up": KeyEvent.up(),
    "ctrl+p": KeyEvent.up(),
    "ctrl+k": KeyEvent.up(),
    "down": KeyEvent.down(),
    "ctrl+n": KeyEvent.down(),
    "ctrl+j": KeyEvent.down(),
}


def translate_key(key: str, character: str | None = None, is_printable: bool = False) -> KeyEvent:
    """Map one terminal key press to a KeyEvent.

    Named keys win over their character (Enter carries "\\r", Tab "\\t").
    """
    event = KEYMAP.get(key)
    if event is not None:
        return event
    if is_printable and character:
        return KeyEvent.char(character)
    return KeyEvent.other()
