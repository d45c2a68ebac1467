"""Tests for scoped terminal acquisition."""

import io

import pytest

from rcf.models.exceptions import TerminalUnavailableError
from rcf.services import terminal
from rcf.services.terminal import terminal_control


class FakeTty(io.StringIO):
    def isatty(self) -> bool:
        return True

    def fileno(self) -> int:
        return 99


@pytest.fixture
def fake_termios(monkeypatch):
    """Record tty attribute restores instead of touching a real terminal."""
    restored = []
    monkeypatch.setattr(terminal.termios, "tcgetattr", lambda fd: ["saved", fd])
    monkeypatch.setattr(
        terminal.termios,
        "tcsetattr",
        lambda fd, when, attrs: restored.append((fd, attrs)),
    )
    return restored


class TestTerminalControl:
    """Acquire, then always restore."""

    def test_not_a_tty(self):
        with pytest.raises(TerminalUnavailableError):
            with terminal_control(io.StringIO(), io.StringIO()):
                pass

    def test_stdout_not_a_tty(self):
        with pytest.raises(TerminalUnavailableError):
            with terminal_control(FakeTty(), io.StringIO()):
                pass

    def test_restores_on_normal_exit(self, fake_termios):
        with terminal_control(FakeTty(), FakeTty()) as info:
            assert info.columns > 0
        assert fake_termios == [(99, ["saved", 99])]

    def test_restores_on_error(self, fake_termios):
        with pytest.raises(RuntimeError):
            with terminal_control(FakeTty(), FakeTty()):
                raise RuntimeError("boom")
        assert fake_termios == [(99, ["saved", 99])]

    def test_unreadable_attributes(self, monkeypatch):
        def fail(fd):
            raise terminal.termios.error("not a tty")

        monkeypatch.setattr(terminal.termios, "tcgetattr", fail)
        with pytest.raises(TerminalUnavailableError):
            with terminal_control(FakeTty(), FakeTty()):
                pass
