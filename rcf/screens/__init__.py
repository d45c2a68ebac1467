"""Screens for rcf."""

from .finder import FinderScreen

__all__ = ["FinderScreen"]
