"""Shared CSS for rcf."""

from .base import BASE_CSS

__all__ = ["BASE_CSS"]
