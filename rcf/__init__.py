"""rcf: interactive fuzzy finder for shell history."""

__version__ = "0.3.0"
