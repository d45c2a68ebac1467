"""Exception hierarchy for rcf.

Startup failures are fatal and reported once; everything after the
interactive loop starts is either pure or recovered locally.
"""


class RcfError(Exception):
    """Base exception for all rcf errors.

    Carries an optional suggestion that is appended when the error is
    shown to the user.
    """

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message} ({self.suggestion})"
        return self.message


class SourceUnavailableError(RcfError):
    """History source cannot be opened or read."""

    pass


class MalformedRecordError(RcfError):
    """A raw history block failed the structural check."""

    pass


class TerminalUnavailableError(RcfError):
    """No controlling terminal to draw on."""

    pass


class CommitSinkError(RcfError):
    """Writing the committed command failed."""

    pass


class ConfigError(RcfError):
    """Configuration is invalid or missing."""

    pass


class ConfigValidationError(ConfigError):
    """Configuration value failed validation."""

    pass
