"""Configuration management for rcf.

Single-file configuration at ~/.config/rcf/config.json. Command-line flags
are applied on top at startup.

Resolution order: command line > config file > environment > defaults
"""

import json
import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from ..models.exceptions import ConfigValidationError
from .commit import DEFAULT_OUTPUT_PATH, SinkKind
from .history import HistoryFormat, default_history_path

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _secure_write_json(path: Path, data: dict) -> None:
    """Write JSON to file with restricted permissions (0600)."""
    content = json.dumps(data, indent=2)
    # Write to temp file first, then rename for atomicity
    temp_path = path.with_suffix(".tmp")
    try:
        fd = os.open(str(temp_path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            os.write(fd, content.encode())
        finally:
            os.close(fd)
        temp_path.rename(path)
    except OSError:
        # Fallback: write normally then chmod
        path.write_text(content)
        try:
            path.chmod(stat.S_IRUSR | stat.S_IWUSR)  # 0600
        except OSError:
            pass  # Best effort on systems that don't support chmod


@dataclass
class Settings:
    """Finder settings. None means "not set at this tier"."""

    window_size: int | None = None  # Number of result lines
    history_file: Path | None = None
    history_format: HistoryFormat | None = None
    sink: SinkKind | None = None
    output_path: Path | None = None  # Used by the file sink
    workers: int | None = None  # Ranker threads, None = CPU count
    margin: int | None = None  # Columns kept free at the right edge
    log_file: Path | None = None
    log_level: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.window_size is not None:
            result["window_size"] = self.window_size
        if self.history_file is not None:
            result["history_file"] = str(self.history_file)
        if self.history_format is not None:
            result["history_format"] = self.history_format.value
        if self.sink is not None:
            result["sink"] = self.sink.value
        if self.output_path is not None:
            result["output_path"] = str(self.output_path)
        if self.workers is not None:
            result["workers"] = self.workers
        if self.margin is not None:
            result["margin"] = self.margin
        if self.log_file is not None:
            result["log_file"] = str(self.log_file)
        if self.log_level is not None:
            result["log_level"] = self.log_level
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        history_file = Path(data["history_file"]).expanduser() if data.get("history_file") else None
        history_format = HistoryFormat(data["history_format"]) if data.get("history_format") else None
        sink = SinkKind(data["sink"]) if data.get("sink") else None
        output_path = Path(data["output_path"]).expanduser() if data.get("output_path") else None
        log_file = Path(data["log_file"]).expanduser() if data.get("log_file") else None
        return cls(
            window_size=data.get("window_size"),
            history_file=history_file,
            history_format=history_format,
            sink=sink,
            output_path=output_path,
            workers=data.get("workers"),
            margin=data.get("margin"),
            log_file=log_file,
            log_level=data.get("log_level"),
        )

    def merge_with(self, override: "Settings") -> "Settings":
        """Return new settings with override values taking precedence."""
        return Settings(
            window_size=override.window_size if override.window_size is not None else self.window_size,
            history_file=override.history_file if override.history_file is not None else self.history_file,
            history_format=override.history_format if override.history_format is not None else self.history_format,
            sink=override.sink if override.sink is not None else self.sink,
            output_path=override.output_path if override.output_path is not None else self.output_path,
            workers=override.workers if override.workers is not None else self.workers,
            margin=override.margin if override.margin is not None else self.margin,
            log_file=override.log_file if override.log_file is not None else self.log_file,
            log_level=override.log_level if override.log_level is not None else self.log_level,
        )

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigValidationError: First invalid value found
        """
        if self.window_size is not None and self.window_size < 1:
            raise ConfigValidationError(f"window_size must be at least 1, got {self.window_size}")
        if self.workers is not None and self.workers < 1:
            raise ConfigValidationError(f"workers must be at least 1, got {self.workers}")
        if self.margin is not None and self.margin < 0:
            raise ConfigValidationError(f"margin must not be negative, got {self.margin}")
        if self.log_level is not None and self.log_level.upper() not in LOG_LEVELS:
            raise ConfigValidationError(
                f"Unknown log_level {self.log_level!r}",
                suggestion=f"use one of {', '.join(LOG_LEVELS)}",
            )


class ConfigManager:
    """Loads, resolves and saves settings."""

    DEFAULT_WINDOW_SIZE = 10
    DEFAULT_MARGIN = 4
    DEFAULT_LOG_LEVEL = "WARNING"

    def __init__(self, config_dir: Path | None = None):
        if config_dir is None:
            config_dir = Path.home() / ".config" / "rcf"
        self._config_dir = config_dir
        self._config_file = config_dir / "config.json"
        self._settings: Settings | None = None

    @property
    def config_file(self) -> Path:
        return self._config_file

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = self._load()
        return self._settings

    def _load(self) -> Settings:
        """Load settings from disk, falling back to empty settings."""
        if not self._config_file.exists():
            return Settings()
        try:
            data = json.loads(self._config_file.read_text())
            settings = Settings.from_dict(data)
            settings.validate()
            return settings
        except (json.JSONDecodeError, KeyError, ValueError, TypeError, ConfigValidationError) as e:
            logger.warning(f"Ignoring invalid config file {self._config_file}: {e}")
            return Settings()

    def save(self, settings: Settings) -> None:
        """Save settings to disk with secure permissions."""
        settings.validate()
        self._config_dir.mkdir(parents=True, exist_ok=True)
        _secure_write_json(self._config_file, settings.to_dict())
        self._settings = settings

    def resolve(self, override: Settings | None = None) -> Settings:
        """Resolve settings through all tiers.

        Args:
            override: Command-line settings

        Returns:
            Settings with every field filled in except ``workers`` and
            ``log_file``, which may legitimately stay None

        Raises:
            ConfigValidationError: An override value is out of range
        """
        override = override or Settings()
        override.validate()
        # merge_with returns a copy; cached settings stay unfilled
        resolved = self.settings.merge_with(override)

        if resolved.window_size is None:
            resolved.window_size = self.DEFAULT_WINDOW_SIZE
        if resolved.history_file is None:
            resolved.history_file = default_history_path()
        if resolved.history_format is None:
            resolved.history_format = HistoryFormat.AUTO
        if resolved.sink is None:
            resolved.sink = SinkKind.FILE
        if resolved.output_path is None:
            resolved.output_path = DEFAULT_OUTPUT_PATH
        if resolved.margin is None:
            resolved.margin = self.DEFAULT_MARGIN
        if resolved.log_level is None:
            resolved.log_level = self.DEFAULT_LOG_LEVEL

        return resolved
