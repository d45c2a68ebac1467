"""Shared test fixtures for rcf."""

import pytest
from pathlib import Path

from rcf.models.record import Record, RecordStore
from rcf.services.config import ConfigManager


SAMPLE_COMMANDS = ["git status", "git commit -m x", "ls -la"]


@pytest.fixture
def sample_records() -> list[Record]:
    """The three-command history used throughout the docs."""
    return [Record(id=i, text=text) for i, text in enumerate(SAMPLE_COMMANDS)]


@pytest.fixture
def sample_store(sample_records: list[Record]) -> RecordStore:
    return RecordStore(sample_records)


@pytest.fixture
def large_store() -> RecordStore:
    """A few hundred distinct commands for ranking tests."""
    verbs = ["git", "docker", "kubectl", "ls", "cd", "make", "python", "grep"]
    args = ["status", "build", "run", "-la", "src", "test", "logs", "apply -f x.yaml"]
    records = []
    for i in range(300):
        text = f"{verbs[i % len(verbs)]} {args[(i // len(verbs)) % len(args)]} {i}"
        records.append(Record(id=i, text=text))
    return RecordStore(records)


@pytest.fixture
def config_manager(tmp_path: Path) -> ConfigManager:
    """Create a ConfigManager with temp directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return ConfigManager(config_dir=config_dir)


@pytest.fixture
def zsh_history(tmp_path: Path) -> Path:
    """A small zsh extended-history file."""
    path = tmp_path / ".zsh_history"
    path.write_text(
        ": 1700000001:0;git status\n"
        ": 1700000002:0;ls -la\n"
        ": 1700000003:0;for f in *.py; do\\\n"
        "  echo $f\\\n"
        "done\n"
        ": 1700000004:0;git status\n"
        ": 1700000005:0;git commit -m x\n"
    )
    return path
