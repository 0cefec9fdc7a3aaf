"""Shared pytest configuration and fixtures for tests."""

import sys
import io
import logging
from pathlib import Path

import pytest

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from questboard.core.repository import KeyValueStore  # noqa: E402
from questboard.core.service import BoardService  # noqa: E402


class FakeClock:
    """Manually advanced epoch-ms clock."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def kv_store(tmp_path):
    return KeyValueStore(tmp_path / "board.db")


@pytest.fixture
def service(kv_store, clock):
    return BoardService(kv_store, clock=clock)


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """
    Point the CLI/REPL at a throwaway data dir and a fresh board.

    Yields the data dir. Root logging handlers installed by the CLI callback
    are removed afterwards so later tests don't write to a closed stream.
    """
    from questboard.cli.main import reset_service
    from questboard.config import reset_settings_cache

    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level

    monkeypatch.setenv("QUESTBOARD_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("QUESTBOARD_LOG_FILE", "0")
    reset_settings_cache()
    reset_service()

    yield tmp_path / "data"

    reset_service()
    reset_settings_cache()
    for h in root.handlers[:]:
        if h not in saved_handlers:
            root.removeHandler(h)
    for h in saved_handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(saved_level)
