"""
Pytest configuration and fixtures for all tests.

This file ensures the project root is in the Python path
so that imports work correctly for all test modules.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import pytest for fixtures
import pytest

from browser_relay.config import Settings
from browser_relay.models.requests import LogEntry
from browser_relay.storage import LogStore


@pytest.fixture
def project_root_path():
    """Return the project root path."""
    return project_root


@pytest.fixture
def settings():
    """Settings pointing at an in-memory database."""
    return Settings(
        database_url="sqlite://",
        echo_logs=False,
        allowed_domains="localhost, example.com",
    )


@pytest.fixture
def store():
    """A fresh in-memory log store per test."""
    log_store = LogStore.from_url("sqlite://")
    yield log_store
    log_store.close()


@pytest.fixture
def make_entry():
    """Factory for validated log entries."""
    def _make(
        message="Hello World",
        level="log",
        url="http://localhost:3000/",
        timestamp="2025-01-01T10:00:00.000Z",
        **kwargs,
    ) -> LogEntry:
        return LogEntry(level=level, message=message, url=url, timestamp=timestamp, **kwargs)
    return _make


@pytest.fixture
def raw_entry():
    """Factory for raw entries as the extension posts them."""
    def _make(message="Hello World", level="log", **kwargs) -> dict:
        entry = {
            "level": level,
            "message": message,
            "timestamp": "2025-01-01T10:00:00.000Z",
            "pageUrl": "http://localhost:3000/",
        }
        entry.update(kwargs)
        return entry
    return _make
