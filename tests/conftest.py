"""Shared pytest fixtures."""

import pytest

from jobfilter.logging.context import clear_log_context
from jobfilter.store import MemoryRuleStore
from jobfilter.watcher import WatcherConfig


@pytest.fixture(autouse=True)
def reset_log_context():
    """Start every test with an empty logging context."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def memory_store():
    return MemoryRuleStore()


@pytest.fixture
def fast_watcher_config():
    """Watcher timing short enough for tests."""
    return WatcherConfig(
        container_retry_delay=0.01,
        container_max_attempts=3,
        settle_delay=0.02,
    )
