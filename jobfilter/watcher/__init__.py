"""Watchers that keep filtering current as the page changes."""

from .changes import ChangeWatcher
from .container import wait_for_container
from .models import RetryPolicy, WatcherConfig
from .save_click import DEFAULT_SETTLE_DELAY, SaveClickWatcher

__all__ = [
    "ChangeWatcher",
    "SaveClickWatcher",
    "RetryPolicy",
    "WatcherConfig",
    "wait_for_container",
    "DEFAULT_SETTLE_DELAY",
]
