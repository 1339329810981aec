"""Scheduling for the CLI watch mode."""

from .service import SnapshotPoller

__all__ = ["SnapshotPoller"]
