"""Data models for filter pass tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict


@dataclass
class PassResult:
    """
    Outcome of one filter pass over every card on the page.

    Attributes:
        pass_id: Identifier attached to the pass's log records
        started_at: UTC timestamp when the pass began
        finished_at: UTC timestamp when the pass completed
        duration_seconds: Time spent on the pass
        total: Card elements found by the adapter
        hidden: Cards hidden by a rule
        shown: Cards left visible
        skipped: Elements the adapter did not read as a card (left untouched)
        errors: Cards that failed to read or evaluate (shown)
        hidden_by_reason: Hide count per HideReason value
    """

    pass_id: str
    started_at: datetime
    finished_at: datetime
    duration_seconds: float = 0.0
    total: int = 0
    hidden: int = 0
    shown: int = 0
    skipped: int = 0
    errors: int = 0
    hidden_by_reason: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        """Compute duration if not set."""
        if self.duration_seconds == 0.0:
            delta = self.finished_at - self.started_at
            self.duration_seconds = delta.total_seconds()

    @property
    def had_errors(self) -> bool:
        return self.errors > 0
