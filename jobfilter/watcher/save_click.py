"""Hide a card right after the user saves it.

Saving a job flips an icon inside the card without adding or removing any
nodes, so the change watcher never sees it. This watcher listens for clicks
on the save control in the capture phase, waits for the site to settle and
re-reads the card.
"""

import asyncio
from typing import Callable, Optional, Set

from bs4.element import Tag

from jobfilter.adapters.base import BaseSiteAdapter
from jobfilter.domain.models import CardState, RuleSet
from jobfilter.logging import get_logger
from jobfilter.page import CLICK, Page, PageEvent, hide

logger = get_logger(__name__, component="watcher")

DEFAULT_SETTLE_DELAY = 0.6


class SaveClickWatcher:
    """
    Capture-phase click listener for the site's save control.

    Every click schedules its own check; a later click does not cancel an
    earlier one, and whatever state the card is in when a check runs wins.
    """

    def __init__(
        self,
        page: Page,
        adapter: BaseSiteAdapter,
        rules: Callable[[], RuleSet],
        settle_delay: float = DEFAULT_SETTLE_DELAY,
    ):
        self.page = page
        self.adapter = adapter
        self.rules = rules
        self.settle_delay = settle_delay
        self._remove_listener: Optional[Callable[[], None]] = None
        self._pending: Set[asyncio.TimerHandle] = set()
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def is_listening(self) -> bool:
        return self._remove_listener is not None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def start(self) -> None:
        if self.is_listening:
            return
        if not self.adapter.save_control_selector or not self.adapter.supports(CardState.SAVED):
            return

        self._loop = asyncio.get_running_loop()
        self._remove_listener = self.page.add_event_listener(CLICK, self._on_click, capture=True)
        logger.debug(
            "Save-click watcher started",
            extra={"event": "watcher.save_click.started", "site": self.adapter.name},
        )

    def disconnect(self) -> None:
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
        for handle in self._pending:
            handle.cancel()
        self._pending.clear()

    def _on_click(self, event: PageEvent) -> None:
        if not self.rules().hide_saved or event.target is None:
            return

        control = self.adapter.save_control_for(event.target)
        if control is None:
            return
        card = self.adapter.card_for(control)
        if card is None:
            return

        handle: Optional[asyncio.TimerHandle] = None

        def settle() -> None:
            self._pending.discard(handle)
            self._check(card)

        handle = self._loop.call_later(self.settle_delay, settle)
        self._pending.add(handle)

    def _check(self, card: Tag) -> None:
        try:
            if self.rules().hide_saved and self.adapter.is_saved(card):
                hide(card)
                logger.debug(
                    "Saved card hidden",
                    extra={"event": "card.hidden", "reason": CardState.SAVED.value},
                )
        except Exception as e:
            logger.error(
                f"Failed to check saved card: {e}",
                extra={"event": "watcher.save_click.failed", "site": self.adapter.name},
                exc_info=True,
            )
