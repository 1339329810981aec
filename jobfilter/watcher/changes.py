"""Re-run filtering whenever cards are added to or removed from the page."""

import asyncio
from typing import Callable, List, Optional, Tuple

from bs4.element import Tag

from jobfilter.adapters.base import BaseSiteAdapter
from jobfilter.logging import get_logger
from jobfilter.page import MutationObserver, MutationRecord, Page

from .container import wait_for_container
from .models import WatcherConfig

logger = get_logger(__name__, component="watcher")


class ChangeWatcher:
    """
    Observes the card container and calls ``trigger`` on structural changes.

    The container is the adapter's ``container_selector`` when it shows up
    within the retry policy, otherwise the page body. Only child-list
    changes count; visibility writes never re-trigger a pass.
    """

    def __init__(
        self,
        page: Page,
        adapter: BaseSiteAdapter,
        trigger: Callable[[], None],
        config: Optional[WatcherConfig] = None,
    ):
        self.page = page
        self.adapter = adapter
        self.trigger = trigger
        self.config = config or WatcherConfig()
        self._observer: Optional[MutationObserver] = None
        self._pending: Optional[asyncio.TimerHandle] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def target(self) -> Optional[Tag]:
        return self._observer.target if self._observer else None

    @property
    def is_observing(self) -> bool:
        return self._observer is not None and self._observer.is_connected

    async def _acquire_container(self) -> Tuple[Tag, bool]:
        """Container to observe, and whether it was missing when the wait began."""
        selector = self.adapter.container_selector
        if not selector:
            return self.page.body, False
        present = self.page.select_one(selector)
        if present is not None:
            return present, False

        container = await wait_for_container(self.page, selector, self.config.retry_policy())
        if container is None:
            logger.info(
                "Observing document body",
                extra={"event": "watcher.fallback.body", "site": self.adapter.name},
            )
            container = self.page.body
        return container, True

    async def start(self) -> None:
        """
        Acquire the container and begin observing it.

        When the container had to be waited for, the trigger runs once after
        observation begins to cover cards added during the wait.
        """
        self._loop = asyncio.get_running_loop()
        container, waited = await self._acquire_container()

        if self._observer is None:
            self._observer = self.page.observer(self._on_mutations)
        self._observer.observe(container)

        logger.info(
            "Change watcher started",
            extra={
                "event": "watcher.started",
                "site": self.adapter.name,
                "container": container.name,
            },
        )

        if waited:
            self._fire()

    async def rebind(self) -> None:
        """Re-acquire the container (it may have been replaced) and observe it."""
        self.disconnect()
        await self.start()

    def disconnect(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        if self._observer is not None:
            self._observer.disconnect()

    def _is_structural(self, records: List[MutationRecord]) -> bool:
        for record in records:
            if record.added_nodes:
                return True
            if record.removed_nodes and self.adapter.trigger_on_removals:
                return True
        return False

    def _on_mutations(self, records: List[MutationRecord]) -> None:
        if not self._is_structural(records):
            return

        if self.config.debounce > 0 and self._loop is not None:
            if self._pending is not None:
                self._pending.cancel()
            self._pending = self._loop.call_later(self.config.debounce, self._fire)
            return

        self._fire()

    def _fire(self) -> None:
        self._pending = None
        try:
            self.trigger()
        except Exception as e:
            logger.error(
                f"Mutation-triggered filter pass failed: {e}",
                extra={"event": "watcher.trigger.failed", "site": self.adapter.name},
                exc_info=True,
            )
