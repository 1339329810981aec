"""Filter session: one adapter, one page, one rule store."""

import asyncio
from typing import Any, Callable, Dict, List, Optional, Set
from uuid import uuid4

from jobfilter.adapters.base import BaseSiteAdapter
from jobfilter.domain.models import RuleSet
from jobfilter.logging import get_logger
from jobfilter.logging.context import log_context
from jobfilter.page import NAVIGATE, Page, PageEvent
from jobfilter.pipeline import FilterPipeline, PassResult
from jobfilter.store import RuleStore, load_rule_set
from jobfilter.watcher import ChangeWatcher, SaveClickWatcher, WatcherConfig

logger = get_logger(__name__, component="session")


class FilterSession:
    """
    Owns everything needed to keep one page filtered.

    The session holds the current RuleSet and replaces it as a whole when
    settings change. Passes run synchronously, either directly or from the
    change watcher; rule loading is the only awaited step.

    Lifecycle:
        session = FilterSession(page, adapter, store)
        await session.start()
        ...
        session.dispose()
    """

    def __init__(
        self,
        page: Page,
        adapter: BaseSiteAdapter,
        store: RuleStore,
        config: Optional[WatcherConfig] = None,
    ):
        """
        Initialize the session.

        Args:
            page: Page to filter
            adapter: Site adapter for the page
            store: Rule store holding the site's settings
            config: Watcher timing (defaults apply when None)
        """
        self.page = page
        self.adapter = adapter
        self.store = store
        self.config = config or WatcherConfig()
        self.session_id = uuid4().hex[:12]

        self._rules = RuleSet.empty()
        self._pipeline = FilterPipeline(adapter, page)
        self._watcher = ChangeWatcher(page, adapter, self._on_page_changed, self.config)
        self._save_watcher = SaveClickWatcher(
            page, adapter, lambda: self._rules, settle_delay=self.config.settle_delay
        )
        self._unsubscribers: List[Callable[[], None]] = []
        self._tasks: Set[asyncio.Task] = set()
        self._started = False
        self._active = False
        self.last_result: Optional[PassResult] = None

    @property
    def rules(self) -> RuleSet:
        return self._rules

    @property
    def is_active(self) -> bool:
        """Whether the page URL is one the adapter filters and watchers are running."""
        return self._active

    @property
    def watcher(self) -> ChangeWatcher:
        return self._watcher

    async def start(self) -> None:
        """
        Subscribe to settings and navigation, then filter the page.

        When the adapter does not accept the current URL the session stays
        idle until a navigation to one it does. A page without a URL is
        filtered as it stands.
        """
        if self._started:
            return
        self._started = True

        with log_context(site=self.adapter.name, session_id=self.session_id):
            self._unsubscribers.append(self.store.on_change(self._on_store_change))
            self._unsubscribers.append(
                self.page.add_event_listener(NAVIGATE, self._on_navigate)
            )

            if not self._url_accepted(self.page.url):
                logger.info(
                    "Page URL not filtered by this site, waiting for navigation",
                    extra={"event": "session.idle", "url": self.page.url},
                )
                return

            await self._activate()

    def _url_accepted(self, url: Optional[str]) -> bool:
        return not url or self.adapter.matches_url(url)

    def _still_wanted(self) -> bool:
        """Whether the session may (re)attach watchers after an await."""
        return self._started and self._url_accepted(self.page.url)

    async def _activate(self) -> None:
        self._rules = await load_rule_set(self.store, self.adapter)
        if not self._still_wanted():
            return
        self.run_filter_pass()
        await self._watcher.start()
        if not self._still_wanted():
            self._watcher.disconnect()
            return
        self._save_watcher.start()
        self._active = True

        logger.info(
            "Filter session started",
            extra={"event": "session.started", "url": self.page.url},
        )

    def _deactivate(self) -> None:
        self._cancel_pending()
        self._watcher.disconnect()
        self._save_watcher.disconnect()
        self._active = False

    def _cancel_pending(self) -> None:
        current = asyncio.current_task() if self._tasks else None
        for task in list(self._tasks):
            if task is not current:
                task.cancel()
                self._tasks.discard(task)

    async def reload(self) -> None:
        """Reload settings, re-filter every card and re-attach the watcher."""
        with log_context(site=self.adapter.name, session_id=self.session_id):
            self._rules = await load_rule_set(self.store, self.adapter)
            if not self._still_wanted():
                return
            self.run_filter_pass()
            await self._watcher.rebind()
            if not self._still_wanted():
                self._watcher.disconnect()
                return

            logger.info("Filter session reloaded", extra={"event": "session.reloaded"})

    def run_filter_pass(self) -> Optional[PassResult]:
        """Run one pass with the current rules. Failures are logged, never raised."""
        with log_context(site=self.adapter.name, session_id=self.session_id):
            try:
                self.last_result = self._pipeline.run_filter_pass(self._rules)
                return self.last_result
            except Exception as e:
                logger.error(
                    f"Filter pass failed: {e}",
                    extra={"event": "filter.pass.failed", "error_type": type(e).__name__},
                    exc_info=True,
                )
                return None

    def dispose(self) -> None:
        """Stop watching, unsubscribe everything and cancel pending reloads."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._started = False
        self._deactivate()

        logger.info(
            "Filter session disposed",
            extra={"event": "session.disposed", "site": self.adapter.name},
        )

    async def wait_for_pending(self) -> None:
        """Wait until reloads scheduled by settings or navigation events finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
            await asyncio.sleep(0)

    # -- event handlers ------------------------------------------------------

    def _on_page_changed(self) -> None:
        self.run_filter_pass()

    def _on_store_change(self, changes: Dict[str, Any]) -> None:
        if not self.adapter.keys.is_relevant(changes):
            logger.debug(
                "Ignoring settings change for other sites",
                extra={"event": "session.settings.ignored", "site": self.adapter.name},
            )
            return
        if not self._active:
            return
        self._schedule(self.reload())

    def _on_navigate(self, event: PageEvent) -> None:
        accepted = self._url_accepted(event.url)
        logger.debug(
            "Navigation observed",
            extra={
                "event": "session.navigated",
                "site": self.adapter.name,
                "url": event.url,
                "accepted": accepted,
            },
        )

        if accepted and self._active:
            self._schedule(self.reload())
        elif accepted:
            self._schedule(self._activate_in_context())
        else:
            self._deactivate()

    async def _activate_in_context(self) -> None:
        with log_context(site=self.adapter.name, session_id=self.session_id):
            await self._activate()

    def _schedule(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                f"Session update failed: {exc}",
                extra={"event": "session.update.failed", "site": self.adapter.name},
                exc_info=exc,
            )
