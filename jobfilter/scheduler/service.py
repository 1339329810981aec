"""Periodic snapshot polling for the CLI watch mode."""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from bs4 import BeautifulSoup

from jobfilter.logging import get_logger
from jobfilter.page import Page
from jobfilter.page.document import HTML_PARSER
from jobfilter.session import FilterSession

logger = get_logger(__name__, component="scheduler")

JOB_ID = "snapshot-poll"


class SnapshotPoller:
    """
    Feeds changes of a saved page file and the settings file into a live session.

    On each tick the page file is re-read when its modification time changed,
    and the card container's children are replaced with the new snapshot's,
    which the session's change watcher picks up like any DOM mutation. The
    rule store is asked to check for outside edits, then the filtered page
    is written to the output file.

    Uses AsyncIOScheduler so ticks run on the same event loop as the session.
    """

    def __init__(
        self,
        session: FilterSession,
        page_path: Union[str, Path],
        output_path: Union[str, Path],
        interval_seconds: float,
    ):
        """
        Initialize the poller.

        Args:
            session: Started filter session whose page is kept in sync
            page_path: Saved HTML snapshot to watch
            output_path: Where the filtered page is written after each tick
            interval_seconds: Seconds between ticks
        """
        self.session = session
        self.page_path = Path(page_path)
        self.output_path = Path(output_path)
        self.interval_seconds = interval_seconds
        self._page_mtime: Optional[float] = self._mtime()
        self._last_output: Optional[str] = None

        self.scheduler = AsyncIOScheduler(
            job_defaults={
                "max_instances": 1,
                "coalesce": True,
                "misfire_grace_time": max(int(interval_seconds), 1),
            },
            timezone=timezone.utc,
        )

    @property
    def page(self) -> Page:
        return self.session.page

    def _mtime(self) -> Optional[float]:
        try:
            return self.page_path.stat().st_mtime
        except OSError:
            return None

    def start(self) -> None:
        """Register the poll job and start the scheduler (needs a running loop)."""
        trigger = IntervalTrigger(seconds=self.interval_seconds, timezone=timezone.utc)
        next_run = datetime.now(timezone.utc)
        self.scheduler.add_job(
            func=self.tick,
            trigger=trigger,
            id=JOB_ID,
            name="Page snapshot poll",
            replace_existing=True,
            next_run_time=next_run,
        )
        self.scheduler.start()

        logger.info(
            f"Snapshot poller started with interval: {self.interval_seconds} seconds",
            extra={
                "event": "scheduler.started",
                "interval_seconds": self.interval_seconds,
                "page_path": str(self.page_path),
                "output_path": str(self.output_path),
            },
        )

    async def shutdown(self) -> None:
        """Stop the scheduler. AsyncIOScheduler applies the stop on the loop, so yield to it once."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            await asyncio.sleep(0)
        logger.info("Snapshot poller stopped", extra={"event": "scheduler.stopped"})

    def is_running(self) -> bool:
        return self.scheduler.running

    async def tick(self) -> None:
        """One poll: sync the page, check settings, write output."""
        try:
            self.sync_page()
            check = getattr(self.session.store, "check_for_changes", None)
            if check is not None:
                check()
            await self.session.wait_for_pending()
            self.write_output()
        except Exception as e:
            logger.error(
                f"Snapshot poll failed: {e}",
                extra={"event": "scheduler.tick.failed", "error_type": type(e).__name__},
                exc_info=True,
            )

    def sync_page(self) -> bool:
        """
        Apply the page file to the live page if it changed since the last look.

        Returns:
            True when the page was updated
        """
        mtime = self._mtime()
        if mtime is None or mtime == self._page_mtime:
            return False
        self._page_mtime = mtime

        snapshot = BeautifulSoup(self.page_path.read_text(encoding="utf-8"), HTML_PARSER)
        selector = self.session.adapter.container_selector
        live = self.page.select_one(selector) if selector else None
        fresh = snapshot.select_one(selector) if selector else None
        if live is None or fresh is None:
            live = self.page.body
            fresh = snapshot.body or snapshot

        self.page.replace_children(live, fresh.decode_contents())
        logger.info(
            "Page snapshot changed",
            extra={"event": "scheduler.page.changed", "page_path": str(self.page_path)},
        )
        return True

    def write_output(self) -> bool:
        """Write the filtered page when it differs from the last write."""
        html = self.page.to_html()
        if html == self._last_output:
            return False
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_text(html, encoding="utf-8")
        self._last_output = html
        logger.debug(
            "Filtered page written",
            extra={"event": "scheduler.output.written", "output_path": str(self.output_path)},
        )
        return True
