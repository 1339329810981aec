"""Waiting for a site's card container to appear."""

import asyncio
from typing import Optional

from bs4.element import Tag

from jobfilter.logging import get_logger
from jobfilter.page import Page

from .models import RetryPolicy

logger = get_logger(__name__, component="watcher")


async def wait_for_container(
    page: Page, selector: str, policy: Optional[RetryPolicy] = None
) -> Optional[Tag]:
    """
    Poll the page until ``selector`` matches.

    Args:
        page: Page to query
        selector: CSS selector of the container
        policy: Retry schedule (defaults to 20 attempts, 500 ms apart)

    Returns:
        The container element, or None when every attempt missed
    """
    policy = policy or RetryPolicy()
    delays = policy.delays()
    attempt = 0

    while True:
        attempt += 1
        container = page.select_one(selector)
        if container is not None:
            if attempt > 1:
                logger.debug(
                    f"Container found after {attempt} attempts",
                    extra={"event": "watcher.container.found", "selector": selector},
                )
            return container

        delay = next(delays, None)
        if delay is None:
            break
        await asyncio.sleep(delay)

    logger.warning(
        f"Container not found after {attempt} attempts",
        extra={
            "event": "watcher.container.missing",
            "selector": selector,
            "attempts": attempt,
        },
    )
    return None
