"""In-process work queue with unique-key deduplication."""

from __future__ import annotations

import asyncio
import logging
from typing import Set
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .models import CrawlTask

LOGGER = logging.getLogger(__name__)

TRACKING_PARAMS = {
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "gclid",
    "fbclid",
}


def unique_key(url: str) -> str:
    """Normalize a URL for deduplication.

    Lowercases scheme and host, drops the fragment and tracking params,
    sorts the query and removes a trailing slash from the path.
    """
    parts = urlsplit(url.strip())
    query = sorted(
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key.lower() not in TRACKING_PARAMS
    )
    path = parts.path.rstrip("/")
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), path, urlencode(query), "")
    )


class WorkQueue:
    """FIFO queue of CrawlTasks; each unique URL is accepted once."""

    def __init__(self) -> None:
        self._queue: "asyncio.Queue[CrawlTask]" = asyncio.Queue()
        self._seen: Set[str] = set()
        self.added = 0
        self.duplicates = 0

    def add_task(self, task: CrawlTask) -> bool:
        """Queue ``task`` unless its URL was seen before or is not http(s)."""
        try:
            scheme = urlsplit(task.url).scheme.lower()
        except ValueError:
            scheme = ""
        if scheme not in ("http", "https"):
            LOGGER.debug("Rejecting non-http task %s", task.url)
            return False

        key = unique_key(task.url)
        if key in self._seen:
            self.duplicates += 1
            LOGGER.debug("Skipping duplicate task %s", task.url)
            return False

        self._seen.add(key)
        self._queue.put_nowait(task)
        self.added += 1
        return True

    async def get(self) -> CrawlTask:
        return await self._queue.get()

    def task_done(self) -> None:
        self._queue.task_done()

    async def join(self) -> None:
        await self._queue.join()

    def __len__(self) -> int:
        return self._queue.qsize()
