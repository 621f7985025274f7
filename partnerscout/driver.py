"""Crawl driver: owns the queue, the fetch cycle and result delivery."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from .config import CrawlConfig
from .fetch import FetchError, FetchOptions, build_http_client, fetch_page
from .models import CrawlTask, ResultRecord
from .queue import WorkQueue
from .sinks import MemorySink
from .traversal import RecordSink, TraversalController

LOGGER = logging.getLogger(__name__)


@dataclass
class CrawlRunResult:
    """Result of a partner discovery run."""

    records: List[ResultRecord] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)


class _RecordingSink:
    """Collects records for the run result and forwards them to the caller's sink."""

    def __init__(self, target: Optional[RecordSink]) -> None:
        self.memory = MemorySink()
        self.target = target

    def push_record(self, record: ResultRecord) -> None:
        self.memory.push_record(record)
        if self.target is not None:
            self.target.push_record(record)


@dataclass
class _RunState:
    started: int = 0
    fetched: int = 0
    failed: int = 0
    skipped: int = 0
    budget_logged: bool = False


async def discover_partners_async(
    config: CrawlConfig,
    *,
    sink: Optional[RecordSink] = None,
    options: Optional[FetchOptions] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> CrawlRunResult:
    """
    Crawl from the configured seeds looking for partner program pages.

    Args:
        config: Crawl settings. Validated before any request is made.
        sink: Optional sink receiving each ResultRecord as it is produced.
        options: Fetch options (timeouts, retries, concurrency).
        client: Optional pre-built httpx.AsyncClient. Not closed by this function.

    Returns:
        CrawlRunResult with records, per-URL errors and stats.

    Raises:
        ConfigurationError: If the configuration is invalid (e.g. no seed URLs).
    """
    config.validate()
    opts = options or FetchOptions()

    queue = WorkQueue()
    recording = _RecordingSink(sink)
    controller = TraversalController(config, queue, recording)
    errors: List[Dict[str, str]] = []
    state = _RunState()

    for seed in config.seed_urls:
        queue.add_task(CrawlTask(url=seed, depth=0, is_partner_page=False))

    LOGGER.info(
        "Starting partner discovery: %d seed(s) (max_depth=%d, max_pages=%d)",
        len(config.seed_urls),
        config.max_depth,
        config.max_pages_total,
    )

    async def process(http: httpx.AsyncClient, task: CrawlTask) -> None:
        if state.started >= config.max_pages_total:
            state.skipped += 1
            if not state.budget_logged:
                LOGGER.info("Reached page limit of %d", config.max_pages_total)
                state.budget_logged = True
            return
        state.started += 1

        try:
            page = await fetch_page(http, task.url, opts)
        except FetchError as exc:
            state.failed += 1
            LOGGER.warning("Failed to fetch %s: %s", task.url, exc)
            errors.append({"url": task.url, "error": str(exc), "stage": "fetch"})
            return
        except Exception as exc:
            state.failed += 1
            LOGGER.warning("Failed to parse %s: %s", task.url, exc)
            errors.append({"url": task.url, "error": str(exc), "stage": "parse"})
            return

        state.fetched += 1
        try:
            controller.handle(task, page)
        except Exception as exc:
            LOGGER.warning("Failed to handle %s: %s", task.url, exc)
            errors.append({"url": task.url, "error": str(exc), "stage": "handle"})

    async def worker(http: httpx.AsyncClient) -> None:
        while True:
            task = await queue.get()
            try:
                await process(http, task)
            finally:
                queue.task_done()

    async def run(http: httpx.AsyncClient) -> None:
        workers = [
            asyncio.create_task(worker(http))
            for _ in range(max(1, opts.max_concurrency))
        ]
        try:
            await queue.join()
        finally:
            for task in workers:
                task.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

    if client is not None:
        await run(client)
    else:
        async with build_http_client(opts) as http:
            await run(http)

    records = list(recording.memory.records)
    stats = {
        "pages_fetched": state.fetched,
        "pages_failed": state.failed,
        "partner_pages_found": len(records),
        "tasks_enqueued": queue.added,
        "tasks_skipped": state.skipped,
        "duplicates_dropped": queue.duplicates,
        "error_count": len(errors),
    }
    LOGGER.info(
        "Partner discovery complete: %d record(s) from %d page(s) (%d failed)",
        len(records),
        state.fetched,
        state.failed,
    )
    return CrawlRunResult(records=records, errors=errors, stats=stats)


def discover_partners(
    config: CrawlConfig,
    *,
    sink: Optional[RecordSink] = None,
    options: Optional[FetchOptions] = None,
) -> CrawlRunResult:
    """Synchronous wrapper for discover_partners_async."""
    return asyncio.run(discover_partners_async(config, sink=sink, options=options))
