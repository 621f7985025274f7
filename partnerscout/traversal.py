"""Per-page traversal decisions: extract and stop, follow the partner link, or fan out.

A task is in one of two states. Partner pages (``is_partner_page=True``) are
extracted and end their path. Every other page is probed: the first
partner-looking link is followed on its own, otherwise all in-scope links are
followed while the depth ceiling allows it.

The decision itself is the pure function :func:`decide`. The
:class:`TraversalController` applies a decision to the queue and sink it is
given at construction time, so it holds no state of its own and can be called
concurrently for different tasks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple

from .classifier import classify, resolve_href
from .config import CrawlConfig
from .extractor import extract
from .models import CrawlTask, ParsedPage, ResultRecord
from .strategy import in_scope

LOGGER = logging.getLogger(__name__)


class TaskQueue(Protocol):
    def add_task(self, task: CrawlTask) -> bool: ...


class RecordSink(Protocol):
    def push_record(self, record: ResultRecord) -> None: ...


@dataclass(frozen=True)
class TraversalDecision:
    """Outcome of visiting one task."""

    record: Optional[ResultRecord] = None
    follow_ups: Tuple[CrawlTask, ...] = ()
    partner_url: Optional[str] = None


def _fan_out(task: CrawlTask, page: ParsedPage, config: CrawlConfig) -> List[CrawlTask]:
    base_url = page.url or task.url
    tasks: List[CrawlTask] = []
    for link in page.links:
        resolved = resolve_href(link.href_raw, base_url)
        if resolved is None or not resolved.startswith(("http://", "https://")):
            continue
        if not in_scope(resolved, base_url, config.enqueue_strategy):
            continue
        tasks.append(task.follow_up(resolved.split("#", 1)[0], is_partner_page=False))
    return tasks


def decide(task: CrawlTask, page: ParsedPage, config: CrawlConfig) -> TraversalDecision:
    """Decide what visiting ``task`` produces. Pure; touches no queue or sink."""
    if task.is_partner_page:
        return TraversalDecision(record=extract(page, task.url, task.source_url))

    partner_url = classify(page.links, task.url, config)
    if partner_url:
        return TraversalDecision(
            follow_ups=(task.follow_up(partner_url, is_partner_page=True),),
            partner_url=partner_url,
        )

    if task.depth < config.max_depth:
        return TraversalDecision(follow_ups=tuple(_fan_out(task, page, config)))

    return TraversalDecision()


class TraversalController:
    """Applies traversal decisions to an injected work queue and result sink."""

    def __init__(self, config: CrawlConfig, queue: TaskQueue, sink: RecordSink) -> None:
        self.config = config
        self.queue = queue
        self.sink = sink

    def handle(self, task: CrawlTask, page: ParsedPage) -> TraversalDecision:
        if task.is_partner_page:
            LOGGER.info("Extracting contact data from %s", task.url)
        else:
            LOGGER.info("Processing %s (depth %d)", task.url, task.depth)

        decision = decide(task, page, self.config)

        if decision.record is not None:
            self.sink.push_record(decision.record)
        if decision.partner_url:
            LOGGER.info("Found partner link on %s: %s", task.url, decision.partner_url)

        added = sum(1 for follow_up in decision.follow_ups if self.queue.add_task(follow_up))
        if decision.follow_ups:
            LOGGER.debug(
                "Enqueued %d/%d follow-up task(s) from %s",
                added,
                len(decision.follow_ups),
                task.url,
            )
        return decision
