"""Affiliate/partner program discovery.

Crawls websites from seed URLs, follows the first link that looks like a
partner or affiliate program, and records the contact signals found there
(emails and whether a contact form exists).

Example usage:

    from partnerscout import build_crawl_config, discover_partners

    config = build_crawl_config({"startUrls": [{"url": "https://example.com"}]})
    result = discover_partners(config)
    for record in result.records:
        print(record.partner_page_url, record.found_emails)

    # Decide a single page without any I/O
    from partnerscout import CrawlTask, decide
    decision = decide(CrawlTask(url="https://example.com"), page, config)
"""

from __future__ import annotations

from .classifier import classify
from .config import ConfigurationError, CrawlConfig, build_crawl_config
from .driver import CrawlRunResult, discover_partners, discover_partners_async
from .extractor import extract
from .fetch import FetchError, FetchOptions
from .models import CrawlTask, LinkCandidate, ParsedPage, ResultRecord
from .page import build_page
from .queue import WorkQueue
from .sinks import JsonlSink, MemorySink
from .traversal import TraversalController, TraversalDecision, decide

__all__ = [
    # Data model
    "CrawlTask",
    "LinkCandidate",
    "ParsedPage",
    "ResultRecord",
    # Configuration
    "CrawlConfig",
    "ConfigurationError",
    "build_crawl_config",
    # Decision logic
    "classify",
    "extract",
    "decide",
    "TraversalController",
    "TraversalDecision",
    # Driver and collaborators
    "build_page",
    "FetchError",
    "FetchOptions",
    "WorkQueue",
    "MemorySink",
    "JsonlSink",
    "CrawlRunResult",
    "discover_partners",
    "discover_partners_async",
    # MCP Server
    "mcp",
]


def get_mcp_server():
    """Get the MCP server instance (lazy import to avoid dependency if not needed)."""
    from .mcp_server import mcp

    return mcp


# Lazy import for mcp to avoid requiring fastmcp if not used
def __getattr__(name):
    if name == "mcp":
        from .mcp_server import mcp

        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
