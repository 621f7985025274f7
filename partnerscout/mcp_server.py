"""MCP server exposing partner program discovery as a tool.

Supports both STDIO and HTTP transports.

Usage:
    # STDIO (for desktop MCP clients)
    python -m partnerscout.mcp_server

    # HTTP (for remote access)
    python -m partnerscout.mcp_server --transport http --port 8000

Environment Variables:
    PARTNERSCOUT_MAX_DEPTH: Default crawl depth (default: 4)
    PARTNERSCOUT_MAX_PAGES: Default page budget per call (default: 50)
    PARTNERSCOUT_CONCURRENCY: Parallel fetches (default: 5)
    PARTNERSCOUT_TIMEOUT: Per-request timeout in seconds (default: 30)
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP

from .cli_output import format_records_markdown
from .config import ConfigurationError, build_crawl_config
from .fetch import FetchOptions

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
LOGGER = logging.getLogger(__name__)

# Load .env before reading environment variables
load_dotenv()

mcp = FastMCP(
    name="Partner Program Finder",
    instructions="""
    Finds affiliate/partner program pages on websites.

    Tool:
       - find_partner_programs: crawl from seed URLs, follow the first link
         that looks like a partner program, and report the emails and contact
         form found on that page.

    Output formats:
    - markdown: one section per partner page (default)
    - json: records plus crawl statistics and per-URL errors
    """,
)


class OutputFormat(str, Enum):
    """Output format for discovery results."""

    markdown = "markdown"
    json = "json"


def _format_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


async def find_partner_programs(
    urls: List[str],
    max_depth: Optional[int] = None,
    max_pages: Optional[int] = None,
    keywords: Optional[List[str]] = None,
    ignored_domains: Optional[List[str]] = None,
    output_format: str = "markdown",
):
    """
    Crawl websites looking for affiliate/partner program pages.

    Args:
        urls: Seed URLs to start from
        max_depth: Maximum link hops from a seed (default: 4)
        max_pages: Maximum pages fetched in this call (default: 50)
        keywords: Keywords marking a partner link (default: built-in list)
        ignored_domains: Domains never treated as partner links (default: social networks)
        output_format: "markdown" (default) or "json"

    Returns:
        Partner pages with their emails and contact-form presence.

    Examples:
        find_partner_programs(urls=["https://example.com"])
        find_partner_programs(urls=["https://example.com"], max_depth=2, output_format="json")
    """
    from . import discover_partners_async

    try:
        fmt = OutputFormat(output_format.lower())
    except ValueError:
        fmt = OutputFormat.markdown

    try:
        config = build_crawl_config(
            {"startUrls": [{"url": url} for url in urls or []]},
            max_depth=max_depth,
            max_pages_total=max_pages,
            keywords=tuple(keywords) if keywords else None,
            ignored_domains=tuple(ignored_domains) if ignored_domains else None,
        )
    except ConfigurationError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return json.dumps({"error": str(exc), "urls": urls}, ensure_ascii=False)

    LOGGER.info("Looking for partner programs from %d seed(s)...", len(config.seed_urls))
    result = await discover_partners_async(config, options=FetchOptions.from_env())

    if fmt == OutputFormat.json:
        return json.dumps(
            {
                "crawled_at": _format_timestamp(),
                "records": [record.to_dict() for record in result.records],
                "stats": result.stats,
                "errors": result.errors,
            },
            indent=2,
            ensure_ascii=False,
        )
    return format_records_markdown(result.records, result.stats)


mcp.tool(find_partner_programs)


def main():
    """CLI entry point for running the MCP server."""
    parser = argparse.ArgumentParser(
        description="Run the partner program finder MCP server.",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to for HTTP transport (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to for HTTP transport (default: 8000)",
    )

    args = parser.parse_args()

    if args.transport == "http":
        LOGGER.info("Starting MCP server on http://%s:%d/mcp", args.host, args.port)
        mcp.run(transport="http", host=args.host, port=args.port)
    else:
        LOGGER.info("Starting MCP server with STDIO transport")
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
