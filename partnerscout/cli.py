"""Command-line interface for partner program discovery."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import shutil
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .cli_config import load_config

# Configuration directory for global CLI usage
CONFIG_DIR = Path.home() / ".config" / "partnerscout"
CONFIG_ENV_FILE = CONFIG_DIR / ".env"


def _load_config() -> None:
    load_config(
        config_env_file=CONFIG_ENV_FILE,
        cwd=Path.cwd(),
        load_env=load_dotenv,
        copy_file=shutil.copy,
    )


_load_config()

from .config import ConfigurationError, CrawlConfig, build_crawl_config
from .cli_output import write_output
from .fetch import FetchOptions
from .sinks import JsonlSink
from .strategy import EnqueueStrategy

EXIT_CONFIG_ERROR = 2


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="partnerscout",
        description="Find affiliate/partner program pages and their contact details.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  # Crawl one site, markdown summary to stdout
  partnerscout https://example.com

  # Several seeds, JSON output
  partnerscout https://a.example https://b.example --json

  # Actor-style input file ({"startUrls": [{"url": "..."}], ...})
  partnerscout --input INPUT.json -o results.json --json

  # Stream records as JSON lines while crawling
  partnerscout https://example.com -o results.jsonl

  # Shallower crawl with extra keywords
  partnerscout https://example.com --max-depth 2 --keyword resellers
""",
    )

    parser.add_argument(
        "urls",
        nargs="*",
        help="Seed URL(s) to crawl",
    )
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="JSON input file with startUrls and optional crawl settings",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum link hops from a seed (default: 4)",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="Maximum pages fetched per run (default: 50)",
    )
    parser.add_argument(
        "--keyword",
        action="append",
        dest="keywords",
        default=None,
        help="Keyword marking a partner link (repeatable; replaces the defaults)",
    )
    parser.add_argument(
        "--ignore-domain",
        action="append",
        dest="ignored_domains",
        default=None,
        help="Domain never treated as a partner link (repeatable; replaces the defaults)",
    )
    parser.add_argument(
        "--enqueue-strategy",
        type=str,
        choices=[strategy.value for strategy in EnqueueStrategy],
        default=None,
        help="Which links to follow when no partner link is found (default: same-hostname)",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Parallel fetches (default: 5)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: 30)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output file; a .jsonl path streams one record per line",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON (includes stats and errors)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args(argv)


def _read_input_file(path: str) -> Dict[str, Any]:
    try:
        with open(Path(path).expanduser(), "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        raise ConfigurationError(f"Input file not found: {path}") from None
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Input file is not valid JSON: {exc}") from None
    if not isinstance(data, dict):
        raise ConfigurationError("Input file must contain a JSON object")
    return data


def _build_config(args: argparse.Namespace) -> CrawlConfig:
    data = _read_input_file(args.input) if args.input else {}
    if args.urls:
        data["startUrls"] = list(data.get("startUrls") or []) + [
            {"url": url} for url in args.urls
        ]
    return build_crawl_config(
        data,
        max_depth=args.max_depth,
        max_pages_total=args.max_pages,
        keywords=tuple(args.keywords) if args.keywords else None,
        ignored_domains=tuple(args.ignored_domains) if args.ignored_domains else None,
        enqueue_strategy=args.enqueue_strategy,
    )


def _build_fetch_options(args: argparse.Namespace) -> FetchOptions:
    options = FetchOptions.from_env()
    if args.concurrency is not None:
        options.max_concurrency = max(1, args.concurrency)
    if args.timeout is not None:
        options.timeout = args.timeout
    return options


async def _run_async(args: argparse.Namespace, config: CrawlConfig) -> int:
    """Main async entry point for a discovery run."""
    from . import discover_partners_async

    options = _build_fetch_options(args)
    streaming = bool(args.output and args.output.endswith(".jsonl"))
    sink = JsonlSink(args.output) if streaming else None

    result = await discover_partners_async(config, sink=sink, options=options)

    for error in result.errors:
        logging.warning("Failed: %s - %s", error["url"], error["error"])

    if streaming:
        logging.info("Wrote %d record(s) to %s", len(result.records), args.output)
    else:
        write_output(
            result.records,
            args.output,
            args.json_output,
            stats=result.stats,
            errors=result.errors,
        )

    if result.stats.get("pages_fetched", 0) == 0:
        logging.error("No page could be fetched")
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for the partnerscout command."""
    args = _parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = _build_config(args)
    except ConfigurationError as exc:
        logging.error("Configuration error: %s", exc)
        return EXIT_CONFIG_ERROR

    try:
        return asyncio.run(_run_async(args, config))
    except KeyboardInterrupt:
        logging.info("Interrupted")
        return 130
    except Exception as exc:
        logging.error("Error: %s", exc)
        if args.verbose:
            logging.exception("Full traceback:")
        return 1


if __name__ == "__main__":
    sys.exit(main())
