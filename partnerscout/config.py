"""Crawl configuration: defaults, validation and input loading."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import urlsplit

LOGGER = logging.getLogger(__name__)

# Words searched for in anchor text and href
DEFAULT_KEYWORDS: Tuple[str, ...] = (
    "affiliate",
    "partner",
    "program",
    "join",
    "referral",
    "collab",
    "colabora",
    "monetize",
    "embassador",
    "socios",
    "developers",
    "integrations",
)

# Communities and social networks, not direct partner programs
DEFAULT_IGNORED_DOMAINS: Tuple[str, ...] = (
    "twitter.com",
    "facebook.com",
    "discord.gg",
    "instagram.com",
    "linkedin.com",
    "youtube.com",
    "t.me",
    "reddit.com",
    "github.com",
)

DEFAULT_MAX_DEPTH = 4
DEFAULT_MAX_PAGES = 50
DEFAULT_ENQUEUE_STRATEGY = "same-hostname"

ENV_MAX_DEPTH = "PARTNERSCOUT_MAX_DEPTH"
ENV_MAX_PAGES = "PARTNERSCOUT_MAX_PAGES"
ENV_CONCURRENCY = "PARTNERSCOUT_CONCURRENCY"
ENV_TIMEOUT = "PARTNERSCOUT_TIMEOUT"
ENV_USER_AGENT = "PARTNERSCOUT_USER_AGENT"


class ConfigurationError(ValueError):
    """Raised when the crawl cannot start because its input is unusable."""


def env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        LOGGER.warning("Ignoring invalid %s=%r; using %d.", name, raw, default)
        return default


def env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        LOGGER.warning("Ignoring invalid %s=%r; using %s.", name, raw, default)
        return default


def _normalize_terms(values: Iterable[str]) -> Tuple[str, ...]:
    seen: List[str] = []
    for value in values:
        term = str(value or "").strip().lower()
        if term and term not in seen:
            seen.append(term)
    return tuple(seen)


@dataclass
class CrawlConfig:
    """Read-only settings consulted by the traversal logic and the driver."""

    seed_urls: List[str] = field(default_factory=list)
    max_depth: int = DEFAULT_MAX_DEPTH
    max_pages_total: int = DEFAULT_MAX_PAGES
    keywords: Tuple[str, ...] = DEFAULT_KEYWORDS
    ignored_domains: Tuple[str, ...] = DEFAULT_IGNORED_DOMAINS
    enqueue_strategy: str = DEFAULT_ENQUEUE_STRATEGY

    def __post_init__(self) -> None:
        self.seed_urls = [str(url).strip() for url in self.seed_urls if str(url).strip()]
        self.keywords = _normalize_terms(self.keywords)
        self.ignored_domains = _normalize_terms(self.ignored_domains)

    def validate(self) -> "CrawlConfig":
        """Fail fast on input the crawl cannot run with."""
        from .strategy import EnqueueStrategy

        if not self.seed_urls:
            raise ConfigurationError("At least one start URL must be provided.")
        for url in self.seed_urls:
            parts = urlsplit(url)
            if parts.scheme not in ("http", "https") or not parts.netloc:
                raise ConfigurationError(f"Start URL is not an absolute http(s) URL: {url}")
        if self.max_depth < 0:
            raise ConfigurationError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.max_pages_total < 1:
            raise ConfigurationError(
                f"max_pages_total must be >= 1, got {self.max_pages_total}"
            )
        try:
            EnqueueStrategy(self.enqueue_strategy)
        except ValueError:
            raise ConfigurationError(
                f"Unknown enqueue strategy: {self.enqueue_strategy}"
            ) from None
        return self


def _seed_from_entry(entry: Any) -> Optional[str]:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, Mapping):
        url = entry.get("url")
        return str(url) if url else None
    return None


def build_crawl_config(
    input_data: Optional[Mapping[str, Any]] = None,
    **overrides: Any,
) -> CrawlConfig:
    """
    Build a validated CrawlConfig from an actor-style input record.

    Args:
        input_data: Mapping shaped like ``{"startUrls": [{"url": ...}], "maxDepth": 4,
            "maxRequestsPerCrawl": 50, "keywords": [...], "ignoredDomains": [...],
            "enqueueStrategy": "same-hostname"}``. Seed entries may also be plain strings.
        **overrides: CrawlConfig field values that take precedence over the input.
            ``None`` values are ignored.

    Returns:
        A validated CrawlConfig.

    Raises:
        ConfigurationError: If no start URLs are given or a value is invalid.
    """
    data = dict(input_data or {})
    values: dict = {
        "max_depth": env_int(ENV_MAX_DEPTH, DEFAULT_MAX_DEPTH),
        "max_pages_total": env_int(ENV_MAX_PAGES, DEFAULT_MAX_PAGES),
    }

    start_urls = data.get("startUrls") or []
    if not isinstance(start_urls, (list, tuple)):
        raise ConfigurationError("startUrls must be a list of {\"url\": ...} objects.")
    values["seed_urls"] = [
        seed for seed in (_seed_from_entry(entry) for entry in start_urls) if seed
    ]

    for key, name in (
        ("maxDepth", "max_depth"),
        ("maxRequestsPerCrawl", "max_pages_total"),
    ):
        if data.get(key) is not None:
            try:
                values[name] = int(data[key])
            except (TypeError, ValueError):
                raise ConfigurationError(f"{key} must be an integer") from None

    if data.get("keywords"):
        values["keywords"] = tuple(data["keywords"])
    if data.get("ignoredDomains"):
        values["ignored_domains"] = tuple(data["ignoredDomains"])
    if data.get("enqueueStrategy"):
        values["enqueue_strategy"] = str(data["enqueueStrategy"])

    values.update({key: value for key, value in overrides.items() if value is not None})
    return CrawlConfig(**values).validate()
