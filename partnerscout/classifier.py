"""Keyword heuristic that picks the partner-program link of a page."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence
from urllib.parse import urljoin, urlsplit

from .config import CrawlConfig
from .models import LinkCandidate

LOGGER = logging.getLogger(__name__)


def resolve_href(href: str, base_url: str) -> Optional[str]:
    """Resolve ``href`` against ``base_url``; None when the result is not a valid URL."""
    try:
        resolved = urljoin(base_url, (href or "").strip())
        parts = urlsplit(resolved)
        # Accessing the port validates it
        parts.port
    except ValueError:
        return None
    if not parts.scheme:
        return None
    if parts.scheme in ("http", "https") and not parts.hostname:
        return None
    return resolved


def is_ignored(href: str, resolved: str, ignored_domains: Iterable[str]) -> bool:
    """Substring match of the raw href or the resolved host against ignored domains."""
    raw = (href or "").lower()
    host = (urlsplit(resolved).hostname or "").lower()
    return any(domain in raw or domain in host for domain in ignored_domains)


def matches_keywords(text: str, href: str, keywords: Iterable[str]) -> bool:
    link_text = (text or "").lower()
    link_href = (href or "").lower()
    return any(keyword in link_text or keyword in link_href for keyword in keywords)


def classify(
    links: Sequence[LinkCandidate],
    page_url: str,
    config: CrawlConfig,
) -> Optional[str]:
    """
    Return the resolved URL of the first partner-looking link, in document order.

    Links whose href cannot be resolved are skipped. Links pointing at an
    ignored domain never match, whatever their text says.
    """
    for link in links:
        href = link.href_raw or ""
        resolved = resolve_href(href, page_url)
        if resolved is None:
            LOGGER.debug("Skipping unresolvable href %r on %s", href, page_url)
            continue
        if is_ignored(href, resolved, config.ignored_domains):
            continue
        if matches_keywords(link.visible_text, href, config.keywords):
            return resolved
    return None
