"""Scope rules deciding which outbound links a fan-out may enqueue."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Optional
from urllib.parse import urlsplit

import tldextract


class EnqueueStrategy(str, Enum):
    """Which outbound links qualify for fan-out, relative to the page URL."""

    all = "all"
    same_hostname = "same-hostname"
    same_domain = "same-domain"
    same_origin = "same-origin"


def _normalize_host(host: Optional[str]) -> str:
    """Normalize hostname by removing port and lowercasing."""
    if not host:
        return ""
    return host.split(":")[0].lower()


@lru_cache(maxsize=256)
def _registrable_domain(host: str) -> Optional[str]:
    """Extract the registrable domain from a hostname."""
    if not host:
        return None
    extracted = tldextract.extract(host)
    if not extracted.domain or not extracted.suffix:
        return host
    domain = ".".join(part for part in (extracted.domain, extracted.suffix) if part)
    return domain or host


def _origin(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme.lower()}://{parts.netloc.lower()}"


def in_scope(candidate: str, page_url: str, strategy: str) -> bool:
    """Return True when ``candidate`` may be enqueued from ``page_url``."""
    mode = EnqueueStrategy(strategy)
    if mode is EnqueueStrategy.all:
        return True
    if mode is EnqueueStrategy.same_origin:
        return _origin(candidate) == _origin(page_url)

    candidate_host = _normalize_host(urlsplit(candidate).netloc)
    page_host = _normalize_host(urlsplit(page_url).netloc)
    if mode is EnqueueStrategy.same_hostname:
        return bool(page_host) and candidate_host == page_host
    page_domain = _registrable_domain(page_host)
    return page_domain is not None and _registrable_domain(candidate_host) == page_domain
