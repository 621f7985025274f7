"""HTTP fetching with retries for the crawl driver."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Optional

import httpx

from .config import ENV_CONCURRENCY, ENV_TIMEOUT, ENV_USER_AGENT, env_float, env_int
from .models import ParsedPage
from .page import build_page

LOGGER = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)

RETRYABLE_STATUS = {408, 429, 500, 502, 503, 504}
HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


@dataclass
class FetchOptions:
    """Options for the fetch layer."""

    timeout: float = 30.0
    max_retries: int = 3
    max_concurrency: int = 5
    retry_backoff: float = 1.0
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls) -> "FetchOptions":
        return cls(
            timeout=env_float(ENV_TIMEOUT, 30.0),
            max_concurrency=max(1, env_int(ENV_CONCURRENCY, 5)),
            user_agent=os.getenv(ENV_USER_AGENT) or DEFAULT_USER_AGENT,
        )


class FetchError(Exception):
    """Raised when a page cannot be fetched or is not HTML."""

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


def build_http_client(options: Optional[FetchOptions] = None) -> httpx.AsyncClient:
    opts = options or FetchOptions()
    return httpx.AsyncClient(
        headers={
            "User-Agent": opts.user_agent,
            "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
        },
        timeout=opts.timeout,
        follow_redirects=True,
    )


async def _get_once(client: httpx.AsyncClient, url: str) -> ParsedPage:
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(
            f"HTTP {exc.response.status_code}",
            url=url,
            status_code=exc.response.status_code,
        ) from exc
    except httpx.RequestError as exc:
        raise FetchError(f"Request failed: {exc}", url=url) from exc

    content_type = response.headers.get("content-type", "").lower()
    if content_type and not content_type.startswith(HTML_CONTENT_TYPES):
        raise FetchError(
            f"Unsupported content type: {content_type}",
            url=url,
            status_code=response.status_code,
        )

    return build_page(str(response.url), response.text, status_code=response.status_code)


def _is_retryable(exc: FetchError) -> bool:
    if exc.status_code is None:
        return isinstance(exc.__cause__, httpx.RequestError)
    return exc.status_code in RETRYABLE_STATUS


async def fetch_page(
    client: httpx.AsyncClient,
    url: str,
    options: Optional[FetchOptions] = None,
) -> ParsedPage:
    """
    Fetch and parse ``url``.

    Transport errors and HTTP 408/429/5xx are retried up to
    ``options.max_retries`` times with linear backoff.

    Raises:
        FetchError: When the page still cannot be fetched, returns another
            error status, or is not HTML.
    """
    opts = options or FetchOptions()
    attempt = 0
    while True:
        try:
            return await _get_once(client, url)
        except FetchError as exc:
            if attempt >= opts.max_retries or not _is_retryable(exc):
                raise
            attempt += 1
            LOGGER.debug(
                "Retrying %s (%d/%d) after: %s", url, attempt, opts.max_retries, exc
            )
            await asyncio.sleep(opts.retry_backoff * attempt)
