"""Shared fixtures for partnerscout tests."""

from __future__ import annotations

from typing import Callable, Dict, List

import httpx
import pytest

from partnerscout.config import ENV_MAX_DEPTH, ENV_MAX_PAGES, CrawlConfig
from partnerscout.models import CrawlTask
from partnerscout.page import build_page


class FakeQueue:
    """Records every task offered; accepts each URL once."""

    def __init__(self) -> None:
        self.tasks: List[CrawlTask] = []

    def add_task(self, task: CrawlTask) -> bool:
        if any(existing.url == task.url for existing in self.tasks):
            return False
        self.tasks.append(task)
        return True


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(ENV_MAX_DEPTH, raising=False)
    monkeypatch.delenv(ENV_MAX_PAGES, raising=False)


@pytest.fixture
def config() -> CrawlConfig:
    return CrawlConfig(seed_urls=["https://example.com"])


@pytest.fixture
def fake_queue() -> FakeQueue:
    return FakeQueue()


@pytest.fixture
def make_page():
    def _make(url: str, body: str):
        return build_page(url, f"<html><body>{body}</body></html>")

    return _make


@pytest.fixture
def mock_site():
    """Factory for httpx clients serving ``pages`` (url -> body html); 404 otherwise."""

    def _client(pages: Dict[str, str]) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(_html_handler(pages)),
            follow_redirects=True,
        )

    return _client


def _html_handler(pages: Dict[str, str]) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url not in pages:
            url = url.rstrip("/")
        if url not in pages:
            return httpx.Response(404, text="not found")
        return httpx.Response(
            200,
            headers={"content-type": "text/html; charset=utf-8"},
            text=f"<html><body>{pages[url]}</body></html>",
        )

    return handler
