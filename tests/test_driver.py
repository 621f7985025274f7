"""Tests for partnerscout.driver module."""

from __future__ import annotations

import pytest

import partnerscout
from partnerscout.config import ConfigurationError, CrawlConfig
from partnerscout.driver import CrawlRunResult, discover_partners_async
from partnerscout.fetch import FetchOptions
from partnerscout.sinks import MemorySink

OPTIONS = FetchOptions(max_concurrency=1, retry_backoff=0.0, max_retries=0)


class TestCrawlRunResult:
    def test_defaults(self):
        result = CrawlRunResult()
        assert result.records == []
        assert result.errors == []
        assert result.stats == {}


class TestDiscoverPartnersAsync:
    @pytest.mark.asyncio
    async def test_seed_to_partner_page(self, mock_site):
        pages = {
            "https://example.com": '<a href="/about">About</a><a href="/partners">Affiliate Program</a>',
            "https://example.com/partners": "<p>join@example.com</p><form></form>",
        }
        sink = MemorySink()
        config = CrawlConfig(seed_urls=["https://example.com"])

        async with mock_site(pages) as client:
            result = await discover_partners_async(
                config, sink=sink, options=OPTIONS, client=client
            )

        expected = {
            "source_url": "https://example.com",
            "partner_page_url": "https://example.com/partners",
            "found_emails": "join@example.com",
            "contact_form_exists": True,
        }
        assert [r.to_dict() for r in result.records] == [expected]
        assert [r.to_dict() for r in sink.records] == [expected]
        assert result.stats["pages_fetched"] == 2
        assert result.stats["partner_pages_found"] == 1
        assert result.errors == []

    @pytest.mark.asyncio
    async def test_fan_out_reaches_partner_page_deeper(self, mock_site):
        pages = {
            "https://example.com": '<a href="/company">Company</a>',
            "https://example.com/company": '<a href="/referrals">Refer a friend</a>',
            "https://example.com/referrals": "<p>No email, no form</p>",
        }
        config = CrawlConfig(seed_urls=["https://example.com"], max_depth=4)

        async with mock_site(pages) as client:
            result = await discover_partners_async(config, options=OPTIONS, client=client)

        assert len(result.records) == 1
        record = result.records[0]
        assert record.source_url == "https://example.com/company"
        assert record.partner_page_url == "https://example.com/referrals"
        assert record.found_emails == "Not found"
        assert record.contact_form_exists is False

    @pytest.mark.asyncio
    async def test_depth_ceiling_stops_fan_out(self, mock_site):
        pages = {
            "https://example.com": '<a href="/a">A</a>',
            "https://example.com/a": '<a href="/b">B</a>',
            "https://example.com/b": '<a href="/partners">Partners</a>',
        }
        config = CrawlConfig(seed_urls=["https://example.com"], max_depth=1)

        async with mock_site(pages) as client:
            result = await discover_partners_async(config, options=OPTIONS, client=client)

        assert result.records == []
        assert result.stats["pages_fetched"] == 2

    @pytest.mark.asyncio
    async def test_page_budget(self, mock_site):
        links = "".join(f'<a href="/p{i}">Page {i}</a>' for i in range(10))
        pages = {"https://example.com": links}
        pages.update({f"https://example.com/p{i}": "<p>nothing</p>" for i in range(10)})
        config = CrawlConfig(seed_urls=["https://example.com"], max_pages_total=3)

        async with mock_site(pages) as client:
            result = await discover_partners_async(config, options=OPTIONS, client=client)

        assert result.stats["pages_fetched"] == 3
        assert result.stats["tasks_skipped"] == 8

    @pytest.mark.asyncio
    async def test_fetch_failure_recorded_and_crawl_continues(self, mock_site):
        pages = {
            "https://example.com": '<a href="/gone">Gone</a><a href="/ok">OK</a>',
            "https://example.com/ok": "<p>fine</p>",
        }
        config = CrawlConfig(seed_urls=["https://example.com"])

        async with mock_site(pages) as client:
            result = await discover_partners_async(config, options=OPTIONS, client=client)

        assert result.errors == [
            {"url": "https://example.com/gone", "error": "HTTP 404", "stage": "fetch"}
        ]
        assert result.stats["pages_fetched"] == 2
        assert result.stats["pages_failed"] == 1

    @pytest.mark.asyncio
    async def test_handler_failure_recorded(self, mock_site):
        class BrokenSink:
            def push_record(self, record):
                raise OSError("disk full")

        pages = {
            "https://example.com": '<a href="/partners">Partners</a>',
            "https://example.com/partners": "<p>x@example.com</p>",
        }
        config = CrawlConfig(seed_urls=["https://example.com"])

        async with mock_site(pages) as client:
            result = await discover_partners_async(
                config, sink=BrokenSink(), options=OPTIONS, client=client
            )

        assert result.errors[0]["stage"] == "handle"
        assert result.errors[0]["url"] == "https://example.com/partners"

    @pytest.mark.asyncio
    async def test_multiple_seeds_concurrently(self, mock_site):
        pages = {
            "https://a.example": '<a href="/affiliates">Affiliates</a>',
            "https://a.example/affiliates": "<p>a@a.example</p>",
            "https://b.example": '<a href="/partners">Partners</a>',
            "https://b.example/partners": "<form></form>",
        }
        config = CrawlConfig(seed_urls=["https://a.example", "https://b.example"])

        async with mock_site(pages) as client:
            result = await discover_partners_async(
                config,
                options=FetchOptions(max_concurrency=4, retry_backoff=0.0),
                client=client,
            )

        found = sorted(r.partner_page_url for r in result.records)
        assert found == ["https://a.example/affiliates", "https://b.example/partners"]

    @pytest.mark.asyncio
    async def test_empty_seeds_abort_before_fetching(self):
        requested = []

        class Spy:
            async def get(self, url):
                requested.append(url)

        with pytest.raises(ConfigurationError):
            await discover_partners_async(CrawlConfig(), options=OPTIONS, client=Spy())
        assert requested == []


class TestDiscoverPartnersSync:
    def test_wrapper_forwards(self, monkeypatch: pytest.MonkeyPatch):
        captured = {}

        async def fake(config, *, sink=None, options=None, client=None):
            captured["config"] = config
            captured["options"] = options
            return CrawlRunResult()

        monkeypatch.setattr("partnerscout.driver.discover_partners_async", fake)
        config = CrawlConfig(seed_urls=["https://example.com"])

        result = partnerscout.discover_partners(config, options=OPTIONS)

        assert result.records == []
        assert captured["config"] is config
        assert captured["options"] is OPTIONS
