"""Tests for partnerscout.models module."""

from __future__ import annotations

import dataclasses

import pytest

from partnerscout.models import NO_EMAILS_FOUND, CrawlTask, ParsedPage, ResultRecord


class TestCrawlTask:
    def test_defaults(self):
        task = CrawlTask(url="https://example.com")
        assert task.depth == 0
        assert task.is_partner_page is False
        assert task.source_url is None

    def test_immutable(self):
        task = CrawlTask(url="https://example.com")
        with pytest.raises(dataclasses.FrozenInstanceError):
            task.depth = 3

    def test_partner_follow_up(self):
        task = CrawlTask(url="https://example.com", depth=2)
        follow = task.follow_up("https://example.com/partners", is_partner_page=True)
        assert follow == CrawlTask(
            url="https://example.com/partners",
            depth=3,
            is_partner_page=True,
            source_url="https://example.com",
        )

    def test_probe_follow_up(self):
        follow = CrawlTask(url="https://example.com").follow_up(
            "https://example.com/a", is_partner_page=False
        )
        assert follow.depth == 1
        assert follow.is_partner_page is False
        assert follow.source_url is None


class TestParsedPage:
    def test_defaults(self):
        page = ParsedPage(url="u", markup="")
        assert page.links == []
        assert page.has_form is False
        assert page.status_code is None


class TestResultRecord:
    def test_to_dict(self):
        record = ResultRecord(
            source_url="https://example.com",
            partner_page_url="https://example.com/partners",
            emails=frozenset({"b@example.com", "a@example.com"}),
            contact_form_exists=False,
        )
        assert record.to_dict() == {
            "source_url": "https://example.com",
            "partner_page_url": "https://example.com/partners",
            "found_emails": "a@example.com, b@example.com",
            "contact_form_exists": False,
        }

    def test_sentinel_when_empty(self):
        record = ResultRecord(source_url=None, partner_page_url="https://e.com/p")
        assert record.found_emails == NO_EMAILS_FOUND
