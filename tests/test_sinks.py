"""Tests for partnerscout.sinks module."""

from __future__ import annotations

import json

from partnerscout.models import ResultRecord
from partnerscout.sinks import JsonlSink, MemorySink


def _record(url: str) -> ResultRecord:
    return ResultRecord(
        source_url="https://example.com",
        partner_page_url=url,
        emails=frozenset({"join@example.com"}),
        contact_form_exists=True,
    )


class TestMemorySink:
    def test_collects_in_order(self):
        sink = MemorySink()
        sink.push_record(_record("https://example.com/a"))
        sink.push_record(_record("https://example.com/b"))
        assert [r.partner_page_url for r in sink.records] == [
            "https://example.com/a",
            "https://example.com/b",
        ]


class TestJsonlSink:
    def test_appends_lines(self, tmp_path):
        path = tmp_path / "out" / "records.jsonl"
        sink = JsonlSink(path)
        sink.push_record(_record("https://example.com/a"))
        sink.push_record(_record("https://example.com/b"))

        lines = path.read_text(encoding="utf-8").splitlines()
        assert sink.count == 2
        assert [json.loads(line)["partner_page_url"] for line in lines] == [
            "https://example.com/a",
            "https://example.com/b",
        ]
        assert json.loads(lines[0])["contact_form_exists"] is True

    def test_existing_file_is_appended(self, tmp_path):
        path = tmp_path / "records.jsonl"
        path.write_text('{"existing": true}\n', encoding="utf-8")
        JsonlSink(path).push_record(_record("https://example.com/a"))
        assert len(path.read_text(encoding="utf-8").splitlines()) == 2
