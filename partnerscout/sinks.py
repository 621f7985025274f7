"""Append-only destinations for result records."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Union

from .models import ResultRecord

LOGGER = logging.getLogger(__name__)


class MemorySink:
    """Keeps records in memory, in arrival order."""

    def __init__(self) -> None:
        self.records: List[ResultRecord] = []

    def push_record(self, record: ResultRecord) -> None:
        self.records.append(record)


class JsonlSink:
    """Appends one JSON object per record to a file."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.count = 0

    def push_record(self, record: ResultRecord) -> None:
        with open(self.path, "a", encoding="utf-8") as fh:
            fh.write(json.dumps(record.to_dict(), ensure_ascii=False) + "\n")
        self.count += 1
        LOGGER.debug("Wrote record for %s to %s", record.partner_page_url, self.path)
