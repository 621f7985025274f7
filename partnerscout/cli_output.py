"""Output and formatting helpers for CLI commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import ResultRecord


def format_records_markdown(
    records: List[ResultRecord],
    stats: Optional[Dict[str, Any]] = None,
) -> str:
    """Format result records as markdown.

    Example output:
    # Partner programs

    _Found 1 partner page(s)_

    ## 1. https://example.com/partners
    - Source: https://example.com
    - Emails: join@example.com
    - Contact form: yes
    """
    lines = ["# Partner programs", ""]
    lines.append(f"_Found {len(records)} partner page(s)_")
    lines.append("")

    for i, record in enumerate(records, 1):
        lines.append(f"## {i}. {record.partner_page_url}")
        lines.append(f"- Source: {record.source_url or '-'}")
        lines.append(f"- Emails: {record.found_emails}")
        lines.append(f"- Contact form: {'yes' if record.contact_form_exists else 'no'}")
        lines.append("")

    if stats:
        lines.append(
            "**Pages fetched:** {fetched} ({failed} failed, {skipped} skipped)".format(
                fetched=stats.get("pages_fetched", 0),
                failed=stats.get("pages_failed", 0),
                skipped=stats.get("tasks_skipped", 0),
            )
        )
        lines.append("")

    return "\n".join(lines)


def records_to_json(
    records: List[ResultRecord],
    stats: Optional[Dict[str, Any]] = None,
    errors: Optional[List[Dict[str, str]]] = None,
) -> str:
    payload: Dict[str, Any] = {"records": [record.to_dict() for record in records]}
    if stats is not None:
        payload["stats"] = stats
    if errors:
        payload["errors"] = errors
    return json.dumps(payload, indent=2, ensure_ascii=False)


def write_output(
    records: List[ResultRecord],
    output: Optional[str],
    json_output: bool,
    stats: Optional[Dict[str, Any]] = None,
    errors: Optional[List[Dict[str, str]]] = None,
) -> None:
    """Write records to stdout or to ``output``."""
    if json_output:
        text = records_to_json(records, stats, errors)
    else:
        text = format_records_markdown(records, stats)

    if output is None:
        print(text)
        return

    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logging.info("Wrote %d record(s) to %s", len(records), path)
