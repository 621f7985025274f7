"""Contact extraction for pages identified as partner programs."""

from __future__ import annotations

import re
from typing import FrozenSet, Optional

from .models import ParsedPage, ResultRecord

# Matches only start where a run of address characters starts.
EMAIL_RE = re.compile(
    r"(?<![a-z0-9._-])[a-z0-9._-]+@[a-z0-9._-]+\.[a-z0-9._-]+",
    re.IGNORECASE,
)


def find_emails(markup: str) -> FrozenSet[str]:
    """Every distinct email-looking substring of ``markup``."""
    return frozenset(EMAIL_RE.findall(markup or ""))


def extract(
    page: ParsedPage,
    partner_page_url: str,
    source_url: Optional[str],
) -> ResultRecord:
    """Build the result record for a partner page. Never raises.

    Takes the parsed page rather than bare markup: emails are scanned from
    ``page.markup`` (the full serialized document, attributes included), while
    ``contact_form_exists`` comes from the structural ``page.has_form`` check
    made when the HTML was parsed.
    """
    return ResultRecord(
        source_url=source_url,
        partner_page_url=partner_page_url,
        emails=find_emails(page.markup),
        contact_form_exists=page.has_form,
    )
