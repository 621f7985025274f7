"""Data structures shared by the crawl driver and the traversal logic."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional

NO_EMAILS_FOUND = "Not found"


@dataclass(frozen=True, slots=True)
class CrawlTask:
    """A single unit of work for the fetch cycle.

    ``depth`` counts link hops from the seed. Follow-up tasks always carry
    ``parent.depth + 1``.
    """

    url: str
    depth: int = 0
    is_partner_page: bool = False
    source_url: Optional[str] = None

    def follow_up(self, url: str, *, is_partner_page: bool) -> "CrawlTask":
        return CrawlTask(
            url=url,
            depth=self.depth + 1,
            is_partner_page=is_partner_page,
            source_url=self.url if is_partner_page else None,
        )


@dataclass(frozen=True, slots=True)
class LinkCandidate:
    """Anchor element inspected while classifying a page."""

    visible_text: str
    href_raw: str = ""


@dataclass(slots=True)
class ParsedPage:
    """Fetched page reduced to what the traversal logic needs."""

    url: str
    markup: str
    links: List[LinkCandidate] = field(default_factory=list)
    has_form: bool = False
    status_code: Optional[int] = None


@dataclass(frozen=True, slots=True)
class ResultRecord:
    """Contact signals extracted from a partner page."""

    source_url: Optional[str]
    partner_page_url: str
    emails: FrozenSet[str] = frozenset()
    contact_form_exists: bool = False

    @property
    def found_emails(self) -> str:
        """Display form of the email set."""
        if not self.emails:
            return NO_EMAILS_FOUND
        return ", ".join(sorted(self.emails))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_url": self.source_url,
            "partner_page_url": self.partner_page_url,
            "found_emails": self.found_emails,
            "contact_form_exists": self.contact_form_exists,
        }
