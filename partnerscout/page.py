"""Turn fetched HTML into ParsedPage instances."""

from __future__ import annotations

from typing import List, Optional

from bs4 import BeautifulSoup

from .models import LinkCandidate, ParsedPage


def _anchor_href(anchor) -> str:
    href = anchor.get("href")
    if isinstance(href, list):
        href = " ".join(href)
    return href or ""


def build_page(url: str, html: str, *, status_code: Optional[int] = None) -> ParsedPage:
    """Parse ``html`` and collect anchors (document order) and form presence."""
    soup = BeautifulSoup(html or "", "html.parser")
    links: List[LinkCandidate] = [
        LinkCandidate(visible_text=anchor.get_text(), href_raw=_anchor_href(anchor))
        for anchor in soup.find_all("a")
    ]
    return ParsedPage(
        url=url,
        markup=str(soup),
        links=links,
        has_form=soup.find("form") is not None,
        status_code=status_code,
    )
