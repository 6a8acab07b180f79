from __future__ import annotations

import re
from typing import List, Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup

_TEXT_URL = re.compile(r"(https?://\S+)")


def resolve_href(href: str, base_url: Optional[str] = None) -> str:
    """Resolve an anchor href the way a browser reports ``a.href``."""
    href = href.strip()
    try:
        if base_url:
            href = urljoin(base_url, href)
        parts = urlsplit(href)
    except ValueError:
        return href
    if parts.scheme.lower() in {"http", "https"} and parts.netloc and not parts.path:
        return urlunsplit((parts.scheme, parts.netloc, "/", parts.query, parts.fragment))
    return href


def extract_links(html: Optional[str], text: Optional[str], base_url: Optional[str] = None) -> List[str]:
    """Collect anchor hrefs from the HTML body, then URLs from the text body.

    Duplicates are dropped; discovery order is kept.
    """
    found: dict[str, None] = {}
    if html:
        soup = BeautifulSoup(html, "html.parser")
        for anchor in soup.find_all("a", href=True):
            found.setdefault(resolve_href(anchor["href"], base_url), None)
    if text:
        for match in _TEXT_URL.finditer(text):
            found.setdefault(match.group(1), None)
    return list(found)


__all__ = ["extract_links", "resolve_href"]
