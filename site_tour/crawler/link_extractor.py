"""
Link extraction, page summaries and URL normalization for SiteTour.
"""
from __future__ import annotations

from typing import List
from urllib.parse import urldefrag, urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup
from bs4.element import Tag


def extract_links(base_url: str, html: str, *, same_host: bool = True) -> List[str]:
    """
    Extract HTTP(S) links from *html*, resolved against *base_url*.

    Ignores mailto:, javascript: and, when *same_host* is set, other hosts.
    Result is normalized and free of duplicates, in document order.
    """
    soup = BeautifulSoup(html, "html.parser")
    base_netloc = urlparse(base_url).netloc.lower()
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw or raw.startswith(("mailto:", "javascript:", "#")):
            continue
        absolute = urljoin(base_url, raw)
        parsed = urlparse(absolute)
        if parsed.scheme not in ("http", "https"):
            continue
        if same_host and parsed.netloc.lower() != base_netloc:
            continue
        links.append(normalize_url(absolute))
    return list(dict.fromkeys(links))


def summarize(html: str, limit: int = 120) -> str:
    """Page title, or the first visible text when there is none, cut to *limit*."""
    soup = BeautifulSoup(html, "html.parser")
    if soup.title and soup.title.string:
        text = soup.title.string
    else:
        text = soup.get_text(" ")
    text = " ".join(text.split())
    if len(text) > limit:
        text = text[: limit - 1].rstrip() + "…"
    return text


def normalize_url(url: str) -> str:
    """
    Normalize URL by lowercasing scheme and netloc, dropping the fragment,
    stripping trailing slash in path and collapsing to root URL.
    """
    parsed = urlparse(urldefrag(url)[0])
    scheme = parsed.scheme.lower()
    netloc = parsed.netloc.lower()
    path = parsed.path.rstrip("/") or "/"
    if path == "/" and not parsed.query:
        return f"{scheme}://{netloc}"
    return urlunparse((scheme, netloc, path, "", parsed.query, ""))
