# linkcop/crawler/urls.py
"""
Link resolution and URL normalization utilities for linkcop.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin, urlparse, urlunparse

from linkcop.logger import logger

FETCHABLE_SCHEMES = ("http", "https")


def resolve_link(href: str, page_url: str, *, strip_same_host_query: bool = True) -> Optional[str]:
    """
    Resolve *href* found on *page_url* to an absolute URL.

    Scheme and host are lower-cased. Links to the page's own host lose their
    query string and fragment when *strip_same_host_query* is set; links to
    other hosts are returned untouched. Returns None for empty or unparseable
    input.
    """
    raw = (href or "").strip()
    if not raw:
        return None
    try:
        parsed = urlparse(urljoin(page_url, raw))
        # port is validated lazily
        parsed.port
    except ValueError as exc:
        logger.debug("Skipping unparseable link %r on %s: %s", raw, page_url, exc)
        return None

    if parsed.scheme in FETCHABLE_SCHEMES:
        if not parsed.netloc:
            logger.debug("Skipping link without host %r on %s", raw, page_url)
            return None
        parsed = parsed._replace(netloc=parsed.netloc.lower())
        if strip_same_host_query and same_host(page_url, parsed.hostname or ""):
            parsed = parsed._replace(query="", fragment="")
    return urlunparse(parsed)


def is_fetchable(url: str) -> bool:
    """True for http(s) URLs with a host; mailto:, javascript: and friends are not."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in FETCHABLE_SCHEMES and bool(parsed.netloc)


def hostname(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def same_host(url: str, host: str) -> bool:
    return hostname(url) == host.lower()


def https_variant(url: str) -> Optional[str]:
    """Return the https twin of an http URL, None for any other scheme."""
    parsed = urlparse(url)
    if parsed.scheme != "http":
        return None
    return urlunparse(parsed._replace(scheme="https"))


__all__ = ["FETCHABLE_SCHEMES", "resolve_link", "is_fetchable", "hostname", "same_host", "https_variant"]
