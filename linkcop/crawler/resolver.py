# linkcop/crawler/resolver.py
"""
Status resolver: turns fetch outcomes into recorded status codes and decides
which follow-up HEAD checks to queue.
"""
from __future__ import annotations

from typing import Callable
from urllib.parse import urljoin

from linkcop.crawler.models import ErrorKind, FetchFailure, FetchResponse
from linkcop.crawler.urls import https_variant
from linkcop.logger import logger
from linkcop.session import CrawlSession

REDIRECT_STATUSES = range(300, 400)


class StatusResolver:
    """Maps responses and errors onto the session's status ledger.

    ``request_head`` is the engine's budget-exempt HEAD dispatcher; it does
    its own dedup, so the resolver may ask for the same check more than once.
    """

    def __init__(
        self,
        session: CrawlSession,
        request_head: Callable[[str], None],
        *,
        probe_ssl: bool = True,
    ) -> None:
        self.session = session
        self._request_head = request_head
        self._probe_ssl = probe_ssl

    def on_response(self, response: FetchResponse) -> None:
        self.session.record_response(
            response.request_url, response.final_url, response.status, response.method
        )
        if response.status in REDIRECT_STATUSES:
            location = response.headers.get("Location")
            if location:
                target = urljoin(response.final_url, location)
                logger.debug("Redirect %s -> %s (%d)", response.request_url, target, response.status)
                self._request_head(target)

    def on_error(self, failure: FetchFailure) -> None:
        self.session.record_status(failure.request_url, failure.status)
        if failure.kind is ErrorKind.FORBIDDEN_DOMAIN:
            self.on_forbidden(failure.request_url)
        else:
            logger.debug(
                "Cannot visit %s (%s %s): %s",
                failure.request_url,
                failure.kind.value,
                failure.status,
                failure.message,
            )

    def on_cross_domain(self, url: str) -> None:
        """A GET to another host is never made; check the link with HEAD instead."""
        logger.debug("HEAD %s (off-site)", url)
        self._request_head(url)
        if self._probe_ssl:
            self.probe_ssl(url)

    def on_forbidden(self, url: str) -> None:
        logger.debug("Queuing HEAD request for forbidden domain %s", url)
        self._request_head(url)
        self.probe_ssl(url)

    def probe_ssl(self, url: str) -> None:
        """Queue a HEAD check of the https twin of an http URL."""
        secure = https_variant(url)
        if secure is not None:
            self._request_head(secure)

    def on_dispatch(self, url: str) -> None:
        """Hook for every admitted same-site GET."""
        if self._probe_ssl:
            self.probe_ssl(url)
