# linkcop/crawler/fetcher.py
"""
Page fetcher: schedules GET/HEAD requests as asyncio tasks, applies the
per-host parallelism and random delay, parses anchors out of HTML pages and
reports every outcome to a :class:`FetchEvents` receiver.
"""
from __future__ import annotations

import asyncio
import random
from typing import Dict, Optional, Set, Tuple

from aiohttp import ClientError, ClientSession, ClientTimeout
from bs4 import BeautifulSoup
from bs4.element import Tag
from multidict import CIMultiDict

from linkcop.config import CrawlConfig
from linkcop.crawler.cache import ResponseCache
from linkcop.crawler.models import ErrorKind, FetchEvents, FetchFailure, FetchResponse, Method
from linkcop.crawler.urls import hostname, same_host
from linkcop.exceptions import AlreadyVisitedError, ForbiddenDomainError
from linkcop.logger import logger

__all__ = ("PageFetcher",)


class PageFetcher:
    """Fire-and-forget GET/HEAD dispatcher with on-disk caching of GET responses."""

    def __init__(self, config: CrawlConfig, events: FetchEvents) -> None:
        self.config = config
        self._events = events
        self._disallowed = tuple(config.disallowed_domains)
        self._requested: Set[Tuple[Method, str]] = set()
        self._pending: Set[asyncio.Task] = set()
        self._host_slots: Dict[str, asyncio.Semaphore] = {}
        self.session: Optional[ClientSession] = None
        self.cache: Optional[ResponseCache] = None

    async def __aenter__(self) -> PageFetcher:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        self.cache = ResponseCache.open(self.config.cache_dir)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.abandon()
        if self.session and not self.session.closed:
            await self.session.close()

    # ------------------------------------------------------------------ #
    # Public contract                                                    #
    # ------------------------------------------------------------------ #

    def is_forbidden(self, url: str) -> bool:
        host = hostname(url)
        return any(host == d or host.endswith("." + d) for d in self._disallowed)

    def visit(self, url: str) -> None:
        """Schedule a GET of *url*.

        Raises ForbiddenDomainError for disallowed domains and
        AlreadyVisitedError when the URL was requested before.
        """
        if self.is_forbidden(url):
            raise ForbiddenDomainError(url)
        self._schedule(Method.GET, url)

    def head(self, url: str) -> None:
        """Schedule a HEAD of *url*; HEAD checks ignore the domain policy."""
        self._schedule(Method.HEAD, url)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def wait(self) -> None:
        """Block until no request is pending, including ones queued meanwhile."""
        while self._pending:
            tasks = list(self._pending)
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for task, result in zip(tasks, results):
                if isinstance(result, Exception):
                    logger.error("Request task %s failed: %r", task.get_name(), result)

    async def abandon(self) -> None:
        """Cancel every in-flight request without reporting its outcome."""
        tasks = list(self._pending)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.debug("Abandoned %d in-flight requests", len(tasks))

    # ------------------------------------------------------------------ #
    # Internals                                                          #
    # ------------------------------------------------------------------ #

    def _schedule(self, method: Method, url: str) -> None:
        if not self.session:
            raise RuntimeError("Session not initialized")
        key = (method, url)
        if key in self._requested:
            raise AlreadyVisitedError(url)
        self._requested.add(key)
        task = asyncio.get_running_loop().create_task(self._run(method, url), name=f"{method.value} {url}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _slot(self, host: str) -> asyncio.Semaphore:
        slot = self._host_slots.get(host)
        if slot is None:
            slot = self._host_slots[host] = asyncio.Semaphore(self.config.parallelism)
        return slot

    async def _run(self, method: Method, url: str) -> None:
        async with self._slot(hostname(url)):
            if self.config.random_delay:
                await asyncio.sleep(random.uniform(0, self.config.random_delay))
            try:
                if method is Method.GET:
                    await self._get(url)
                else:
                    await self._head(url)
            except (ClientError, asyncio.TimeoutError) as exc:
                self._events.on_error(
                    FetchFailure(url, 0, ErrorKind.TRANSPORT, method, str(exc) or type(exc).__name__)
                )

    async def _get(self, url: str) -> None:
        cached = self.cache.load(url) if self.cache else None
        if cached is not None:
            logger.debug("GET %s (cached, %d)", url, cached.status)
            status, final_url, body = cached.status, cached.final_url, cached.body
            headers = CIMultiDict(cached.headers)
        else:
            assert self.session is not None
            logger.debug("GET %s", url)
            async with self.session.get(url, allow_redirects=True) as resp:
                body = await resp.read()
                final_url = str(resp.url) if resp.history else url
                status, headers = resp.status, CIMultiDict(resp.headers)
            if self.cache and status < 500:
                self.cache.store(url, final_url, status, dict(headers), body)

        if final_url != url and self.is_forbidden(final_url):
            self._events.on_error(
                FetchFailure(url, status, ErrorKind.FORBIDDEN_DOMAIN, Method.GET, f"redirected to {final_url}")
            )
            return
        if status >= 400:
            self._events.on_error(FetchFailure(url, status, ErrorKind.HTTP_STATUS, Method.GET, f"HTTP {status}"))
            return

        self._events.on_response(FetchResponse(url, final_url, status, Method.GET, headers))
        mime = headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
        if mime != "text/html":
            return
        if not same_host(final_url, self.config.hostname):
            logger.debug("Not parsing %s: redirected off-site from %s", final_url, url)
            return
        self._extract(final_url, body)

    async def _head(self, url: str) -> None:
        assert self.session is not None
        logger.debug("HEAD %s", url)
        async with self.session.head(url, allow_redirects=False) as resp:
            status, headers = resp.status, CIMultiDict(resp.headers)
        if status >= 400:
            self._events.on_error(FetchFailure(url, status, ErrorKind.HTTP_STATUS, Method.HEAD, f"HTTP {status}"))
            return
        self._events.on_response(FetchResponse(url, url, status, Method.HEAD, headers))

    def _extract(self, page_url: str, body: bytes) -> None:
        soup = BeautifulSoup(body, "html.parser")
        for tag in soup.find_all("a", href=True):
            if not isinstance(tag, Tag):
                continue
            href = tag.get("href")
            if isinstance(href, str):
                self._events.on_anchor(page_url, href)
