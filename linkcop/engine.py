# File: linkcop/engine.py
"""linkcop.engine: Оркестрация обхода: события загрузчика, состояние сессии, финализация отчёта."""

from __future__ import annotations

import asyncio
import signal
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from linkcop.config import CrawlConfig
from linkcop.crawler.fetcher import PageFetcher
from linkcop.crawler.models import FetchFailure, FetchResponse, Method, ReportRow
from linkcop.crawler.resolver import StatusResolver
from linkcop.crawler.urls import is_fetchable, resolve_link, same_host
from linkcop.exceptions import FetchRefusedError, ForbiddenDomainError
from linkcop.flush import Renderer, ReportFlush
from linkcop.logger import logger
from linkcop.session import CrawlSession, CrawlSnapshot

__all__ = ["CrawlEngine", "CrawlOutcome", "install_interrupt_handler", "start_crawl"]


@dataclass(slots=True)
class CrawlOutcome:
    """Итог обхода: строки отчёта, признак прерывания и снимок состояния."""

    rows: List[ReportRow] = field(default_factory=list)
    interrupted: bool = False
    snapshot: Optional[CrawlSnapshot] = None


class CrawlEngine:
    """Реагирует на события PageFetcher и ведёт общее состояние обхода.

    Каждая ссылка проходит путь Undiscovered → Queued → Resolving → Resolved;
    ошибки загрузки записываются как статусы, а не прерывают обход.
    """

    def __init__(
        self,
        config: CrawlConfig,
        *,
        render: Optional[Renderer] = None,
        fetcher_factory: Callable[..., PageFetcher] = PageFetcher,
    ) -> None:
        self.config = config
        self.seed = str(config.host)
        self.host = config.hostname
        self.session = CrawlSession(config.max_visits)
        self.resolver = StatusResolver(self.session, self.request_head, probe_ssl=config.probe_ssl)
        self.flush = ReportFlush(self.session, render, only_failures=config.only_failures)
        self._fetcher_factory = fetcher_factory
        self._fetcher: Optional[PageFetcher] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop: Optional[asyncio.Event] = None
        self._interrupt_requested = False

    # ------------------------------------------------------------------ #
    # Fetch events                                                       #
    # ------------------------------------------------------------------ #

    def on_response(self, response: FetchResponse) -> None:
        self.resolver.on_response(response)

    def on_error(self, failure: FetchFailure) -> None:
        self.resolver.on_error(failure)

    def on_anchor(self, page_url: str, href: str) -> None:
        link = resolve_link(href, page_url, strip_same_host_query=self.config.strip_same_host_query)
        if link is None:
            return
        if not is_fetchable(link):
            logger.debug("Skipping %s", link)
            return
        self.session.record_edge(page_url, link)
        logger.debug("Adding %s to list of links to GET", link)
        self.request_get(link)

    # ------------------------------------------------------------------ #
    # Dispatch                                                           #
    # ------------------------------------------------------------------ #

    def request_get(self, url: str) -> None:
        """Full visit for same-site links, HEAD check for everything else."""
        if not same_host(url, self.host):
            self.resolver.on_cross_domain(url)
            return
        if not self.session.admit(url, Method.GET):
            if self.session.remaining_visits == 0:
                logger.debug("Aborting %s over max visits", url)
            return
        try:
            self._require_fetcher().visit(url)
        except ForbiddenDomainError:
            self.resolver.on_forbidden(url)
            return
        except FetchRefusedError as exc:
            logger.debug("Cannot visit %s because of %s", url, exc)
            return
        self.resolver.on_dispatch(url)

    def request_head(self, url: str) -> None:
        if not self.session.admit(url, Method.HEAD):
            return
        try:
            self._require_fetcher().head(url)
        except FetchRefusedError as exc:
            logger.debug("Cannot get HEAD for %s because of %s", url, exc)

    def _require_fetcher(self) -> PageFetcher:
        if self._fetcher is None:
            raise RuntimeError("Crawl is not running")
        return self._fetcher

    # ------------------------------------------------------------------ #
    # Lifecycle                                                          #
    # ------------------------------------------------------------------ #

    def interrupt(self) -> None:
        """Просит run() немедленно финализировать отчёт. Безопасно из любого потока."""
        self._interrupt_requested = True
        loop, stop = self._loop, self._stop
        if loop is None or stop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(stop.set)

    async def run(self) -> CrawlOutcome:
        """Обходит сайт до исчерпания работы или до прерывания и выводит отчёт ровно один раз."""
        self._loop = asyncio.get_running_loop()
        self._stop = asyncio.Event()
        if self._interrupt_requested:
            self._stop.set()

        logger.info("Starting crawl: %s (max visits %d)", self.seed, self.config.max_visits)
        start = time.monotonic()
        async with self._fetcher_factory(self.config, self) as fetcher:
            self._fetcher = fetcher
            self.request_get(self.seed)

            drain = asyncio.ensure_future(fetcher.wait())
            stopped = asyncio.ensure_future(self._stop.wait())
            try:
                await asyncio.wait({drain, stopped}, return_when=asyncio.FIRST_COMPLETED)
                interrupted = self._stop.is_set()
                if interrupted:
                    logger.warning("Interrupted with %d requests in flight", fetcher.pending)
                self.flush()
            finally:
                for task in (drain, stopped):
                    task.cancel()
                await asyncio.gather(drain, stopped, return_exceptions=True)

        duration = time.monotonic() - start
        logger.info(
            "Finished in %.2f s, %d visits left in budget",
            duration,
            self.session.remaining_visits,
        )
        return CrawlOutcome(rows=self.flush.rows, interrupted=interrupted, snapshot=self.session.snapshot())


def install_interrupt_handler(
    engine: CrawlEngine, loop: Optional[asyncio.AbstractEventLoop] = None
) -> Callable[[], None]:
    """Направляет SIGINT в engine.interrupt(); возвращает функцию снятия обработчика."""
    loop = loop or asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, engine.interrupt)
        return lambda: loop.remove_signal_handler(signal.SIGINT)
    except (NotImplementedError, RuntimeError, ValueError):
        pass
    try:
        previous = signal.signal(signal.SIGINT, lambda signum, frame: engine.interrupt())
    except ValueError:
        logger.debug("SIGINT handler not installed: not in the main thread")
        return lambda: None
    return lambda: signal.signal(signal.SIGINT, previous)


async def start_crawl(config: CrawlConfig, render: Optional[Renderer] = None) -> CrawlOutcome:
    """Запускает обход с обработчиком SIGINT."""
    engine = CrawlEngine(config, render=render)
    remove_handler = install_interrupt_handler(engine)
    try:
        return await engine.run()
    finally:
        remove_handler()
