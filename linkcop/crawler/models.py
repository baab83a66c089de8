# linkcop/crawler/models.py
"""
Data models shared by the page fetcher, the crawl engine and the reports.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional, Protocol

REPORT_HEADER = ("Source Page", "Link", "Status", "SSL Link", "SSL Status")


class Method(str, Enum):
    GET = "GET"
    HEAD = "HEAD"


class ErrorKind(str, Enum):
    """Why a request produced an error event instead of a response."""

    TRANSPORT = "transport"  # DNS, TLS, timeout, connection reset
    HTTP_STATUS = "http_status"  # status >= 400
    FORBIDDEN_DOMAIN = "forbidden_domain"  # target host excluded by policy


@dataclass(slots=True, frozen=True)
class FetchResponse:
    """Successful (status < 400) answer to a GET or HEAD."""

    request_url: str
    final_url: str
    status: int
    method: Method = Method.GET
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class FetchFailure:
    request_url: str
    status: int
    kind: ErrorKind
    method: Method = Method.GET
    message: str = ""


@dataclass(slots=True, frozen=True)
class ReportRow:
    """One broken or insecure link found on a source page."""

    source_page: str
    link: str
    status: int
    ssl_link: Optional[str] = None
    ssl_status: Optional[int] = None

    def as_strings(self) -> List[str]:
        """Always five fields, empty strings for absent values."""
        return [
            self.source_page,
            self.link,
            str(self.status),
            self.ssl_link or "",
            "" if self.ssl_status is None else str(self.ssl_status),
        ]


class FetchEvents(Protocol):
    """Receiver of page fetcher events."""

    def on_response(self, response: FetchResponse) -> None: ...

    def on_error(self, failure: FetchFailure) -> None: ...

    def on_anchor(self, page_url: str, href: str) -> None: ...
