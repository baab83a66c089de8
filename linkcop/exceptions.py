# File: linkcop/exceptions.py
"""linkcop.exceptions: Ошибки, которые видны вызывающему коду."""

from __future__ import annotations

__all__ = (
    "LinkcopError",
    "FetchRefusedError",
    "ForbiddenDomainError",
    "AlreadyVisitedError",
    "ReportWriteError",
)


class LinkcopError(Exception):
    """Base class for linkcop errors."""


class FetchRefusedError(LinkcopError):
    """The page fetcher refused to schedule a request."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{reason}: {url}")
        self.url = url
        self.reason = reason


class ForbiddenDomainError(FetchRefusedError):
    """Target host is excluded by the disallowed-domains policy."""

    def __init__(self, url: str) -> None:
        super().__init__(url, "Forbidden domain")


class AlreadyVisitedError(FetchRefusedError):
    def __init__(self, url: str) -> None:
        super().__init__(url, "URL already visited")


class ReportWriteError(LinkcopError):
    """Requested report output could not be written."""
