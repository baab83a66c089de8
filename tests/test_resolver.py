# File: tests/test_resolver.py
from typing import List

import pytest

from linkcop.crawler.models import ErrorKind, FetchFailure, FetchResponse, Method
from linkcop.crawler.resolver import StatusResolver


@pytest.fixture()
def heads() -> List[str]:
    return []


@pytest.fixture()
def resolver(session, heads) -> StatusResolver:
    return StatusResolver(session, heads.append, probe_ssl=False)


def test_response_status_is_recorded(resolver, session, heads):
    resolver.on_response(FetchResponse("https://site.com/a", "https://site.com/a", 200))
    assert session.status_of("https://site.com/a") == 200
    assert heads == []


def test_redirected_response_recorded_under_both_urls(resolver, session):
    resolver.on_response(FetchResponse("https://site.com/old", "https://site.com/new", 200))
    assert session.status_of("https://site.com/old") == 200
    assert session.status_of("https://site.com/new") == 200


@pytest.mark.parametrize("status", [300, 301, 302, 307, 308, 399])
def test_redirect_status_queues_head_of_location(resolver, session, heads, status):
    resolver.on_response(
        FetchResponse(
            "http://x.com/moved",
            "http://x.com/moved",
            status,
            Method.HEAD,
            {"Location": "/landing"},
        )
    )
    assert session.status_of("http://x.com/moved") == status
    assert heads == ["http://x.com/landing"]


@pytest.mark.parametrize("status", [200, 204, 299])
def test_non_redirect_status_ignores_location(resolver, heads, status):
    resolver.on_response(
        FetchResponse("http://x.com/a", "http://x.com/a", status, Method.HEAD, {"Location": "/b"})
    )
    assert heads == []


def test_redirect_without_location_is_just_recorded(resolver, session, heads):
    resolver.on_response(FetchResponse("http://x.com/a", "http://x.com/a", 302, Method.HEAD, {}))
    assert session.status_of("http://x.com/a") == 302
    assert heads == []


def test_http_error_recorded_as_data(resolver, session, heads):
    resolver.on_error(FetchFailure("https://site.com/missing", 404, ErrorKind.HTTP_STATUS))
    assert session.status_of("https://site.com/missing") == 404
    assert heads == []


def test_transport_error_leaves_status_unresolved(resolver, session):
    resolver.on_error(FetchFailure("https://down.example/", 0, ErrorKind.TRANSPORT, message="dns"))
    assert session.status_of("https://down.example/") == 0


def test_forbidden_domain_error_falls_back_to_head_and_ssl_probe(resolver, heads):
    resolver.on_error(FetchFailure("http://facebook.com/page", 0, ErrorKind.FORBIDDEN_DOMAIN))
    assert heads == ["http://facebook.com/page", "https://facebook.com/page"]


def test_forbidden_https_link_gets_single_head(resolver, heads):
    resolver.on_forbidden("https://facebook.com/page")
    assert heads == ["https://facebook.com/page"]


def test_cross_domain_is_downgraded_to_head(resolver, heads):
    resolver.on_cross_domain("http://other.org/x")
    assert heads == ["http://other.org/x"]


def test_ssl_probe_when_enabled(session, heads):
    resolver = StatusResolver(session, heads.append, probe_ssl=True)
    resolver.on_cross_domain("http://other.org/x")
    resolver.on_dispatch("http://site.com/y")
    resolver.on_dispatch("https://site.com/z")
    assert heads == ["http://other.org/x", "https://other.org/x", "https://site.com/y"]
