"""
Unit tests for the provider chain.

Covers:
    - First success short-circuits the chain
    - Transport errors, non-2xx and malformed bodies advance to the next provider
    - All failures fall back to "{origin}/s/{encode(url)}"
    - Query shape (fixed params + url) and timeout reach the session
    - Provider list built from configuration
"""

import requests

from slink_local.manager.providers import (
    PROVIDER_REGISTRY,
    Provider,
    ProviderChain,
    Resolution,
    get_providers_from_config,
)
from slink_local.manager.strategies import encode

from tests.fakes import ORIGIN, TEST_PROVIDERS, FakeResponse, FakeSession

LONG_URL = "https://example.com/a/very/long/path?x=1&y=2"
FIRST, SECOND, THIRD = (p.endpoint for p in TEST_PROVIDERS)


def _chain(session, providers=TEST_PROVIDERS):
    return ProviderChain(origin=ORIGIN, providers=providers, session=session, timeout=3.0)


def test_first_success_stops_the_chain():
    session = FakeSession({FIRST: "https://first.example/abc", SECOND: "https://second.example/zzz"})
    result = _chain(session).resolve(LONG_URL)

    assert result.short_url == "https://first.example/abc"
    assert result.provider == "first"
    assert result.via_fallback is False
    assert session.called_endpoints() == [FIRST]


def test_failed_provider_advances_to_next():
    session = FakeSession({FIRST: requests.Timeout("slow"), SECOND: "https://second.example/zzz\n"})
    result = _chain(session).resolve(LONG_URL)

    assert result.short_url == "https://second.example/zzz"
    assert result.source == "second"
    assert session.called_endpoints() == [FIRST, SECOND]
    assert result.attempts[0][0] == "first"


def test_non_2xx_and_malformed_bodies_are_failures():
    session = FakeSession(
        {
            FIRST: FakeResponse("https://first.example/abc", status_code=503),
            SECOND: "Error: please try again later",
            THIRD: "https://third.example/ok",
        }
    )
    result = _chain(session).resolve(LONG_URL)

    assert result.provider == "third"
    assert [name for name, _ in result.attempts] == ["first", "second"]


def test_all_providers_fail_returns_local_fallback(caplog):
    session = FakeSession()
    with caplog.at_level("WARNING", logger="slink.providers"):
        result = _chain(session).resolve(LONG_URL)

    assert result.short_url == f"{ORIGIN}/s/{encode(LONG_URL)}"
    assert result.via_fallback is True
    assert result.source == "fallback"
    assert len(result.attempts) == 3
    assert session.called_endpoints() == [FIRST, SECOND, THIRD]
    assert "All 3 providers failed" in caplog.text


def test_unexpected_request_exception_is_absorbed():
    session = FakeSession({FIRST: requests.exceptions.InvalidURL("bad")})
    assert _chain(session, providers=TEST_PROVIDERS[:1]).shorten(LONG_URL) == f"{ORIGIN}/s/{encode(LONG_URL)}"


def test_unencodable_url_is_a_provider_failure():
    session = FakeSession(
        {FIRST: UnicodeEncodeError("utf-8", "\udc80", 0, 1, "surrogates not allowed"), SECOND: "https://second.example/ok"}
    )
    result = _chain(session).resolve(LONG_URL)

    assert result.provider == "second"
    assert result.attempts[0][0] == "first"
    assert "surrogates not allowed" in result.attempts[0][1]


def test_unencodable_url_never_leaves_a_real_session():
    # requests fails while encoding the query, before any socket is opened
    url = "https://example.com/\udc80"
    chain = ProviderChain(origin=ORIGIN, providers=TEST_PROVIDERS[:1], session=requests.Session(), timeout=1.0)
    result = chain.resolve(url)

    assert result.via_fallback is True
    assert result.short_url == f"{ORIGIN}/s/{encode(url)}"


def test_no_providers_means_fallback_only():
    session = FakeSession()
    result = _chain(session, providers=[]).resolve(LONG_URL)
    assert result == Resolution(short_url=f"{ORIGIN}/s/{encode(LONG_URL)}")
    assert session.calls == []


def test_query_parameters_and_timeout():
    session = FakeSession({SECOND: "https://second.example/zzz"})
    _chain(session, providers=TEST_PROVIDERS[1:2]).resolve(LONG_URL)

    call = session.calls[0]
    assert call["params"] == {"format": "simple", "url": LONG_URL}
    assert call["timeout"] == 3.0


def test_custom_url_param():
    provider = Provider("custom", "https://custom.example/api", url_param="long")
    session = FakeSession({"https://custom.example/api": "https://c.example/1"})
    assert _chain(session, providers=[provider]).shorten(LONG_URL) == "https://c.example/1"
    assert session.calls[0]["params"] == {"long": LONG_URL}


def test_origin_trailing_slash_is_trimmed():
    chain = ProviderChain(origin=ORIGIN + "/", providers=[], session=FakeSession())
    assert chain.fallback_url("x") == f"{ORIGIN}/s/{encode('x')}"


def test_default_registry_order():
    providers = get_providers_from_config()
    assert [p.name for p in providers] == ["tinyurl", "isgd", "vgd"]
    assert PROVIDER_REGISTRY["tinyurl"].endpoint == "https://tinyurl.com/api-create.php"
    assert PROVIDER_REGISTRY["isgd"].params == {"format": "simple"}


def test_registry_from_env_skips_unknown(monkeypatch, caplog):
    monkeypatch.setenv("SLINK_PROVIDERS", "vgd, nope ,TinyURL")
    with caplog.at_level("WARNING", logger="slink.providers"):
        providers = get_providers_from_config()
    assert [p.name for p in providers] == ["vgd", "tinyurl"]
    assert "nope" in caplog.text


def test_default_session_and_timeout(monkeypatch):
    monkeypatch.setenv("SLINK_PROVIDER_TIMEOUT", "120")
    chain = ProviderChain(origin=ORIGIN, providers=[])
    assert isinstance(chain.session, requests.Session)
    assert chain.session.headers["User-Agent"].startswith("slink-local/")
    assert chain.timeout == 60.0
