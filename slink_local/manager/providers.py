"""
Provider chain for slink_local.

Responsibilities:
    - Describe external shortening providers (name, endpoint, query shape)
    - Try them strictly in order, stopping at the first usable answer
    - Fall back to a local "{origin}/s/{token}" URL when every provider fails

Design notes:
    - A provider call is one HTTP GET with the long URL as a query parameter.
      A call succeeds when it returns 2xx and the body is an http(s) URL.
    - Failures raise ProviderUnavailable inside the chain, are logged as
      warnings and never reach the caller.
    - `resolve` returns a Resolution telling which provider answered (or that
      the local fallback was used) together with the failed attempts.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import requests

from ..config import settings
from ..exceptions import ProviderUnavailable
from ..log import get_logger
from .strategies import encode
from .validation import is_http_url

log = get_logger("providers")

USER_AGENT = "slink-local/1.0"


@dataclass(frozen=True)
class Provider:
    """
    An external shortening service reachable with a single GET.

    Attributes:
        name (str): Registry name used in logs and in Resolution.provider.
        endpoint (str): Base URL of the API.
        params (Mapping[str, str]): Fixed query parameters sent with every call.
        url_param (str): Query parameter that carries the long URL.
    """

    name: str
    endpoint: str
    params: Mapping[str, str] = field(default_factory=dict)
    url_param: str = "url"

    def shorten(self, long_url: str, session: requests.Session, timeout: float) -> str:
        """
        Ask the provider for a short URL.

        Raises:
            ProviderUnavailable: Transport error, a URL that cannot be encoded,
            non-2xx status or a body that is not an http(s) URL.
        """
        query = dict(self.params)
        query[self.url_param] = long_url
        try:
            resp = session.get(self.endpoint, params=query, timeout=timeout)
            resp.raise_for_status()
            body = (resp.text or "").strip()
        except (requests.RequestException, ValueError) as exc:
            raise ProviderUnavailable(self.name, str(exc)) from exc
        if not is_http_url(body):
            raise ProviderUnavailable(self.name, f"unexpected response {body[:80]!r}")
        return body


# Provider registry (default chain order: tinyurl -> is.gd -> v.gd)
PROVIDER_REGISTRY: Dict[str, Provider] = {
    "tinyurl": Provider("tinyurl", "https://tinyurl.com/api-create.php"),
    "isgd": Provider("isgd", "https://is.gd/create.php", {"format": "simple"}),
    "vgd": Provider("vgd", "https://v.gd/create.php", {"format": "simple"}),
}


def get_providers_from_config(names: Optional[Iterable[str]] = None) -> List[Provider]:
    """
    Build the ordered provider list from parameter or settings.PROVIDERS.
    Unknown names are skipped with a warning; an empty list leaves only the
    local fallback.
    """
    providers: List[Provider] = []
    for name in names if names is not None else settings.PROVIDERS:
        provider = PROVIDER_REGISTRY.get(name.strip().lower())
        if provider is None:
            log.warning("Unknown shortening provider %r ignored", name)
            continue
        providers.append(provider)
    return providers


@dataclass(frozen=True)
class Resolution:
    """Outcome of one pass over the provider chain."""

    short_url: str
    provider: Optional[str] = None
    attempts: Tuple[Tuple[str, str], ...] = ()

    @property
    def via_fallback(self) -> bool:
        return self.provider is None

    @property
    def source(self) -> str:
        return self.provider or "fallback"


class ProviderChain:
    """
    Ordered, fail-soft resolution of long URLs to short URLs.

    Example:
        >>> chain = ProviderChain(origin="http://localhost:8000", providers=[])
        >>> chain.shorten("https://example.com/page").startswith("http://localhost:8000/s/")
        True
    """

    def __init__(
        self,
        origin: str,
        providers: Optional[Sequence[Provider]] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.origin = origin.rstrip("/")
        self.providers: List[Provider] = list(providers) if providers is not None else get_providers_from_config()
        self.timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = USER_AGENT
        self.session = session

    def fallback_url(self, long_url: str) -> str:
        return f"{self.origin}/s/{encode(long_url)}"

    def resolve(self, long_url: str) -> Resolution:
        """Try each provider once, in order; never raises."""
        attempts: List[Tuple[str, str]] = []
        for provider in self.providers:
            try:
                short_url = provider.shorten(long_url, self.session, self.timeout)
            except ProviderUnavailable as exc:
                log.warning("Provider %s failed: %s", exc.provider, exc.reason)
                attempts.append((exc.provider, exc.reason))
                continue
            log.debug("Provider %s shortened %s -> %s", provider.name, long_url, short_url)
            return Resolution(short_url=short_url, provider=provider.name, attempts=tuple(attempts))

        short_url = self.fallback_url(long_url)
        if self.providers:
            log.warning("All %d providers failed, using local fallback %s", len(self.providers), short_url)
        return Resolution(short_url=short_url, provider=None, attempts=tuple(attempts))

    def shorten(self, long_url: str) -> str:
        return self.resolve(long_url).short_url
