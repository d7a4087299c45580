"""
URL validation.

A candidate is accepted when it is an absolute URL: a recognized scheme, a
non-empty host and (if present) a numeric port in range. Nothing is fetched.
"""

import re
from typing import Iterable, Optional
from urllib.parse import urlsplit

from ..config import settings

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*$")
_FORBIDDEN_RE = re.compile(r"[\s\x00-\x1f\x7f]")


def validate_url(candidate: Optional[str], schemes: Optional[Iterable[str]] = None) -> bool:
    """
    Return True if `candidate` is a well-formed absolute URL.

    Args:
        candidate (str): Raw user input; surrounding whitespace is ignored.
        schemes (Iterable[str], optional): Accepted schemes. Defaults to
            settings.ALLOWED_SCHEMES.

    Example:
        >>> validate_url("https://example.com/page")
        True
        >>> validate_url("example.com")
        False
    """
    if not isinstance(candidate, str):
        return False
    url = candidate.strip()
    if not url or _FORBIDDEN_RE.search(url):
        return False
    try:
        url.encode("utf-8")  # lone surrogates cannot be sent on the wire
    except UnicodeEncodeError:
        return False

    try:
        parts = urlsplit(url)
        port = parts.port  # raises ValueError on a bad port
    except ValueError:
        return False

    allowed = {s.lower() for s in (schemes if schemes is not None else settings.ALLOWED_SCHEMES)}
    if not parts.scheme or not _SCHEME_RE.match(parts.scheme) or parts.scheme.lower() not in allowed:
        return False
    if not parts.netloc or not parts.hostname:
        return False
    if port is not None and not 0 <= port <= 65535:
        return False
    return True


def is_http_url(candidate: str) -> bool:
    """True for absolute http/https URLs (the shape a provider must return)."""
    return candidate.startswith(("http://", "https://")) and validate_url(candidate, schemes=("http", "https"))
