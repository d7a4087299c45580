"""
Strategy for the local fallback token in slink_local.

Provided strategy:
- RollingHashStrategy: 32-bit signed rolling hash (h = h*31 + unit) over the
  UTF-16 code units of the URL, absolute value, base-36

Common helpers:
- _base36_encode: non-negative integer -> base-36 string
- _to_int32: wrap an integer to signed 32-bit two's complement
- encode: module-level facade for the rolling hash

Notes:
- The fallback URL is always "{origin}/s/{encode(url)}", so the token
  derivation is fixed and not configurable.
- Tokens are not unique: different URLs may share one. The fallback is a
  best-effort local identifier, not a short code allocator.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

_BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_BASE36_BASE = len(_BASE36_ALPHABET)


def _base36_encode(num: int) -> str:
    """
    Convert a non-negative integer to a base-36 string.
    0 -> "0", 35 -> "z", 36 -> "10"
    """
    if num < 0:
        raise ValueError("num must be non-negative")
    if num == 0:
        return "0"
    out = []
    while num > 0:
        num, rem = divmod(num, _BASE36_BASE)
        out.append(_BASE36_ALPHABET[rem])
    return "".join(reversed(out))


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_units(text: str):
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def rolling_hash(text: str) -> int:
    """Signed 32-bit rolling hash of `text`, wrapped at every step."""
    h = 0
    for unit in _utf16_units(text):
        h = _to_int32(h * 31 + unit)
    return h


class BaseStrategy(ABC):
    """Abstract base for fallback token strategies."""

    @abstractmethod
    def generate(self, url: str, *, length: Optional[int] = None) -> str:
        """Derive a token for `url`. `length` truncates where applicable."""
        raise NotImplementedError


@dataclass(frozen=True)
class RollingHashStrategy(BaseStrategy):
    """Deterministic rolling hash -> abs -> base-36 strategy."""

    def generate(self, url: str, *, length: Optional[int] = None) -> str:
        token = _base36_encode(abs(rolling_hash(url)))
        return token[:length] if length else token


_ROLLING_HASH = RollingHashStrategy()


def encode(text: str) -> str:
    """
    Fallback token for `text`: rolling hash rendered in base-36.

    Example:
        >>> encode("a")
        '2p'
    """
    return _ROLLING_HASH.generate(text)
