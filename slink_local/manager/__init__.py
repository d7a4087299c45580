"""
Validation, fallback tokens, provider chain and the orchestrating manager.
"""

from .providers import PROVIDER_REGISTRY, Provider, ProviderChain, Resolution
from .slink_manager import ShortenResult, SlinkManager
from .strategies import encode
from .validation import validate_url

__all__ = [
    "PROVIDER_REGISTRY",
    "Provider",
    "ProviderChain",
    "Resolution",
    "ShortenResult",
    "SlinkManager",
    "encode",
    "validate_url",
]
