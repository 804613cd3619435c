"""Integração TOTVS Datasul REST."""

from mobile_backend.infrastructure.totvs.classifier import classify_response
from mobile_backend.infrastructure.totvs.client import TotvsClient
from mobile_backend.infrastructure.totvs.cookie_jar import InMemoryCookieStore
from mobile_backend.infrastructure.totvs.refresh_guard import InMemoryRefreshGuard

__all__ = [
    "InMemoryCookieStore",
    "InMemoryRefreshGuard",
    "TotvsClient",
    "classify_response",
]
