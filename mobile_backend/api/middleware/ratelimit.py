"""
Rate limiting com slowapi.

Protege principalmente o login, que repassa a senha ao TOTVS.
"""

from functools import lru_cache

from slowapi import Limiter
from slowapi.util import get_remote_address


@lru_cache
def get_limiter() -> Limiter:
    """Retorna o limiter compartilhado (singleton)."""
    return Limiter(key_func=get_remote_address)
