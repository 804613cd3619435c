"""
Cookie jar compartilhado das chamadas ao TOTVS.

Um único jar por processo, sem partição por domínio nem por usuário:
o TOTVS é um host só e a sessão remota é única (ver DESIGN.md).
"""

import threading
from collections.abc import Iterable

from mobile_backend.core.logging import get_logger
from mobile_backend.domain.interfaces import ICookieStore

logger = get_logger(__name__)


def parse_set_cookie(header: str) -> tuple[str, str] | None:
    """
    Extrai o par nome=valor de um cabeçalho Set-Cookie.

    Atributos (Path, Expires, HttpOnly...) são descartados.
    Retorna None para entradas malformadas ou vazias.
    """
    pair = header.split(";", 1)[0]
    name, sep, value = pair.partition("=")

    name = name.strip()
    value = value.strip()

    if not sep or not name or not value:
        return None

    return name, value


class InMemoryCookieStore(ICookieStore):
    """Jar nome -> valor com semântica last-write-wins."""

    def __init__(self):
        self._cookies: dict[str, str] = {}
        self._lock = threading.Lock()

    def update(self, set_cookie_headers: str | Iterable[str] | None) -> None:
        if not set_cookie_headers:
            return

        if isinstance(set_cookie_headers, str):
            set_cookie_headers = [set_cookie_headers]

        parsed = [
            pair for pair in (parse_set_cookie(h) for h in set_cookie_headers) if pair
        ]
        if not parsed:
            return

        with self._lock:
            for name, value in parsed:
                self._cookies[name] = value

        logger.debug("Cookies TOTVS atualizados", names=[name for name, _ in parsed])

    def to_header(self) -> str:
        with self._lock:
            return "; ".join(f"{name}={value}" for name, value in self._cookies.items())

    def clear(self) -> None:
        with self._lock:
            self._cookies.clear()

        logger.info("Cookie jar TOTVS limpo")

    def as_dict(self) -> dict[str, str]:
        """Cópia do conteúdo atual."""
        with self._lock:
            return dict(self._cookies)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cookies)
