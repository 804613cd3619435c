"""
Coordenação single-flight de re-login por identidade.
"""

import threading

from mobile_backend.domain.interfaces import IRefreshGuard


class InMemoryRefreshGuard(IRefreshGuard):
    """
    Conjunto de identidades com re-login em andamento.

    Idle -> Refreshing só a partir de Idle; quem chega durante
    Refreshing recebe False e deve aguardar em vez de logar de novo.
    """

    def __init__(self):
        self._in_flight: set[str] = set()
        self._lock = threading.Lock()

    def try_acquire(self, login: str) -> bool:
        with self._lock:
            if login in self._in_flight:
                return False
            self._in_flight.add(login)
            return True

    def release(self, login: str) -> None:
        with self._lock:
            self._in_flight.discard(login)

    def is_refreshing(self, login: str) -> bool:
        with self._lock:
            return login in self._in_flight
