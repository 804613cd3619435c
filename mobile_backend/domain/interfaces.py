"""
Interfaces (abstrações) do domínio.

Os serviços e o cliente TOTVS dependem destas abstrações, não das
implementações em memória, para que possam ser trocadas nos testes.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from mobile_backend.domain.entities import TotvsLoginResponse


class ICookieStore(ABC):
    """Cookie jar compartilhado por todas as chamadas ao TOTVS."""

    @abstractmethod
    def update(self, set_cookie_headers: str | Iterable[str] | None) -> None:
        """Grava os pares nome=valor de cabeçalhos Set-Cookie."""

    @abstractmethod
    def to_header(self) -> str:
        """Serializa o jar para o cabeçalho Cookie."""

    @abstractmethod
    def clear(self) -> None:
        """Esvazia o jar."""


class IRefreshGuard(ABC):
    """Guarda single-flight de re-login por identidade."""

    @abstractmethod
    def try_acquire(self, login: str) -> bool:
        """Idle -> Refreshing. Retorna False se já estiver em andamento."""

    @abstractmethod
    def release(self, login: str) -> None:
        """Refreshing -> Idle, incondicionalmente."""

    @abstractmethod
    def is_refreshing(self, login: str) -> bool:
        """Indica se há re-login em andamento para a identidade."""


class ICredentialVault(ABC):
    """Cofre de credenciais reversível, em memória."""

    @abstractmethod
    async def store(self, login: str, password: str) -> None:
        pass

    @abstractmethod
    async def get(self, login: str) -> str | None:
        """Senha em texto plano, ou None se ausente ou ilegível."""

    @abstractmethod
    async def delete(self, login: str) -> None:
        pass

    @abstractmethod
    async def clear(self) -> None:
        pass


class ITotvsClient(ABC):
    """Cliente do Datasul REST."""

    @abstractmethod
    async def login(self, identity: str, password: str) -> TotvsLoginResponse:
        pass

    @abstractmethod
    async def request(
        self,
        url: str,
        identity: str | None = None,
        *,
        method: str = "GET",
        json: Any = None,
        empty_default: Any = None,
        max_redirects: int | None = None,
    ) -> Any:
        pass

    @abstractmethod
    async def get_item(self, it_codigo: str, identity: str | None = None) -> dict:
        pass

    @abstractmethod
    async def get_deposits(self, cod_estabel: str, identity: str | None = None) -> list:
        pass

    @abstractmethod
    async def get_locations(
        self,
        cod_estabel: str,
        cod_deposito: str,
        identity: str | None = None,
    ) -> list:
        pass

    @abstractmethod
    async def get_batches(
        self,
        cod_estabel: str,
        it_codigo: str,
        cod_deposito: str,
        cod_local: str,
        identity: str | None = None,
    ) -> list:
        pass

    @abstractmethod
    async def get_box_return(
        self,
        cod_estabel: str,
        it_codigo: str,
        cod_deposito: str,
        cod_local: str,
        cod_lote: str,
        quantidade: float,
        identity: str | None = None,
    ) -> dict:
        pass

    @abstractmethod
    async def finalize_fractioning(
        self,
        cod_estabel: str,
        it_codigo: str,
        cod_deposito: str,
        cod_local: str,
        cod_lote: str,
        quantidade: float,
        dados_baixa: str,
        ordem_producao: str | None = None,
        batelada: str | None = None,
        identity: str | None = None,
    ) -> dict:
        pass
