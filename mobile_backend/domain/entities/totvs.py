"""
Entidades do protocolo TOTVS Datasul REST.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


# Valor de desc_erro que o TOTVS devolve num login aceito
LOGIN_SUCCESS_SENTINEL = "RETORNO VÁLIDO"


@dataclass
class TotvsLoginResponse:
    """Resposta do programa escd0002 (tipo=1)."""

    desc_erro: str
    nome: str
    login: str

    @property
    def is_valid(self) -> bool:
        return self.desc_erro == LOGIN_SUCCESS_SENTINEL

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TotvsLoginResponse":
        return cls(
            desc_erro=str(data.get("desc_erro", "")),
            nome=str(data.get("nome", "")),
            login=str(data.get("login", "")),
        )

    @classmethod
    def synthesized(cls, identity: str) -> "TotvsLoginResponse":
        """Resposta mínima para HTTP 200 com corpo vazio ou ilegível."""
        return cls(desc_erro="OK", nome=identity, login=identity)

    def to_dict(self) -> dict[str, str]:
        return {"desc_erro": self.desc_erro, "nome": self.nome, "login": self.login}


class ResponseClass(str, Enum):
    """Classificação de uma resposta do TOTVS."""

    JSON_PAYLOAD = "json_payload"
    REDIRECT = "redirect"
    LOGIN_PAGE_REDIRECT = "login_page_redirect"
    LOGIN_PAGE_BODY = "login_page_body"
    EMPTY_BODY = "empty_body"
    ERROR = "error"

    @property
    def is_session_loss(self) -> bool:
        return self in (
            ResponseClass.LOGIN_PAGE_REDIRECT,
            ResponseClass.LOGIN_PAGE_BODY,
            ResponseClass.EMPTY_BODY,
        )


@dataclass
class ClassifiedResponse:
    """Resultado de ``classify_response``."""

    kind: ResponseClass
    status_code: int
    payload: Any = None
    location: str | None = None
    message: str | None = None
