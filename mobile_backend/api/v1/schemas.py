"""
Schemas Pydantic para validação de requests/responses da API.
"""

import math
from typing import Any

from pydantic import BaseModel, Field, field_validator


# ============== Auth Schemas ==============

class LoginRequest(BaseModel):
    """Credenciais TOTVS do usuário."""

    username: str = Field(..., min_length=1, description="Login TOTVS (com ou sem @asperbras)")
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required")
        return v


class LoginResponse(BaseModel):
    """Resposta de login."""

    success: bool = True
    login: str
    nome: str


class LogoutRequest(BaseModel):
    """Request de logout."""

    login: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    """Resposta simples com mensagem."""

    success: bool = True
    message: str


# ============== Fracionamento Schemas ==============

def _parse_quantidade(v: Any) -> float:
    """Aceita número ou texto numérico (vírgula decimal); exige valor finito e positivo."""
    if isinstance(v, str):
        try:
            v = float(v.strip().replace(",", "."))
        except ValueError:
            raise ValueError("Quantity must be a number")
    elif isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ValueError("Quantity must be a number")
    if not math.isfinite(v) or v <= 0:
        raise ValueError("Quantity must be positive")
    return v


class BoxReturnQuery(BaseModel):
    """Parâmetros do retorno de caixa (tipo=5)."""

    cod_estabel: str = Field(..., min_length=1)
    it_codigo: str = Field(..., min_length=1)
    cod_deposito: str = Field(..., min_length=1)
    cod_local: str = Field(..., min_length=1)
    cod_lote: str = Field(..., min_length=1)
    quantidade: float

    @field_validator("quantidade", mode="before")
    @classmethod
    def validate_quantidade(cls, v: Any) -> float:
        return _parse_quantidade(v)


class FinalizeFractioningRequest(BoxReturnQuery):
    """Body da finalização do fracionamento (tipo=6)."""

    dados_baixa: str = Field(..., min_length=1)
    ordem_producao: str | None = None
    batelada: str | None = None


class FractioningBoxResponse(BaseModel):
    """Retorno paginado do escp1001 para caixa/finalização."""

    total: int = 0
    hasNext: bool = False
    items: list[dict[str, Any]] = Field(default_factory=list)
