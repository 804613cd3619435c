"""
Entidades de fracionamento retornadas pelo programa escp1001.
"""

from dataclasses import dataclass, field
from typing import Any


# Corpo vazio em retorno de caixa/finalização equivale a "nenhum item"
BOX_RESPONSE_DEFAULT: dict[str, Any] = {"total": 0, "hasNext": False, "items": []}

# Corpo vazio em consultas de lista equivale a lista vazia
LIST_RESPONSE_DEFAULT: list[Any] = []


@dataclass
class FractioningBoxResponse:
    """Retorno paginado de caixa (tipo=5) e de finalização (tipo=6)."""

    total: int = 0
    has_next: bool = False
    items: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FractioningBoxResponse":
        return cls(
            total=int(data.get("total") or 0),
            has_next=bool(data.get("hasNext", False)),
            items=list(data.get("items") or []),
        )

    def error_messages(self) -> list[str]:
        """Mensagens dos itens que o TOTVS marcou como erro."""
        return [
            str(item["mensagem"])
            for item in self.items
            if isinstance(item, dict)
            and "ERRO" in str(item.get("mensagem") or "").upper()
        ]
