"""
Serviço de Fracionamento.

Consulta item, depósitos, localizações e lotes no TOTVS e executa o
fracionamento de caixas, validando as mensagens de erro que o
programa escp1001 devolve dentro dos itens.
"""

from typing import Any

from mobile_backend.core.exceptions import FractioningValidationError
from mobile_backend.core.logging import get_logger
from mobile_backend.core.security import mask_login
from mobile_backend.domain.entities import FractioningBoxResponse
from mobile_backend.domain.interfaces import ITotvsClient

logger = get_logger(__name__)


class FractioningService:
    """Operações de fracionamento em nome do usuário logado."""

    def __init__(self, totvs_client: ITotvsClient):
        self.totvs = totvs_client

    def _validate_box_response(self, response: dict[str, Any]) -> None:
        """Levanta FractioningValidationError se algum item trouxer ERRO."""
        if not isinstance(response, dict):
            return

        errors = FractioningBoxResponse.from_dict(response).error_messages()

        if errors:
            raise FractioningValidationError("; ".join(errors))

    async def get_item(self, it_codigo: str, user_login: str | None = None) -> dict:
        return await self.totvs.get_item(it_codigo, identity=user_login)

    async def get_deposits(self, cod_estabel: str, user_login: str | None = None) -> list:
        return await self.totvs.get_deposits(cod_estabel, identity=user_login)

    async def get_locations(
        self,
        cod_estabel: str,
        cod_deposito: str,
        user_login: str | None = None,
    ) -> list:
        return await self.totvs.get_locations(cod_estabel, cod_deposito, identity=user_login)

    async def get_batches(
        self,
        cod_estabel: str,
        it_codigo: str,
        cod_deposito: str,
        cod_local: str,
        user_login: str | None = None,
    ) -> list:
        return await self.totvs.get_batches(
            cod_estabel,
            it_codigo,
            cod_deposito,
            cod_local,
            identity=user_login,
        )

    async def get_box_return(
        self,
        cod_estabel: str,
        it_codigo: str,
        cod_deposito: str,
        cod_local: str,
        cod_lote: str,
        quantidade: float,
        user_login: str | None = None,
    ) -> dict:
        """Simula o retorno da caixa e valida as mensagens dos itens."""
        response = await self.totvs.get_box_return(
            cod_estabel,
            it_codigo,
            cod_deposito,
            cod_local,
            cod_lote,
            quantidade,
            identity=user_login,
        )
        self._validate_box_response(response)
        return response

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
        user_login: str | None = None,
    ) -> dict:
        """
        Efetiva o fracionamento no TOTVS.

        Raises:
            FractioningValidationError: TOTVS recusou algum item.
        """
        logger.info(
            "Finalizando fracionamento",
            login=mask_login(user_login),
            cod_estabel=cod_estabel,
            it_codigo=it_codigo,
            ordem_producao=ordem_producao,
        )

        response = await self.totvs.finalize_fractioning(
            cod_estabel,
            it_codigo,
            cod_deposito,
            cod_local,
            cod_lote,
            quantidade,
            dados_baixa,
            ordem_producao=ordem_producao,
            batelada=batelada,
            identity=user_login,
        )
        self._validate_box_response(response)

        logger.info("Fracionamento finalizado", login=mask_login(user_login), it_codigo=it_codigo)
        return response
