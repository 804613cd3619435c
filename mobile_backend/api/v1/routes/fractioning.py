"""
Rotas de Fracionamento.

Todas as chamadas são feitas no TOTVS em nome do usuário do header
X-User-Login; perda de sessão é recuperada pelo cliente TOTVS.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from mobile_backend.api.v1.dependencies import (
    CurrentUserLogin,
    RequireAPIKey,
    get_fractioning_service,
)
from mobile_backend.api.v1.schemas import (
    BoxReturnQuery,
    FinalizeFractioningRequest,
    FractioningBoxResponse,
)
from mobile_backend.services.fractioning_service import FractioningService

router = APIRouter(prefix="/fractioning", tags=["Fracionamento"])

RequiredCode = Annotated[str, Query(min_length=1)]


@router.get(
    "/item",
    summary="Consulta item",
    description="Retorna código e descrição do item (escp1001 tipo=4).",
)
async def get_item(
    it_codigo: RequiredCode,
    user_login: CurrentUserLogin,
    _api_key: RequireAPIKey,
    service: FractioningService = Depends(get_fractioning_service),
) -> Any:
    return await service.get_item(it_codigo, user_login)


@router.get(
    "/deposits",
    summary="Lista depósitos do estabelecimento",
)
async def get_deposits(
    cod_estabel: RequiredCode,
    user_login: CurrentUserLogin,
    _api_key: RequireAPIKey,
    service: FractioningService = Depends(get_fractioning_service),
) -> Any:
    return await service.get_deposits(cod_estabel, user_login)


@router.get(
    "/locations",
    summary="Lista localizações do depósito",
)
async def get_locations(
    cod_estabel: RequiredCode,
    cod_deposito: RequiredCode,
    user_login: CurrentUserLogin,
    _api_key: RequireAPIKey,
    service: FractioningService = Depends(get_fractioning_service),
) -> Any:
    return await service.get_locations(cod_estabel, cod_deposito, user_login)


@router.get(
    "/batches",
    summary="Lista lotes do item na localização",
)
async def get_batches(
    cod_estabel: RequiredCode,
    it_codigo: RequiredCode,
    cod_deposito: RequiredCode,
    cod_local: RequiredCode,
    user_login: CurrentUserLogin,
    _api_key: RequireAPIKey,
    service: FractioningService = Depends(get_fractioning_service),
) -> Any:
    return await service.get_batches(cod_estabel, it_codigo, cod_deposito, cod_local, user_login)


@router.get(
    "/box-return",
    response_model=FractioningBoxResponse,
    summary="Simula retorno da caixa",
    description="Retorna os itens que serão usados no fracionamento (escp1001 tipo=5).",
)
async def get_box_return(
    params: Annotated[BoxReturnQuery, Query()],
    user_login: CurrentUserLogin,
    _api_key: RequireAPIKey,
    service: FractioningService = Depends(get_fractioning_service),
) -> Any:
    return await service.get_box_return(
        params.cod_estabel,
        params.it_codigo,
        params.cod_deposito,
        params.cod_local,
        params.cod_lote,
        params.quantidade,
        user_login,
    )


@router.post(
    "/finalize",
    response_model=FractioningBoxResponse,
    summary="Finaliza fracionamento",
    description="Efetiva a baixa e o fracionamento no TOTVS (escp1001 tipo=6).",
)
async def finalize_fractioning(
    body: FinalizeFractioningRequest,
    user_login: CurrentUserLogin,
    _api_key: RequireAPIKey,
    service: FractioningService = Depends(get_fractioning_service),
) -> Any:
    return await service.finalize_fractioning(
        body.cod_estabel,
        body.it_codigo,
        body.cod_deposito,
        body.cod_local,
        body.cod_lote,
        body.quantidade,
        body.dados_baixa,
        ordem_producao=body.ordem_producao,
        batelada=body.batelada,
        user_login=user_login,
    )
