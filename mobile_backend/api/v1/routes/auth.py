"""
Rotas de Autenticação.
"""

from fastapi import APIRouter, Depends, Request

from mobile_backend.api.middleware.ratelimit import get_limiter
from mobile_backend.api.v1.dependencies import RequireAPIKey, get_auth_service
from mobile_backend.api.v1.schemas import (
    LoginRequest,
    LoginResponse,
    LogoutRequest,
    MessageResponse,
)
from mobile_backend.core.config import get_settings
from mobile_backend.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Autenticação"])

limiter = get_limiter()


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login TOTVS",
    description="""
    Valida usuário e senha no TOTVS.

    O login é tentado como informado e, se recusado, com o sufixo
    `@asperbras`. Em caso de sucesso a senha fica cifrada em memória
    para permitir re-login automático quando a sessão TOTVS expirar.
    """,
)
@limiter.limit(lambda: get_settings().login_rate_limit)
async def login(
    request: Request,
    credentials: LoginRequest,
    _api_key: RequireAPIKey,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Autentica no TOTVS."""
    user = await auth_service.login(credentials.username, credentials.password)
    return LoginResponse(login=user["login"], nome=user["nome"])


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Logout",
    description="Remove a senha guardada para re-login automático.",
)
async def logout(
    body: LogoutRequest,
    _api_key: RequireAPIKey,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Encerra a sessão do usuário."""
    await auth_service.logout(body.login)
    return MessageResponse(message="Logout realizado com sucesso")
