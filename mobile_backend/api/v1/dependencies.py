"""
Injeção de Dependências.

Configura e fornece instâncias dos serviços
usando o sistema de dependency injection do FastAPI.
"""

import secrets
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Security, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from mobile_backend.core.config import get_settings
from mobile_backend.core.logging import get_logger
from mobile_backend.domain.interfaces import (
    ICookieStore,
    ICredentialVault,
    IRefreshGuard,
    ITotvsClient,
)
from mobile_backend.infrastructure.credentials import InMemoryCredentialVault
from mobile_backend.infrastructure.totvs import (
    InMemoryCookieStore,
    InMemoryRefreshGuard,
    TotvsClient,
)
from mobile_backend.services.auth_service import AuthService
from mobile_backend.services.fractioning_service import FractioningService

logger = get_logger(__name__)


# ============== Segurança ==============

# Chave do app móvel: X-API-Key ou Authorization: Bearer
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


async def verify_api_key(
    api_key: Annotated[str | None, Security(api_key_header)] = None,
    bearer: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)] = None,
) -> str:
    """
    Confere a chave do app antes de qualquer chamada ao TOTVS.

    Fora de ENVIRONMENT=development a chave é obrigatória: ausente
    gera 401, divergente gera 403.
    """
    settings = get_settings()
    if settings.is_development:
        return "dev-mode"

    provided_key = api_key or (bearer.credentials if bearer else None)

    if not provided_key:
        logger.warning("Chamada ao BFF sem chave do app")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Chave do app ausente (X-API-Key ou Authorization: Bearer)",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not secrets.compare_digest(provided_key.encode(), settings.api_key.encode()):
        logger.warning("Chave do app recusada")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Chave do app inválida",
        )

    return provided_key


async def get_user_login(
    x_user_login: Annotated[str | None, Header()] = None,
) -> str:
    """Login TOTVS do usuário em nome de quem a chamada é feita."""
    if not x_user_login or not x_user_login.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Header 'X-User-Login' não informado",
        )
    return x_user_login.strip()


# Type aliases para uso nos endpoints
RequireAPIKey = Annotated[str, Depends(verify_api_key)]
CurrentUserLogin = Annotated[str, Depends(get_user_login)]


# ============== Infraestrutura ==============

@lru_cache
def get_cookie_store() -> ICookieStore:
    """Retorna jar de cookies TOTVS (singleton)."""
    return InMemoryCookieStore()


@lru_cache
def get_refresh_guard() -> IRefreshGuard:
    """Retorna guarda de re-login (singleton)."""
    return InMemoryRefreshGuard()


@lru_cache
def get_credential_vault() -> ICredentialVault:
    """Retorna cofre de credenciais (singleton)."""
    return InMemoryCredentialVault(get_settings().secret_key)


@lru_cache
def get_totvs_client() -> ITotvsClient:
    """Retorna cliente TOTVS (singleton)."""
    return TotvsClient(
        cookie_store=get_cookie_store(),
        refresh_guard=get_refresh_guard(),
        credential_vault=get_credential_vault(),
    )


# ============== Serviços ==============

@lru_cache
def get_auth_service() -> AuthService:
    """Retorna serviço de autenticação (singleton)."""
    return AuthService(
        totvs_client=get_totvs_client(),
        credential_vault=get_credential_vault(),
    )


@lru_cache
def get_fractioning_service() -> FractioningService:
    """Retorna serviço de fracionamento (singleton)."""
    return FractioningService(totvs_client=get_totvs_client())


# ============== Reset (para testes) ==============

def reset_dependencies() -> None:
    """Limpa cache de dependências (útil para testes)."""
    get_cookie_store.cache_clear()
    get_refresh_guard.cache_clear()
    get_credential_vault.cache_clear()
    get_totvs_client.cache_clear()
    get_auth_service.cache_clear()
    get_fractioning_service.cache_clear()
