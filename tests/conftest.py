"""Fixtures compartilhadas dos testes do Mobile Backend."""

import os

import pytest

# Ambiente determinístico antes de importar a aplicação
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-pytest-32-chars!!")

from fakes import FakeTotvs  # noqa: E402

from mobile_backend.core.config import Settings  # noqa: E402
from mobile_backend.infrastructure.credentials import InMemoryCredentialVault  # noqa: E402
from mobile_backend.infrastructure.totvs import (  # noqa: E402
    InMemoryCookieStore,
    InMemoryRefreshGuard,
    TotvsClient,
)


@pytest.fixture
def settings() -> Settings:
    """Configurações com esperas curtas para os testes."""
    return Settings(
        _env_file=None,
        environment="development",
        secret_key="test-secret-key-for-pytest-32-chars!!",
        totvs_api_environment="homolog",
        totvs_api_base_url="http://totvs.test/dts/datasul-rest",
        totvs_relogin_wait_seconds=0.01,
        totvs_max_redirects=5,
        totvs_max_relogin_attempts=1,
    )


@pytest.fixture
def cookie_store() -> InMemoryCookieStore:
    return InMemoryCookieStore()


@pytest.fixture
def refresh_guard() -> InMemoryRefreshGuard:
    return InMemoryRefreshGuard()


@pytest.fixture
def vault(settings) -> InMemoryCredentialVault:
    return InMemoryCredentialVault(settings.secret_key)


@pytest.fixture
def fake_totvs() -> FakeTotvs:
    return FakeTotvs()


@pytest.fixture
def totvs_client(settings, cookie_store, refresh_guard, vault, fake_totvs) -> TotvsClient:
    return TotvsClient(
        cookie_store=cookie_store,
        refresh_guard=refresh_guard,
        credential_vault=vault,
        settings=settings,
        transport=fake_totvs.transport,
    )


@pytest.fixture
def resource_url(settings) -> str:
    return f"{settings.totvs_base_url}/resources/prg/cpp/v1/escp1001?tipo=4&it_codigo=3066865"
