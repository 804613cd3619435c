"""
Testes do serviço de autenticação.
"""

import pytest

from fakes import json_response

from mobile_backend.core.exceptions import TotvsAuthenticationError
from mobile_backend.services.auth_service import AuthService


@pytest.fixture
def auth_service(totvs_client, vault):
    return AuthService(totvs_client=totvs_client, credential_vault=vault)


class TestAuthService:

    @pytest.mark.asyncio
    async def test_login_caches_password(self, auth_service, vault):
        user = await auth_service.login("jdoe", "senha")

        assert user == {"login": "jdoe", "nome": "JOHN DOE"}
        assert await vault.get("jdoe") == "senha"

    @pytest.mark.asyncio
    async def test_login_without_name_uses_login(self, auth_service, fake_totvs):
        fake_totvs.login_handler = lambda request: json_response({"desc_erro": "RETORNO VÁLIDO"})

        user = await auth_service.login("jdoe", "senha")

        assert user["nome"] == "jdoe"

    @pytest.mark.asyncio
    async def test_rejected_login_does_not_cache(self, auth_service, fake_totvs, vault):
        fake_totvs.login_handler = lambda request: json_response({"desc_erro": "Senha inválida"})

        with pytest.raises(TotvsAuthenticationError):
            await auth_service.login("jdoe", "errada")

        assert await vault.get("jdoe") is None

    @pytest.mark.asyncio
    async def test_logout_forgets_password_but_keeps_jar(self, auth_service, vault, cookie_store):
        await auth_service.login("jdoe", "senha")

        await auth_service.logout("jdoe")

        assert await vault.get("jdoe") is None
        assert cookie_store.as_dict() == {"JSESSIONID": "fresh"}
