"""
Testes da API HTTP com o TOTVS simulado.
"""

import pytest
from fastapi.testclient import TestClient

from fakes import LOGIN_PAGE_HTML, json_response, text_response

from mobile_backend.api.middleware.ratelimit import get_limiter
from mobile_backend.api.v1 import dependencies
from mobile_backend.core.config import Settings
from mobile_backend.main import create_app
from mobile_backend.services.auth_service import AuthService
from mobile_backend.services.fractioning_service import FractioningService

USER = {"X-User-Login": "jdoe"}


@pytest.fixture
def client(totvs_client, vault):
    get_limiter().reset()
    app = create_app()
    app.dependency_overrides[dependencies.get_auth_service] = lambda: AuthService(
        totvs_client=totvs_client, credential_vault=vault
    )
    app.dependency_overrides[dependencies.get_fractioning_service] = lambda: FractioningService(
        totvs_client=totvs_client
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestInfo:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_v1_info(self, client):
        assert client.get("/v1/").json()["endpoints"]["fractioning"] == "/v1/fractioning"


class TestAuthRoutes:

    def test_login_success(self, client, fake_totvs):
        response = client.post("/v1/auth/login", json={"username": " jdoe ", "password": "senha"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "login": "jdoe", "nome": "JOHN DOE"}
        assert fake_totvs.login_calls[0].url.params["login"] == "jdoe"

    def test_login_rejected(self, client, fake_totvs):
        fake_totvs.login_handler = lambda request: json_response({"desc_erro": "Senha inválida"})

        response = client.post("/v1/auth/login", json={"username": "jdoe", "password": "x"})

        assert response.status_code == 401
        assert response.json()["error"] == "TotvsAuthenticationError"

    @pytest.mark.parametrize("body", [
        {"username": "", "password": "x"},
        {"username": "   ", "password": "x"},
        {"username": "jdoe", "password": ""},
        {"username": "jdoe"},
    ])
    def test_login_validation(self, client, body):
        assert client.post("/v1/auth/login", json=body).status_code == 422

    def test_login_rate_limit(self, client):
        statuses = [
            client.post("/v1/auth/login", json={"username": "jdoe", "password": "senha"}).status_code
            for _ in range(11)
        ]

        assert statuses[:10] == [200] * 10
        assert statuses[10] == 429

    def test_logout_forgets_password(self, client, vault):
        client.post("/v1/auth/login", json={"username": "jdoe", "password": "senha"})

        response = client.post("/v1/auth/logout", json={"login": "jdoe"})

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert "jdoe" not in vault._records


class TestFractioningRoutes:

    def test_item(self, client, fake_totvs):
        fake_totvs.resource_handler = lambda request: json_response(
            {"it_codigo": "3066865", "desc_item": "CAIXA"}
        )

        response = client.get("/v1/fractioning/item", params={"it_codigo": "3066865"}, headers=USER)

        assert response.status_code == 200
        assert response.json()["desc_item"] == "CAIXA"

    def test_missing_user_header(self, client):
        response = client.get("/v1/fractioning/item", params={"it_codigo": "1"})

        assert response.status_code == 401

    def test_missing_required_code(self, client):
        response = client.get("/v1/fractioning/locations", params={"cod_estabel": "2202"}, headers=USER)

        assert response.status_code == 422

    def test_empty_deposits(self, client, fake_totvs):
        fake_totvs.resource_handler = lambda request: text_response("")

        response = client.get("/v1/fractioning/deposits", params={"cod_estabel": "2202"}, headers=USER)

        assert response.status_code == 200
        assert response.json() == []

    def test_box_return_accepts_comma_decimal(self, client, fake_totvs):
        fake_totvs.resource_handler = lambda request: json_response(
            {"total": 0, "hasNext": False, "items": []}
        )
        params = {
            "cod_estabel": "2202",
            "it_codigo": "3066865",
            "cod_deposito": "ALM",
            "cod_local": "A1",
            "cod_lote": "L1",
            "quantidade": "2,5",
        }

        response = client.get("/v1/fractioning/box-return", params=params, headers=USER)

        assert response.status_code == 200
        assert fake_totvs.resource_calls[0].url.params["quantidade"] == "2.5"

    @pytest.mark.parametrize("quantidade", ["0", "-1", "abc", "nan", "inf"])
    def test_box_return_rejects_bad_quantity(self, client, quantidade):
        params = {
            "cod_estabel": "2202",
            "it_codigo": "1",
            "cod_deposito": "ALM",
            "cod_local": "A1",
            "cod_lote": "L1",
            "quantidade": quantidade,
        }

        response = client.get("/v1/fractioning/box-return", params=params, headers=USER)

        assert response.status_code == 422

    @pytest.mark.parametrize("quantidade", [[1], {"valor": 1}, True, None])
    def test_finalize_rejects_non_numeric_quantity(self, client, fake_totvs, quantidade):
        body = {
            "cod_estabel": "2202",
            "it_codigo": "1",
            "cod_deposito": "ALM",
            "cod_local": "A1",
            "cod_lote": "L1",
            "quantidade": quantidade,
            "dados_baixa": "dados",
        }

        response = client.post("/v1/fractioning/finalize", json=body, headers=USER)

        assert response.status_code == 422
        assert fake_totvs.resource_calls == []

    def test_finalize_validation_error(self, client, fake_totvs):
        fake_totvs.resource_handler = lambda request: json_response({
            "total": 1,
            "hasNext": False,
            "items": [{"mensagem": "ERRO: lote bloqueado"}],
        })
        body = {
            "cod_estabel": "2202",
            "it_codigo": "1",
            "cod_deposito": "ALM",
            "cod_local": "A1",
            "cod_lote": "L1",
            "quantidade": 3,
            "dados_baixa": "dados",
        }

        response = client.post("/v1/fractioning/finalize", json=body, headers=USER)

        assert response.status_code == 400
        assert response.json() == {
            "error": "FractioningValidationError",
            "detail": "ERRO: lote bloqueado",
        }

    def test_session_expired_without_credentials(self, client, fake_totvs):
        fake_totvs.resource_handler = lambda request: text_response(LOGIN_PAGE_HTML)

        response = client.get("/v1/fractioning/item", params={"it_codigo": "1"}, headers=USER)

        assert response.status_code == 401
        assert response.json()["error"] == "SessionExpiredError"

    def test_session_recovered_after_login(self, client, fake_totvs):
        client.post("/v1/auth/login", json={"username": "jdoe", "password": "senha"})
        logins_before = len(fake_totvs.login_calls)
        served = {"count": 0}

        def handler(request):
            served["count"] += 1
            if served["count"] == 1:
                return text_response(LOGIN_PAGE_HTML)
            return json_response({"it_codigo": "1", "desc_item": "CAIXA"})

        fake_totvs.resource_handler = handler

        response = client.get("/v1/fractioning/item", params={"it_codigo": "1"}, headers=USER)

        assert response.status_code == 200
        assert len(fake_totvs.login_calls) == logins_before + 1

    def test_upstream_error_is_502(self, client, fake_totvs):
        fake_totvs.resource_handler = lambda request: text_response("boom", status_code=500)

        response = client.get("/v1/fractioning/item", params={"it_codigo": "1"}, headers=USER)

        assert response.status_code == 502
        assert response.json()["error"] == "TotvsError"


class TestApiKey:

    @pytest.fixture
    def production_settings(self, monkeypatch):
        settings = Settings(
            _env_file=None,
            environment="production",
            api_key="chave-de-producao",
            secret_key="test-secret-key-for-pytest-32-chars!!",
        )
        monkeypatch.setattr(dependencies, "get_settings", lambda: settings)
        return settings

    def test_missing_key(self, client, production_settings):
        response = client.get("/v1/fractioning/item", params={"it_codigo": "1"}, headers=USER)

        assert response.status_code == 401

    def test_wrong_key(self, client, production_settings):
        headers = {**USER, "X-API-Key": "errada"}

        response = client.get("/v1/fractioning/item", params={"it_codigo": "1"}, headers=headers)

        assert response.status_code == 403

    def test_bearer_key(self, client, fake_totvs, production_settings):
        fake_totvs.resource_handler = lambda request: json_response({"it_codigo": "1"})
        headers = {**USER, "Authorization": "Bearer chave-de-producao"}

        response = client.get("/v1/fractioning/item", params={"it_codigo": "1"}, headers=headers)

        assert response.status_code == 200
