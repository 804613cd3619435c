"""
Testes do login TOTVS (escd0002).
"""

import httpx
import pytest

from fakes import LOGIN_OK, LOGIN_PAGE_HTML, json_response, text_response

from mobile_backend.core.exceptions import TotvsAuthenticationError


def _accept_only(login: str):
    """Handler que aceita apenas o login informado."""
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["login"] == login:
            return json_response(
                {**LOGIN_OK, "login": login},
                headers=[("set-cookie", "JSESSIONID=fresh; Path=/")],
            )
        return json_response({"desc_erro": "Usuário inválido", "nome": "", "login": ""})
    return handler


class TestTotvsLogin:

    @pytest.mark.asyncio
    async def test_sentinel_response_is_success(self, totvs_client, fake_totvs, cookie_store):
        result = await totvs_client.login("jdoe", "senha")

        assert result.is_valid
        assert result.nome == "JOHN DOE"
        assert len(fake_totvs.login_calls) == 1
        assert cookie_store.as_dict() == {"JSESSIONID": "fresh"}

    @pytest.mark.asyncio
    async def test_sends_basic_auth_and_query_credentials(self, totvs_client, fake_totvs):
        await totvs_client.login("jdoe", "p@ss word")

        request = fake_totvs.login_calls[0]
        assert request.headers["authorization"].startswith("Basic ")
        assert request.url.params["tipo"] == "1"
        assert request.url.params["login"] == "jdoe"
        assert request.url.params["senha"] == "p@ss word"
        assert "p%40ss%20word" in str(request.url)

    @pytest.mark.asyncio
    async def test_falls_back_to_domain_suffix(self, totvs_client, fake_totvs):
        fake_totvs.login_handler = _accept_only("jdoe@asperbras")

        result = await totvs_client.login("jdoe", "senha")

        assert result.login == "jdoe@asperbras"
        assert [r.url.params["login"] for r in fake_totvs.login_calls] == ["jdoe", "jdoe@asperbras"]

    @pytest.mark.asyncio
    async def test_suffixed_login_is_tried_once(self, totvs_client, fake_totvs):
        fake_totvs.login_handler = _accept_only("nobody")

        with pytest.raises(TotvsAuthenticationError):
            await totvs_client.login("jdoe@asperbras", "senha")

        assert len(fake_totvs.login_calls) == 1

    @pytest.mark.asyncio
    async def test_both_attempts_rejected(self, totvs_client, fake_totvs, cookie_store):
        fake_totvs.login_handler = lambda request: json_response(
            {"desc_erro": "Senha inválida"},
            headers=[("set-cookie", "JSESSIONID=nope")],
        )

        with pytest.raises(TotvsAuthenticationError):
            await totvs_client.login("jdoe", "errada")

        assert len(fake_totvs.login_calls) == 2
        assert len(cookie_store) == 0

    @pytest.mark.asyncio
    async def test_http_401_falls_back_then_fails(self, totvs_client, fake_totvs):
        fake_totvs.login_handler = lambda request: text_response("", status_code=401)

        with pytest.raises(TotvsAuthenticationError):
            await totvs_client.login("jdoe", "errada")

        assert len(fake_totvs.login_calls) == 2

    @pytest.mark.asyncio
    async def test_server_error_is_reported_as_authentication_failure(self, totvs_client, fake_totvs):
        fake_totvs.login_handler = lambda request: text_response("boom", status_code=500)

        with pytest.raises(TotvsAuthenticationError):
            await totvs_client.login("jdoe", "senha")

    @pytest.mark.asyncio
    async def test_html_body_is_failure(self, totvs_client, fake_totvs):
        fake_totvs.login_handler = lambda request: text_response(LOGIN_PAGE_HTML)

        with pytest.raises(TotvsAuthenticationError):
            await totvs_client.login("jdoe", "senha")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", ["", "not json at all"])
    async def test_unreadable_200_body_is_synthesized(self, totvs_client, fake_totvs, cookie_store, body):
        fake_totvs.login_handler = lambda request: text_response(
            body, headers=[("set-cookie", "JSESSIONID=fresh")]
        )

        result = await totvs_client.login("jdoe", "senha")

        assert result.desc_erro == "OK"
        assert result.nome == "jdoe"
        assert result.login == "jdoe"
        assert cookie_store.as_dict() == {"JSESSIONID": "fresh"}

    @pytest.mark.asyncio
    async def test_connection_failure_is_authentication_failure(self, totvs_client, fake_totvs):
        def refuse(request):
            raise httpx.ReadTimeout("timeout", request=request)

        fake_totvs.login_handler = refuse

        with pytest.raises(TotvsAuthenticationError):
            await totvs_client.login("jdoe", "senha")
