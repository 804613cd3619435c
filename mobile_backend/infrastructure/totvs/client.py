"""
Cliente TOTVS Datasul REST.

Autentica com Basic Auth no programa escd0002 e, a partir daí, fala
com os recursos usando apenas os cookies de sessão. Quando a sessão
cai (redirect para a tela de login, página HTML ou corpo vazio), faz
re-login silencioso com a senha guardada no cofre e repete a chamada.

NOTA: redirecionamentos são seguidos manualmente para que a tela de
login seja detectada antes de ser "seguida" pelo httpx.
"""

import asyncio
import copy
from typing import Any
from urllib.parse import quote

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from mobile_backend.core.config import Settings, get_settings
from mobile_backend.core.exceptions import (
    RetryBudgetExceededError,
    SessionExpiredError,
    TooManyRedirectsError,
    TotvsAuthenticationError,
    TotvsError,
)
from mobile_backend.core.logging import get_logger
from mobile_backend.core.security import mask_login
from mobile_backend.domain.entities import (
    BOX_RESPONSE_DEFAULT,
    LIST_RESPONSE_DEFAULT,
    ResponseClass,
    TotvsLoginResponse,
)
from mobile_backend.domain.interfaces import (
    ICookieStore,
    ICredentialVault,
    IRefreshGuard,
    ITotvsClient,
)
from mobile_backend.infrastructure.totvs.classifier import classify_response

logger = get_logger(__name__)

LOGIN_PATH = "/resources/prg/cdp/v1/escd0002"
FRACTIONING_PATH = "/resources/prg/cpp/v1/escp1001"

# Códigos "tipo" do escp1001
TIPO_DEPOSITOS = 1
TIPO_LOCALIZACOES = 2
TIPO_LOTES = 3
TIPO_ITEM = 4
TIPO_RETORNO_CAIXA = 5
TIPO_FINALIZAR = 6

# Caracteres que encodeURIComponent também preserva
_QUERY_SAFE = "!'()*"


def format_query_value(value: Any) -> str:
    """
    Converte um valor de query string em texto.

    Números usam a conversão padrão, sem arredondar nem completar
    casas: 100.5 -> "100.5", 100.0 -> "100".
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_url(base_url: str, path: str, params: dict[str, Any]) -> str:
    """Monta a URL codificando cada parâmetro individualmente."""
    query = "&".join(
        f"{quote(name, safe='')}={quote(format_query_value(value), safe=_QUERY_SAFE)}"
        for name, value in params.items()
        if value is not None
    )
    return f"{base_url}{path}?{query}" if query else f"{base_url}{path}"


class TotvsClient(ITotvsClient):
    """
    Cliente com sessão por cookie e recuperação automática.

    O jar de cookies e a guarda de re-login são injetados e
    compartilhados entre todas as requisições do processo.
    """

    def __init__(
        self,
        cookie_store: ICookieStore,
        refresh_guard: IRefreshGuard,
        credential_vault: ICredentialVault,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            cookie_store: Jar compartilhado de cookies TOTVS
            refresh_guard: Guarda single-flight de re-login
            credential_vault: Origem das senhas para re-login
            settings: Configurações (padrão: get_settings())
            transport: Transporte httpx alternativo (testes)
        """
        self.settings = settings or get_settings()
        self.base_url = self.settings.totvs_base_url
        self.cookies = cookie_store
        self.refresh_guard = refresh_guard
        self.vault = credential_vault
        self._transport = transport

    def _get_headers(self) -> dict[str, str]:
        """Headers padrão, com o cookie de sessão quando houver."""
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

        cookie_header = self.cookies.to_header()
        if cookie_header:
            headers["Cookie"] = cookie_header

        return headers

    @retry(
        retry=retry_if_exception_type((httpx.ConnectError, httpx.ConnectTimeout)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        reraise=True,
    )
    async def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        json: Any = None,
        auth: httpx.Auth | None = None,
    ) -> httpx.Response:
        """
        Executa uma única requisição, sem seguir redirecionamentos.

        Só falhas de conexão são repetidas: nelas a requisição
        não chegou ao TOTVS.
        """
        async with httpx.AsyncClient(
            follow_redirects=False,
            timeout=self.settings.totvs_request_timeout_seconds,
            transport=self._transport,
        ) as client:
            return await client.request(
                method,
                url,
                headers=headers,
                json=json,
                auth=auth,
            )

    # ============== Login ==============

    async def login(self, identity: str, password: str) -> TotvsLoginResponse:
        """
        Autentica no TOTVS.

        Tenta o login como informado e, se falhar, com o sufixo de
        domínio (ex.: jdoe -> jdoe@asperbras).

        Raises:
            TotvsAuthenticationError: Se as duas tentativas falharem.
        """
        candidates = [identity]
        domain = self.settings.totvs_login_domain
        if domain and not identity.endswith(domain):
            candidates.append(f"{identity}{domain}")

        logger.debug(
            "Tentativa de login TOTVS",
            login=mask_login(identity),
            environment=self.settings.totvs_api_environment,
        )

        for attempt, candidate in enumerate(candidates, start=1):
            try:
                response = await self._attempt_login(candidate, password)
            except (TotvsError, TotvsAuthenticationError) as e:
                logger.debug(
                    "Tentativa de login TOTVS falhou",
                    login=mask_login(candidate),
                    attempt=attempt,
                    error=str(e),
                )
                continue

            logger.info("Login TOTVS realizado", login=mask_login(candidate), attempt=attempt)
            return response

        logger.warning("Login TOTVS falhou em todas as tentativas", login=mask_login(identity))
        raise TotvsAuthenticationError()

    async def _attempt_login(self, candidate: str, password: str) -> TotvsLoginResponse:
        """Uma chamada ao escd0002; grava os cookies apenas em caso de sucesso."""
        url = build_url(
            self.base_url,
            LOGIN_PATH,
            {"tipo": 1, "login": candidate, "senha": password},
        )

        try:
            response = await self._send(
                "GET",
                url,
                headers=self._get_headers(),
                auth=httpx.BasicAuth(candidate, password),
            )
        except httpx.HTTPError as e:
            raise TotvsError(f"TOTVS API request failed: {e.__class__.__name__}") from e

        status = response.status_code

        if status == 401:
            raise TotvsAuthenticationError("Invalid credentials")

        if not 200 <= status < 300:
            raise TotvsError(
                f"TOTVS API error: {status} {response.reason_phrase}".rstrip(),
                upstream_status=status,
            )

        body = response.text.strip()

        if body.startswith("<"):
            raise TotvsAuthenticationError("TOTVS devolveu página de login")

        try:
            data = response.json() if body else None
        except ValueError:
            data = None

        if isinstance(data, dict):
            result = TotvsLoginResponse.from_dict(data)
            if not result.is_valid:
                raise TotvsAuthenticationError("Invalid credentials")
        elif status == 200:
            # O TOTVS às vezes aceita o login e manda corpo vazio ou quebrado
            logger.debug("Login TOTVS com corpo ilegível, assumindo sucesso", login=mask_login(candidate))
            result = TotvsLoginResponse.synthesized(candidate)
        else:
            raise TotvsError("Failed to parse TOTVS login response", upstream_status=status)

        self.cookies.update(response.headers.get_list("set-cookie"))
        return result

    # ============== Requisições genéricas ==============

    async def request(
        self,
        url: str,
        identity: str | None = None,
        *,
        method: str = "GET",
        json: Any = None,
        empty_default: Any = None,
        max_redirects: int | None = None,
    ) -> Any:
        """
        Chama um recurso do TOTVS usando apenas o cookie de sessão.

        Args:
            url: URL completa do recurso.
            identity: Login do usuário, necessário para re-login.
            method: GET ou POST.
            json: Corpo JSON (POST).
            empty_default: Payload devolvido quando o corpo vem vazio.
                Sem ele, corpo vazio é tratado como perda de sessão.
            max_redirects: Orçamento de redirecionamentos e novas
                tentativas (padrão: TOTVS_MAX_REDIRECTS).

        Returns:
            JSON já decodificado.
        """
        budget = self.settings.totvs_max_redirects if max_redirects is None else max_redirects
        remaining = budget
        relogins = 0
        current_url, current_method, current_json = url, method, json

        while True:
            try:
                response = await self._send(
                    current_method,
                    current_url,
                    headers=self._get_headers(),
                    json=current_json,
                )
            except httpx.HTTPError as e:
                raise TotvsError(f"TOTVS API request failed: {e.__class__.__name__}") from e

            self.cookies.update(response.headers.get_list("set-cookie"))

            result = classify_response(response, current_url)

            if result.kind is ResponseClass.JSON_PAYLOAD:
                return result.payload

            if result.kind is ResponseClass.REDIRECT:
                if remaining <= 0:
                    raise TooManyRedirectsError(budget)
                remaining -= 1
                logger.debug(
                    "Seguindo redirecionamento TOTVS",
                    status=result.status_code,
                    remaining=remaining,
                )
                if result.status_code == 303:
                    # 303 See Other: segue sempre com GET e sem corpo
                    current_method, current_json = "GET", None
                current_url = result.location
                continue

            if result.kind is ResponseClass.EMPTY_BODY and empty_default is not None:
                return copy.deepcopy(empty_default)

            if result.kind is ResponseClass.ERROR:
                if result.status_code == 401:
                    raise TotvsAuthenticationError("TOTVS recusou a sessão (401)")
                raise TotvsError(result.message, upstream_status=result.status_code)

            # Perda de sessão
            logger.warning(
                "Sessão TOTVS perdida",
                signal=result.kind.value,
                login=mask_login(identity),
            )

            if not identity:
                raise SessionExpiredError(
                    "Sessão TOTVS expirada e nenhum usuário informado para re-login."
                )

            if remaining <= 0:
                self.cookies.clear()
                raise RetryBudgetExceededError()
            remaining -= 1

            if await self._recover_session(identity, relogins):
                relogins += 1

            current_url, current_method, current_json = url, method, json

    async def _recover_session(self, identity: str, relogins_done: int) -> bool:
        """
        Restabelece a sessão TOTVS de ``identity``.

        Returns:
            True se este chamador fez o re-login; False se outro
            re-login da mesma identidade já estava em andamento e
            apenas aguardamos.

        Raises:
            SessionExpiredError: Sem credenciais ou tentativas esgotadas.
            TotvsAuthenticationError: Re-login recusado pelo TOTVS.
        """
        if relogins_done >= self.settings.totvs_max_relogin_attempts:
            self.cookies.clear()
            raise SessionExpiredError(
                "Sessão TOTVS não pôde ser restabelecida. Faça login novamente."
            )

        if not self.refresh_guard.try_acquire(identity):
            logger.info("Re-login TOTVS já em andamento, aguardando", login=mask_login(identity))
            await asyncio.sleep(self.settings.totvs_relogin_wait_seconds)
            return False

        try:
            password = await self.vault.get(identity)

            if password is None:
                logger.warning("Sem credenciais para re-login TOTVS", login=mask_login(identity))
                self.cookies.clear()
                raise SessionExpiredError()

            try:
                await self.login(identity, password)
            except TotvsAuthenticationError:
                self.cookies.clear()
                raise

            logger.info("Sessão TOTVS restabelecida", login=mask_login(identity))
            return True
        finally:
            self.refresh_guard.release(identity)

    # ============== Fracionamento (escp1001) ==============

    def _fractioning_url(self, params: dict[str, Any]) -> str:
        return build_url(self.base_url, FRACTIONING_PATH, params)

    async def get_item(self, it_codigo: str, identity: str | None = None) -> dict:
        url = self._fractioning_url({"tipo": TIPO_ITEM, "it_codigo": it_codigo})
        return await self.request(url, identity)

    async def get_deposits(self, cod_estabel: str, identity: str | None = None) -> list:
        url = self._fractioning_url({"tipo": TIPO_DEPOSITOS, "cod_estabel": cod_estabel})
        return await self.request(url, identity, empty_default=LIST_RESPONSE_DEFAULT)

    async def get_locations(
        self,
        cod_estabel: str,
        cod_deposito: str,
        identity: str | None = None,
    ) -> list:
        url = self._fractioning_url({
            "tipo": TIPO_LOCALIZACOES,
            "cod_estabel": cod_estabel,
            "cod_deposito": cod_deposito,
        })
        return await self.request(url, identity, empty_default=LIST_RESPONSE_DEFAULT)

    async def get_batches(
        self,
        cod_estabel: str,
        it_codigo: str,
        cod_deposito: str,
        cod_local: str,
        identity: str | None = None,
    ) -> list:
        url = self._fractioning_url({
            "tipo": TIPO_LOTES,
            "cod_estabel": cod_estabel,
            "it_codigo": it_codigo,
            "cod_deposito": cod_deposito,
            "cod_local": cod_local,
        })
        return await self.request(url, identity, empty_default=LIST_RESPONSE_DEFAULT)

    async def get_box_return(
        self,
        cod_estabel: str,
        it_codigo: str,
        cod_deposito: str,
        cod_local: str,
        cod_lote: str,
        quantidade: float,
        identity: str | None = None,
    ) -> dict:
        url = self._fractioning_url({
            "tipo": TIPO_RETORNO_CAIXA,
            "cod_estabel": cod_estabel,
            "it_codigo": it_codigo,
            "cod_deposito": cod_deposito,
            "cod_local": cod_local,
            "cod_lote": cod_lote,
            "quantidade": quantidade,
        })
        return await self.request(url, identity, empty_default=BOX_RESPONSE_DEFAULT)

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
        identity: str | None = None,
    ) -> dict:
        url = self._fractioning_url({
            "tipo": TIPO_FINALIZAR,
            "cod_estabel": cod_estabel,
            "it_codigo": it_codigo,
            "cod_deposito": cod_deposito,
            "cod_local": cod_local,
            "cod_lote": cod_lote,
            "quantidade": quantidade,
            "dados_baixa": dados_baixa,
            "ordem_producao": ordem_producao,
            "batelada": batelada,
        })
        return await self.request(url, identity, empty_default=BOX_RESPONSE_DEFAULT)
