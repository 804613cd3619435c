"""
Classificação das respostas do TOTVS.

O Datasul não devolve 401 quando a sessão cai: redireciona para a
tela de login, devolve a própria página HTML com status 200 ou manda
corpo vazio. Toda essa heurística fica aqui, numa função só, e o
cliente decide o que fazer olhando apenas para ``ResponseClass``.
"""

from urllib.parse import urljoin

import httpx

from mobile_backend.domain.entities import ClassifiedResponse, ResponseClass

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})

# Trechos de URL que identificam a tela de login do TOTVS
LOGIN_PAGE_MARKERS = ("loginForm", "totvs-login")


def is_login_page_url(url: str) -> bool:
    return any(marker in url for marker in LOGIN_PAGE_MARKERS)


def classify_response(response: httpx.Response, request_url: str) -> ClassifiedResponse:
    """
    Classifica uma resposta crua.

    Args:
        response: Resposta obtida sem seguir redirecionamentos.
        request_url: URL requisitada, base para resolver Location relativo.
    """
    status = response.status_code

    if status in REDIRECT_STATUSES:
        location = response.headers.get("location")
        if not location:
            return ClassifiedResponse(
                kind=ResponseClass.ERROR,
                status_code=status,
                message=f"TOTVS API error: {status} sem cabeçalho Location",
            )

        target = urljoin(request_url, location)
        kind = (
            ResponseClass.LOGIN_PAGE_REDIRECT
            if is_login_page_url(target)
            else ResponseClass.REDIRECT
        )
        return ClassifiedResponse(kind=kind, status_code=status, location=target)

    if not 200 <= status < 300:
        return ClassifiedResponse(
            kind=ResponseClass.ERROR,
            status_code=status,
            message=f"TOTVS API error: {status} {response.reason_phrase}".rstrip(),
        )

    body = response.text.strip()

    if not body:
        return ClassifiedResponse(kind=ResponseClass.EMPTY_BODY, status_code=status)

    if body.startswith("<"):
        return ClassifiedResponse(kind=ResponseClass.LOGIN_PAGE_BODY, status_code=status)

    try:
        payload = response.json()
    except ValueError as e:
        return ClassifiedResponse(
            kind=ResponseClass.ERROR,
            status_code=status,
            message=f"Failed to parse TOTVS response: {e}",
        )

    return ClassifiedResponse(
        kind=ResponseClass.JSON_PAYLOAD,
        status_code=status,
        payload=payload,
    )
