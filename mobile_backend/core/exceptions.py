"""
Exceções de domínio.

Cada exceção carrega o status HTTP usado pelo handler global
em ``mobile_backend.main``.
"""


class AppException(Exception):
    """Exceção base da aplicação."""

    status_code: int = 500

    def __init__(self, message: str = "Erro interno"):
        self.message = message
        super().__init__(message)


# ============== TOTVS ==============

class TotvsError(AppException):
    """Falha de transporte ou de protocolo ao falar com o TOTVS."""

    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None):
        self.upstream_status = upstream_status
        super().__init__(message)


class RetryBudgetExceededError(TotvsError):
    """Orçamento de tentativas de uma chamada esgotado."""

    def __init__(self, message: str = "Limite de tentativas ao TOTVS excedido"):
        super().__init__(message)


class TooManyRedirectsError(RetryBudgetExceededError):
    """Cadeia de redirecionamentos maior que o permitido."""

    def __init__(self, max_redirects: int):
        self.max_redirects = max_redirects
        super().__init__(
            f"Too many redirects: limite de {max_redirects} redirecionamentos excedido"
        )


class TotvsAuthenticationError(AppException):
    """TOTVS rejeitou as credenciais (ou respondeu 401)."""

    status_code = 401

    def __init__(self, message: str = "Usuário ou senha inválidos"):
        super().__init__(message)


class SessionExpiredError(AppException):
    """Sessão TOTVS perdida e sem credenciais para recuperá-la."""

    status_code = 401

    def __init__(
        self,
        message: str = "Sessão TOTVS expirada. Faça login novamente.",
    ):
        super().__init__(message)


# ============== Fracionamento ==============

class FractioningValidationError(AppException):
    """TOTVS devolveu mensagem de erro de negócio nos itens."""

    status_code = 400
