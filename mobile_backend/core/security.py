"""
Utilitários de segurança para logs.
"""

from typing import Any


SENSITIVE_KEYS = (
    "senha", "password", "token", "secret",
    "authorization", "cookie", "api_key",
)


def mask_login(login: str | None) -> str:
    """
    Mascara login para logs.

    Exemplo: jdoe@asperbras -> jd***@asperbras
    """
    if not login:
        return "N/A"

    user, sep, domain = login.partition("@")

    if len(user) <= 2:
        return f"***{sep}{domain}"

    return f"{user[:2]}***{sep}{domain}"


def mask_token(token: str | None, visible_chars: int = 8) -> str:
    """
    Mascara tokens e cabeçalhos de cookie para logs.

    Exemplo: JSESSIONID=abc123... -> JSESSIO...***
    """
    if not token:
        return "N/A"

    if len(token) <= visible_chars:
        return "***"

    return f"{token[:visible_chars]}...***"


def sanitize_log_data(data: dict[str, Any]) -> dict[str, Any]:
    """
    Sanitiza dicionário para logging seguro.
    Mascara valores de chaves sensíveis.
    """
    sanitized = {}

    for key, value in data.items():
        key_lower = key.lower()

        if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
            if key_lower in ("senha", "password") or "secret" in key_lower:
                sanitized[key] = "***REDACTED***"
            else:
                sanitized[key] = mask_token(str(value))
        else:
            sanitized[key] = value

    return sanitized
