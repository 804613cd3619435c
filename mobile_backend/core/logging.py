"""
Configuração de logging estruturado com structlog.
"""

import logging
import sys

import structlog

from mobile_backend.core.config import get_settings
from mobile_backend.core.security import sanitize_log_data


def _mask_sensitive(_logger, _method_name: str, event_dict: dict) -> dict:
    """Processor que mascara senhas, cookies e tokens antes de renderizar."""
    return sanitize_log_data(event_dict)


def setup_logging() -> None:
    """
    Configura structlog e o logging da stdlib.

    - LOG_FORMAT=json: uma linha JSON por evento (produção)
    - LOG_FORMAT=console: saída colorida para desenvolvimento
    """
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _mask_sensitive,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Retorna logger estruturado para o módulo."""
    return structlog.get_logger(name)
