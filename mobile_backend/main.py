"""
Mobile Backend - Aplicação Principal.

Backend-for-frontend do app de fracionamento: autenticação e
operações de estoque repassadas ao TOTVS Datasul.
"""

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from mobile_backend.api.middleware.ratelimit import get_limiter
from mobile_backend.api.v1 import router as v1_router
from mobile_backend.core.config import get_settings
from mobile_backend.core.exceptions import AppException
from mobile_backend.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gerencia ciclo de vida da aplicação.

    Startup:
    - Configura logging

    Shutdown:
    - Registra encerramento (cofre e cookies morrem com o processo)
    """
    setup_logging()
    settings = get_settings()

    logger.info(
        "Iniciando Mobile Backend",
        environment=settings.environment,
        totvs_environment=settings.totvs_api_environment,
        debug=settings.debug,
    )

    yield

    logger.info("Encerrando Mobile Backend")


def create_app() -> FastAPI:
    """
    Factory function para criar aplicação FastAPI.

    Permite configuração diferente para testes.
    """
    settings = get_settings()

    app = FastAPI(
        title="Mobile Backend",
        description="""
# API do app de fracionamento

Autenticação e fracionamento de caixas integrados ao TOTVS Datasul.

## 🔐 Autenticação

Endpoints exigem API Key (exceto em desenvolvimento):

```
X-API-Key: sua-api-key-aqui
```

Endpoints de fracionamento exigem também o login TOTVS do usuário:

```
X-User-Login: jdoe
```

A sessão TOTVS é renovada automaticamente enquanto a senha do
usuário estiver em cache (após `POST /v1/auth/login`).
        """,
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "Autenticação",
                "description": "Login/logout no TOTVS",
            },
            {
                "name": "Fracionamento",
                "description": "Consulta de item, depósito, localização e lote; fracionamento de caixas",
            },
            {
                "name": "Health",
                "description": "Verificação de saúde da aplicação",
            },
        ],
    )

    # Rate limit
    app.state.limiter = get_limiter()
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        """Handler para exceções do domínio."""
        logger.warning(
            "Erro de domínio",
            error=exc.__class__.__name__,
            status_code=exc.status_code,
            path=request.url.path,
            method=request.method,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.__class__.__name__,
                "detail": str(exc),
            },
        )

    app.include_router(v1_router)

    # Health check
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Verifica saúde da aplicação."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
            "totvs_environment": settings.totvs_api_environment,
            "timestamp": datetime.now().isoformat(),
        }

    @app.get("/", tags=["Info"])
    async def root():
        """Informações da API."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs" if settings.debug else "Disabled in production",
            "health": "/health",
            "api": "/v1",
        }

    return app


# Instância da aplicação
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "mobile_backend.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
