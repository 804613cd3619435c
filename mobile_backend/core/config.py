"""
Mobile Backend (BFF)
Configurações por ambiente
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Base path calculado uma vez
_BASE_PATH = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Configurações da aplicação com validação via Pydantic."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "mobile-backend-base"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True

    # API
    api_key: str = "dev-api-key-change-in-production"
    login_rate_limit: str = "10/minute"

    # Server
    host: str = "127.0.0.1"
    port: int = 3333

    # Security
    # Também é a origem da chave do cofre de credenciais TOTVS
    secret_key: str = Field(
        default="change-this-secret-key-in-production",
        min_length=32,
    )

    # TOTVS
    totvs_api_environment: Literal["homolog", "production"] = "homolog"
    totvs_api_base_url: str = "http://totvs-homolog.asperbras.com/dts/datasul-rest"
    totvs_production_url: str = "http://totvs.asperbras.com/dts/datasul-rest"
    totvs_login_domain: str = "@asperbras"
    totvs_request_timeout_seconds: float = 30.0
    totvs_max_redirects: int = Field(default=5, ge=0)
    totvs_relogin_wait_seconds: float = 1.0
    totvs_max_relogin_attempts: int = Field(default=1, ge=0)

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "console"

    @property
    def base_path(self) -> Path:
        """Caminho base do projeto."""
        return _BASE_PATH

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def totvs_base_url(self) -> str:
        """URL base do Datasul REST conforme o ambiente TOTVS."""
        if self.totvs_api_environment == "production":
            return self.totvs_production_url.rstrip("/")
        return self.totvs_api_base_url.rstrip("/")

    @property
    def cors_origins(self) -> list[str]:
        """Retorna lista de origens CORS."""
        origins_str = os.environ.get("CORS_ORIGINS", "")
        if origins_str:
            return [origin.strip() for origin in origins_str.split(",")]
        if self.is_production:
            return []
        return ["http://localhost:3000", "http://localhost:8081", "http://localhost:19006"]


@lru_cache
def get_settings() -> Settings:
    """Retorna instância cacheada das configurações."""
    return Settings()
