# pharmapos/core/config.py
import os
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration de l'application avec validation Pydantic"""

    # =====================================
    # APPLICATION
    # =====================================
    APP_NAME: str = "Pharma POS"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # =====================================
    # SÉCURITÉ JWT
    # =====================================
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24h

    # =====================================
    # BASE DE DONNÉES
    # =====================================
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "postgres")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "pharma_pos")
    POSTGRES_HOST: str = os.getenv("POSTGRES_HOST", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")

    # URL complète, prioritaire sur les paramètres POSTGRES_*
    SQLALCHEMY_DATABASE_URL: Optional[str] = None

    @property
    def DATABASE_URL(self) -> str:
        if self.SQLALCHEMY_DATABASE_URL:
            return self.SQLALCHEMY_DATABASE_URL
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    # =====================================
    # SQLALCHEMY CONFIGURATION
    # =====================================
    SQLALCHEMY_ECHO: bool = False

    @property
    def SQLALCHEMY_ENGINE_OPTIONS(self) -> dict:
        # Options de pool valables uniquement pour PostgreSQL
        if not self.DATABASE_URL.startswith("postgresql"):
            return {}
        return {
            "pool_size": 10,
            "max_overflow": 20,
            "pool_timeout": 30,
            "pool_recycle": 1800,
            "pool_pre_ping": True,
            "connect_args": {"client_encoding": "utf8", "connect_timeout": 10}
        }

    # =====================================
    # CORS
    # =====================================
    CORS_ORIGINS: list = ["http://localhost:3000", "http://127.0.0.1:3000"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list = ["*"]
    CORS_ALLOW_HEADERS: list = ["*"]

    # =====================================
    # ABONNEMENTS (contrôle d'accès)
    # =====================================
    # Préfixes par segments complets ; "/" ne couvre que la racine
    SUBSCRIPTION_SKIP_PATHS: list = [
        "/",
        "/api/auth",
        "/api/account/login",
        "/api/account/register",
        "/api/subscription",
        "/api/billing",
        "/api/security",
        "/health",
        "/swagger",
        "/docs",
        "/openapi.json",
    ]
    SUBSCRIPTION_STATIC_EXTENSIONS: list = [".css", ".js", ".png", ".jpg", ".ico", ".svg"]
    SUBSCRIPTION_UPGRADE_URL: str = "/api/billing/upgrade"

    # =====================================
    # ISOLATION PAR SUCCURSALE
    # =====================================
    BRANCH_ISOLATION_SKIP_PATHS: list = [
        "/api/auth",
        "/connect",
        "/.well-known",
        "/swagger",
        "/docs",
    ]

    # =====================================
    # LOGGING
    # =====================================
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


# Instance globale des paramètres
settings = Settings()
