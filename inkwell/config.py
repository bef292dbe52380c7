"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_JWT_SECRET = "dev-jwt-secret-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
    
    # ==========================================================================
    # Environment
    # ==========================================================================
    
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    
    # ==========================================================================
    # API Server
    # ==========================================================================
    
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    cors_origins: str = "http://localhost:5173"
    
    # ==========================================================================
    # Database
    # ==========================================================================
    
    # Empty means the in-memory store; "mongodb://..." selects MongoDB
    database_url: str = ""
    database_name: str = "inkwell"
    
    # ==========================================================================
    # Authentication
    # ==========================================================================
    
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24 * 7
    
    # ==========================================================================
    # Articles
    # ==========================================================================
    
    slug_suffix_length: int = 6
    slug_max_attempts: int = 5
    
    # ==========================================================================
    # Optional Services
    # ==========================================================================
    
    sentry_dsn: str = ""
    
    # ==========================================================================
    # Helpers
    # ==========================================================================
    
    @model_validator(mode="after")
    def _check_production_secret(self) -> "Settings":
        if self.is_production and self.jwt_secret_key == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET_KEY must be set in production")
        return self
    
    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
    
    @property
    def is_production(self) -> bool:
        return self.environment == "production"
    
    @property
    def use_mongo(self) -> bool:
        """Whether the MongoDB backend should be used."""
        return self.database_url.startswith(("mongodb://", "mongodb+srv://"))


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
