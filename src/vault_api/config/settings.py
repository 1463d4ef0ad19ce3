# src/vault_api/config/settings.py
from typing import List, Optional
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

VALID_ENVIRONMENTS = ["development", "production", "test"]


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from vault_api.config.settings import get_settings
        settings = get_settings()
        storage_dir = settings.storage_dir
    """

    # Application Settings
    app_name: str = Field(
        default="vault-api",
        description="Application name"
    )

    environment: str = Field(
        default="production",
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV", "environment"),
        description="Runtime environment: development, production, or test"
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP server binds to"
    )

    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port the HTTP server listens on"
    )

    public_base_url: Optional[str] = Field(
        default=None,
        description="Scheme and host used in file URLs. Falls back to the request's own base URL."
    )

    cors_allow_origins: List[str] = Field(
        default=["*"],
        description="Origins allowed to call the API from a browser"
    )

    # Storage Configuration
    storage_dir: str = Field(
        default="uploads",
        description="Directory that holds uploaded files"
    )

    client_dist_dir: str = Field(
        default="frontend/dist",
        description="Directory of the bundled client app served for unmatched routes"
    )

    # Upload client
    api_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL the upload client talks to"
    )

    client_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound on every request the upload client makes"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @property
    def is_development(self) -> bool:
        """Internal error detail is only exposed to callers in development."""
        return self.environment == "development"

    @field_validator("environment", mode="before")
    @classmethod
    def normalize_environment(cls, v):
        """Normalize common spellings of the environment name."""
        if isinstance(v, str):
            v = v.strip().lower()
            mode_mapping = {
                "dev": "development",
                "prod": "production",
            }
            return mode_mapping.get(v, v)
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment is one of the allowed values."""
        if v not in VALID_ENVIRONMENTS:
            raise ValueError(f"Invalid environment: {v}. Must be one of {VALID_ENVIRONMENTS}")
        return v

    @field_validator("public_base_url", "api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        if v:
            return v.rstrip("/")
        return v

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v):
        return v.upper()

    def get_environment_dict(self) -> dict:
        """Get configuration as a dictionary suitable for a subprocess environment.

        Returns:
            Dictionary of environment variables
        """
        return {
            "ENVIRONMENT": self.environment,
            "HOST": self.host,
            "PORT": str(self.port),
            "STORAGE_DIR": self.storage_dir,
            "CLIENT_DIST_DIR": self.client_dist_dir,
            "PUBLIC_BASE_URL": self.public_base_url or "",
            "API_BASE_URL": self.api_base_url,
            "CLIENT_TIMEOUT_SECONDS": str(self.client_timeout_seconds),
            "LOG_LEVEL": self.log_level,
        }

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
