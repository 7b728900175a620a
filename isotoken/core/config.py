"""Runtime configuration with validation."""

from enum import Enum
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Deployment environment."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class ConfigurationError(Exception):
    """Raised when configuration is invalid for the environment."""
    pass


INSECURE_DEFAULT_KEY = "dev-insecure-key-change-me"


class Settings(BaseSettings):
    """
    IsoToken settings, read from ``ISOTOKEN_*`` environment variables.

    Used by the CLI and the FastAPI helpers; the parser itself takes its
    registry and clock as constructor arguments instead.
    """

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Deployment environment (development/production)"
    )

    # Signing
    # SIGNING_KEY: default HMAC secret for the CLI and TokenAuth. Default is insecure.
    signing_key: str = Field(
        default=INSECURE_DEFAULT_KEY,
        description="Default HMAC signing secret (override in production)"
    )
    default_algorithm: str = Field(
        default="HS256",
        description="Algorithm used when none is given explicitly"
    )
    token_ttl_seconds: int = Field(
        default=3600,
        description="Lifetime of tokens issued by the CLI (0 = no exp claim)"
    )

    # Request extraction
    access_token_param: str = Field(
        default="access_token",
        description="Query/form parameter searched when no bearer header is sent"
    )
    max_form_bytes: int = Field(
        default=10_000_000,
        description="Largest form body read while looking for the token parameter"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(
        default="json",
        description="Log output format: 'json' for structured, 'text' for human-readable"
    )

    model_config = SettingsConfigDict(
        env_prefix="ISOTOKEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard Python logging levels."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v_upper

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in ('json', 'text'):
            raise ValueError("Invalid log format. Must be 'json' or 'text'")
        return v_lower

    def validate_production_config(self) -> None:
        """Fail in production when the signing key is the insecure default.

        Raises:
            ConfigurationError: If production config is insecure.
        """
        if self.environment != Environment.PRODUCTION:
            return

        if self.signing_key == INSECURE_DEFAULT_KEY:
            raise ConfigurationError(
                "ISOTOKEN_SIGNING_KEY is using the default insecure value. "
                "Generate a secure key: openssl rand -hex 32"
            )


# Global settings instance
settings = Settings()
