"""
Configuration management via environment variables.

Settings are read from the process environment, with a project-root .env
file loaded first through python-dotenv. Everything else in the package
reads configuration through get_settings().
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Application identifier for logging
        app_env: Environment name (development, staging, production)
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        database_url: SQLAlchemy connection string for the symposium store
        openrouter_api_key: API key for the OpenRouter gateway
        openrouter_base_url: Base URL of the OpenRouter REST API
        llm_temperature: Sampling temperature for consultant completions
        llm_max_tokens: Maximum completion length
        http_timeout_seconds: Timeout passed to every outbound HTTP call
        airtable_api_url: Base URL of the Airtable REST API
        perplexity_api_url: Base URL of the Perplexity API
        perplexity_model: Online model used for web searches
        context_message_limit: Most recent messages folded into a prompt
        seed_demo_data: Create the example symposium on first start
        enable_audit_logging: Register the HTTP request audit middleware
    """
    # Application settings
    app_name: str
    app_env: str
    log_level: str

    # Database settings
    database_url: str

    # LLM gateway settings
    openrouter_api_key: str
    openrouter_base_url: str
    llm_temperature: float
    llm_max_tokens: int
    http_timeout_seconds: int

    # External data sources
    airtable_api_url: str
    perplexity_api_url: str
    perplexity_model: str

    # Conversation settings
    context_message_limit: int
    seed_demo_data: bool

    # Safety settings
    enable_audit_logging: bool

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env.lower() == "production"


def _get_env(key: str, default: Optional[str] = None) -> str:
    """
    Get environment variable with optional default.

    Raises:
        ValueError: If required variable is not set and no default provided
    """
    value = os.environ.get(key, default)
    if value is None:
        raise ValueError(
            f"Required environment variable '{key}' is not set. "
            f"Please check your .env file."
        )
    return value


def _get_bool(key: str, default: str) -> bool:
    return _get_env(key, default).lower() in ("1", "true", "yes")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance with all configuration values

    Raises:
        ValueError: If required environment variables are missing
    """
    database_url = _get_env("DATABASE_URL", "sqlite:///symposium.db")

    # SQLAlchemy dropped the legacy "postgres" dialect name
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)

    return Settings(
        # Application
        app_name=_get_env("APP_NAME", "Symposium"),
        app_env=_get_env("APP_ENV", "development"),
        log_level=_get_env("LOG_LEVEL", "INFO"),

        # Database
        database_url=database_url,

        # LLM gateway
        openrouter_api_key=_get_env("OPENROUTER_API_KEY"),
        openrouter_base_url=_get_env("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1").rstrip("/"),
        llm_temperature=float(_get_env("LLM_TEMPERATURE", "0.7")),
        llm_max_tokens=int(_get_env("LLM_MAX_TOKENS", "10000")),
        http_timeout_seconds=int(_get_env("HTTP_TIMEOUT_SECONDS", "60")),

        # External data sources
        airtable_api_url=_get_env("AIRTABLE_API_URL", "https://api.airtable.com/v0").rstrip("/"),
        perplexity_api_url=_get_env("PERPLEXITY_API_URL", "https://api.perplexity.ai").rstrip("/"),
        perplexity_model=_get_env("PERPLEXITY_MODEL", "sonar"),

        # Conversation
        context_message_limit=int(_get_env("CONTEXT_MESSAGE_LIMIT", "50")),
        seed_demo_data=_get_bool("SEED_DEMO_DATA", "false"),

        # Safety
        enable_audit_logging=_get_bool("ENABLE_AUDIT_LOGGING", "true"),
    )
