"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """SmartFuel server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Default to loopback; there is no auth layer in front of the tools.
    smartfuel_host: str = "127.0.0.1"
    smartfuel_port: int = 8001
    smartfuel_log_level: str = "info"
    smartfuel_allow_insecure_bind: bool = False

    # Rule files (empty = packaged defaults)
    rulepack_path: str = ""
    ontology_path: str = ""

    # Guidance history
    history_limit_default: int = 10
    history_retention: int = 100


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
