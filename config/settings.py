"""Configuration settings loaded from environment variables."""

from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field


load_dotenv()


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Engine Configuration
    dmn_engine: str = Field(
        default="pydmnrules",
        description="Decision engine backend used to execute DMN documents (see engines.ENGINES)",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_stack_traces: bool = Field(
        default=True,
        description="Log the full stack trace when a decision fails to execute",
    )

    model_config = {"extra": "ignore"}


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance loaded from environment."""
    return Settings(
        dmn_engine=os.getenv("DMN_ENGINE", "pydmnrules"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_stack_traces=_env_flag("LOG_STACK_TRACES", "true"),
    )
