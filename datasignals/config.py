"""Runtime configuration — env-driven via pydantic-settings.

All settings can be overridden via DATASIGNALS_* environment variables
or a .env file in the working directory.

Examples
--------
Override via environment::

    export DATASIGNALS_LOG_LEVEL=DEBUG
    export DATASIGNALS_MAX_TARGET_DEPTH=8
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SignalsConfig(BaseSettings):
    """Settings for a signal hub session."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DATASIGNALS_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Deepest collection nesting accepted as a send target
    max_target_depth: int = Field(default=32, ge=1)

    # Log each failing listener at ERROR (failures are counted regardless)
    log_delivery_failures: bool = True


# Module-level default — import as `from datasignals.config import config`
config = SignalsConfig()
