"""Process configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    texsizer_env: str = "development"
    texsizer_log_level: str = "info"

    # Engine
    texsizer_preset: str = "balanced"
    texsizer_max_workers: int | None = None

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
