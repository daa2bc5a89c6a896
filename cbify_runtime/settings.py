"""Runtime settings loaded from environment variables."""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Defaults applied when a caller does not pick a policy explicitly."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    default_mode: str = Field(default="EPSILON_GREEDY", alias="CBIFY_MODE")
    seed: Optional[int] = Field(default=None, alias="CBIFY_SEED")
    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
