"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    backend_provider: Literal["http", "memory"] = "http"
    backend_base_url: str = "http://localhost:5000"
    backend_timeout_seconds: float | None = 30.0
    session_cookie_max_age: int = 400 * 24 * 60 * 60
    session_cookie_secure: bool = False

    model_config = SettingsConfigDict(env_prefix="MANAGERSOL_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
