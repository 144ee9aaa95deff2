from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from page_meta_core import __version__


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    user_agent: str = Field(default=f"page-meta-core/{__version__}", alias="USER_AGENT")

    sentinel_header: str = Field(default="X-Meta-Proxy-Request", alias="SENTINEL_HEADER")
    sentinel_value: str = Field(default="1", alias="SENTINEL_VALUE")

    # Only used when the package builds its own httpx client.
    fetch_timeout_s: float = Field(default=20.0, alias="FETCH_TIMEOUT_S")
    max_redirects: int = Field(default=10, alias="MAX_REDIRECTS")

    stop_at_head_end: bool = Field(default=False, alias="STOP_AT_HEAD_END")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")


def load_settings() -> Settings:
    return Settings()
