from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    trace_enabled: bool = Field(default=True, validation_alias="APP_ERRORS_TRACE_ENABLED")
    log_level: str = Field(default="INFO", validation_alias="APP_ERRORS_LOG_LEVEL")

    @field_validator("trace_enabled", mode="before")
    @classmethod
    def _parse_trace_enabled(cls, v: bool | str) -> bool | str:
        if v == "":
            return True
        return v

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
