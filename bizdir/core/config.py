from __future__ import annotations

import os
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


RECONCILIATION_STRATEGIES = ("keyed", "sequential")
LOG_FORMATS = ("plain", "json")


class BaseAppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "BizDir Finance"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "plain"

    # Tax load is only computed when taxed revenue is at least this large in magnitude
    TAX_LOAD_EPSILON: float = 1e-6

    # "keyed" groups reports by their own year/quarter fields,
    # "sequential" consumes them positionally with a single cursor
    RECONCILIATION_STRATEGY: str = "keyed"

    # Upper bound on concurrent per-company report fetches within one call
    MAX_CONCURRENT_FETCHES: int = 8

    @field_validator("RECONCILIATION_STRATEGY", "LOG_FORMAT", mode="before")
    @classmethod
    def normalize_choice(cls, v):
        """Accept choices case-insensitively."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("RECONCILIATION_STRATEGY")
    @classmethod
    def check_strategy(cls, v: str) -> str:
        if v not in RECONCILIATION_STRATEGIES:
            raise ValueError(
                f"Invalid RECONCILIATION_STRATEGY: {v}. Must be one of {', '.join(RECONCILIATION_STRATEGIES)}"
            )
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        if v not in LOG_FORMATS:
            raise ValueError(f"Invalid LOG_FORMAT: {v}. Must be plain/json")
        return v

    @field_validator("TAX_LOAD_EPSILON")
    @classmethod
    def check_epsilon(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("TAX_LOAD_EPSILON must be positive")
        return v

    @field_validator("MAX_CONCURRENT_FETCHES")
    @classmethod
    def check_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("MAX_CONCURRENT_FETCHES must be at least 1")
        return v


class DevSettings(BaseAppSettings):
    ENV: str = "dev"
    LOG_LEVEL: str = "DEBUG"


class TestSettings(BaseAppSettings):
    ENV: str = "test"


class ProdSettings(BaseAppSettings):
    ENV: str = "prod"
    LOG_FORMAT: str = "json"
    MAX_CONCURRENT_FETCHES: int = 16


_ENV_TO_SETTINGS: dict[str, type[BaseAppSettings]] = {
    "dev": DevSettings,
    "development": DevSettings,
    "test": TestSettings,
    "testing": TestSettings,
    "prod": ProdSettings,
    "production": ProdSettings,
}


@lru_cache
def get_settings() -> BaseAppSettings:
    env_name = os.getenv("APP_ENV") or os.getenv("ENV") or "dev"
    env = env_name.lower()
    settings_cls = _ENV_TO_SETTINGS.get(env, DevSettings)
    return settings_cls()


settings = get_settings()
