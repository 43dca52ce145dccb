from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Bank Ledger API"
    database_url: str = "sqlite:///bank_ledger.db"
    log_level: str = "INFO"
    # Minor units (cents); 10000 == 100.00
    min_initial_balance: int = Field(default=10000, ge=0)
    store_backend: Literal["sql", "memory"] = "sql"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="LEDGER_",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
