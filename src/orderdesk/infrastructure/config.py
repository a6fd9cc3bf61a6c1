"""Runtime settings, read from ``ORDERDESK_*`` environment variables or ``.env``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ORDERDESK_", env_file=".env", extra="ignore"
    )

    # memory: in-process only (tests, embedding); nothing survives a CLI call.
    backend: Literal["memory", "json", "sql"] = "json"
    data_dir: Path = Path("data")  # json backend: orders.json / products.json
    database_url: str = "sqlite:///data/orderdesk.db"  # sql backend
    log_level: str = "WARNING"
    max_public_quantity: int = 100  # quantity ceiling on public order submission
    currency: str = "LKR"


@lru_cache
def get_settings() -> Settings:
    return Settings()
