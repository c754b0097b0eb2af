from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def repo_root() -> Path:
    """
    Description: Resolve repository root from within src/ package.
    Layer: L0
    Input: None
    Output: Absolute Path to repo root
    """
    # src/manpoweradmin/config.py -> src/manpoweradmin -> src -> repo root
    return Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    """
    Description: Central configuration loader for the manpower admin console.
    Layer: L0
    Input: .env in repo root + MANPOWER_* environment variables
    Output: Strongly typed settings object
    """

    model_config = SettingsConfigDict(
        env_file=str(repo_root() / ".env"),
        env_file_encoding="utf-8",
        env_prefix="MANPOWER_",
        extra="ignore",
    )

    # Store
    store_backend: Literal["firestore", "memory"] = "firestore"
    firestore_project: Optional[str] = None
    firestore_credentials_file: Optional[str] = None
    seed_file: Optional[str] = None  # JSON seed for the memory backend

    # Collections
    submissions_collection: str = "manpowerSubmissions"
    payments_collection: str = "manpowerServicePayments"

    # Display
    default_currency: str = "BDT"
    currency_locale: str = "en_US"
    flash_seconds: float = 3.0

    # Runtime
    log_level: str = "INFO"
    environment: str = "local"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Description: Cached settings accessor for Streamlit screens and managers.
    Layer: L0
    Input: None
    Output: Settings
    """
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the console process."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    )
