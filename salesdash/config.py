from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data"
DEFAULT_FILE_GLOB = "*.csv"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    """Runtime settings, read from ``SALESDASH_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SALESDASH_",
        env_ignore_empty=True,
        populate_by_name=True,
        frozen=True,
    )

    data_dir: Path = DEFAULT_DATA_DIR
    file_glob: str = DEFAULT_FILE_GLOB
    use_sample_data: bool = Field(default=True, validation_alias=AliasChoices("SALESDASH_USE_SAMPLE"))
    gemini_api_key: Optional[str] = Field(default=None, validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"))
    gemini_model: str = DEFAULT_GEMINI_MODEL
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper()


def load_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
