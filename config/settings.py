"""Centralized configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from dotenv import load_dotenv

from markup.parser import SPOILER_LABEL
from markup.timestamps import is_valid_timezone

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ==================== Server ====================
    host: str = "127.0.0.1"
    port: int = 8090
    log_file: str = "preview.log"

    # ==================== Rendering ====================
    # IANA zone used to display absolute timestamps
    display_timezone: str = Field(default="UTC", validation_alias="DISPLAY_TIMEZONE")
    spoiler_label: str = SPOILER_LABEL

    # ==================== Code Blocks ====================
    # Extra languages loaded at startup, e.g. "rust,go,sql"
    preload_languages: Annotated[List[str], NoDecode] = Field(
        default_factory=list, validation_alias="PRELOAD_LANGUAGES"
    )
    # Used by the quick code-block shortcut
    default_code_language: str = Field(
        default="", validation_alias="DEFAULT_CODE_LANGUAGE"
    )

    @field_validator("display_timezone")
    @classmethod
    def validate_timezone(cls, v):
        if not is_valid_timezone(v):
            raise ValueError(f"display_timezone must be an IANA timezone, got {v!r}")
        return v

    @field_validator("preload_languages", mode="before")
    @classmethod
    def parse_language_list(cls, v):
        if v is None or v == "":
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
