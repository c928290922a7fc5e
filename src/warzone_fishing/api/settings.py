"""Service settings read from the environment."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    app_name: str = "Warzone Fishing Admin API"
    config_path: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("WARZONE_FISHING_CONFIG"),
    )
    seed: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("WARZONE_FISHING_SEED"),
    )
    host: str = Field(
        "127.0.0.1",
        validation_alias=AliasChoices("WARZONE_FISHING_HOST"),
    )
    port: int = Field(
        8000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("WARZONE_FISHING_PORT"),
    )
    load_entry_points: bool = Field(
        True,
        validation_alias=AliasChoices("WARZONE_FISHING_ENTRY_POINTS"),
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)


@lru_cache
def get_settings() -> ServiceSettings:
    return ServiceSettings()
