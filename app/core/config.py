"""Application settings loaded from the environment (and an optional .env file)."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.models.domain import UpdateMode

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


@dataclass(frozen=True, slots=True)
class LeaderboardPolicy:
    top_limit: int = 10
    nearby_range: int = 2
    update_mode: UpdateMode = UpdateMode.REPLACE


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    leaderboard_name: str = Field(default="global", pattern=r"^[A-Za-z0-9_-]{1,64}$")
    storage_backend: Literal["redis", "memory"] = "redis"
    redis_url: str = DEFAULT_REDIS_URL

    top_limit: int = Field(default=10, ge=0)
    nearby_range: int = Field(default=2, ge=0)
    update_mode: UpdateMode = UpdateMode.REPLACE

    log_level: str = "INFO"

    @field_validator("update_mode", mode="before")
    @classmethod
    def normalize_update_mode(cls, value: object) -> object:
        # Accept any casing of the two known modes; anything else fails validation.
        if isinstance(value, str):
            for mode in UpdateMode:
                if value.strip().lower() == mode.value.lower():
                    return mode
        return value

    def policy(self) -> LeaderboardPolicy:
        return LeaderboardPolicy(
            top_limit=self.top_limit,
            nearby_range=self.nearby_range,
            update_mode=self.update_mode,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
