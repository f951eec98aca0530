"""Client configuration for the room service."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ROOMCLIENT_", env_file=".env", case_sensitive=False, extra="ignore"
    )

    base_url: str = Field(default="http://localhost:8080")
    request_timeout: float = Field(default=10.0, description="Seconds before a request is abandoned")

    create_path: str = Field(default="/api/v1/rooms")
    join_path: str = Field(default="/api/v1/rooms/{room_id}/join")
    leave_path: str = Field(default="/api/v1/rooms/{room_id}/leave")

    device_type: str = Field(default="app")
    source_channel_id: str = Field(default="channel_python")
    source_channel_type: int = Field(default=0)
    default_max_participants: int = Field(default=9, ge=0)
    default_rtc_type: int = Field(default=1)

    @field_validator("request_timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        """Reject zero or negative timeouts; httpx treats them as unbounded."""

        if value <= 0:
            raise ValueError("request_timeout must be positive")
        return value


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
