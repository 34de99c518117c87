"""
Central application configuration using pydantic-settings.

Typed access to environment-based configuration for the match host.
Rule constants live in `subway_deal.config.GameConfig`; only the knobs an
operator is expected to turn are exposed here.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from subway_deal.config import GameConfig


class ServerSettings(BaseSettings):
    """
    Configuration for the match host.

    Environment variables (prefix: SUBWAY_DEAL_):
        SUBWAY_DEAL_HOST              - Bind host (default: 127.0.0.1)
        SUBWAY_DEAL_PORT              - Bind port (default: 8000)
        SUBWAY_DEAL_LOG_LEVEL         - Root log level (default: INFO)
        SUBWAY_DEAL_SEED              - Fixed shuffle seed for every new match
        SUBWAY_DEAL_MAX_PLAYERS       - Largest table a match accepts (default: 5)
        SUBWAY_DEAL_HEARTBEAT_SECONDS - Websocket heartbeat interval (default: 15)
        SUBWAY_DEAL_CLIENT_QUEUE_SIZE - Outbound messages buffered per websocket client (default: 256)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="SUBWAY_DEAL_",
    )

    host: str = Field(default="127.0.0.1", description="Host the API binds to.")
    port: int = Field(default=8000, gt=0, lt=65536, description="Port the API binds to.")
    log_level: str = Field(default="INFO", description="Root logger level.")
    seed: Optional[int] = Field(
        default=None,
        description="Shuffle seed applied to new matches; random when unset.",
    )
    max_players: int = Field(default=5, ge=2, description="Largest table a match accepts.")
    heartbeat_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Interval between websocket heartbeat messages.",
    )
    client_queue_size: int = Field(
        default=256,
        gt=0,
        description="Outbound messages buffered per websocket client before it is dropped.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Optional[str]) -> str:
        if not value:
            return "INFO"
        return str(value).upper()

    def game_config(self, seed: Optional[int] = None) -> GameConfig:
        """Rule configuration for a new match; an explicit seed wins over the configured one."""
        return GameConfig(
            max_players=self.max_players,
            seed=seed if seed is not None else self.seed,
        )


@lru_cache
def get_server_settings() -> ServerSettings:
    """Return cached server settings instance."""
    return ServerSettings()
