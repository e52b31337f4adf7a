"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Registrator settings loaded from environment variables."""

    name: str
    ip: str
    mac: str
    status_port: int
    motion_client_port: int
    poll_interval_ms: int = 5000
    poll_timeout_ms: int = 2000
    reconnect_delay_ms: int = 1000
    read_chunk_size: int = 65536
    carry_partial_records: bool = False
    sweep_on_poll: bool = False
    reply_cancels_timeout: bool = False
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="REGISTRATOR_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def milliseconds(value: int) -> float:
    """Convert a millisecond setting into asyncio seconds."""
    return value / 1000
