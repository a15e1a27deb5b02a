"""Mini README: Centralised configuration models and helpers for Station Clock.

Structure:
    * StationClockSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read environment variables (``STATIONCLOCK_``
    prefix or a ``.env`` file), choose the venue, the storage back-end and the
    service port. The configuration is cached so validation runs once per
    process; tests build ``StationClockSettings`` directly instead.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, validator
from pydantic_settings import BaseSettings

STORAGE_BACKENDS = ("file", "memory")


class StationClockSettings(BaseSettings):
    """Runtime configuration for the Station Clock desk."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding one persisted ledger file per venue.",
    )
    venue: str = Field(
        "billiard",
        description="Venue key selecting station count and rate table (billiard, game-room).",
    )
    timezone: str = Field(
        "Africa/Tunis",
        description="IANA time zone used for the ledger date key and receipt timestamps.",
    )
    storage_backend: str = Field(
        "file",
        description="Ledger persistence back-end: 'file' (JSON on disk) or 'memory'.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the control desk to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the control desk exposes.",
        ge=1,
        le=65535,
    )
    refresh_interval_seconds: float = Field(
        1.0,
        description="Seconds between live elapsed/cost refreshes while a station runs.",
        gt=0,
    )

    class Config:
        env_prefix = "STATIONCLOCK_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @validator("venue", "storage_backend", pre=True)
    def _normalise_key(cls, value: str) -> str:
        return str(value).strip().lower()

    @validator("storage_backend")
    def _known_backend(cls, value: str) -> str:
        if value not in STORAGE_BACKENDS:
            raise ValueError(f"storage_backend must be one of {STORAGE_BACKENDS}")
        return value

    @validator("timezone")
    def _known_timezone(cls, value: str) -> str:
        """Reject zone names the interpreter cannot resolve."""

        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as error:
            raise ValueError(f"Unknown time zone: {value}") from error
        return value

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@lru_cache()
def get_settings() -> StationClockSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return StationClockSettings()
