"""Run configuration."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Run settings loaded from ISLAND_EROSION_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ISLAND_EROSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Terrain
    seed: int = 0
    width: int = 256
    height: int = 256

    # Erosion preset name (see terrain.presets) and optional droplet override
    preset: str = "moderate"
    droplet_count: int | None = None

    # Output: ".json" or ".npy"; nothing is written when unset
    output_path: Path | None = None

    # Logging
    log_level: str = "info"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept any case; reject names the logging module doesn't know."""
        level = v.strip().lower()
        if level not in {"debug", "info", "warning", "error", "critical"}:
            raise ValueError(f"unknown log level: {v}")
        return level


settings = Settings()
