# -*- coding: utf-8 -*-

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Timer settings from CONSULT_TIMER_* environment variables or .env"""

    model_config = SettingsConfigDict(
        env_prefix="CONSULT_TIMER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = "INFO"

    # Colour bands (fractions of the slot). Ordering is not checked here.
    yellow_threshold: float = Field(default=0.6, gt=0, lt=1)
    red_threshold: float = Field(default=0.9, gt=0, lt=1)
    tick_interval_ms: int = Field(default=1000, gt=0)

    # Overtime chime
    sound_enabled: bool = True
    sound_volume: float = Field(default=0.5, ge=0, le=1)
    chime_type: Literal["gentle-bell", "singing-bowl", "soft-chime"] = "gentle-bell"

    always_on_top: bool = True
    default_appointment_type: str = "standard"


# Global settings instance
settings = Settings()
