from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SOLOTERM_DICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Largest N accepted in "NdX".
    max_dice: int = Field(1000, ge=1)

    # Physical dice one exploding/reroll expression may roll, originals included.
    max_rolled_dice: int = Field(100, ge=1)

    log_level: str = "WARNING"


settings = Settings()
