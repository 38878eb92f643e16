from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Board geometry
    radius: int = 6
    tile_size: float = 1.0
    junction_precision: int = 1000

    # Palette & synthesis
    palette_size: int = 4
    synthesis_strategy: str = "cascade"
    max_backtracks: int = 5000
    reshuffle_attempts: int = 50

    # Auto-fill
    autofill_max_attempts: int = 12

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="PAIRLEROY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
