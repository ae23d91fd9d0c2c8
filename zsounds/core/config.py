"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from zsounds.core.ontology.car import DEFAULT_CAR_TYPES


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "data"


class Settings(BaseSettings):
    """Settings loaded from the environment (prefix ``ZSOUNDS_``)."""

    # Sound configuration
    config_path: Path = DEFAULT_CONFIG_PATH
    root_rule: str = "root"

    # Host environment
    known_car_types: list[str] = Field(default_factory=lambda: list(DEFAULT_CAR_TYPES))
    skin_provider: str | None = None

    # Reproducible OneOf choices when set
    random_seed: int | None = None

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="ZSOUNDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
