import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PigletConfig(BaseSettings):
    """Repository settings; override with PIGLET_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PIGLET_",
        extra="ignore",
    )

    repo_dir_name: str = ".piglet"
    default_branch: str = "master"
    short_id_length: int = Field(default=7, ge=1, le=64)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {value!r}")
        return level


def load_config() -> PigletConfig:
    return PigletConfig()
