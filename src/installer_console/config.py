from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INSTALLER_CONSOLE_",
        extra="ignore",
    )

    state_file: Path = Path("installation-state.json")
    configurations_file: Path = Path("configurations.json")
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "INFO"


def load_settings(**overrides: Optional[object]) -> Settings:
    """Settings from env/.env, with non-None keyword overrides (e.g. CLI flags) on top."""
    return Settings(**{k: v for k, v in overrides.items() if v is not None})
