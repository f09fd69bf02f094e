from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralized application configuration."""

    app_name: str = "OKR Tracker"
    environment: str = "dev"
    debug: bool = True
    api_prefix: str = "/api"

    # Data paths
    data_dir: Path = Path("./data")
    sqlite_path: Path = Path("./data/okr_tracker.db")

    allowed_origins: List[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    # Scoring
    seed_default_levels: bool = True

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    def ensure_dirs(self) -> None:
        """Create required local directories."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.sqlite_path.parent.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    settings = Settings()
    settings.ensure_dirs()
    return settings
