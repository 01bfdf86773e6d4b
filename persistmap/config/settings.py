"""Library settings loaded from environment variables via pydantic-settings.

Values are read from (highest priority first):

  1. Environment variables prefixed with ``PERSISTMAP_``,
     e.g. ``PERSISTMAP_FETCH_ALL=false``
  2. A ``.env`` file in the working directory

Defaults apply when neither source sets a field.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """persistmap settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_prefix="PERSISTMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Map defaults ===
    fetch_all: bool = True
    # Seconds; unset means writes carry no expiry hint.
    default_ttl: float | None = None

    # === SQLite adapter ===
    sqlite_db_path: str = "data/persistmap.db"

    # === Runtime ===
    app_env: str = "development"
    log_level: str = "INFO"
