"""Configuration settings for the school transcript schema.

Values are loaded from the environment or a ``.env`` file in the working
directory. Every field has a default, so a bare checkout sets up a local
SQLite database under ``data/``.

    from school_transcript.settings import get_settings
    settings = get_settings()
"""

from pathlib import Path
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Compute project root from this file's location
_PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = _PACKAGE_DIR.parent


class Settings(BaseSettings):
    """Database settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== Database ====================
    database_url: Optional[str] = Field(
        default=None,
        description="SQLAlchemy URL (sqlite:///... or postgresql+psycopg://...). "
        "When unset, a SQLite file named after database_name is used.",
    )
    database_name: str = Field(
        default="SchoolTranscript",
        description="Name of the database the schema is created in",
    )
    data_path: Path = Field(
        default=None,
        validate_default=True,
        description="Directory holding the default SQLite database file",
    )
    sql_echo: bool = Field(
        default=False,
        description="Log every SQL statement emitted by the engine",
    )

    # ==================== Logging ====================
    log_level: str = Field(
        default="INFO",
        description="Minimum level of the stderr log sink",
    )

    @field_validator("data_path", mode="before")
    @classmethod
    def set_default_data_path(cls, v):
        """Default the data directory to <project>/data."""
        if v is None:
            return PROJECT_ROOT / "data"
        return Path(v)

    # ==================== Computed Properties ====================

    @property
    def sqlite_path(self) -> Path:
        """Path of the default SQLite database file."""
        return self.data_path / f"{self.database_name}.db"

    @property
    def sqlalchemy_url(self) -> str:
        """URL the engine connects to."""
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.sqlite_path}"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    return Settings()
