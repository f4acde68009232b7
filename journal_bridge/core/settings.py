# journal_bridge/core/settings.py

from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

from journal_bridge.core.exceptions import ConfigurationError


DEFAULT_TOGGL_API_BASE = "https://api.track.toggl.com/api/v9"

# Define project root to build paths consistently
PROJECT_ROOT = Path(__file__).parent.parent.parent

class Settings(BaseSettings):
    """Manages application-wide settings for the journal bridge service."""
    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / '.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # --- API ---
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Journal Bridge"
    VERSION: str = "1.0.0"

    # --- Toggl Track ---
    TOGGL_API_TOKEN: Optional[str] = None
    TOGGL_API_BASE: str = DEFAULT_TOGGL_API_BASE

    # --- Notion ---
    NOTION_API_TOKEN: Optional[str] = None
    NOTION_DATABASE_ID: Optional[str] = None  # legacy journal database
    NOTION_JOURNAL_DATABASE_ID: Optional[str] = None
    NOTION_TASK_DATABASE_ID: Optional[str] = None
    NOTION_PROJECT_DATABASE_ID: Optional[str] = None

    # --- Journal day ---
    JOURNAL_UTC_OFFSET_HOURS: int = 9

    # --- Routine counter ---
    ROUTINE_VALUE_PROPERTY: str = "分子"

    # --- CORS ---
    ALLOWED_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000"

    @property
    def ALLOWED_ORIGINS(self) -> List[str]:
        if not self.ALLOWED_ORIGINS_STR:
            return []
        return [origin.strip() for origin in self.ALLOWED_ORIGINS_STR.split(",")]

    def require(self, key: str) -> str:
        """
        Returns the configured value for `key`.

        Raises:
            ConfigurationError: If the value is missing or empty.
        """
        value = getattr(self, key, None)
        if not value:
            raise ConfigurationError(key)
        return value

# Instantiate a single settings object for the whole app
settings = Settings()


def get_settings() -> Settings:
    """Dependency returning the process-wide settings."""
    return settings
