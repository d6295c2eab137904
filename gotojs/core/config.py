"""
Application configuration.

Settings for the CLI and the script hook layer, read from environment
variables prefixed with ``GOTOJS_`` (or a ``.env`` file). The rewrite engine
itself takes no configuration.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_prefix="GOTOJS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Script hook
    CONTENT_TYPE: str = "text/jsplusgoto"
    OUTPUT_CONTENT_TYPE: str = "text/javascript"

    # Translation
    SCANNER: Literal["regex", "pygments"] = "regex"
    STRICT: bool = False
    ENCODING: str = "utf-8"

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: Literal["json", "text"] = "text"
    LOG_FILE: Optional[str] = None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
