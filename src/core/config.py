"""Configuration Management."""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Builder settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="BUILDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Backend (pages API)
    backend_url: str = Field(default="http://localhost:3000", description="Pages API base URL")
    backend_timeout: float = Field(default=5.0, gt=0, description="Pages API request timeout")

    # History
    history_max_size: int = Field(default=50, gt=0, description="Max undo history entries")

    # Autosave
    autosave_interval: float = Field(default=30.0, gt=0, description="Autosave interval (seconds)")

    # Canvas
    min_zoom: int = Field(default=25, gt=0, description="Minimum zoom (percent)")
    max_zoom: int = Field(default=200, gt=0, description="Maximum zoom (percent)")

    # Validation
    max_tree_depth: int = Field(default=32, gt=0, description="Max component nesting on load")
    max_page_size: int = Field(default=1024 * 1024, gt=0, description="Max page JSON size (bytes)")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
