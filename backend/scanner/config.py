"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# backend/.env, applied regardless of the working directory
ENV_PATH = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gemini narrative (optional)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # Market data
    http_timeout: float = 30.0
    kline_limit: int = 300

    # Scan pacing
    pause_seconds: float = 1.5  # Between instruments, protects upstream rate limits
    refresh_interval: int = 300  # Seconds between passes in loop mode

    # Universe / evaluator YAML (optional)
    universe_path: str = ""  # Empty = backend/universe.yaml


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    # Load backend/.env into os.environ first; real environment variables win
    load_dotenv(ENV_PATH, override=False)
    return Settings()
