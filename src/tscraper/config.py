"""Configuration handling using Pydantic settings."""

from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Page loading
    TRENDS_URL: str = Field(default="https://trends.google.com/trending?geo=US")
    HEADLESS: bool = Field(default=True)
    PAGE_TIMEOUT_S: float = Field(default=30.0)
    RETRY_MAX: int = Field(default=3)
    RETRY_WAIT_MAX_S: float = Field(default=10.0)

    # Output options
    OUTPUT_FORMAT: Literal["csv", "json", "sqlite"] = Field(default="csv")
    OUTPUT_DIR: Path = Field(default=Path("./out"))

    # Cleaning rules and classification domains (JSON files, optional)
    CLEANING_RULES_PATH: Optional[Path] = Field(default=None)
    DOMAINS_PATH: Optional[Path] = Field(default=None)

    # Topic classification
    GEMINI_API_KEY: Optional[str] = Field(default=None)
    GEMINI_MODEL: str = Field(default="gemini-1.5-flash")
    RELEVANCE_THRESHOLD: float = Field(default=6.0)
    REQUEST_DELAY_S: float = Field(default=1.0)
    TIMEOUT_S: float = Field(default=30.0)

    LOG_LEVEL: str = Field(default="INFO")


settings = Settings()
