"""Configuration management using pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Retry
    max_retries: int = Field(default=3, ge=0, description="Retries allowed after the first attempt")
    retry_delay_ms: int = Field(default=1, ge=0, description="Delay before each retry in milliseconds")

    # Demo fetch
    fetch_url: str = Field(
        default="https://jsonplaceholder.typicode.com/todos/1",
        min_length=1,
        description="URL fetched by the demo entry point",
    )
    request_timeout: float = Field(default=10.0, gt=0, description="Total HTTP request timeout in seconds")

    # Logging
    log_level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_dir: Path = Field(default=Path("./logs"), description="Directory for log files")

    @property
    def retry_delay_seconds(self) -> float:
        """Return the retry delay in seconds."""
        return self.retry_delay_ms / 1000
