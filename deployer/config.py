"""Application configuration using pydantic-settings."""

import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file without clobbering variables already set in the environment
load_dotenv(override=False)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = True

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = Field(default=5000, validation_alias=AliasChoices("port", "api_port"))

    # Providers
    aws_region: str = "us-east-1"
    github_api_url: str = "https://api.github.com"

    # Working copies
    work_root: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "deployer-work"
    )
    keep_working_copies: bool = False  # Debug only: leave checkouts on disk

    # Sync
    entry_filename: str = "index.html"
    upload_concurrency: int = Field(default=8, ge=1)

    # Deadlines (seconds)
    http_timeout_seconds: float = 15.0
    git_timeout_seconds: float = 300.0
    upload_timeout_seconds: float = 60.0

    # Generated CI workflow
    workflow_path: str = ".github/workflows/deploy-to-s3.yml"
    workflow_commit_message: str = "Add S3 deployment workflow"
    git_author_name: str = "Repo Deployer"
    git_author_email: str = "deployer@localhost"

    # Wizard drafts
    draft_ttl_minutes: int = 30

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"
    log_directory: str = "logs"
    log_file_name: str = "deployer.log"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
