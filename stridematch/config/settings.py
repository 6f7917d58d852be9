"""Configuration settings for the shoe recommendation context core."""

from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field
from pathlib import Path


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Dislike matching
    dislike_confidence_threshold: float = Field(
        default=0.8,
        description="Minimum match confidence for a dislike to be accepted without asking",
    )
    prefix_boost_score: float = Field(
        default=0.9,
        description="Score floor when a candidate and a model share a stem (ignoring numbers)",
    )
    min_clarification_length: int = Field(
        default=3,
        description="Shorter unmatched candidates are treated as noise, not clarifications",
    )

    # Data files
    catalog_path: Optional[Path] = Field(
        default=None,
        description="Path to a shoe catalog JSON file (None = bundled catalog)",
    )
    vocabulary_path: Optional[Path] = Field(
        default=None,
        description="Path to a vocabulary YAML file (None = bundled vocabulary)",
    )

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )
    environment: str = Field(
        default="development",
        description="Environment: 'development' or 'production'",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "STRIDEMATCH_",
        "extra": "ignore",
    }


settings = Settings()
