"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Analysis minimums
    SCORING_MIN_MONTHLY_SPEND: float = 1000
    SCORING_MIN_INVESTMENT_MONTHS: float = 6

    # Expected authority links per $1000/month of spend
    SCORING_LINKS_PER_THOUSAND: float = 1.5

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields in .env file
        case_sensitive = False  # Allow both UPPERCASE and lowercase


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()
