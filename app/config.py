"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Forecast Provider Configuration
    openweather_api_key: str = Field(
        default="",
        description="OpenWeather One Call API key"
    )
    openweather_base_url: str = Field(
        default="https://api.openweathermap.org",
        description="Base URL for the OpenWeather API"
    )
    weather_units: str = Field(
        default="metric",
        description="Unit system requested from the forecast provider"
    )
    forecast_days: int = Field(
        default=7,
        description="Number of daily forecast entries kept for analysis"
    )
    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for forecast requests"
    )

    # Retry Configuration (transport failures only)
    max_retry_attempts: int = Field(
        default=3,
        description="Maximum number of attempts for a forecast request"
    )
    retry_backoff_multiplier: int = Field(
        default=1,
        description="Multiplier for exponential backoff"
    )
    retry_min_wait: int = Field(
        default=1,
        description="Minimum wait time in seconds between retries"
    )
    retry_max_wait: int = Field(
        default=5,
        description="Maximum wait time in seconds between retries"
    )

    # Field Defaults
    default_area_unit: str = Field(
        default="acres",
        description="Area unit selected for new sessions"
    )

    # Sessions
    max_sessions: int = Field(
        default=1000,
        description="Maximum sessions kept in memory; the least recently used is evicted"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="Fasal Salah Field Advisory API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
