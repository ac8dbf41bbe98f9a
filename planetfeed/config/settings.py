"""
PlanetFeed Configuration System
==============================

Simple configuration management with environment variables and Pydantic models.
Environment variables override Field defaults with clear precedence.
"""

from pathlib import Path
from typing import Optional
from enum import Enum

from pydantic import BaseModel, Field, field_validator, AnyHttpUrl
from pydantic_settings import BaseSettings

from ..utils.exceptions import ConfigurationError, ErrorCode


class LogLevel(str, Enum):
    """Available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class FeedSettings(BaseModel):
    """Combined feed envelope and topical filter configuration."""
    title: str = Field(default="PlanetFeed", min_length=1, description="Combined feed title")
    description: str = Field(
        default="Posts from the community, in one place",
        description="Combined feed description",
    )
    url: AnyHttpUrl = Field(default="https://planetfeed.example.org/", description="Canonical feed URL")
    image_url: AnyHttpUrl = Field(
        default="https://planetfeed.example.org/logo.png",
        description="Feed image URL",
    )
    copyright: str = Field(
        default="The copyright for each post is retained by its author.",
        description="Copyright notice for the combined feed",
    )
    marker_keyword: str = Field(default="python", description="Keyword an item must mention to be included")
    keyword_field: str = Field(default="keywords", description="Extension element holding item keywords")

    @field_validator('marker_keyword', 'keyword_field')
    @classmethod
    def validate_not_blank(cls, v):
        """Reject blank keywords, which would match every item."""
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class FetchSettings(BaseModel):
    """Remote feed retrieval settings."""
    request_timeout: float = Field(default=15.0, gt=0, le=300, description="Per-request timeout in seconds")
    user_agent: str = Field(
        default="PlanetFeed/1.0 (+https://planetfeed.example.org/)",
        min_length=1,
        description="Client signature sent with every request",
    )
    max_concurrent: int = Field(default=20, ge=1, le=500, description="Maximum requests in flight at once")


class RetrySettings(BaseModel):
    """Per-feed retry policy settings."""
    max_retries: int = Field(default=2, ge=0, le=10, description="Retries after the first attempt")
    backoff_base: float = Field(default=1.2, ge=1.0, le=10.0, description="Delay before retry r is r * base**r seconds")


class RosterSettings(BaseModel):
    """Author roster location."""
    path: str = Field(default="data/authors.json", description="Author roster JSON file")


class PublishingSettings(BaseModel):
    """Output location for serialized feeds."""
    output_dir: str = Field(default="feeds", description="Directory receiving feed.<language>.rss files")


class ScheduleSettings(BaseModel):
    """Recurring run configuration."""
    interval_minutes: int = Field(default=60, ge=1, le=24 * 60, description="Minutes between aggregation runs")
    run_on_startup: bool = Field(default=True, description="Run immediately when the service starts")


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: LogLevel = Field(default=LogLevel.INFO, description="Global log level")
    file_path: Optional[str] = Field(default="logs/planetfeed.log", description="Log file path")
    max_file_size_mb: int = Field(default=10, ge=1, le=100, description="Max log file size in MB")
    backup_count: int = Field(default=5, ge=1, le=20, description="Number of log backup files")
    structured_logging: bool = Field(default=False, description="Use structured JSON logging")
    console_logging: bool = Field(default=True, description="Enable console logging")


class PlanetFeedSettings(BaseSettings):
    """Main application settings."""

    feed: FeedSettings = Field(default_factory=FeedSettings)
    fetching: FetchSettings = Field(default_factory=FetchSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    roster: RosterSettings = Field(default_factory=RosterSettings)
    publishing: PublishingSettings = Field(default_factory=PublishingSettings)
    schedule: ScheduleSettings = Field(default_factory=ScheduleSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    app_name: str = Field(default="PlanetFeed", description="Application name")
    debug: bool = Field(default=False, description="Enable debug mode")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "env_prefix": "PLANETFEED_",
    }

    def validate_configuration(self) -> None:
        """Validate complete configuration."""
        errors = []

        if self.logging.file_path:
            try:
                log_path = Path(self.logging.file_path)
                log_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                errors.append(f"Invalid log file path: {e}")

        output_dir = Path(self.publishing.output_dir)
        if output_dir.exists() and not output_dir.is_dir():
            errors.append(f"Publishing output is not a directory: {output_dir}")

        if errors:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}",
                error_code=ErrorCode.CONFIG_INVALID
            )

    def get_effective_log_level(self) -> str:
        """Get effective log level considering debug mode."""
        if self.debug:
            return "DEBUG"
        return self.logging.level.value


def load_settings() -> PlanetFeedSettings:
    """Load settings from environment variables and defaults.

    Environment variables override Pydantic Field defaults.

    Returns:
        Loaded and validated settings

    Raises:
        ConfigurationError: If configuration is invalid
    """
    from dotenv import load_dotenv
    load_dotenv()

    try:
        # Precedence: environment variables, then .env values, then Field defaults
        settings = PlanetFeedSettings()
        settings.validate_configuration()
        return settings

    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to initialize settings: {e}",
            error_code=ErrorCode.CONFIG_INVALID
        ) from e


_settings: Optional[PlanetFeedSettings] = None


def get_settings(reload: bool = False) -> PlanetFeedSettings:
    """Get global settings instance (singleton pattern).

    Args:
        reload: Force reload of settings

    Returns:
        Global settings instance
    """
    global _settings

    if _settings is None or reload:
        _settings = load_settings()

    return _settings
