"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from jobfilter.adapters.factory import supported_sites
from jobfilter.watcher.models import WatcherConfig

from .duration import DurationParseError, parse_duration, validate_duration_range


class SettingsBackend(str, Enum):
    """Where per-site filter settings are stored."""

    YAML = "yaml"
    SQLITE = "sqlite"
    MEMORY = "memory"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


def _duration_field(v: Any, name: str, allow_zero: bool = False, max_seconds: float = 60) -> float:
    try:
        seconds = parse_duration(v, allow_zero=allow_zero)
        if seconds:
            validate_duration_range(seconds, min_seconds=0.01, max_seconds=max_seconds, name=name)
        return seconds
    except DurationParseError as e:
        raise ValueError(str(e)) from e


class SettingsConfig(BaseModel):
    """Rule store location."""

    backend: SettingsBackend = Field(
        SettingsBackend.YAML, description="Settings backend (yaml, sqlite, memory)"
    )
    path: Optional[str] = Field(
        "settings.yaml", description="Settings file for the yaml backend"
    )
    database_url: Optional[str] = Field(
        None, description="SQLAlchemy URL for the sqlite backend"
    )

    model_config = {"use_enum_values": True}

    @model_validator(mode="after")
    def validate_backend_location(self):
        """Require a settings path for the yaml backend."""
        if self.backend == SettingsBackend.YAML.value and not (self.path or "").strip():
            raise ValueError("settings.path is required for the yaml backend")
        return self


class WatcherSettings(BaseModel):
    """Watcher timing. Durations accept "500ms", "2s", "PT0.5S" or plain seconds."""

    container_retry_delay: float = Field(0.5, description="Delay between container lookups")
    container_max_attempts: int = Field(
        20, ge=1, le=1000, description="Container lookups before falling back to the body"
    )
    container_backoff_multiplier: float = Field(
        1.0, ge=1.0, le=5.0, description="Growth factor of the lookup delay"
    )
    settle_delay: float = Field(0.6, description="Wait after a save click before re-reading")
    debounce: float = Field(0.0, description="Trailing debounce for mutation passes (0 = off)")

    @field_validator("container_retry_delay", mode="before")
    @classmethod
    def parse_retry_delay(cls, v: Any) -> float:
        return _duration_field(v, "container_retry_delay")

    @field_validator("settle_delay", mode="before")
    @classmethod
    def parse_settle_delay(cls, v: Any) -> float:
        return _duration_field(v, "settle_delay", allow_zero=True, max_seconds=10)

    @field_validator("debounce", mode="before")
    @classmethod
    def parse_debounce(cls, v: Any) -> float:
        return _duration_field(v, "debounce", allow_zero=True, max_seconds=10)

    def to_watcher_config(self) -> WatcherConfig:
        return WatcherConfig(
            container_retry_delay=self.container_retry_delay,
            container_max_attempts=self.container_max_attempts,
            container_backoff_multiplier=self.container_backoff_multiplier,
            settle_delay=self.settle_delay,
            debounce=self.debounce,
        )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for jobfilter."""

    site: Optional[str] = Field(None, description="Site adapter name (linkedin, naukri, ...)")
    page_url: Optional[str] = Field(
        None, description="URL the saved page was captured from"
    )
    settings: SettingsConfig = Field(
        default_factory=SettingsConfig, description="Rule store settings"
    )
    watcher: WatcherSettings = Field(
        default_factory=WatcherSettings, description="Watcher timing"
    )
    poll_interval: float = Field(2.0, description="Watch mode polling interval")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @field_validator("site")
    @classmethod
    def validate_site(cls, v: Optional[str]) -> Optional[str]:
        """Normalize and check the site name."""
        if v is None:
            return None
        site = v.strip().lower()
        if site not in supported_sites():
            raise ValueError(
                f"Unknown site '{v}'. Supported sites: {', '.join(supported_sites())}"
            )
        return site

    @field_validator("poll_interval", mode="before")
    @classmethod
    def parse_poll_interval(cls, v: Any) -> float:
        try:
            seconds = parse_duration(v)
            validate_duration_range(seconds, min_seconds=0.1, max_seconds=3600, name="Poll interval")
            return seconds
        except DurationParseError as e:
            raise ValueError(str(e)) from e
