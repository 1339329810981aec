"""Settings taken from environment variables (a .env file is loaded by the CLI)."""

import os
from dataclasses import dataclass
from typing import List, Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class EnvironmentConfig:
    """
    Values read from the process environment.

    Attributes:
        log_level: LOG_LEVEL, upper-cased (None when unset)
        settings_db: JOBFILTER_SETTINGS_DB; selects the sqlite settings backend
        environment: ENVIRONMENT label attached to every log record
    """

    log_level: Optional[str] = None
    settings_db: Optional[str] = None
    environment: str = "local"


def load_environment_config() -> EnvironmentConfig:
    """
    Read LOG_LEVEL, JOBFILTER_SETTINGS_DB and ENVIRONMENT.

    Raises:
        ConfigurationError: Listing every variable with an invalid value
    """
    log_level = (os.getenv("LOG_LEVEL") or "").strip().upper() or None
    settings_db = os.getenv("JOBFILTER_SETTINGS_DB")
    problems: List[str] = []

    if log_level is not None and log_level not in VALID_LOG_LEVELS:
        problems.append(
            f"LOG_LEVEL={log_level!r} is not one of {', '.join(VALID_LOG_LEVELS)}"
        )
    if settings_db is not None and "://" not in settings_db:
        problems.append(
            f"JOBFILTER_SETTINGS_DB={settings_db!r} is not a database URL "
            "(e.g. sqlite:///./data/settings.db)"
        )

    if problems:
        raise ConfigurationError(
            "Invalid environment variables",
            errors=problems,
            suggestions=["Fix or unset them in your shell or .env file (see .env.example)"],
        )

    return EnvironmentConfig(
        log_level=log_level,
        settings_db=settings_db,
        environment=os.getenv("ENVIRONMENT") or "local",
    )
