"""Locate, read and validate the jobfilter configuration file."""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings

DEFAULT_LOCATIONS = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)

PathLike = Union[str, Path]


def load_config(
    config_path: Optional[PathLike] = None, allow_missing: bool = False
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Build the application configuration and read the environment.

    ``config_path`` is used when given; otherwise the first existing entry of
    DEFAULT_LOCATIONS. With ``allow_missing`` and no file anywhere, the
    built-in defaults apply.

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid, or
            an environment variable is invalid
    """
    path = _find_config_file(config_path, allow_missing)
    raw = read_config_file(path) if path is not None else {}

    emit_warnings(check_for_warnings(raw))
    app_config = parse_config(raw, source=str(path) if path else "built-in defaults")
    return app_config, load_environment_config()


def read_config_file(path: PathLike) -> Dict[str, Any]:
    """Parse a YAML file that must hold a mapping (an empty file is an empty mapping)."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Configuration file not found: {path}",
            suggestions=["Copy config.example.yaml to config.yaml"],
        ) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Could not parse YAML in {path}",
            errors=[str(e)],
            suggestions=["Indent with spaces, not tabs", "Quote values that contain ':' or '#'"],
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"{path} must contain a mapping at the top level, got {type(data).__name__}"
        )
    return data


def parse_config(raw: Dict[str, Any], source: str = "config") -> AppConfig:
    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError.from_validation_error(e, source) from e


def _find_config_file(config_path: Optional[PathLike], allow_missing: bool) -> Optional[Path]:
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {path}",
                suggestions=["Check the --config path"],
            )
        return path

    for candidate in DEFAULT_LOCATIONS:
        if candidate.exists():
            return candidate

    if allow_missing:
        return None
    raise ConfigurationError(
        "Configuration file not found",
        errors=[f"Looked for {candidate}" for candidate in DEFAULT_LOCATIONS],
        suggestions=["Copy config.example.yaml to config.yaml", "Or pass --config PATH"],
    )


def validate_config_file(config_path: PathLike) -> bool:
    """Check a configuration file without reading the environment; prints the outcome."""
    try:
        parse_config(read_config_file(config_path), source=str(config_path))
    except ConfigurationError as e:
        print(f"✗ {config_path}: validation failed\n{e}")
        return False

    print(f"✓ {config_path} is valid")
    return True
