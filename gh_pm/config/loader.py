"""Locate, load and save the ``.gh-pm.yml`` configuration file."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from .models import PMConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".gh-pm.yml"


def find_config_file(start: Path | None = None) -> Path | None:
    """Search for the configuration file in ``start`` and its parents.

    Args:
        start: Directory to start from (defaults to the working directory)

    Returns:
        Path to the first configuration file found, or None
    """
    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None) -> tuple[PMConfig, Path]:
    """Load and validate the configuration file.

    Args:
        path: Explicit configuration path; searched for when None

    Returns:
        Tuple of (config, path it was loaded from)

    Raises:
        ConfigError: If no file is found or it cannot be parsed
    """
    config_path = path or find_config_file()
    if config_path is None:
        raise ConfigError(
            f"configuration file {CONFIG_FILE_NAME} not found in current "
            "or parent directories"
        )

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"failed to read config file at {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse config file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config file {config_path} must contain a mapping")

    try:
        config = PMConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid config file {config_path}: {e}") from e

    logger.debug("Loaded configuration from %s", config_path)
    return config, Path(config_path)


def save_config(config: PMConfig, path: Path) -> None:
    """Write the configuration back to disk, keeping key order."""
    data = config.model_dump(mode="json", exclude_none=True)
    try:
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                data,
                f,
                sort_keys=False,
                default_flow_style=False,
                allow_unicode=True,
            )
    except OSError as e:
        raise ConfigError(f"failed to write config file: {e}") from e

    logger.debug("Saved configuration to %s", path)
