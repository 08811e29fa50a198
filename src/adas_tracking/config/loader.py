"""
Configuration loading - file discovery, YAML parsing and environment overrides.
"""

import logging
import os
from pathlib import Path

import yaml

from ..utils.constants import ENV_DETECTIONS_PATH, ENV_JITTER_SEED
from .schemas import Config
from .validator import ValidationResult, validate_config_full

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "config.yaml"


class ConfigValidationError(Exception):
    """Raised when config cannot be loaded or fails validation."""

    def __init__(self, message: str, result: ValidationResult | None = None):
        super().__init__(message)
        self.result = result


def find_config_file(config_path: str | None = None) -> Path | None:
    """
    Find config file in standard locations.

    Search order:
    1. Specified path (if provided)
    2. Current directory (config.yaml)
    3. ~/.config/adas-tracking/config.yaml

    Args:
        config_path: User-specified config path

    Returns:
        Path to config file, or None when no file exists and none was specified

    Raises:
        ConfigValidationError: If a specified config file does not exist
    """
    if config_path:
        specified = Path(config_path)
        if specified.exists():
            return specified
        raise ConfigValidationError(f"Specified config file not found: {config_path}")

    search_paths = [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.home() / ".config" / "adas-tracking" / DEFAULT_CONFIG_NAME,
    ]

    for path in search_paths:
        if path.exists():
            logger.info(f"Using config: {path}")
            return path

    logger.info("No config file found - using defaults")
    return None


def read_config_file(config_file: Path) -> dict:
    """
    Read a YAML config file.

    Supports pointer files: if config only contains `use: path/to/config.yaml`,
    that file is loaded instead (relative to the pointer file). Empty sections
    are dropped.

    Raises:
        ConfigValidationError: Invalid YAML or unreadable file
    """
    try:
        with open(config_file, encoding="utf-8") as f:
            config = yaml.safe_load(f)

        if isinstance(config, dict) and list(config.keys()) == ["use"]:
            pointer_path = Path(config_file).parent / config["use"]
            logger.info(f"Config pointer: {config_file} -> {config['use']}")
            with open(pointer_path, encoding="utf-8") as f:
                config = yaml.safe_load(f)
            config_file = pointer_path

    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in {config_file}: {e}") from e
    except OSError as e:
        raise ConfigValidationError(f"Cannot read {config_file}: {e}") from e

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigValidationError(f"Config root must be a mapping: {config_file}")

    # an empty section (`jitter:`) means "use the defaults"
    config = {section: values for section, values in config.items() if values is not None}

    logger.info(f"Configuration loaded from {config_file}")
    return config


def apply_overrides(config: dict, overrides: dict) -> dict:
    """
    Merge section -> {key: value} overrides into a raw config.

    An empty YAML section (`source:`) loads as None and is treated as {}.
    A section that is not a mapping is left alone for validation to report.
    """
    for section, values in overrides.items():
        current = config.get(section)
        if current is None:
            config[section] = dict(values)
        elif isinstance(current, dict):
            current.update(values)
    return config


def load_config_with_env(config: dict) -> dict:
    """
    Apply environment variable overrides to config.

    Args:
        config: Base configuration dictionary

    Returns:
        Configuration with environment variables applied
    """
    if ENV_DETECTIONS_PATH in os.environ:
        logger.info(f"Using detections path from environment: {ENV_DETECTIONS_PATH}")
        apply_overrides(config, {"source": {"detections": os.environ[ENV_DETECTIONS_PATH]}})

    if ENV_JITTER_SEED in os.environ:
        raw = os.environ[ENV_JITTER_SEED]
        try:
            seed = int(raw)
        except ValueError:
            logger.warning(f"Ignoring non-integer {ENV_JITTER_SEED}={raw!r}")
        else:
            apply_overrides(config, {"jitter": {"seed": seed}})

    return config


def load_config(config_path: str | None = None, overrides: dict | None = None) -> Config:
    """
    Load, override and validate configuration.

    Args:
        config_path: Explicit config path, or None to search standard locations
        overrides: Section -> {key: value} applied after environment overrides
            (used for command line flags)

    Returns:
        Validated Config

    Raises:
        ConfigValidationError: If config cannot be loaded or is invalid
    """
    config_file = find_config_file(config_path)
    config = read_config_file(config_file) if config_file else {}
    config = load_config_with_env(config)
    apply_overrides(config, overrides or {})

    result = validate_config_full(config)
    if not result.valid:
        raise ConfigValidationError("Configuration is invalid", result)

    for warning in result.warnings:
        logger.warning(warning)
    logger.info("Configuration validated")

    return result.config
