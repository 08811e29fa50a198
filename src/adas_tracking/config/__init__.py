"""
Configuration loading and validation.

- load_config: Find, read, override and validate a YAML config
- validate_config_full: Schema + semantic validation with errors/warnings
- load_config_with_env: Apply environment variable overrides
- apply_overrides: Merge section overrides into a raw config

Pydantic schemas available for type-safe validation:
- Config: Complete configuration schema
- validate_config_pydantic: Validate and parse config to Pydantic model
"""

from .loader import (
    ConfigValidationError,
    apply_overrides,
    find_config_file,
    load_config,
    load_config_with_env,
    read_config_file,
)
from .schemas import (
    AlertsConfig,
    Config,
    JitterConfig,
    LaneConfig,
    OutputConfig,
    RiskConfig,
    SourceConfig,
    TrackingConfig,
    validate_config_pydantic,
)
from .validator import (
    ValidationResult,
    print_validation_result,
    validate_config_full,
)

__all__ = [
    # Sub-schemas for type hints
    "AlertsConfig",
    # Pydantic validation
    "Config",
    # Exception
    "ConfigValidationError",
    "JitterConfig",
    "LaneConfig",
    "OutputConfig",
    "RiskConfig",
    "SourceConfig",
    "TrackingConfig",
    "ValidationResult",
    # Config loading
    "apply_overrides",
    "find_config_file",
    "load_config",
    "load_config_with_env",
    "print_validation_result",
    "read_config_file",
    # Validation
    "validate_config_full",
    "validate_config_pydantic",
]
