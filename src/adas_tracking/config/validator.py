"""
Configuration Validator - Validates config syntax and semantic correctness.

Schema checks come from the pydantic models; this module adds the checks
that need the filesystem or cross-section judgement, and reports everything
as errors (fatal) or warnings (suspicious but runnable).
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .schemas import Config, validate_config_pydantic

logger = logging.getLogger(__name__)


# ANSI color codes for terminal output
class Colors:
    GREEN = "\033[92m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls):
        """Disable colors for non-TTY output."""
        cls.GREEN = cls.RED = cls.YELLOW = ""
        cls.CYAN = cls.BOLD = cls.RESET = ""


# Disable colors if not a TTY
if not sys.stdout.isatty():
    Colors.disable()


@dataclass
class ValidationResult:
    """Result of config validation."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    derived: dict[str, Any] = field(default_factory=dict)
    config: Config | None = None


def validate_config_full(config: dict | None) -> ValidationResult:
    """
    Comprehensive config validation with detailed error messages.

    Args:
        config: Configuration dictionary to validate

    Returns:
        ValidationResult with errors, warnings, derived settings and,
        when valid, the parsed Config.
    """
    result = ValidationResult(valid=True)

    if config is not None and not isinstance(config, dict):
        result.valid = False
        result.errors.append("Configuration must be a mapping")
        return result

    parsed, errors = validate_config_pydantic(config)
    if errors:
        result.valid = False
        result.errors.extend(errors)
        return result

    _validate_tracking(parsed, result)
    _validate_source(parsed, result)
    _validate_alerts(parsed, result)

    result.derived["max_age_seconds"] = parsed.tracking.max_age_seconds
    result.derived["emitters"] = list(dict.fromkeys(parsed.alerts.enabled))
    result.derived["vehicle_classes"] = parsed.risk.vehicle_classes

    if result.errors:
        result.valid = False
    else:
        result.config = parsed

    return result


def _validate_tracking(config: Config, result: ValidationResult) -> None:
    """Flag association settings that make identities unstable."""
    tracking = config.tracking

    if tracking.max_age_frames == 0:
        result.warnings.append(
            "tracking.max_age_frames is 0 - tracks expire as soon as a frame misses them"
        )
    if tracking.iou_threshold < 0.3:
        result.warnings.append(
            f"tracking.iou_threshold {tracking.iou_threshold} is low - nearby objects may swap ids"
        )
    if tracking.min_confidence > 0.9:
        result.warnings.append(
            f"tracking.min_confidence {tracking.min_confidence} drops most detections"
        )


def _validate_source(config: Config, result: ValidationResult) -> None:
    """Check that configured input files exist."""
    for name in ("detections", "video"):
        path = getattr(config.source, name)
        if path and not Path(path).exists():
            result.errors.append(f"source.{name} not found: {path}")


def _validate_alerts(config: Config, result: ValidationResult) -> None:
    if not config.alerts.enabled:
        result.warnings.append("No alerts enabled - frame results will still be written")


def print_validation_result(result: ValidationResult) -> None:
    """Print validation result in Terraform-like format."""
    print()
    print(f"{Colors.BOLD}Configuration Validation{Colors.RESET}")
    print("=" * 60)

    if result.valid:
        print(f"\n{Colors.GREEN}✓ Configuration is valid{Colors.RESET}")
    else:
        print(f"\n{Colors.RED}✗ Configuration has errors{Colors.RESET}")

    if result.errors:
        print(f"\n{Colors.RED}Errors:{Colors.RESET}")
        for error in result.errors:
            print(f"  {Colors.RED}✗{Colors.RESET} {error}")

    if result.warnings:
        print(f"\n{Colors.YELLOW}Warnings:{Colors.RESET}")
        for warning in result.warnings:
            print(f"  {Colors.YELLOW}!{Colors.RESET} {warning}")

    if result.valid and result.derived:
        print(f"\n{Colors.CYAN}Derived Configuration:{Colors.RESET}")
        max_age = result.derived.get("max_age_seconds")
        if max_age is not None:
            print(f"  Track max age: {max_age * 1000:.1f} ms")
        emitters = result.derived.get("emitters", [])
        if emitters:
            print(f"  Active alerts: {', '.join(emitters)}")
        classes = result.derived.get("vehicle_classes", [])
        if classes:
            print(f"  Vehicle classes: {', '.join(classes)}")

    print()
