"""
Configuration validation utilities.

Turns the raw TOML tables into validated configuration dataclasses.
"""

import logging
from typing import Any, Dict

from ..models.config import (
    DEFAULT_METADATA_ARGS,
    DEFAULT_STREAM_LIMIT,
    AppConfig,
    CargoSettings,
    LoggingSettings,
)
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_non_empty_string,
    validate_positive_integer,
    validate_string_list,
)

logger = logging.getLogger(__name__)

COLOR_MODES = ["always", "never", "auto"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
MIN_STREAM_LIMIT = 64 * 1024


def validate_cargo_config(cargo_data: Dict[str, Any]) -> CargoSettings:
    """
    Validate and create CargoSettings from the `[cargo]` table.

    Args:
        cargo_data: Raw cargo configuration from TOML

    Returns:
        Validated CargoSettings instance

    Raises:
        ValidationError: If validation fails
    """
    if not isinstance(cargo_data, dict):
        raise ValidationError("[cargo] must be a table", field_name="cargo", value=cargo_data)

    executable = validate_non_empty_string(
        cargo_data.get("executable", "cargo"),
        field_name="cargo.executable",
    )

    color = validate_enum_choice(
        cargo_data.get("color", "always"),
        valid_choices=COLOR_MODES,
        field_name="cargo.color",
    )

    metadata_args = validate_string_list(
        cargo_data.get("metadata_args", list(DEFAULT_METADATA_ARGS)),
        field_name="cargo.metadata_args",
    )

    stream_limit = validate_positive_integer(
        cargo_data.get("stream_limit", DEFAULT_STREAM_LIMIT),
        min_value=MIN_STREAM_LIMIT,
        field_name="cargo.stream_limit",
    )

    return CargoSettings(
        executable=executable,
        color=color,
        metadata_args=metadata_args,
        stream_limit=stream_limit,
    )


def validate_logging_config(logging_data: Dict[str, Any]) -> LoggingSettings:
    """Validate and create LoggingSettings from the `[logging]` table."""
    if not isinstance(logging_data, dict):
        raise ValidationError("[logging] must be a table", field_name="logging", value=logging_data)

    level = validate_enum_choice(
        logging_data.get("level", "INFO"),
        valid_choices=LOG_LEVELS,
        field_name="logging.level",
        case_sensitive=False,
    )
    return LoggingSettings(level=level)


def validate_app_config(config_data: Dict[str, Any]) -> AppConfig:
    """Validate the whole configuration document."""
    app_config = AppConfig(
        cargo=validate_cargo_config(config_data.get("cargo", {})),
        logging=validate_logging_config(config_data.get("logging", {})),
    )
    logger.debug(f"Validated configuration: {app_config}")
    return app_config
