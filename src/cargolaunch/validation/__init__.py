"""
Validation and error handling for the cargolaunch package.

This module provides input validation and error handling helpers with
consistent error reporting across the application.
"""

from .exceptions import (
    ErrorSeverity,
    ValidationError,
    handle_error,
    handle_config_error,
    handle_subprocess_error,
    handle_cli_error,
)

from .validators import (
    validate_directory,
    validate_enum_choice,
    validate_non_empty_string,
    validate_positive_integer,
    validate_string_list,
)

__all__ = [
    "ErrorSeverity",
    "ValidationError",
    "handle_error",
    "handle_config_error",
    "handle_subprocess_error",
    "handle_cli_error",
    "validate_directory",
    "validate_enum_choice",
    "validate_non_empty_string",
    "validate_positive_integer",
    "validate_string_list",
]
