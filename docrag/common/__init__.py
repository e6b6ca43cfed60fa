"""Shared helpers used by the core services and the CLI."""

from .exception_handler import (
    failure_details,
    format_exception_json,
    get_error_code,
    log_exception,
)

__all__ = [
    "failure_details",
    "format_exception_json",
    "get_error_code",
    "log_exception",
]
