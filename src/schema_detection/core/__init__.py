"""Core module - configuration, logging, and shared exceptions."""

from schema_detection.core.config import Settings, get_settings
from schema_detection.core.exceptions import ConfigurationError, SchemaDetectionError
from schema_detection.core.logging import configure_logging, get_logger, log_context

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    "log_context",
    # Exceptions
    "ConfigurationError",
    "SchemaDetectionError",
]
