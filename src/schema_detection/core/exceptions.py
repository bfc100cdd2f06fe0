"""Exceptions raised by the schema detection package.

Detector failures have no wrapper here: the service re-raises a detector's own
error unchanged.
"""

from __future__ import annotations

from pathlib import Path


class SchemaDetectionError(Exception):
    """Base class for schema detection errors."""


class ConfigurationError(SchemaDetectionError):
    """Error loading or validating detection configuration."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}" if path is not None else message)
