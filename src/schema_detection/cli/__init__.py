"""CLI for schema detection.

Usage:
    schema-detection detectors
    schema-detection detect ./events.json --json
    schema-detection seed

Environment:
    Loads .env file from current directory if present.
    Set SCHEMA_DETECTION_DATABASE_URL for the detector config store.
"""

from schema_detection.cli.main import app, main

__all__ = ["app", "main"]
