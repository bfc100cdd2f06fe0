"""CLI command implementations."""

from schema_detection.cli.commands import detect, detectors, seed

__all__ = [
    "detect",
    "detectors",
    "seed",
]
