"""Shared CLI utilities and constants."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from schema_detection.core.config import get_settings
from schema_detection.core.logging import configure_logging

# Load .env file from current directory (database URL, log settings)
load_dotenv()

# Shared console instance
console = Console()

JsonFlag = Annotated[
    bool,
    typer.Option(
        "--json",
        help="Output as JSON for scripting",
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-v=INFO, -vv=DEBUG)",
    ),
]

DatabaseUrlOption = Annotated[
    str | None,
    typer.Option(
        "--database-url",
        help="Detector config database (defaults to SCHEMA_DETECTION_DATABASE_URL)",
    ),
]


def setup_logging(verbosity: int = 0, log_format: str | None = None) -> None:
    """Configure structured logging based on verbosity level.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2+=DEBUG
        log_format: "console" for development, "json" for production/cloud;
            defaults to SCHEMA_DETECTION_LOG_FORMAT
    """
    log_format = log_format or get_settings().log_format
    if verbosity >= 2:
        level = "DEBUG"
    elif verbosity >= 1:
        level = "INFO"
    else:
        level = "WARNING"

    configure_logging(
        log_level=level,
        log_format=log_format,
        show_timestamps=verbosity >= 1,
        color=log_format == "console",
    )


def print_json(data: object) -> None:
    """Print JSON without markup interpretation or wrapping."""
    console.print(json.dumps(data, indent=2), markup=False, highlight=False, soft_wrap=True)
