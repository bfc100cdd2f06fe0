"""Detectors command - list available detectors."""

from __future__ import annotations

from rich.table import Table as RichTable

from schema_detection.cli.common import JsonFlag, console, print_json
from schema_detection.detectors import create_builtin_detectors
from schema_detection.plugin.repository import default_priority


def detectors(json_output: JsonFlag = False) -> None:
    """List the built-in schema detectors.

    Examples:

        schema-detection detectors

        schema-detection detectors --json
    """
    available = create_builtin_detectors()

    if json_output:
        print_json(
            [
                {
                    "name": d.name,
                    "label": d.label,
                    "description": d.description,
                    "priority": default_priority(d.name),
                }
                for d in available
            ]
        )
        return

    table = RichTable(title="Schema Detectors")
    table.add_column("Name", style="cyan")
    table.add_column("Label")
    table.add_column("Priority", justify="right")
    table.add_column("Description", style="dim")
    for d in available:
        table.add_row(d.name, d.label, str(default_priority(d.name)), d.description or "")
    console.print(table)
