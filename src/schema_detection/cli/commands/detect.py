"""Detect command - run schema detection on a context file."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table as RichTable

from schema_detection.cli.common import JsonFlag, VerboseOption, console, print_json, setup_logging
from schema_detection.detectors import DetectionContext, create_builtin_detectors
from schema_detection.models import DetectionResult
from schema_detection.service import SchemaDetectionService


def detect(
    context_file: Annotated[
        Path,
        typer.Argument(
            help="JSON file with fieldStats, sampleData, headers and optional config",
            exists=True,
            dir_okay=False,
            file_okay=True,
            resolve_path=True,
        ),
    ],
    detector: Annotated[
        str | None,
        typer.Option("--detector", "-d", help="Detector to prefer (default: auto-select)"),
    ] = None,
    json_output: JsonFlag = False,
    verbose: VerboseOption = 0,
) -> None:
    """Run schema detection on a dataset snapshot.

    Examples:

        schema-detection detect ./events.json

        schema-detection detect ./events.json --detector default --json
    """
    setup_logging(verbose)

    try:
        payload = json.loads(context_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON in {context_file}: {e}[/red]")
        raise typer.Exit(1) from e
    if not isinstance(payload, dict):
        console.print("[red]Context file must contain a JSON object[/red]")
        raise typer.Exit(1)

    context = DetectionContext.from_dict(payload)
    service = SchemaDetectionService(create_builtin_detectors())
    result = asyncio.run(service.detect(detector, context))

    if json_output:
        print_json(result.model_dump(mode="json", by_alias=True))
    else:
        _print_result(result)


def _print_result(result: DetectionResult) -> None:
    """Print a detection result with Rich tables."""
    language = result.language
    reliability = "[green]reliable[/green]" if language.is_reliable else "[yellow]unreliable[/yellow]"
    console.print(
        f"\n[bold]Language:[/bold] {language.name} ({language.code}) "
        f"{language.confidence:.2f} {reliability}"
    )

    mappings = result.field_mappings
    table = RichTable(title="Field Mappings")
    table.add_column("Role", style="cyan")
    table.add_column("Column")
    table.add_column("Confidence", justify="right")
    roles = {
        "title": mappings.title,
        "description": mappings.description,
        "timestamp": mappings.timestamp,
        "location name": mappings.location_name,
    }
    for role, mapping in roles.items():
        if mapping is None:
            table.add_row(role, "[dim]-[/dim]", "")
        else:
            table.add_row(role, mapping.path, f"{mapping.confidence:.2f}")
    console.print(table)

    geo = mappings.geo
    if geo is None:
        console.print("[bold]Geo:[/bold] [dim]none[/dim]")
    elif geo.type == "separate":
        console.print(
            f"[bold]Geo:[/bold] separate lat={geo.latitude.path} lng={geo.longitude.path} "
            f"({geo.confidence:.2f})"
        )
    else:
        console.print(
            f"[bold]Geo:[/bold] combined {geo.combined.path} format={geo.combined.format} "
            f"({geo.confidence:.2f})"
        )

    patterns = result.patterns
    console.print(f"[bold]ID fields:[/bold] {', '.join(patterns.id_fields) or '-'}")
    console.print(f"[bold]Enum fields:[/bold] {', '.join(patterns.enum_fields) or '-'}")
