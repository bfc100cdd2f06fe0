"""Main CLI application entry point."""

from __future__ import annotations

import typer

from schema_detection.cli.commands import detect, detectors, seed

app = typer.Typer(
    name="schema-detection",
    help="Schema detection - infer language, field roles and patterns of tabular datasets.",
    no_args_is_help=True,
)

# Register commands
app.command()(detectors.detectors)
app.command()(detect.detect)
app.command()(seed.seed)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
