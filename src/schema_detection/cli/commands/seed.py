"""Seed command - create missing detector records."""

from __future__ import annotations

import asyncio

from schema_detection.cli.common import DatabaseUrlOption, VerboseOption, console, setup_logging
from schema_detection.core.config import get_settings
from schema_detection.detectors import create_builtin_detectors
from schema_detection.plugin.seeding import seed_detectors
from schema_detection.storage import get_engine, get_session_factory, init_database


def seed(database_url: DatabaseUrlOption = None, verbose: VerboseOption = 0) -> None:
    """Create detector config records for the built-in detectors.

    Existing records are kept as they are.

    Examples:

        schema-detection seed

        schema-detection seed --database-url sqlite+aiosqlite:///./detectors.db
    """
    setup_logging(verbose)
    created = asyncio.run(_seed(database_url or get_settings().database_url))
    console.print(f"[green]Seeded {created} detector record(s)[/green]")


async def _seed(database_url: str) -> int:
    engine = get_engine(database_url)
    try:
        await init_database(engine)
        return await seed_detectors(get_session_factory(engine), create_builtin_detectors())
    finally:
        await engine.dispose()
