"""Seed persisted detector records at host startup.

Creates a record for every registered detector that has none yet. Existing
records are left untouched, so seeding is idempotent and never resets a
detector the user reconfigured. Persistence failures are logged and do not
abort startup.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from schema_detection.core.logging import get_logger
from schema_detection.detectors.base import SchemaDetector
from schema_detection.plugin.db_models import SchemaDetectorRecord
from schema_detection.plugin.repository import default_priority

logger = get_logger(__name__)


async def seed_detectors(
    session_factory: async_sessionmaker[AsyncSession],
    detectors: Iterable[SchemaDetector],
) -> int:
    """Create missing detector records.

    Args:
        session_factory: Factory for database sessions
        detectors: Registered detectors

    Returns:
        Number of records created (0 if the store was unavailable)
    """
    created = 0
    try:
        async with session_factory() as session:
            result = await session.execute(select(SchemaDetectorRecord.name))
            existing = set(result.scalars().all())

            for detector in detectors:
                if detector.name in existing:
                    continue
                session.add(
                    SchemaDetectorRecord(
                        name=detector.name,
                        label=detector.label or detector.name,
                        description=detector.description,
                        enabled=True,
                        priority=default_priority(detector.name),
                        options={},
                    )
                )
                await session.commit()
                existing.add(detector.name)
                created += 1
                logger.info("detector_seeded", detector=detector.name)
    except (SQLAlchemyError, OSError) as e:
        logger.warning("detector_seeding_failed", error=str(e), created=created)

    return created
