"""Access to persisted detector configuration.

Helpers the host application uses around ``SchemaDetectionService.detect``:
load a detector's config before the call, record the run after it, and
build a service whose registration order follows the persisted priorities.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schema_detection.core.logging import get_logger
from schema_detection.detectors.base import DetectorConfig, SchemaDetector
from schema_detection.plugin.db_models import (
    DEFAULT_DETECTOR_PRIORITY,
    DEFAULT_PRIORITY,
    SchemaDetectorRecord,
)
from schema_detection.service import DEFAULT_DETECTOR_NAME, SchemaDetectionService

logger = get_logger(__name__)


def default_priority(name: str) -> int:
    """Priority given to a newly seeded detector."""
    return DEFAULT_DETECTOR_PRIORITY if name == DEFAULT_DETECTOR_NAME else DEFAULT_PRIORITY


async def get_detector_record(session: AsyncSession, name: str) -> SchemaDetectorRecord | None:
    result = await session.execute(
        select(SchemaDetectorRecord).where(SchemaDetectorRecord.name == name)
    )
    return result.scalar_one_or_none()


async def list_detector_records(session: AsyncSession) -> list[SchemaDetectorRecord]:
    """All detector records ordered by priority, then name."""
    result = await session.execute(
        select(SchemaDetectorRecord).order_by(
            SchemaDetectorRecord.priority, SchemaDetectorRecord.name
        )
    )
    return list(result.scalars().all())


async def load_detector_config(session: AsyncSession, name: str) -> DetectorConfig:
    """Load the persisted configuration of a detector.

    Args:
        session: Database session
        name: Detector name

    Returns:
        DetectorConfig from the record, or defaults when no record exists
    """
    record = await get_detector_record(session, name)
    if record is None:
        return DetectorConfig(priority=default_priority(name))
    return DetectorConfig(
        enabled=record.enabled,
        priority=record.priority,
        options=dict(record.options or {}),
    )


async def record_detector_run(session: AsyncSession, name: str) -> SchemaDetectorRecord | None:
    """Increment the run statistics of a detector after a successful detection.

    Returns:
        The updated record, or None if the detector has no record
    """
    record = await get_detector_record(session, name)
    if record is None:
        logger.debug("detector_record_missing", detector=name)
        return None

    record.total_runs = (record.total_runs or 0) + 1
    record.last_used = datetime.now(UTC)
    await session.commit()
    return record


def build_service(
    detectors: Iterable[SchemaDetector],
    records: Sequence[SchemaDetectorRecord] = (),
) -> SchemaDetectionService:
    """Create a service with registration ordered by persisted priority.

    Detectors without a record get their default priority. Ties keep the
    given order. Detectors whose record is disabled stay callable by name but
    are left out of auto-selection.

    Args:
        detectors: Detector instances
        records: Persisted detector records

    Returns:
        Configured SchemaDetectionService
    """
    by_name = {record.name: record for record in records}

    def priority(detector: SchemaDetector) -> int:
        record = by_name.get(detector.name)
        return record.priority if record is not None else default_priority(detector.name)

    service = SchemaDetectionService()
    for detector in sorted(detectors, key=priority):
        record = by_name.get(detector.name)
        service.register(detector, auto_select=record is None or record.enabled)
    return service
