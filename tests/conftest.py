"""Shared pytest fixtures for all tests."""

from collections.abc import Callable
from typing import Any

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from schema_detection.analysis.config import DetectionThresholds, clear_thresholds_cache
from schema_detection.analysis.vocabulary import FieldVocabulary, load_vocabulary
from schema_detection.detectors.base import DetectionContext
from schema_detection.models import FieldStatistics
from schema_detection.storage.base import init_database

StatsFactory = Callable[..., FieldStatistics]


@pytest.fixture(scope="function")
async def engine() -> AsyncEngine:
    """Create an in-memory SQLite engine for testing.

    Creates a fresh database for each test function.
    """
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    # Enable foreign keys for SQLite
    @event.listens_for(test_engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    await init_database(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncSession:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def _reset_threshold_cache():
    """Thresholds are cached module-wide; start every test from the YAML defaults."""
    clear_thresholds_cache()
    yield
    clear_thresholds_cache()


@pytest.fixture
def vocabulary() -> FieldVocabulary:
    """Field vocabulary from config/patterns/field_names.yaml."""
    return load_vocabulary()


@pytest.fixture
def thresholds() -> DetectionThresholds:
    """Default detection thresholds."""
    return DetectionThresholds()


def make_stats(path: str, **overrides: Any) -> FieldStatistics:
    """Build FieldStatistics for a fully populated, all-string column of 100 rows."""
    data: dict[str, Any] = {
        "path": path,
        "occurrences": 100,
        "occurrence_percent": 100.0,
        "null_count": 0,
        "unique_values": 100,
        "unique_samples": [],
        "type_distribution": {"string": 100},
    }
    data.update(overrides)
    return FieldStatistics.model_validate(data)


@pytest.fixture
def stats() -> StatsFactory:
    """Factory for FieldStatistics with sensible defaults."""
    return make_stats


@pytest.fixture
def event_context() -> DetectionContext:
    """Typical event dataset: id, name, date, coordinates, notes."""
    headers = ["id", "event_name", "event_date", "lat", "lng", "notes"]
    field_stats = {
        "id": make_stats(
            "id",
            type_distribution={"integer": 100},
            unique_samples=[1, 2, 3, 4, 5],
            numeric_stats={"min": 1, "max": 100, "avg": 50.5, "is_integer": True},
        ),
        "event_name": make_stats(
            "event_name",
            unique_samples=[
                "Summer Music Festival",
                "Jazz Night at the Pier",
                "Charity Fun Run",
            ],
        ),
        "event_date": make_stats(
            "event_date",
            unique_samples=["2024-07-15", "2024-08-02", "2024-09-10"],
            formats={"date": 100},
        ),
        "lat": make_stats(
            "lat",
            type_distribution={"number": 100},
            unique_samples=[52.52, 48.85, 51.5],
            numeric_stats={"min": 40.1, "max": 55.3, "avg": 50.2},
            geo_hints={"is_latitude": True, "field_name_pattern": "lat", "value_range": True},
        ),
        "lng": make_stats(
            "lng",
            type_distribution={"number": 100},
            unique_samples=[13.40, 2.35, -0.12],
            numeric_stats={"min": -5.0, "max": 20.4, "avg": 8.1},
            geo_hints={"is_longitude": True, "field_name_pattern": "lng", "value_range": True},
        ),
        "notes": make_stats(
            "notes",
            unique_values=80,
            unique_samples=[
                "A wonderful outdoor concert with local bands and food trucks.",
                "Smooth jazz by the water with a view of the sunset over the bay.",
                "Five kilometre run through the park to raise money for the shelter.",
            ],
        ),
    }
    sample_data = [
        {
            "id": 1,
            "event_name": "Summer Music Festival",
            "event_date": "2024-07-15",
            "lat": 52.52,
            "lng": 13.40,
            "notes": "A wonderful outdoor concert with local bands and food trucks.",
        },
        {
            "id": 2,
            "event_name": "Jazz Night at the Pier",
            "event_date": "2024-08-02",
            "lat": 48.85,
            "lng": 2.35,
            "notes": "Smooth jazz by the water with a view of the sunset over the bay.",
        },
        {
            "id": 3,
            "event_name": "Charity Fun Run",
            "event_date": "2024-09-10",
            "lat": 51.5,
            "lng": -0.12,
            "notes": "Five kilometre run through the park to raise money for the shelter.",
        },
    ]
    return DetectionContext(field_stats=field_stats, sample_data=sample_data, headers=headers)
