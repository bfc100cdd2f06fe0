"""SQLAlchemy models for persisted detector configuration.

One row per detector name. The host application loads a row into
``DetectionContext.config`` before detection and bumps the run statistics
after a successful call; the service itself never touches these records.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from schema_detection.storage.base import Base

DEFAULT_PRIORITY = 100
# The fallback detector sorts after every other detector
DEFAULT_DETECTOR_PRIORITY = 1000


class SchemaDetectorRecord(Base):
    """Persisted configuration and usage statistics of a detector."""

    __tablename__ = "schema_detectors"

    record_id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    label: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_PRIORITY)
    options: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Statistics
    total_runs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_used: Mapped[datetime | None] = mapped_column(DateTime)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return f"SchemaDetectorRecord(name={self.name!r}, enabled={self.enabled}, priority={self.priority})"
