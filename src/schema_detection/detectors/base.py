"""Base classes for schema detection.

This module provides:
- SchemaDetector: Abstract base class for all schema detectors
- DetectionContext: Context passed to detectors with statistics and samples
- DetectorConfig: Persisted per-detector configuration handed in by the caller

A detector handles ALL detection for a dataset in one call: language, semantic
field mappings and structural patterns. Detectors are registered with the
SchemaDetectionService, which picks one per request.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Iterator
from dataclasses import dataclass, field
from typing import Any

from schema_detection.models import DetectionResult, FieldStatistics


@dataclass(frozen=True)
class DetectorConfig:
    """Configuration for a detector, loaded from the detector-config store.

    ``priority`` is advisory: the caller uses it to order registration.
    ``options`` is interpreted only by the detector it belongs to.
    """

    enabled: bool = True
    priority: int = 100
    options: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a detector option with optional default."""
        return self.options.get(key, default)


@dataclass
class DetectionContext:
    """Context passed to detectors containing everything needed for detection.

    ``headers`` is the canonical column order for all positional reasoning.
    """

    field_stats: dict[str, FieldStatistics] = field(default_factory=dict)
    sample_data: list[dict[str, Any]] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)
    config: DetectorConfig = field(default_factory=DetectorConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DetectionContext:
        """Build a context from its JSON form.

        Accepts ``fieldStats``/``sampleData`` (camelCase) or snake_case keys.
        Headers default to the field-statistics keys when absent.
        """
        raw_stats = data.get("fieldStats", data.get("field_stats", {})) or {}
        field_stats = {
            path: FieldStatistics.model_validate({"path": path, **stats})
            for path, stats in raw_stats.items()
        }
        raw_config = data.get("config") or {}
        config = DetectorConfig(
            enabled=raw_config.get("enabled", True),
            priority=raw_config.get("priority", 100),
            options=dict(raw_config.get("options") or {}),
        )
        return cls(
            field_stats=field_stats,
            sample_data=list(data.get("sampleData", data.get("sample_data", [])) or []),
            headers=list(data.get("headers") or field_stats.keys()),
            config=config,
        )

    def iter_columns(self) -> Iterator[tuple[str, FieldStatistics]]:
        """Yield (header, statistics) pairs in header order.

        Headers without statistics are skipped; statistics without a header
        are never yielded, so results only name real columns.
        """
        for header in self.headers:
            stats = self.field_stats.get(header)
            if stats is not None:
                yield header, stats

    def column_values(self, header: str) -> list[Any]:
        """Non-null values of a column across the sample rows."""
        return [row[header] for row in self.sample_data if row.get(header) is not None]


class SchemaDetector(ABC):
    """Abstract base class for schema detectors.

    Both ``can_handle`` and ``detect`` may be plain or ``async`` methods; the
    service awaits whichever they return. Detectors must not depend on call
    order or mutate shared state.
    """

    # Detector identity (override in subclasses)
    name: str = "base"
    label: str = ""
    description: str | None = None

    def can_handle(self, context: DetectionContext) -> bool | Awaitable[bool]:
        """Check if this detector can handle the given input.

        Returning False lets the service fall back to another detector.

        Args:
            context: Detection context

        Returns:
            True if the detector wants to process this dataset
        """
        return True

    @abstractmethod
    def detect(self, context: DetectionContext) -> DetectionResult | Awaitable[DetectionResult]:
        """Run all detection for the dataset.

        Args:
            context: Detection context with statistics, samples and headers

        Returns:
            Complete DetectionResult
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
