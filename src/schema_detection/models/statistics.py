"""Field Statistics Models.

Pydantic models for the per-column statistics produced by the upstream
statistics pass (one snapshot per detection request):
- FieldStatistics: Complete statistical picture of one column
- FormatHints: Counters of values matching well-known formats
- NumericStats: Range statistics for numeric columns
- EnumValue: Value frequency for enum candidates
- GeoHints: Coordinate hints derived from the column name and value range

The external JSON uses camelCase keys (``occurrencePercent``, ``typeDistribution``);
the models accept both camelCase and snake_case names.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

NUMERIC_TYPES = ("number", "integer")


class StatsModel(BaseModel):
    """Base for statistics models: camelCase aliases, immutable snapshot."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class FormatHints(StatsModel):
    """Occurrence counts of values matching known formats."""

    email: int = 0
    url: int = 0
    date_time: int = 0
    date: int = 0
    numeric: int = 0


class NumericStats(StatsModel):
    """Statistics for numeric columns."""

    min: float
    max: float
    avg: float
    is_integer: bool = False


class EnumValue(StatsModel):
    """A value with its count."""

    value: Any
    count: int
    percent: float


class GeoHints(StatsModel):
    """Coordinate hints computed by the statistics pass."""

    is_latitude: bool = False
    is_longitude: bool = False
    field_name_pattern: str = ""
    value_range: bool = False


class FieldStatistics(StatsModel):
    """Statistics for one column of a sampled dataset."""

    path: str
    occurrences: int = 0
    occurrence_percent: float = 0.0
    null_count: int = 0
    unique_values: int = 0
    unique_samples: list[Any] = Field(default_factory=list)
    type_distribution: dict[str, int] = Field(default_factory=dict)
    formats: FormatHints = Field(default_factory=FormatHints)
    numeric_stats: NumericStats | None = None
    is_enum_candidate: bool = False
    enum_values: list[EnumValue] | None = None
    geo_hints: GeoHints | None = None
    first_seen: datetime | None = None
    last_seen: datetime | None = None
    depth: int = 0

    @property
    def field_name(self) -> str:
        """Last segment of a nested path (``venue.name`` -> ``name``)."""
        return self.path.split(".")[-1]

    def type_share(self, *types: str) -> float:
        """Share of occurrences whose observed type is one of ``types``."""
        if self.occurrences <= 0:
            return 0.0
        return sum(self.type_distribution.get(t, 0) for t in types) / self.occurrences

    @property
    def string_share(self) -> float:
        return self.type_share("string")

    @property
    def has_string_type(self) -> bool:
        return self.type_distribution.get("string", 0) > 0

    @property
    def has_numeric_type(self) -> bool:
        return any(self.type_distribution.get(t, 0) > 0 for t in NUMERIC_TYPES)

    @property
    def unique_ratio(self) -> float:
        """Distinct values relative to occurrences (1.0 = every value distinct)."""
        if self.occurrences <= 0:
            return 0.0
        return self.unique_values / self.occurrences

    @property
    def null_ratio(self) -> float:
        if self.occurrences <= 0:
            return 0.0
        return self.null_count / self.occurrences

    @property
    def date_format_share(self) -> float:
        """Share of occurrences recognised as dates or datetimes."""
        if self.occurrences <= 0:
            return 0.0
        return min(1.0, (self.formats.date + self.formats.date_time) / self.occurrences)

    def string_samples(self) -> list[str]:
        """Non-empty string values from the unique samples."""
        return [s for s in self.unique_samples if isinstance(s, str) and s.strip()]

    def average_sample_length(self) -> float | None:
        """Average length of string samples, or None without string samples."""
        samples = self.string_samples()
        if not samples:
            return None
        return sum(len(s) for s in samples) / len(samples)
