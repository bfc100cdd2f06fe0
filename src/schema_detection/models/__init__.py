"""Data models: field statistics (input) and detection results (output)."""

from schema_detection.models.results import (
    CombinedCoordinate,
    CombinedGeoMapping,
    DetectionResult,
    FieldMapping,
    FieldMappingsResult,
    GeoFieldMapping,
    LanguageResult,
    PatternResult,
    SeparateGeoMapping,
)
from schema_detection.models.statistics import (
    EnumValue,
    FieldStatistics,
    FormatHints,
    GeoHints,
    NumericStats,
)

__all__ = [
    # Input
    "EnumValue",
    "FieldStatistics",
    "FormatHints",
    "GeoHints",
    "NumericStats",
    # Output
    "CombinedCoordinate",
    "CombinedGeoMapping",
    "DetectionResult",
    "FieldMapping",
    "FieldMappingsResult",
    "GeoFieldMapping",
    "LanguageResult",
    "PatternResult",
    "SeparateGeoMapping",
]
