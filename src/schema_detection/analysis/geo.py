"""Coordinate and location detection.

Finds how a dataset stores geographic positions:
- Separate latitude and longitude columns
- One combined column ("lat,lng" / "lng,lat" pairs, GeoJSON Point, WKT POINT)
- An address-like column, attached to the coordinates or, without
  coordinates, offered as the location name

Coordinate candidates are scored on four factors: name pattern (0.4), value
type and range (0.3), type consistency (0.2) and completeness (0.1).
"""

from __future__ import annotations

import json
import re
from collections import Counter
from collections.abc import Collection
from dataclasses import dataclass, field
from typing import Any, Literal

from schema_detection.analysis.config import DetectionThresholds
from schema_detection.analysis.vocabulary import (
    FieldVocabulary,
    normalize_header,
    pattern_index,
    position_score,
)
from schema_detection.core.logging import get_logger
from schema_detection.models import (
    CombinedCoordinate,
    CombinedGeoMapping,
    FieldMapping,
    FieldStatistics,
    GeoFieldMapping,
    SeparateGeoMapping,
)

logger = get_logger(__name__)

Axis = Literal["lat", "lng"]

COORDINATE_BOUNDS: dict[str, tuple[float, float]] = {
    "lat": (-90.0, 90.0),
    "lng": (-180.0, 180.0),
}

# Samples inspected per column
MAX_SAMPLES = 10

# Name score for a column only flagged by the statistics pass
GEO_HINT_NAME_SCORE = 0.5

# Combined formats recognisable from the value alone
SELF_DESCRIBING_FORMATS = ("geojson", "wkt")

_DEGREES = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*°?\s*([NSEW])?\s*$", re.IGNORECASE)
_PAIR = re.compile(
    r"^\s*[(\[]?\s*(-?\d+(?:\.\d+)?)\s*(?:[,;]\s*|\s+)(-?\d+(?:\.\d+)?)\s*[)\]]?\s*$"
)
_WKT_POINT = re.compile(
    r"^\s*POINT\s*(?:Z\s*)?\(\s*(-?\d+(?:\.\d+)?)\s+(-?\d+(?:\.\d+)?)", re.IGNORECASE
)


def parse_coordinate(value: Any) -> float | None:
    """Parse a single coordinate value.

    Accepts numbers, numeric strings and degree notation with a hemisphere
    suffix (``52.52° N``, ``13.4W``); southern and western values are negated.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if not isinstance(value, str):
        return None

    match = _DEGREES.match(value)
    if not match:
        return None
    number = float(match.group(1))
    hemisphere = (match.group(2) or "").upper()
    return -abs(number) if hemisphere in ("S", "W") else number


def in_bounds(number: float, axis: Axis) -> bool:
    low, high = COORDINATE_BOUNDS[axis]
    return low <= number <= high


def looks_like_coordinate(value: Any, axis: Axis) -> bool:
    """Whether a value parses as a coordinate within the axis bounds."""
    number = parse_coordinate(value)
    return number is not None and in_bounds(number, axis)


@dataclass
class GeoDetection:
    """Outcome of geo detection for one dataset.

    ``coordinate_paths`` are the columns claimed as coordinates; they are
    excluded from semantic role and identifier detection.
    ``address`` is the location column offered as the location name when the
    dataset has no coordinates.
    """

    mapping: GeoFieldMapping | None = None
    address: FieldMapping | None = None
    coordinate_paths: set[str] = field(default_factory=set)


def _samples(stats: FieldStatistics, values: list[Any]) -> list[Any]:
    source = stats.unique_samples or values
    return [v for v in source if v is not None][:MAX_SAMPLES]


def _name_score(stats: FieldStatistics, header: str, patterns: list[re.Pattern[str]], axis: Axis) -> float:
    index = pattern_index(normalize_header(header), patterns)
    if index >= 0:
        return position_score(index, len(patterns))

    hints = stats.geo_hints
    if hints is not None and (hints.is_latitude if axis == "lat" else hints.is_longitude):
        return GEO_HINT_NAME_SCORE
    return 0.0


def _range_score(
    stats: FieldStatistics, samples: list[Any], axis: Axis, thresholds: DetectionThresholds
) -> float:
    """Type/range factor in [0, 1]; 0 means the values cannot be coordinates."""
    numeric = stats.numeric_stats
    if numeric is not None:
        if in_bounds(numeric.min, axis) and in_bounds(numeric.max, axis):
            return 1.0
        return 0.0

    if not samples:
        return 0.0
    share = sum(1 for s in samples if looks_like_coordinate(s, axis)) / len(samples)
    return share if share >= thresholds.coordinate_sample_share else 0.0


def coordinate_confidence(
    header: str,
    stats: FieldStatistics,
    axis: Axis,
    vocabulary: FieldVocabulary,
    thresholds: DetectionThresholds,
    values: list[Any] | None = None,
) -> float:
    """Confidence that a column holds latitudes (or longitudes).

    Returns 0.0 unless the name or the statistics pass points at the axis and
    the values fit its bounds.
    """
    patterns = vocabulary.patterns("latitude" if axis == "lat" else "longitude")
    name_score = _name_score(stats, header, patterns, axis)
    if name_score == 0.0:
        return 0.0

    range_score = _range_score(stats, _samples(stats, values or []), axis, thresholds)
    if range_score == 0.0:
        return 0.0

    consistency = 0.0
    if stats.occurrences > 0 and stats.type_distribution:
        consistency = max(stats.type_distribution.values()) / stats.occurrences
    completeness = 1.0 - stats.null_ratio

    confidence = name_score * 0.4 + range_score * 0.3 + consistency * 0.2 + completeness * 0.1
    return min(1.0, max(0.0, confidence))


def _read_point(value: Any) -> tuple[str, float, float] | None:
    """Classify one combined-coordinate value as (kind, first, second)."""
    if isinstance(value, str) and value.lstrip().startswith("{"):
        try:
            value = json.loads(value)
        except ValueError:
            return None

    if isinstance(value, dict):
        coordinates = value.get("coordinates")
        if (
            str(value.get("type", "")).lower() == "point"
            and isinstance(coordinates, list | tuple)
            and len(coordinates) >= 2
            and all(isinstance(c, int | float) and not isinstance(c, bool) for c in coordinates[:2])
        ):
            return "geojson", float(coordinates[0]), float(coordinates[1])
        return None

    if isinstance(value, list | tuple) and len(value) == 2:
        if all(isinstance(c, int | float) and not isinstance(c, bool) for c in value):
            return "pair", float(value[0]), float(value[1])
        return None

    if not isinstance(value, str):
        return None

    match = _WKT_POINT.match(value)
    if match:
        return "wkt", float(match.group(1)), float(match.group(2))
    match = _PAIR.match(value)
    if match:
        return "pair", float(match.group(1)), float(match.group(2))
    return None


def detect_coordinate_format(samples: list[Any]) -> tuple[str, float] | None:
    """Detect the combined-coordinate format of a column's samples.

    Returns:
        (format, share of samples in that format) or None if no sample parses.
        Format is one of "lat,lng", "lng,lat", "geojson", "wkt".
    """
    if not samples:
        return None

    counts: Counter[str] = Counter()
    for sample in samples:
        point = _read_point(sample)
        if point is None:
            continue
        kind, first, second = point
        if kind == "pair":
            if in_bounds(first, "lat") and in_bounds(second, "lng"):
                counts["lat,lng"] += 1
            elif in_bounds(first, "lng") and in_bounds(second, "lat"):
                counts["lng,lat"] += 1
        elif in_bounds(first, "lng") and in_bounds(second, "lat"):
            # GeoJSON and WKT order longitude first
            counts[kind] += 1

    if not counts:
        return None
    # lat,lng wins ties: it is the common human-readable order
    order = ["lat,lng", "lng,lat", "geojson", "wkt"]
    best = max(order, key=lambda kind: (counts[kind], -order.index(kind)))
    return best, counts[best] / len(samples)


def _find_combined(
    columns: list[tuple[str, FieldStatistics]],
    values: dict[str, list[Any]],
    vocabulary: FieldVocabulary,
    thresholds: DetectionThresholds,
    exclude: Collection[str],
) -> tuple[str, str, float] | None:
    """Best combined coordinate column.

    Bare number pairs only count under a coordinate-like header: values such as
    ``12,50`` are decimal-comma numbers in most supported locales. GeoJSON and
    WKT shapes are accepted under any header at a reduced confidence.
    """
    best: tuple[str, str, float] | None = None
    for header, stats in columns:
        if header in exclude:
            continue
        detected = detect_coordinate_format(_samples(stats, values.get(header, [])))
        if detected is None:
            continue
        coord_format, share = detected
        if share < thresholds.coordinate_sample_share:
            continue
        if vocabulary.matches(header, "combined_coordinates"):
            confidence = share
        elif coord_format in SELF_DESCRIBING_FORMATS:
            confidence = share * 0.8
        else:
            continue
        if best is None or confidence > best[2]:
            best = (header, coord_format, confidence)
    return best


def find_address_field(
    columns: list[tuple[str, FieldStatistics]],
    vocabulary: FieldVocabulary,
    language: str,
    exclude: Collection[str] = (),
) -> FieldMapping | None:
    """Find a textual column naming a place or address.

    Name affinity for the location vocabulary of the language counts most; a
    match against the generic address prefixes scores 0.5.
    """
    best: FieldMapping | None = None
    for header, stats in columns:
        if header in exclude or stats.string_share < 0.7:
            continue
        affinity = vocabulary.role_affinity(header, "location", language)
        if affinity == 0.0 and vocabulary.matches(header, "address"):
            affinity = 0.5
        if affinity == 0.0:
            continue
        confidence = affinity * 0.6 + stats.string_share * 0.3 + (1.0 - stats.null_ratio) * 0.1
        if best is None or confidence > best.confidence:
            best = FieldMapping(path=header, confidence=min(1.0, confidence))
    return best


def _ranked(candidates: dict[str, float], order: dict[str, int]) -> list[str]:
    return sorted(candidates, key=lambda h: (-candidates[h], order[h]))


def detect_geo(
    columns: list[tuple[str, FieldStatistics]],
    vocabulary: FieldVocabulary,
    thresholds: DetectionThresholds,
    language: str = "eng",
    values: dict[str, list[Any]] | None = None,
) -> GeoDetection:
    """Detect coordinate columns and the location column.

    Args:
        columns: (header, statistics) pairs in header order
        vocabulary: Field vocabulary
        thresholds: Geo thresholds
        language: Dataset language for the location vocabulary
        values: Sample values per header, used when statistics carry no samples

    Returns:
        GeoDetection; ``mapping`` is None when no coordinates were found
    """
    values = values or {}
    order = {header: position for position, (header, _) in enumerate(columns)}

    lat_candidates: dict[str, float] = {}
    lng_candidates: dict[str, float] = {}
    for header, stats in columns:
        samples = values.get(header)
        lat = coordinate_confidence(header, stats, "lat", vocabulary, thresholds, samples)
        lng = coordinate_confidence(header, stats, "lng", vocabulary, thresholds, samples)
        if lat >= thresholds.strong_coordinate:
            lat_candidates[header] = lat
        if lng >= thresholds.strong_coordinate:
            lng_candidates[header] = lng

    result = GeoDetection(coordinate_paths=set(lat_candidates) | set(lng_candidates))

    separate: tuple[str, str] | None = None
    for lat_header in _ranked(lat_candidates, order):
        lng_header = next(
            (h for h in _ranked(lng_candidates, order) if h != lat_header), None
        )
        if lng_header is not None:
            separate = (lat_header, lng_header)
            break

    if separate is not None:
        lat_header, lng_header = separate
        confidence = min(lat_candidates[lat_header], lng_candidates[lng_header])
        if len(lat_candidates) > 1 or len(lng_candidates) > 1:
            confidence *= thresholds.ambiguity_penalty
        address = find_address_field(columns, vocabulary, language, result.coordinate_paths)
        result.mapping = SeparateGeoMapping(
            confidence=confidence,
            latitude=FieldMapping(path=lat_header, confidence=lat_candidates[lat_header]),
            longitude=FieldMapping(path=lng_header, confidence=lng_candidates[lng_header]),
            location_field=address,
        )
        logger.debug("geo_separate_detected", latitude=lat_header, longitude=lng_header)
        return result

    combined = _find_combined(columns, values, vocabulary, thresholds, result.coordinate_paths)
    if combined is not None:
        header, coord_format, confidence = combined
        result.coordinate_paths.add(header)
        address = find_address_field(columns, vocabulary, language, result.coordinate_paths)
        result.mapping = CombinedGeoMapping(
            confidence=confidence,
            combined=CombinedCoordinate(path=header, format=coord_format),
            location_field=address,
        )
        logger.debug("geo_combined_detected", path=header, format=coord_format)
        return result

    # A lone axis without its partner is not a usable position
    result.address = find_address_field(columns, vocabulary, language, result.coordinate_paths)
    return result

