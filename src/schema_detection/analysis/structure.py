"""Structural pattern detection.

Finds structural column roles that are independent of meaning:
- Identifier columns: (near) every value distinct, (near) no nulls, and either an
  identifier-like name or identifier-like values
- Enum columns: low-cardinality categoricals flagged by the statistics pass

Ordering is deterministic: identifiers by closeness of the distinct ratio to 1.0,
enums by ascending cardinality; ties keep header order.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Iterable
from typing import Any

from schema_detection.analysis.config import DetectionThresholds
from schema_detection.analysis.vocabulary import FieldVocabulary
from schema_detection.models import FieldStatistics, PatternResult

_UUID = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
_OBJECT_ID = re.compile(r"^[0-9a-f]{24}$", re.IGNORECASE)
_ALPHANUMERIC_ID = re.compile(r"^[A-Za-z0-9]{8,}$")

# Integers from this size on look like generated keys rather than quantities
MIN_NUMERIC_ID = 1_000_000


def looks_like_id(value: Any) -> bool:
    """Whether a single value looks like a generated identifier.

    Recognises UUIDs, 24-hex ObjectIds, alphanumeric codes of 8+ characters
    containing a digit, and integers of at least seven digits.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int | float):
        return float(value).is_integer() and abs(value) >= MIN_NUMERIC_ID
    if not isinstance(value, str):
        return False

    candidate = value.strip()
    if _UUID.match(candidate) or _OBJECT_ID.match(candidate):
        return True
    return bool(_ALPHANUMERIC_ID.match(candidate)) and any(c.isdigit() for c in candidate)


def _is_integer_column(stats: FieldStatistics) -> bool:
    if stats.numeric_stats is not None:
        return stats.numeric_stats.is_integer
    if stats.type_share("integer") >= 0.9:
        return True
    numbers = [
        s for s in stats.unique_samples if isinstance(s, int | float) and not isinstance(s, bool)
    ]
    return bool(numbers) and len(numbers) == len(stats.unique_samples) and all(
        float(n).is_integer() for n in numbers
    )


def has_id_like_values(stats: FieldStatistics) -> bool:
    """Whether the column's values look like keys (integers or id strings)."""
    if stats.has_numeric_type and stats.type_share("number", "integer") >= 0.9:
        return _is_integer_column(stats)

    samples = stats.string_samples()
    if not samples:
        return False
    matching = sum(1 for s in samples if looks_like_id(s))
    return matching / len(samples) >= 0.8


def detect_id_fields(
    columns: Iterable[tuple[str, FieldStatistics]],
    vocabulary: FieldVocabulary,
    thresholds: DetectionThresholds,
    exclude: Collection[str] = (),
) -> list[str]:
    """Find identifier-like columns.

    Args:
        columns: (header, statistics) pairs in header order
        vocabulary: Field vocabulary (identifier name patterns)
        thresholds: Uniqueness and null limits
        exclude: Headers that cannot be identifiers (e.g. coordinates)

    Returns:
        Headers ordered by closeness of the distinct ratio to 1.0
    """
    ranked: list[tuple[float, int, str]] = []
    for position, (header, stats) in enumerate(columns):
        if header in exclude or stats.occurrences <= 0:
            continue
        ratio = stats.unique_ratio
        if ratio < thresholds.id_uniqueness or stats.null_ratio > thresholds.id_max_null_ratio:
            continue
        if not (vocabulary.matches(header, "identifier") or has_id_like_values(stats)):
            continue
        ranked.append((abs(1.0 - ratio), position, header))

    return [header for _, _, header in sorted(ranked)]


def detect_enum_fields(
    columns: Iterable[tuple[str, FieldStatistics]],
    thresholds: DetectionThresholds,
    exclude: Collection[str] = (),
) -> list[str]:
    """Find low-cardinality categorical columns.

    A column qualifies when the statistics pass flagged it as an enum
    candidate, not every value is distinct, and its cardinality is within
    ``enum_threshold`` (distinct values, or percent of occurrences when
    ``enum_mode`` is "percentage").

    Returns:
        Headers ordered by ascending cardinality
    """
    ranked: list[tuple[int, int, str]] = []
    for position, (header, stats) in enumerate(columns):
        if header in exclude or not stats.is_enum_candidate:
            continue
        if stats.occurrences > 0 and stats.unique_values >= stats.occurrences:
            continue
        if thresholds.enum_mode == "percentage":
            within = stats.unique_ratio * 100 <= thresholds.enum_threshold
        else:
            within = stats.unique_values <= thresholds.enum_threshold
        if within:
            ranked.append((stats.unique_values, position, header))

    return [header for _, _, header in sorted(ranked)]


def detect_patterns(
    columns: list[tuple[str, FieldStatistics]],
    vocabulary: FieldVocabulary,
    thresholds: DetectionThresholds,
    exclude: Collection[str] = (),
) -> PatternResult:
    """Detect identifier and enum columns."""
    return PatternResult(
        id_fields=detect_id_fields(columns, vocabulary, thresholds, exclude),
        enum_fields=detect_enum_fields(columns, thresholds),
    )
