"""Semantic field mapping.

Assigns columns to the roles title, description, timestamp and location name.

Each candidate gets a combined confidence:

    name_weight * name affinity + (1 - name_weight) * value evidence

Name affinity comes from the language's vocabulary (see vocabulary.py). Value
evidence comes from the column statistics: string share, sample lengths,
uniqueness, completeness and date format hints. A column without evidence for
a role is never a candidate, whatever its name. The best candidate is kept if
it reaches ``min_confidence``.

Roles are assigned in the order timestamp, title, description, location
name; each assigned column is removed from later roles.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Collection

from schema_detection.analysis.config import DetectionThresholds
from schema_detection.analysis.vocabulary import FieldVocabulary
from schema_detection.core.logging import get_logger
from schema_detection.models import FieldMapping, FieldMappingsResult, FieldStatistics

logger = get_logger(__name__)

ROLE_ORDER = ("timestamp", "title", "description", "location_name")

_NUMERIC_TEXT = re.compile(r"^\s*-?[\d.,]+\s*$")


def _completeness(stats: FieldStatistics) -> float:
    if stats.occurrence_percent > 0:
        return min(1.0, stats.occurrence_percent / 100)
    return 1.0 - stats.null_ratio


def _mostly_numeric_text(stats: FieldStatistics) -> bool:
    samples = stats.string_samples()
    if not samples:
        return False
    return sum(1 for s in samples if _NUMERIC_TEXT.match(s)) / len(samples) > 0.5


def title_evidence(stats: FieldStatistics) -> float:
    """Evidence for a title column.

    Mostly strings of moderate length, distinct values, present in most rows.
    Categorical and number-like columns are penalised.
    """
    if stats.string_share < 0.8 or _mostly_numeric_text(stats):
        return 0.0

    length = stats.average_sample_length()
    if length is None:
        score = 0.5
    elif 10 <= length <= 100:
        score = 1.0
    elif 5 <= length <= 200:
        score = 0.8
    elif length < 3 or length > 500:
        score = 0.3
    else:
        score = 0.6

    uniqueness = 0.7 + 0.3 * min(1.0, stats.unique_ratio / 0.5)
    score *= uniqueness * (0.6 + 0.4 * _completeness(stats))
    if stats.is_enum_candidate:
        score *= 0.5
    return score


def description_evidence(stats: FieldStatistics, title_length: float | None = None) -> float:
    """Evidence for a description column.

    Longer free text; repeated values are fine. Texts longer than the chosen
    title score higher.
    """
    if stats.string_share < 0.7 or _mostly_numeric_text(stats):
        return 0.0

    length = stats.average_sample_length()
    if length is None:
        return 0.5 * (0.8 + 0.2 * _completeness(stats))
    if 20 <= length <= 500:
        score = 1.0
    elif 10 <= length <= 1000:
        score = 0.8
    elif length < 5:
        score = 0.2
    elif length > 1000:
        score = 0.7
    else:
        score = 0.6

    if title_length is not None:
        score = min(1.0, score + 0.1) if length > title_length else score * 0.8
    return score * (0.8 + 0.2 * _completeness(stats))


def location_name_evidence(stats: FieldStatistics) -> float:
    """Evidence for a location name column: short place-like text."""
    if stats.string_share < 0.7 or _mostly_numeric_text(stats):
        return 0.0

    samples = stats.string_samples()
    if not samples:
        return 0.5

    length = sum(len(s) for s in samples) / len(samples)
    if 3 <= length <= 50:
        score = 1.0
    elif 2 <= length <= 100:
        score = 0.8
    elif length < 2:
        score = 0.2
    else:
        score = 0.6

    place_like = sum(1 for s in samples if len(s.split()) > 1 or s[:1].isupper()) / len(samples)
    return score * (0.7 + 0.3 * place_like)


def timestamp_evidence(stats: FieldStatistics, thresholds: DetectionThresholds) -> float:
    """Evidence for a timestamp column from the date/dateTime format share."""
    share = stats.date_format_share
    if share < thresholds.min_date_share:
        return 0.0
    return min(1.0, 0.7 + 0.3 * share)


class FieldMapper:
    """Assigns semantic roles for one dataset.

    Args:
        vocabulary: Field vocabulary
        thresholds: Mapping thresholds
        language: Dataset language (ISO 639-3)
    """

    def __init__(self, vocabulary: FieldVocabulary, thresholds: DetectionThresholds, language: str):
        self.vocabulary = vocabulary
        self.thresholds = thresholds
        self.language = language

    def evidence(self, role: str, stats: FieldStatistics, title: FieldStatistics | None = None) -> float:
        """Value evidence of a column for a role."""
        if role == "title":
            return title_evidence(stats)
        if role == "description":
            title_length = title.average_sample_length() if title is not None else None
            return description_evidence(stats, title_length)
        if role == "location_name":
            return location_name_evidence(stats)
        if role == "timestamp":
            return timestamp_evidence(stats, self.thresholds)
        raise ValueError(f"Unknown role: {role}")

    def confidence(self, header: str, role: str, evidence: float) -> float:
        weight = self.thresholds.name_weight
        affinity = self.vocabulary.role_affinity(header, role, self.language)
        return min(1.0, max(0.0, weight * affinity + (1.0 - weight) * evidence))

    def best_candidate(
        self,
        role: str,
        columns: list[tuple[str, FieldStatistics]],
        evidence: Callable[[FieldStatistics], float],
    ) -> FieldMapping | None:
        """Highest-confidence column for a role; ties keep header order."""
        best: FieldMapping | None = None
        for header, stats in columns:
            score = evidence(stats)
            if score <= 0.0:
                continue
            confidence = self.confidence(header, role, score)
            if best is None or confidence > best.confidence:
                best = FieldMapping(path=header, confidence=confidence)

        if best is None or best.confidence < self.thresholds.min_confidence:
            return None
        return best

    def map_fields(
        self,
        columns: list[tuple[str, FieldStatistics]],
        exclude: Collection[str] = (),
        address: FieldMapping | None = None,
    ) -> dict[str, FieldMapping | None]:
        """Assign every role to at most one distinct column.

        Args:
            columns: (header, statistics) pairs in header order
            exclude: Headers unavailable to any role (coordinate columns)
            address: Location column used as the location name when no
                column qualifies on its own

        Returns:
            Role name -> mapping (None for unassigned roles)
        """
        stats_by_header = dict(columns)
        claimed = set(exclude)
        assigned: dict[str, FieldMapping | None] = {}

        for role in ROLE_ORDER:
            available = [(h, s) for h, s in columns if h not in claimed]
            title = assigned.get("title")
            title_stats = stats_by_header.get(title.path) if title is not None else None
            mapping = self.best_candidate(
                role, available, lambda s, r=role, t=title_stats: self.evidence(r, s, t)
            )
            assigned[role] = mapping
            if mapping is not None:
                claimed.add(mapping.path)

        if assigned["location_name"] is None and address is not None and address.path not in claimed:
            assigned["location_name"] = FieldMapping(
                path=address.path,
                confidence=address.confidence * self.thresholds.address_fallback_factor,
            )

        logger.debug(
            "fields_mapped",
            language=self.language,
            **{role: m.path if m else None for role, m in assigned.items()},
        )
        return assigned


def detect_field_mappings(
    columns: list[tuple[str, FieldStatistics]],
    vocabulary: FieldVocabulary,
    thresholds: DetectionThresholds,
    language: str = "eng",
    exclude: Collection[str] = (),
    address: FieldMapping | None = None,
) -> FieldMappingsResult:
    """Map semantic roles (without geo) for a dataset."""
    mapper = FieldMapper(vocabulary, thresholds, language)
    return FieldMappingsResult(**mapper.map_fields(columns, exclude, address))
