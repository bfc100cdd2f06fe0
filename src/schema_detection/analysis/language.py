"""Language detection for sample data.

Classifies the dominant natural language of a dataset's textual content so
that header vocabularies for that language can be used. Identification is
statistical (character n-gram models via lingua), restricted to the languages
the field vocabularies support.

Values that carry no language signal are dropped before classification:
emails, URLs, ISO dates, numbers, coordinate pairs, UUIDs, and strings shorter
than three characters.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from lingua import Language, LanguageDetector, LanguageDetectorBuilder

from schema_detection.models import LanguageResult
from schema_detection.models.results import RELIABILITY_THRESHOLD

SUPPORTED_LANGUAGES = ("eng", "deu", "fra", "spa", "ita", "nld", "por")

LANGUAGE_NAMES: dict[str, str] = {
    "eng": "English",
    "deu": "German",
    "fra": "French",
    "spa": "Spanish",
    "ita": "Italian",
    "nld": "Dutch",
    "por": "Portuguese",
    "und": "Unknown",
}

# lingua language name -> ISO 639-3 code
_LINGUA_CODES: dict[str, str] = {
    "ENGLISH": "eng",
    "GERMAN": "deu",
    "FRENCH": "fra",
    "SPANISH": "spa",
    "ITALIAN": "ita",
    "DUTCH": "nld",
    "PORTUGUESE": "por",
}

# Shorter text produces unreliable classifications
MIN_TEXT_LENGTH = 20
MIN_VALUE_LENGTH = 3

_NON_TEXT_PATTERNS = [
    re.compile(r"^[^\s@]+@[^\s@]+\.[a-z]{2,}$", re.IGNORECASE),  # email
    re.compile(r"^https?://", re.IGNORECASE),  # url
    re.compile(r"^\d{4}-\d{2}-\d{2}(T\d{2}:\d{2}:\d{2})?"),  # iso date
    re.compile(r"^-?\d+(\.\d+)?$"),  # number
    re.compile(r"^-?\d+\.\d+,\s?-?\d+\.\d+$"),  # coordinate pair
    re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE),
    re.compile(r"^[\d\s./-]+$"),  # ids, phone numbers
]

_detector: LanguageDetector | None = None


def _get_detector() -> LanguageDetector:
    """Build the lingua detector once; model loading is expensive."""
    global _detector
    if _detector is None:
        _detector = LanguageDetectorBuilder.from_languages(
            *(getattr(Language, name) for name in _LINGUA_CODES)
        ).build()
    return _detector


def default_language_result() -> LanguageResult:
    """English with zero confidence: used when there is too little text."""
    return LanguageResult(code="eng", name="English", confidence=0.0, is_reliable=False)


def is_supported_language(code: str) -> bool:
    return code in SUPPORTED_LANGUAGES


def is_non_text_value(value: str) -> bool:
    """Whether a string looks like data rather than natural language."""
    return any(pattern.search(value) for pattern in _NON_TEXT_PATTERNS)


def is_useful_text(value: str) -> bool:
    trimmed = value.strip()
    return len(trimmed) >= MIN_VALUE_LENGTH and not is_non_text_value(trimmed)


def extract_text(
    sample_data: Iterable[dict[str, Any]],
    headers: Iterable[str],
    columns: Iterable[str] | None = None,
) -> str:
    """Collect text suitable for language detection.

    Headers are included since they often carry language-specific terms.

    Args:
        sample_data: Sample rows
        headers: Column headers
        columns: Restrict values to these columns (headers are then omitted)

    Returns:
        Space-joined text
    """
    parts: list[str] = []
    selected = list(columns) if columns is not None else None

    if selected is None:
        parts.extend(h for h in headers if len(h) > 2 and not is_non_text_value(h))

    for row in sample_data:
        values = row.values() if selected is None else (row.get(c) for c in selected)
        for value in values:
            if isinstance(value, str) and is_useful_text(value):
                parts.append(value.strip())

    return " ".join(parts)


def detect_language_from_text(
    text: str,
    min_text_length: int = MIN_TEXT_LENGTH,
    reliability_threshold: float = RELIABILITY_THRESHOLD,
) -> LanguageResult:
    """Classify text into one of the supported languages.

    Confidence is the top score plus half the gap to the runner-up, capped at 1.

    Args:
        text: Text to analyze
        min_text_length: Minimum characters required for classification
        reliability_threshold: Confidence above which the result is reliable

    Returns:
        LanguageResult; English with confidence 0 when text is too short
    """
    if len(text.strip()) < min_text_length:
        return default_language_result()

    values = _get_detector().compute_language_confidence_values(text)
    if not values:
        return default_language_result()

    top = values[0]
    code = _LINGUA_CODES.get(top.language.name)
    if code is None:
        return default_language_result()

    confidence = top.value
    if len(values) > 1:
        gap = top.value - values[1].value
        confidence = min(1.0, top.value + gap * 0.5)

    return LanguageResult.build(
        code=code,
        name=LANGUAGE_NAMES[code],
        confidence=confidence,
        threshold=reliability_threshold,
    )


def detect_language(
    sample_data: list[dict[str, Any]],
    headers: list[str],
    columns: list[str] | None = None,
    min_text_length: int = MIN_TEXT_LENGTH,
    reliability_threshold: float = RELIABILITY_THRESHOLD,
) -> LanguageResult:
    """Detect the language of sample rows (and headers).

    Main entry point used by the default detector.
    """
    text = extract_text(sample_data, headers, columns)
    return detect_language_from_text(text, min_text_length, reliability_threshold)
