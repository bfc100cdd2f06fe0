"""Default schema detector.

Heuristic detector that handles any tabular dataset:
1. Language of the textual content (selects the header vocabulary)
2. Coordinates and location (separate, combined or address only)
3. Semantic roles: timestamp, title, description, location name
4. Structural patterns: identifier and enum columns

Thresholds come from config/detection/thresholds.yaml and may be overridden
per call through ``DetectorConfig.options``.
"""

from __future__ import annotations

from schema_detection.analysis.config import DetectionThresholds, get_thresholds
from schema_detection.analysis.fields import detect_field_mappings
from schema_detection.analysis.geo import detect_geo
from schema_detection.analysis.language import (
    LANGUAGE_NAMES,
    detect_language,
    is_supported_language,
)
from schema_detection.analysis.structure import detect_patterns
from schema_detection.analysis.vocabulary import load_vocabulary
from schema_detection.core.logging import get_logger
from schema_detection.detectors.base import DetectionContext, SchemaDetector
from schema_detection.models import (
    DetectionResult,
    FieldMappingsResult,
    LanguageResult,
)

logger = get_logger(__name__)


class DefaultDetector(SchemaDetector):
    """Multilingual heuristic detector used as the fallback for every dataset."""

    name = "default"
    label = "Default Detector"
    description = (
        "Heuristic detection of language, semantic fields, coordinates and "
        "identifier/enum columns for any tabular dataset"
    )

    def can_handle(self, context: DetectionContext) -> bool:
        return True

    async def detect(self, context: DetectionContext) -> DetectionResult:
        """Run all detection for the dataset.

        Args:
            context: Detection context

        Returns:
            DetectionResult with language, field mappings and patterns
        """
        thresholds = get_thresholds().with_overrides(context.config.options)
        vocabulary = load_vocabulary()
        columns = list(context.iter_columns())

        forced = self._forced_language(context)
        language = forced or detect_language(
            context.sample_data,
            context.headers,
            min_text_length=thresholds.min_text_length,
            reliability_threshold=thresholds.reliability_threshold,
        )

        geo = detect_geo(
            columns,
            vocabulary,
            thresholds,
            language=language.code,
            values={header: context.column_values(header) for header in context.headers},
        )
        mappings = detect_field_mappings(
            columns,
            vocabulary,
            thresholds,
            language=language.code,
            exclude=geo.coordinate_paths,
            address=geo.address,
        )

        if forced is None:
            language = self._refine_language(context, mappings, language, thresholds)

        patterns = detect_patterns(columns, vocabulary, thresholds, exclude=geo.coordinate_paths)

        return DetectionResult(
            language=language,
            field_mappings=mappings.model_copy(update={"geo": geo.mapping}),
            patterns=patterns,
        )

    @staticmethod
    def _forced_language(context: DetectionContext) -> LanguageResult | None:
        code = context.config.get("language")
        if code is None:
            return None
        if not is_supported_language(code):
            logger.warning("unsupported_forced_language", language=code)
            return None
        return LanguageResult(code=code, name=LANGUAGE_NAMES[code], confidence=1.0, is_reliable=True)

    @staticmethod
    def _refine_language(
        context: DetectionContext,
        mappings: FieldMappingsResult,
        language: LanguageResult,
        thresholds: DetectionThresholds,
    ) -> LanguageResult:
        """Re-estimate the language from the title/description text.

        Keeps the first estimate when those columns carry too little text.
        """
        text_columns = [m.path for m in (mappings.title, mappings.description) if m is not None]
        if not text_columns:
            return language

        refined = detect_language(
            context.sample_data,
            context.headers,
            columns=text_columns,
            min_text_length=thresholds.min_text_length,
            reliability_threshold=thresholds.reliability_threshold,
        )
        if refined.confidence == 0.0:
            return language
        if refined.code != language.code:
            logger.debug("language_refined", initial=language.code, refined=refined.code)
        return refined
