"""Analysis building blocks of the default detector.

- vocabulary: Multilingual field name vocabularies and header normalisation
- config: Tunable detection thresholds
- language: Language identification of sample text
- fields: Semantic role mapping (title, description, timestamp, location name)
- geo: Coordinate and location detection
- structure: Identifier and enum column detection
"""

from schema_detection.analysis.config import (
    DetectionThresholds,
    clear_thresholds_cache,
    get_thresholds,
    load_thresholds,
)
from schema_detection.analysis.fields import FieldMapper, detect_field_mappings
from schema_detection.analysis.geo import (
    COORDINATE_BOUNDS,
    GeoDetection,
    detect_coordinate_format,
    detect_geo,
    looks_like_coordinate,
)
from schema_detection.analysis.language import (
    LANGUAGE_NAMES,
    SUPPORTED_LANGUAGES,
    detect_language,
    detect_language_from_text,
    extract_text,
)
from schema_detection.analysis.structure import (
    detect_enum_fields,
    detect_id_fields,
    detect_patterns,
    looks_like_id,
)
from schema_detection.analysis.vocabulary import (
    FieldVocabulary,
    clear_vocabulary_cache,
    load_vocabulary,
    normalize_header,
)

__all__ = [
    # Config
    "DetectionThresholds",
    "clear_thresholds_cache",
    "get_thresholds",
    "load_thresholds",
    # Vocabulary
    "FieldVocabulary",
    "clear_vocabulary_cache",
    "load_vocabulary",
    "normalize_header",
    # Language
    "LANGUAGE_NAMES",
    "SUPPORTED_LANGUAGES",
    "detect_language",
    "detect_language_from_text",
    "extract_text",
    # Fields
    "FieldMapper",
    "detect_field_mappings",
    # Geo
    "COORDINATE_BOUNDS",
    "GeoDetection",
    "detect_coordinate_format",
    "detect_geo",
    "looks_like_coordinate",
    # Structure
    "detect_enum_fields",
    "detect_id_fields",
    "detect_patterns",
    "looks_like_id",
]
