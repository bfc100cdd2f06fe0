"""Schema Detection.

Infers the language, semantic field roles (title, description, timestamp,
location), coordinates and identifier/enum columns of an imported dataset
from its per-column statistics and sample rows.

Example:
    from schema_detection import DetectionContext, SchemaDetectionService
    from schema_detection.detectors import create_builtin_detectors

    service = SchemaDetectionService(create_builtin_detectors())
    result = await service.detect(None, DetectionContext.from_dict(payload))
    result.field_mappings.title
"""

__version__ = "0.1.0"

from schema_detection.detectors import DetectionContext, DetectorConfig, SchemaDetector
from schema_detection.models import DetectionResult
from schema_detection.service import SchemaDetectionService

__all__ = [
    "DetectionContext",
    "DetectionResult",
    "DetectorConfig",
    "SchemaDetectionService",
    "SchemaDetector",
    "__version__",
]
