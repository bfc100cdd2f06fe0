"""Schema detectors.

This module provides the detector infrastructure:
- SchemaDetector: Abstract base class for all detectors
- DetectionContext / DetectorConfig: Detector input
- DefaultDetector: Built-in heuristic detector (name "default")

Usage:
    from schema_detection.detectors import BUILTIN_DETECTORS, DetectionContext
    from schema_detection.service import SchemaDetectionService

    service = SchemaDetectionService([cls() for cls in BUILTIN_DETECTORS])
    result = await service.detect(None, DetectionContext.from_dict(payload))
"""

from schema_detection.detectors.base import (
    DetectionContext,
    DetectorConfig,
    SchemaDetector,
)
from schema_detection.detectors.default import DefaultDetector

# All built-in detector classes
BUILTIN_DETECTORS: list[type[SchemaDetector]] = [
    DefaultDetector,
]


def create_builtin_detectors() -> list[SchemaDetector]:
    """Instantiate all built-in detectors in registration order."""
    return [detector_class() for detector_class in BUILTIN_DETECTORS]


__all__ = [
    # Base classes
    "SchemaDetector",
    "DetectionContext",
    "DetectorConfig",
    # Registration
    "BUILTIN_DETECTORS",
    "create_builtin_detectors",
    # Built-in detectors
    "DefaultDetector",
]
