"""Schema detection service.

Owns the detector registry and resolves which detector runs for a request.

Resolution (the fallback chain):
1. The explicitly requested detector, if registered and ``can_handle`` is true
2. The first other registered detector whose ``can_handle`` is true
   (registration order; the ``default`` detector is not scanned)
3. The ``default`` detector, called without ``can_handle``
4. ``DetectionResult.empty()`` when nothing is registered

A detector that raises is logged and re-raised unchanged. No retries.

Usage:
    service = SchemaDetectionService([DefaultDetector()])
    result = await service.detect(None, context)
"""

from __future__ import annotations

import inspect
from collections.abc import Iterable
from typing import Any

from schema_detection.core.logging import get_logger, log_context
from schema_detection.detectors.base import DetectionContext, SchemaDetector
from schema_detection.models import DetectionResult

logger = get_logger(__name__)

DEFAULT_DETECTOR_NAME = "default"


async def _resolve(value: Any) -> Any:
    """Await the value if a detector returned an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


class SchemaDetectionService:
    """Registry of schema detectors plus the selection protocol."""

    def __init__(self, detectors: Iterable[SchemaDetector] = ()):
        """Register the given detectors in order.

        Args:
            detectors: Detectors in auto-selection scan order
        """
        self._detectors: dict[str, SchemaDetector] = {}
        self._manual_only: set[str] = set()
        self._default: SchemaDetector | None = None
        for detector in detectors:
            self.register(detector)

    def register(self, detector: SchemaDetector, *, auto_select: bool = True) -> None:
        """Register (or replace) a detector by name.

        Last write wins. A detector named ``default`` becomes the fallback.

        Args:
            detector: Detector instance to register
            auto_select: False keeps the detector out of the compatibility scan;
                it stays callable by explicit name
        """
        self._detectors[detector.name] = detector
        if auto_select:
            self._manual_only.discard(detector.name)
        else:
            self._manual_only.add(detector.name)
        if detector.name == DEFAULT_DETECTOR_NAME:
            self._default = detector
        logger.debug("detector_registered", detector=detector.name, auto_select=auto_select)

    def get_detector(self, name: str) -> SchemaDetector | None:
        """Get a detector by name.

        Returns:
            Detector instance or None if not registered
        """
        return self._detectors.get(name)

    def get_all_detectors(self) -> list[SchemaDetector]:
        """Get all registered detectors in registration order."""
        return list(self._detectors.values())

    @property
    def default_detector(self) -> SchemaDetector | None:
        return self._default

    async def detect(
        self, detector_name: str | None, context: DetectionContext
    ) -> DetectionResult:
        """Run detection with the requested detector or the best fallback.

        Args:
            detector_name: Detector to prefer, or None for auto-selection
            context: Detection context

        Returns:
            The selected detector's result, or the empty result when no
            detector is registered

        Raises:
            Exception: Whatever the selected detector raised
        """
        detector = await self._select(detector_name, context)

        if detector is None:
            logger.warning("no_detector_available", requested=detector_name)
            return DetectionResult.empty()

        with log_context(detector=detector.name):
            try:
                result: DetectionResult = await _resolve(detector.detect(context))
            except Exception:
                logger.exception("detector_failed")
                raise

        logger.info(
            "detection_completed",
            detector=detector.name,
            language=result.language.code,
            mapped=result.field_mappings.assigned_paths(),
        )
        return result

    async def find_compatible_detector(self, context: DetectionContext) -> SchemaDetector | None:
        """Find the first registered detector that can handle the context.

        Scans in registration order, skipping the ``default`` detector and
        detectors registered with ``auto_select=False``. The ``default``
        detector is returned when no other detector matches.

        Returns:
            First compatible detector, the default detector, or None when
            neither exists
        """
        for name, detector in self._detectors.items():
            if name == DEFAULT_DETECTOR_NAME or name in self._manual_only:
                continue
            if await _resolve(detector.can_handle(context)):
                return detector
        return self._default

    async def _select(
        self, detector_name: str | None, context: DetectionContext
    ) -> SchemaDetector | None:
        if detector_name is not None:
            requested = self._detectors.get(detector_name)
            if requested is None:
                logger.info("detector_not_found", requested=detector_name)
            elif await _resolve(requested.can_handle(context)):
                logger.debug("detector_selected", detector=requested.name, reason="requested")
                return requested
            else:
                logger.info("detector_declined", requested=detector_name)

        compatible = await self.find_compatible_detector(context)
        if compatible is not None:
            reason = "fallback" if compatible is self._default else "compatible"
            logger.debug("detector_selected", detector=compatible.name, reason=reason)
        return compatible

    @staticmethod
    def get_empty_result() -> DetectionResult:
        """Result returned when no detector exists."""
        return DetectionResult.empty()
