"""Default detector threshold configuration.

Loads tuning constants from config/detection/thresholds.yaml and lets a
detector's persisted options override them per call.

Usage:
    from schema_detection.analysis.config import get_thresholds

    thresholds = get_thresholds().with_overrides(context.config.options)
    if confidence < thresholds.min_confidence:
        ...
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from schema_detection.core.config import get_settings
from schema_detection.core.logging import get_logger

logger = get_logger(__name__)

# Module-level cache
_THRESHOLDS_CACHE: DetectionThresholds | None = None


@dataclass(frozen=True)
class DetectionThresholds:
    """Tuning constants of the default detector."""

    # Field mapping
    name_weight: float = 0.6
    min_confidence: float = 0.45
    min_date_share: float = 0.5

    # Geo
    coordinate_sample_share: float = 0.7
    strong_coordinate: float = 0.5
    ambiguity_penalty: float = 0.9
    address_fallback_factor: float = 0.6

    # Patterns
    id_uniqueness: float = 0.95
    id_max_null_ratio: float = 0.01
    enum_threshold: float = 50
    enum_mode: str = "count"

    # Language
    min_text_length: int = 20
    reliability_threshold: float = 0.5

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> DetectionThresholds:
        """Build thresholds from the sectioned YAML structure.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        flat: dict[str, Any] = {}
        for section in config_dict.values():
            if isinstance(section, dict):
                flat.update(section)
        return cls().with_overrides(flat)

    def with_overrides(self, options: dict[str, Any] | None) -> DetectionThresholds:
        """Return a copy with matching keys taken from ``options``."""
        if not options:
            return self
        updates: dict[str, Any] = {}
        for f in fields(self):
            if f.name not in options or options[f.name] is None:
                continue
            current = getattr(self, f.name)
            try:
                updates[f.name] = type(current)(options[f.name])
            except (TypeError, ValueError):
                logger.warning("invalid_threshold_override", key=f.name, value=options[f.name])
        return replace(self, **updates) if updates else self


def load_thresholds(config_path: Path | None = None) -> DetectionThresholds:
    """Load thresholds from YAML, falling back to defaults if the file is absent."""
    if config_path is None:
        config_path = get_settings().config_path / "detection" / "thresholds.yaml"

    if not config_path.exists():
        logger.debug("thresholds_file_missing", path=str(config_path))
        return DetectionThresholds()

    with open(config_path, encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}
    return DetectionThresholds.from_dict(config_dict)


def get_thresholds() -> DetectionThresholds:
    """Get the default thresholds (loaded once)."""
    global _THRESHOLDS_CACHE
    if _THRESHOLDS_CACHE is None:
        _THRESHOLDS_CACHE = load_thresholds()
    return _THRESHOLDS_CACHE


def clear_thresholds_cache() -> None:
    """Clear the thresholds cache (useful for testing)."""
    global _THRESHOLDS_CACHE
    _THRESHOLDS_CACHE = None
