"""Tests for detection threshold configuration."""

from pathlib import Path

from schema_detection.analysis.config import DetectionThresholds, get_thresholds, load_thresholds


class TestDetectionThresholds:
    """Tests for DetectionThresholds."""

    def test_yaml_matches_defaults(self):
        """Test the shipped YAML loads the documented defaults."""
        thresholds = get_thresholds()

        assert thresholds.name_weight == 0.6
        assert thresholds.min_confidence == 0.45
        assert thresholds.id_uniqueness == 0.95
        assert thresholds.enum_mode == "count"

    def test_from_dict_flattens_sections(self):
        """Test sectioned YAML structure is flattened."""
        thresholds = DetectionThresholds.from_dict(
            {"field_mapping": {"min_confidence": 0.3}, "patterns": {"enum_threshold": 10}}
        )

        assert thresholds.min_confidence == 0.3
        assert thresholds.enum_threshold == 10
        assert thresholds.name_weight == 0.6

    def test_overrides(self):
        """Test options override matching keys and ignore others."""
        thresholds = DetectionThresholds().with_overrides(
            {"min_confidence": "0.7", "enum_mode": "percentage", "unknown": 1}
        )

        assert thresholds.min_confidence == 0.7
        assert thresholds.enum_mode == "percentage"

    def test_invalid_override_ignored(self):
        """Test a value of the wrong type keeps the default."""
        thresholds = DetectionThresholds().with_overrides({"min_confidence": "high"})

        assert thresholds.min_confidence == 0.45

    def test_no_overrides_returns_same(self):
        """Test empty options return the same instance."""
        thresholds = DetectionThresholds()

        assert thresholds.with_overrides({}) is thresholds
        assert thresholds.with_overrides(None) is thresholds

    def test_missing_file_uses_defaults(self, tmp_path: Path):
        """Test a missing thresholds file yields defaults."""
        assert load_thresholds(tmp_path / "missing.yaml") == DetectionThresholds()
