"""Tests for the schema-detection CLI."""

import json

import pytest
from typer.testing import CliRunner

from schema_detection.cli.commands import detect, seed
from schema_detection.cli.main import app

runner = CliRunner()

EVENTS_PAYLOAD = {
    "headers": ["id", "event_name", "event_date", "lat", "lng", "notes"],
    "fieldStats": {
        "id": {
            "occurrences": 100,
            "occurrencePercent": 100,
            "uniqueValues": 100,
            "uniqueSamples": [1, 2, 3],
            "typeDistribution": {"integer": 100},
            "numericStats": {"min": 1, "max": 100, "avg": 50.5, "isInteger": True},
        },
        "event_name": {
            "occurrences": 100,
            "occurrencePercent": 100,
            "uniqueValues": 100,
            "uniqueSamples": ["Summer Music Festival", "Jazz Night at the Pier"],
            "typeDistribution": {"string": 100},
        },
        "event_date": {
            "occurrences": 100,
            "occurrencePercent": 100,
            "uniqueValues": 100,
            "uniqueSamples": ["2024-07-15", "2024-08-02"],
            "typeDistribution": {"string": 100},
            "formats": {"date": 100},
        },
        "lat": {
            "occurrences": 100,
            "occurrencePercent": 100,
            "uniqueValues": 100,
            "uniqueSamples": [52.52, 48.85],
            "typeDistribution": {"number": 100},
            "numericStats": {"min": 40.1, "max": 55.3, "avg": 50.2},
        },
        "lng": {
            "occurrences": 100,
            "occurrencePercent": 100,
            "uniqueValues": 100,
            "uniqueSamples": [13.4, 2.35],
            "typeDistribution": {"number": 100},
            "numericStats": {"min": -5.0, "max": 20.4, "avg": 8.1},
        },
        "notes": {
            "occurrences": 100,
            "occurrencePercent": 100,
            "uniqueValues": 80,
            "uniqueSamples": [
                "A wonderful outdoor concert with local bands and food trucks.",
                "Smooth jazz by the water with a view of the sunset over the bay.",
            ],
            "typeDistribution": {"string": 100},
        },
    },
    "sampleData": [
        {
            "id": 1,
            "event_name": "Summer Music Festival",
            "event_date": "2024-07-15",
            "lat": 52.52,
            "lng": 13.4,
            "notes": "A wonderful outdoor concert with local bands and food trucks.",
        },
        {
            "id": 2,
            "event_name": "Jazz Night at the Pier",
            "event_date": "2024-08-02",
            "lat": 48.85,
            "lng": 2.35,
            "notes": "Smooth jazz by the water with a view of the sunset over the bay.",
        },
    ],
}


@pytest.fixture(autouse=True)
def _keep_logging(monkeypatch):
    """Commands reconfigure logging onto the runner's streams; keep the test setup."""
    monkeypatch.setattr(detect, "setup_logging", lambda verbosity=0: None)
    monkeypatch.setattr(seed, "setup_logging", lambda verbosity=0: None)


@pytest.fixture
def context_file(tmp_path):
    path = tmp_path / "events.json"
    path.write_text(json.dumps(EVENTS_PAYLOAD), encoding="utf-8")
    return path


class TestDetectorsCommand:
    def test_json(self):
        result = runner.invoke(app, ["detectors", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [d["name"] for d in data] == ["default"]
        assert data[0]["label"] == "Default Detector"
        assert data[0]["priority"] == 1000

    def test_table(self):
        result = runner.invoke(app, ["detectors"])

        assert result.exit_code == 0
        assert "default" in result.stdout


class TestDetectCommand:
    """Tests for the detect command."""

    def test_json_output(self, context_file):
        result = runner.invoke(app, ["detect", str(context_file), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        mappings = data["fieldMappings"]
        assert mappings["title"]["path"] == "event_name"
        assert mappings["timestamp"]["path"] == "event_date"
        assert mappings["geo"]["type"] == "separate"
        assert mappings["geo"]["latitude"]["path"] == "lat"
        assert data["patterns"]["idFields"] == ["id"]
        assert set(data["language"]) == {"code", "name", "confidence", "isReliable"}

    def test_table_output(self, context_file):
        result = runner.invoke(app, ["detect", str(context_file), "--detector", "default"])

        assert result.exit_code == 0
        assert "Language:" in result.stdout
        assert "event_name" in result.stdout
        assert "separate lat=lat lng=lng" in result.stdout

    def test_unknown_detector_falls_back(self, context_file):
        result = runner.invoke(app, ["detect", str(context_file), "-d", "missing", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["patterns"]["idFields"] == ["id"]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        result = runner.invoke(app, ["detect", str(path)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.stdout

    def test_non_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        result = runner.invoke(app, ["detect", str(path)])

        assert result.exit_code == 1

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["detect", str(tmp_path / "absent.json")])

        assert result.exit_code != 0


class TestSeedCommand:
    def test_seeds_once(self, tmp_path):
        """Test the second run finds the records already present."""
        url = f"sqlite+aiosqlite:///{tmp_path / 'detectors.db'}"

        first = runner.invoke(app, ["seed", "--database-url", url])
        second = runner.invoke(app, ["seed", "--database-url", url])

        assert first.exit_code == 0
        assert "Seeded 1 detector record(s)" in first.stdout
        assert second.exit_code == 0
        assert "Seeded 0 detector record(s)" in second.stdout
