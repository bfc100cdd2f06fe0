"""Tests for semantic field mapping."""

import pytest

from schema_detection.analysis.config import DetectionThresholds
from schema_detection.analysis.fields import (
    FieldMapper,
    description_evidence,
    detect_field_mappings,
    location_name_evidence,
    timestamp_evidence,
    title_evidence,
)
from schema_detection.models import FieldMapping


def _columns(**stats_by_header):
    return list(stats_by_header.items())


class TestEvidence:
    """Tests for per-role value evidence."""

    def test_title_requires_strings(self, stats):
        """Test numeric columns carry no title evidence."""
        assert title_evidence(stats("id", type_distribution={"number": 100})) == 0.0

    def test_title_length_bands(self, stats):
        """Test typical title lengths score highest."""
        typical = stats("t", unique_samples=["Summer Music Festival", "Open Air Cinema"])
        tiny = stats("t", unique_samples=["A", "B"])

        assert title_evidence(typical) == pytest.approx(1.0)
        assert title_evidence(tiny) < title_evidence(typical)

    def test_title_penalises_enums_and_numbers(self, stats):
        """Test enum candidates and number-like strings are penalised."""
        samples = ["Summer Music Festival", "Open Air Cinema"]
        plain = stats("t", unique_samples=samples)
        enum = stats("t", unique_samples=samples, is_enum_candidate=True)
        numeric_text = stats("t", unique_samples=["123", "4.5", "67"])

        assert title_evidence(enum) < title_evidence(plain)
        assert title_evidence(numeric_text) == 0.0

    def test_description_prefers_longer_text_than_title(self, stats):
        """Test a description longer than the title scores higher."""
        long_text = stats(
            "d", unique_samples=["A long description of the event with plenty of detail."]
        )

        longer = description_evidence(long_text, title_length=10.0)
        shorter = description_evidence(long_text, title_length=200.0)

        assert longer > shorter

    def test_location_name_prefers_place_text(self, stats):
        """Test multi-word capitalised place names score above lowercase codes."""
        places = stats("v", unique_samples=["Central Park", "Madison Square Garden"])
        codes = stats("v", unique_samples=["abc", "xyz"])

        assert location_name_evidence(places) > location_name_evidence(codes)

    def test_timestamp_requires_date_share(self, stats):
        """Test timestamp evidence needs enough date format hints."""
        thresholds = DetectionThresholds()

        assert timestamp_evidence(stats("d", formats={"date": 100}), thresholds) == pytest.approx(1.0)
        assert timestamp_evidence(stats("d", formats={"date_time": 60}), thresholds) > 0.7
        assert timestamp_evidence(stats("d", formats={"date": 10}), thresholds) == 0.0
        assert timestamp_evidence(stats("d"), thresholds) == 0.0


class TestDetectFieldMappings:
    """Tests for detect_field_mappings."""

    def test_english_title(self, stats, vocabulary, thresholds):
        """Test an English title column is detected."""
        columns = _columns(
            title=stats("title"), id=stats("id", type_distribution={"number": 100})
        )

        result = detect_field_mappings(columns, vocabulary, thresholds, "eng")

        assert result.title is not None
        assert result.title.path == "title"
        assert result.title.confidence > 0.5

    def test_german_title(self, stats, vocabulary, thresholds):
        """Test a German title column is detected with the German vocabulary."""
        columns = _columns(titel=stats("titel"), id=stats("id", type_distribution={"number": 100}))

        result = detect_field_mappings(columns, vocabulary, thresholds, "deu")

        assert result.title is not None
        assert result.title.path == "titel"

    def test_description(self, stats, vocabulary, thresholds):
        """Test description columns in English and German."""
        english = detect_field_mappings(
            _columns(description=stats("description")), vocabulary, thresholds, "eng"
        )
        german = detect_field_mappings(
            _columns(beschreibung=stats("beschreibung")), vocabulary, thresholds, "deu"
        )

        assert english.description is not None and english.description.path == "description"
        assert german.description is not None and german.description.path == "beschreibung"

    def test_timestamp(self, stats, vocabulary, thresholds):
        """Test a date column with date format hints is the timestamp."""
        columns = _columns(date=stats("date", formats={"date": 100}))

        result = detect_field_mappings(columns, vocabulary, thresholds, "eng")

        assert result.timestamp is not None
        assert result.timestamp.path == "date"

    def test_location_name(self, stats, vocabulary, thresholds):
        """Test a venue column is the location name."""
        result = detect_field_mappings(_columns(venue=stats("venue")), vocabulary, thresholds, "eng")

        assert result.location_name is not None
        assert result.location_name.path == "venue"

    def test_unmatched_fields_are_null(self, stats, vocabulary, thresholds):
        """Test a column without name affinity is not accepted on statistics alone."""
        result = detect_field_mappings(
            _columns(random_field=stats("random_field")), vocabulary, thresholds, "eng"
        )

        assert result.title is None
        assert result.description is None
        assert result.timestamp is None
        assert result.location_name is None

    def test_unknown_language_falls_back_to_english(self, stats, vocabulary, thresholds):
        """Test an unknown language uses the English vocabulary."""
        result = detect_field_mappings(_columns(title=stats("title")), vocabulary, thresholds, "xyz")

        assert result.title is not None
        assert result.title.path == "title"

    def test_camel_case_headers(self, stats, vocabulary, thresholds):
        """Test camelCase and spaced headers are normalised before matching."""
        columns = _columns(
            eventName=stats("eventName"),
            **{"Event Date": stats("Event Date", formats={"date_time": 100})},
        )

        result = detect_field_mappings(columns, vocabulary, thresholds, "eng")

        assert result.title is not None and result.title.path == "eventName"
        assert result.timestamp is not None and result.timestamp.path == "Event Date"

    def test_each_column_claimed_once(self, stats, vocabulary, thresholds):
        """Test a column assigned to one role is not reused for another."""
        columns = _columns(
            name=stats("name", unique_samples=["Central Park Concert", "Harbour Festival"])
        )

        result = detect_field_mappings(columns, vocabulary, thresholds, "eng")
        assigned = result.assigned_paths()

        assert assigned == ["name"]
        assert len(assigned) == len(set(assigned))

    def test_excluded_columns_not_assigned(self, stats, vocabulary, thresholds):
        """Test excluded (coordinate) columns are never assigned."""
        columns = _columns(location=stats("location", unique_samples=["52.5,13.4", "48.8,2.3"]))

        result = detect_field_mappings(
            columns, vocabulary, thresholds, "eng", exclude={"location"}
        )

        assert result.assigned_paths() == []

    def test_timestamp_evaluated_first(self, stats, vocabulary, thresholds):
        """Test a date-formatted column goes to timestamp before title."""
        columns = _columns(
            event_date=stats("event_date", formats={"date": 100}, unique_samples=["2024-01-15"]),
            title=stats("title"),
        )

        result = detect_field_mappings(columns, vocabulary, thresholds, "eng")

        assert result.timestamp is not None and result.timestamp.path == "event_date"
        assert result.title is not None and result.title.path == "title"


class TestAddressFallback:
    """Tests for the address fallback of the location name."""

    def test_address_fills_location_name(self, stats, vocabulary, thresholds):
        """Test the address candidate is used when no location name was found."""
        address = FieldMapping(path="street", confidence=0.9)
        mapper = FieldMapper(vocabulary, thresholds, "eng")

        mapped = mapper.map_fields(_columns(street=stats("street")), address=address)

        assert mapped["location_name"] is not None
        assert mapped["location_name"].path == "street"
        assert mapped["location_name"].confidence == 0.9 * thresholds.address_fallback_factor

    def test_address_not_used_when_claimed(self, stats, vocabulary, thresholds):
        """Test the fallback never reuses a column already assigned to a role."""
        address = FieldMapping(path="title", confidence=0.9)
        mapper = FieldMapper(vocabulary, thresholds, "eng")

        mapped = mapper.map_fields(_columns(title=stats("title")), address=address)

        assert mapped["title"] is not None and mapped["title"].path == "title"
        assert mapped["location_name"] is None
