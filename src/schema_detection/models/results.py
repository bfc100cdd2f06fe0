"""Detection result models.

The output contract every detector honours:
- DetectionResult: language + field mappings + structural patterns, produced whole
- LanguageResult: ISO 639-3 classification with confidence
- FieldMappingsResult: semantic roles (title, description, timestamp, location name) and geo
- GeoFieldMapping: tagged union of SeparateGeoMapping / CombinedGeoMapping
- PatternResult: identifier-like and enum-like columns

Results are immutable and serialise with camelCase keys
(``result.model_dump(by_alias=True)``).
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Confidence = Annotated[float, Field(ge=0.0, le=1.0)]

# Confidence above which a language classification is considered trustworthy
RELIABILITY_THRESHOLD = 0.5


class ResultModel(BaseModel):
    """Base for result models: camelCase aliases, immutable."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class FieldMapping(ResultModel):
    """A column assigned to a semantic role."""

    path: str
    confidence: Confidence


class CombinedCoordinate(ResultModel):
    """A single column carrying both coordinates."""

    path: str
    format: str  # "lat,lng", "lng,lat", "geojson", "wkt"


class SeparateGeoMapping(ResultModel):
    """Latitude and longitude in two distinct columns."""

    type: Literal["separate"] = "separate"
    confidence: Confidence
    latitude: FieldMapping
    longitude: FieldMapping
    location_field: FieldMapping | None = None


class CombinedGeoMapping(ResultModel):
    """Both coordinates in one column."""

    type: Literal["combined"] = "combined"
    confidence: Confidence
    combined: CombinedCoordinate
    location_field: FieldMapping | None = None


GeoFieldMapping = Annotated[SeparateGeoMapping | CombinedGeoMapping, Field(discriminator="type")]


class LanguageResult(ResultModel):
    """Detected dominant language of the sample text."""

    code: str  # ISO 639-3, e.g. "eng", "deu"
    name: str
    confidence: Confidence
    is_reliable: bool = False

    @classmethod
    def build(
        cls,
        code: str,
        name: str,
        confidence: float,
        threshold: float = RELIABILITY_THRESHOLD,
    ) -> LanguageResult:
        """Create a result, deriving reliability from the confidence."""
        confidence = max(0.0, min(1.0, confidence))
        return cls(code=code, name=name, confidence=confidence, is_reliable=confidence > threshold)


class FieldMappingsResult(ResultModel):
    """All semantic field assignments for a dataset."""

    title: FieldMapping | None = None
    description: FieldMapping | None = None
    timestamp: FieldMapping | None = None
    location_name: FieldMapping | None = None
    geo: GeoFieldMapping | None = None

    def assigned_paths(self) -> list[str]:
        """Columns claimed by one of the four semantic roles."""
        mappings = [self.title, self.description, self.timestamp, self.location_name]
        return [m.path for m in mappings if m is not None]


class PatternResult(ResultModel):
    """Structural column roles."""

    id_fields: list[str] = Field(default_factory=list)
    enum_fields: list[str] = Field(default_factory=list)


class DetectionResult(ResultModel):
    """Complete output of one detection call."""

    language: LanguageResult
    field_mappings: FieldMappingsResult = Field(default_factory=FieldMappingsResult)
    patterns: PatternResult = Field(default_factory=PatternResult)

    @classmethod
    def empty(cls) -> DetectionResult:
        """Well-formed result used when no detector is available."""
        return cls(
            language=LanguageResult(code="und", name="Unknown", confidence=0.0, is_reliable=False),
            field_mappings=FieldMappingsResult(),
            patterns=PatternResult(),
        )
