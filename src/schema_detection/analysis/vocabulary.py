"""Field name vocabularies for semantic role detection.

Vocabularies are defined in config/patterns/field_names.yaml: per semantic role
and language an ordered list of header patterns (most specific first), plus
language-independent lists for coordinates, addresses and identifiers.

Headers are normalised before matching so that ``Event Date``, ``eventDate``
and ``event-date`` all read as ``event_date``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

from schema_detection.core.config import get_settings
from schema_detection.core.exceptions import ConfigurationError

SEMANTIC_ROLES = ("title", "description", "timestamp", "location_name", "location")
GLOBAL_LISTS = ("latitude", "longitude", "combined_coordinates", "address", "identifier")
FALLBACK_LANGUAGE = "eng"

# Affinity for a header that only shares one token with a vocabulary entry
TOKEN_AFFINITY = 0.4
# Scale for a match found only in another language's vocabulary
FOREIGN_AFFINITY = 0.8

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEPARATORS = re.compile(r"[\s\-.]+")
_UNDERSCORES = re.compile(r"_+")

# Module-level cache keyed by resolved file path
_VOCABULARY_CACHE: dict[Path, FieldVocabulary] = {}


def normalize_header(header: str) -> str:
    """Normalise a header for vocabulary matching.

    Nested paths keep their last segment; camelCase, spaces, hyphens and dots
    become underscores; the result is lower-cased.

    Examples:
        >>> normalize_header("eventDate")
        'event_date'
        >>> normalize_header("Venue Name")
        'venue_name'
        >>> normalize_header("location.lat")
        'lat'
    """
    name = header.split(".")[-1] or header
    name = _CAMEL_BOUNDARY.sub("_", name.strip())
    name = _SEPARATORS.sub("_", name)
    name = _UNDERSCORES.sub("_", name).strip("_")
    return name.lower()


def pattern_index(name: str, patterns: list[re.Pattern[str]]) -> int:
    """Index of the first pattern matching ``name``, or -1."""
    for index, pattern in enumerate(patterns):
        if pattern.search(name):
            return index
    return -1


def position_score(index: int, total: int) -> float:
    """Score a match position: the first pattern scores 1.0, later ones less."""
    if index < 0 or total <= 0:
        return 0.0
    return 1.0 - index / total


def name_affinity(header: str, patterns: list[re.Pattern[str]]) -> float:
    """How strongly a header name suggests the vocabulary's role (0-1).

    A full match scores between 0.5 and 1.0 depending on the pattern position.
    A header whose individual token matches (``start_date`` against ``^date$``)
    scores TOKEN_AFFINITY.
    """
    name = normalize_header(header)
    if not name or not patterns:
        return 0.0

    index = pattern_index(name, patterns)
    if index >= 0:
        return 0.5 + position_score(index, len(patterns)) * 0.5

    tokens = [t for t in name.split("_") if t]
    if len(tokens) > 1 and any(pattern_index(token, patterns) >= 0 for token in tokens):
        return TOKEN_AFFINITY
    return 0.0


def _compile(patterns: Any, where: str, path: Path | None) -> list[re.Pattern[str]]:
    if not isinstance(patterns, list):
        raise ConfigurationError(f"'{where}' must be a list of patterns", path)
    compiled: list[re.Pattern[str]] = []
    for raw in patterns:
        try:
            compiled.append(re.compile(str(raw), re.IGNORECASE))
        except re.error as e:
            raise ConfigurationError(f"invalid pattern {raw!r} in '{where}': {e}", path) from e
    return compiled


class FieldVocabulary:
    """Compiled field name vocabularies.

    Loads role patterns per language and the language-independent lists.
    """

    def __init__(self, config_dict: dict[str, Any], path: Path | None = None):
        self.path = path
        self._roles: dict[str, dict[str, list[re.Pattern[str]]]] = {}
        self._lists: dict[str, list[re.Pattern[str]]] = {}
        self._load(config_dict)

    def _load(self, config_dict: dict[str, Any]) -> None:
        roles = config_dict.get("roles")
        if not isinstance(roles, dict):
            raise ConfigurationError("missing 'roles' section", self.path)

        for role in SEMANTIC_ROLES:
            by_language = roles.get(role)
            if not isinstance(by_language, dict) or FALLBACK_LANGUAGE not in by_language:
                raise ConfigurationError(
                    f"role '{role}' needs patterns for '{FALLBACK_LANGUAGE}'", self.path
                )
            self._roles[role] = {
                language: _compile(patterns, f"roles.{role}.{language}", self.path)
                for language, patterns in by_language.items()
            }

        for list_name in GLOBAL_LISTS:
            self._lists[list_name] = _compile(
                config_dict.get(list_name, []), list_name, self.path
            )

    @property
    def languages(self) -> list[str]:
        """Languages with at least one role vocabulary."""
        found: set[str] = set()
        for by_language in self._roles.values():
            found.update(by_language)
        return sorted(found)

    def role_patterns(self, role: str, language: str = FALLBACK_LANGUAGE) -> list[re.Pattern[str]]:
        """Patterns for a semantic role, falling back to English.

        Raises:
            KeyError: For an unknown role
        """
        by_language = self._roles[role]
        return by_language.get(language) or by_language[FALLBACK_LANGUAGE]

    def patterns(self, list_name: str) -> list[re.Pattern[str]]:
        """Language-independent pattern list (latitude, longitude, ...)."""
        return self._lists[list_name]

    def role_affinity(self, header: str, role: str, language: str = FALLBACK_LANGUAGE) -> float:
        """Name affinity of a header for a role.

        Uses the language's patterns first, then the English ones. A match in
        any other language still counts, scaled by FOREIGN_AFFINITY, so that a
        misclassified dataset language does not hide a well-named column.
        """
        affinity = name_affinity(header, self.role_patterns(role, language))
        if affinity == 0.0 and language != FALLBACK_LANGUAGE:
            affinity = name_affinity(header, self.role_patterns(role, FALLBACK_LANGUAGE))
        if affinity == 0.0:
            foreign = (
                name_affinity(header, patterns)
                for other, patterns in self._roles[role].items()
                if other not in (language, FALLBACK_LANGUAGE)
            )
            affinity = max(foreign, default=0.0) * FOREIGN_AFFINITY
        return affinity

    def matches(self, header: str, list_name: str) -> bool:
        """Whether the normalised header matches any pattern of the list."""
        return pattern_index(normalize_header(header), self._lists[list_name]) >= 0


def load_vocabulary(config_path: Path | None = None) -> FieldVocabulary:
    """Load field name vocabularies from YAML.

    Args:
        config_path: Optional path to the YAML file. If None, uses
            config/patterns/field_names.yaml under the configured config path.

    Returns:
        FieldVocabulary instance (cached per path)

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    if config_path is None:
        config_path = get_settings().config_path / "patterns" / "field_names.yaml"
    resolved = config_path.resolve()

    cached = _VOCABULARY_CACHE.get(resolved)
    if cached is not None:
        return cached

    if not resolved.exists():
        raise ConfigurationError("vocabulary file not found", resolved)

    with open(resolved, encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    vocabulary = FieldVocabulary(config_dict, path=resolved)
    _VOCABULARY_CACHE[resolved] = vocabulary
    return vocabulary


def clear_vocabulary_cache() -> None:
    """Clear the vocabulary cache (useful for testing)."""
    _VOCABULARY_CACHE.clear()
