# ============================================================================
# SCOPE: DOMAIN (Medication)
# Description: Free-text medication parser used to pre-fill medication forms.
# ============================================================================
"""Medication Text Parser.

Turns an utterance such as "I need to take Aspirin 325mg twice daily" into
structured ``ParsedMedication`` candidates.

Names are found two ways:
    - catalog: the known generic/brand patterns (high confidence source)
    - heuristic: capitalized words longer than 3 characters

Dosage, frequency, times and instructions are read from the whole text and
attached to every medication found in the same call. In a sentence naming
several medications they all receive the same attributes.
"""

from __future__ import annotations

import logging
import re

from .models import MatchSource, ParsedMedication
from .pattern_tables import PatternTables, get_default_pattern_tables

logger = logging.getLogger(__name__)

BASE_CONFIDENCE = 0.8
DOSAGE_BONUS = 0.1
FREQUENCY_BONUS = 0.05
TIMES_BONUS = 0.05

HEURISTIC_MIN_LENGTH = 4
_CAPITALIZED_WORD = re.compile(r"[A-Z][a-z]+")
_WHITESPACE = re.compile(r"\s+")


class MedicationTextParser:
    """Parser that builds medication descriptions from free text."""

    def __init__(self, tables: PatternTables | None = None) -> None:
        self._tables = tables or get_default_pattern_tables()

    def parse(self, text: str) -> list[ParsedMedication]:
        """Parse medications mentioned in text.

        Args:
            text: Raw user text.

        Returns:
            One ParsedMedication per unique name, catalog names first.
        """
        if not text or not text.strip():
            return []

        names = self.extract_names(text)
        if not names:
            return []

        dosage = self.extract_dosage(text)
        frequency = self.extract_frequency(text)
        times = self.extract_times(text)
        instructions = self.extract_instructions(text)

        confidence = BASE_CONFIDENCE
        if dosage:
            confidence += DOSAGE_BONUS
        if frequency:
            confidence += FREQUENCY_BONUS
        if times:
            confidence += TIMES_BONUS
        confidence = round(confidence, 2)

        medications = [
            ParsedMedication(
                name=name,
                source=source,
                confidence=confidence,
                dosage=dosage,
                frequency=frequency,
                times=times,
                instructions=instructions,
            )
            for name, source in names
        ]

        logger.debug("Parsed %d medications from text: %s", len(medications), [m.name for m in medications])
        return medications

    def extract_names(self, text: str) -> list[tuple[str, MatchSource]]:
        """Find candidate medication names, deduplicated case-insensitively."""
        names: list[tuple[str, MatchSource]] = []
        seen: set[str] = set()

        def add(name: str, source: MatchSource) -> None:
            key = name.lower()
            if key not in seen:
                seen.add(key)
                names.append((name, source))

        for pattern in self._tables.catalog:
            match = pattern.search(text)
            if match:
                add(match.group(0), MatchSource.CATALOG)

        for word in _WHITESPACE.split(text.strip()):
            if len(word) >= HEURISTIC_MIN_LENGTH and _CAPITALIZED_WORD.fullmatch(word):
                add(word, MatchSource.HEURISTIC)

        return names

    def extract_dosage(self, text: str) -> str | None:
        return _first_match(self._tables.dosage, text)

    def extract_frequency(self, text: str) -> str | None:
        return _first_match(self._tables.frequency, text)

    def extract_times(self, text: str) -> tuple[str, ...]:
        """All time expressions, grouped by pattern in table order."""
        return tuple(
            match.group(0)
            for pattern in self._tables.time
            for match in pattern.finditer(text)
        )

    def extract_instructions(self, text: str) -> str | None:
        text_lower = text.lower()
        for keyword in self._tables.instructions:
            if keyword in text_lower:
                return keyword
        return None


def _first_match(patterns: tuple[re.Pattern[str], ...], text: str) -> str | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return None


def get_medication_text_parser(tables: PatternTables | None = None) -> MedicationTextParser:
    """Factory function to create MedicationTextParser."""
    return MedicationTextParser(tables=tables)
