# ============================================================================
# SCOPE: DOMAIN (Medication)
# Description: Entity extraction for medication-management conversations.
# ============================================================================
"""Medication Entity Extractor.

Scans user text against the pattern tables and the user's own medication
list, producing typed, positioned, confidence-scored entities.

Supported Entities:
    - medication_name: A medication from the user's list (0.9)
    - dosage: Value plus unit, e.g. "500mg", "2 tablets" (0.8)
    - time: "8:00 am", "9 pm", "morning", "bedtime" (0.8)

Usage:
    extractor = MedicationEntityExtractor()
    entities = extractor.extract("Did I take my Metformin at 8 am?", medications)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from .models import Entity, EntityKind, Medication
from .pattern_tables import PatternTables, get_default_pattern_tables

logger = logging.getLogger(__name__)

# Confidence per entity kind
CONFIDENCE_MEDICATION_NAME = 0.9
CONFIDENCE_DOSAGE = 0.8
CONFIDENCE_TIME = 0.8


class MedicationEntityExtractor:
    """Entity extractor for medication conversations.

    Every match is retained, overlapping ones included; only a repeated
    (kind, value) pair within one pass is dropped.
    """

    def __init__(self, tables: PatternTables | None = None) -> None:
        """Initialize entity extractor.

        Args:
            tables: Pattern tables to use (bundled tables if None).
        """
        self._tables = tables or get_default_pattern_tables()

    def extract(
        self,
        text: str,
        known_medications: Sequence[Medication] = (),
    ) -> list[Entity]:
        """Extract entities from user text.

        Args:
            text: Raw user text.
            known_medications: The user's current medications.

        Returns:
            Entities in discovery order: medication names, dosages, times.
        """
        if not text or not text.strip():
            return []

        entities: list[Entity] = []
        seen: set[tuple[EntityKind, str]] = set()

        for medication in known_medications:
            pattern = self._name_pattern(medication.name)
            if pattern is None:
                continue
            self._collect(
                text, (pattern,), EntityKind.MEDICATION_NAME, CONFIDENCE_MEDICATION_NAME, entities, seen
            )

        self._collect(text, self._tables.dosage, EntityKind.DOSAGE, CONFIDENCE_DOSAGE, entities, seen)
        self._collect(text, self._tables.time, EntityKind.TIME, CONFIDENCE_TIME, entities, seen)

        if entities:
            logger.debug("Extracted %d entities: %s", len(entities), [e.to_dict() for e in entities])

        return entities

    @staticmethod
    def _name_pattern(name: str) -> re.Pattern[str] | None:
        """Whole-word, case-insensitive pattern for a medication name."""
        name = name.strip()
        if not name:
            return None
        # Lookarounds instead of \b so names ending in punctuation still match
        return re.compile(rf"(?<!\w){re.escape(name)}(?!\w)", re.IGNORECASE)

    @staticmethod
    def _collect(
        text: str,
        patterns: Iterable[re.Pattern[str]],
        kind: EntityKind,
        confidence: float,
        entities: list[Entity],
        seen: set[tuple[EntityKind, str]],
    ) -> None:
        for pattern in patterns:
            for match in pattern.finditer(text):
                value = match.group(0)
                if match.end() <= match.start() or (kind, value) in seen:
                    continue
                seen.add((kind, value))
                entities.append(
                    Entity(
                        kind=kind,
                        value=value,
                        confidence=confidence,
                        start=match.start(),
                        end=match.end(),
                    )
                )


def get_medication_entity_extractor(
    tables: PatternTables | None = None,
) -> MedicationEntityExtractor:
    """Factory function to create MedicationEntityExtractor."""
    return MedicationEntityExtractor(tables=tables)
