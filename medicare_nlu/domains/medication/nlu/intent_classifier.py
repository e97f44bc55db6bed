# ============================================================================
# SCOPE: DOMAIN (Medication)
# Description: Intent classification for medication-management conversations.
# ============================================================================
"""Medication Intent Classifier.

Classifies an utterance into exactly one intent by testing trigger patterns
in a fixed priority order.

Supported Intents:
    - add_medication: User wants to register a new medication
    - check_status: User asks whether a dose was taken
    - get_info: User asks about a medication
    - mark_taken: User reports having taken a dose
    - skip_dose: User wants to skip a dose
    - snooze: User wants to be reminded later
    - general_question: No trigger matched and no known medication named

Usage:
    classifier = MedicationIntentClassifier()
    intent = classifier.classify("Did I take my Metformin this morning?", medications)
    print(intent.kind)        # IntentKind.CHECK_STATUS
    print(intent.parameters)  # {"medication_name": "Metformin", "time": "morning"}
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from .entity_extractor import MedicationEntityExtractor
from .models import Entity, EntityKind, Intent, IntentKind, Medication
from .pattern_tables import PatternTables, get_default_pattern_tables

logger = logging.getLogger(__name__)

# Confidence levels
CONFIDENCE_PATTERN_MATCH = 0.8
CONFIDENCE_FALLBACK = 0.5

# Intents whose parameters are the referenced medication and time
_MEDICATION_TIME_INTENTS = frozenset({
    IntentKind.CHECK_STATUS,
    IntentKind.GET_INFO,
    IntentKind.MARK_TAKEN,
    IntentKind.SKIP_DOSE,
})


class MedicationIntentClassifier:
    """Pattern-based intent classifier.

    The first intent (in table order) with any matching trigger wins.
    Confidence is fixed per outcome, not per pattern.
    """

    def __init__(
        self,
        tables: PatternTables | None = None,
        entity_extractor: MedicationEntityExtractor | None = None,
    ) -> None:
        """Initialize intent classifier.

        Args:
            tables: Pattern tables (bundled tables if None).
            entity_extractor: Extractor sharing the same tables.
        """
        self._tables = tables or get_default_pattern_tables()
        self._extractor = entity_extractor or MedicationEntityExtractor(self._tables)

    def classify(
        self,
        text: str,
        known_medications: Sequence[Medication] = (),
    ) -> Intent:
        """Classify the intent of user text.

        Args:
            text: Raw user text.
            known_medications: The user's current medications.

        Returns:
            Intent with every extracted entity and kind-specific parameters.
        """
        text = text or ""
        text_lower = text.lower()
        entities = tuple(self._extractor.extract(text, known_medications))

        kind = self._match_trigger(text_lower)
        if kind is not None:
            confidence = CONFIDENCE_PATTERN_MATCH
        else:
            has_medication = any(e.kind is EntityKind.MEDICATION_NAME for e in entities)
            kind = IntentKind.GET_INFO if has_medication else IntentKind.GENERAL_QUESTION
            confidence = CONFIDENCE_FALLBACK
            logger.debug("No trigger matched, falling back to %s", kind.value)

        return Intent(
            kind=kind,
            confidence=confidence,
            entities=entities,
            parameters=self.extract_parameters(text, kind, entities),
        )

    def _match_trigger(self, text_lower: str) -> IntentKind | None:
        for kind, patterns in self._tables.intents:
            for pattern in patterns:
                if pattern.search(text_lower):
                    logger.debug("Intent detected: %s by /%s/", kind.value, pattern.pattern)
                    return kind
        return None

    def extract_parameters(
        self,
        text: str,
        kind: IntentKind,
        entities: Sequence[Entity],
    ) -> dict[str, Any]:
        """Derive intent-specific parameters.

        Args:
            text: Raw user text (snooze reads its duration from here).
            kind: Classified intent.
            entities: Entities extracted from the same text.

        Returns:
            Parameter mapping; missing values are None. Sequences are tuples.
        """
        if kind is IntentKind.ADD_MEDICATION:
            return {
                "medication_name": _first_value(entities, EntityKind.MEDICATION_NAME),
                "dosage": _first_value(entities, EntityKind.DOSAGE),
                "times": tuple(e.value for e in entities if e.kind is EntityKind.TIME),
            }

        if kind in _MEDICATION_TIME_INTENTS:
            return {
                "medication_name": _first_value(entities, EntityKind.MEDICATION_NAME),
                "time": _first_value(entities, EntityKind.TIME),
            }

        if kind is IntentKind.SNOOZE:
            match = self._tables.snooze_duration.search(text)
            if match:
                return {"duration": int(match.group(1)), "unit": match.group(2).lower()}
            return {"duration": None, "unit": None}

        return {}


def _first_value(entities: Sequence[Entity], kind: EntityKind) -> str | None:
    return next((e.value for e in entities if e.kind is kind), None)


def get_medication_intent_classifier(
    tables: PatternTables | None = None,
) -> MedicationIntentClassifier:
    """Factory function to create MedicationIntentClassifier."""
    return MedicationIntentClassifier(tables=tables)
