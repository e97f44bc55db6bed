# ============================================================================
# SCOPE: DOMAIN (Medication)
# Description: Facade wiring the medication NLU components together.
# ============================================================================
"""Medication NLU Engine.

Holds one shared set of pattern tables and reply templates and exposes
every engine operation. All operations are pure: the engine keeps no
per-call state, so one instance can serve concurrent callers.

Usage:
    engine = get_nlu_engine()

    parsed = engine.parse_medications("Take Aspirin 325mg twice daily")
    intent = engine.classify_intent("Did I take my Metformin?", medications)
    conflicts = engine.check_conflicts("Aspirin", medications)
    reply = engine.generate_response(intent, medications)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from medicare_nlu.config import Settings, get_settings

from .conflict_detector import MedicationConflictDetector
from .entity_extractor import MedicationEntityExtractor
from .intent_classifier import MedicationIntentClassifier
from .medication_parser import MedicationTextParser
from .models import ConflictWarning, Entity, Intent, Medication, ParsedMedication
from .pattern_tables import PATTERNS_FILE, PatternTables, load_pattern_tables
from .response_generator import MedicationResponseGenerator, append_conflict_warnings
from .response_templates import RESPONSES_FILE, ResponseTemplates, load_response_templates
from .similarity import DUPLICATE_THRESHOLD, similarity

logger = logging.getLogger(__name__)


class MedicationNLUEngine:
    """Entry point to the medication NLU components."""

    def __init__(
        self,
        tables: PatternTables,
        templates: ResponseTemplates,
        duplicate_threshold: float = DUPLICATE_THRESHOLD,
    ) -> None:
        """Initialize engine.

        Args:
            tables: Compiled pattern tables shared by every component.
            templates: Reply templates.
            duplicate_threshold: Similarity at which names count as duplicates.
        """
        self.tables = tables
        self.templates = templates

        self.entity_extractor = MedicationEntityExtractor(tables)
        self.parser = MedicationTextParser(tables)
        self.intent_classifier = MedicationIntentClassifier(tables, self.entity_extractor)
        self.conflict_detector = MedicationConflictDetector(tables, duplicate_threshold)
        self.response_generator = MedicationResponseGenerator(templates)

        logger.info(
            "MedicationNLUEngine initialized (patterns v%s, templates v%s, duplicate_threshold=%s)",
            tables.version,
            templates.version,
            duplicate_threshold,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> MedicationNLUEngine:
        """Build an engine from the data assets named in settings."""
        settings = settings or get_settings()
        templates_dir = Path(settings.NLU_TEMPLATES_DIR)
        return cls(
            tables=load_pattern_tables(templates_dir / PATTERNS_FILE),
            templates=load_response_templates(templates_dir / RESPONSES_FILE),
            duplicate_threshold=settings.NLU_DUPLICATE_SIMILARITY_THRESHOLD,
        )

    def extract_entities(self, text: str, known_medications: Sequence[Medication] = ()) -> list[Entity]:
        return self.entity_extractor.extract(text, known_medications)

    def parse_medications(self, text: str) -> list[ParsedMedication]:
        return self.parser.parse(text)

    def classify_intent(self, text: str, known_medications: Sequence[Medication] = ()) -> Intent:
        return self.intent_classifier.classify(text, known_medications)

    def check_conflicts(
        self,
        candidate_name: str,
        existing_medications: Sequence[Medication],
    ) -> list[ConflictWarning]:
        return self.conflict_detector.check_conflicts(candidate_name, existing_medications)

    def generate_response(
        self,
        intent: Intent,
        user_medications: Sequence[Medication],
        conflicts: Sequence[ConflictWarning] = (),
    ) -> str:
        """Render a reply, followed by a warnings block when conflicts are given."""
        reply = self.response_generator.respond(intent, user_medications)
        return append_conflict_warnings(reply, conflicts)

    @staticmethod
    def similarity(a: str, b: str) -> float:
        return similarity(a, b)


# Engine singleton
_engine_instance: MedicationNLUEngine | None = None


def get_nlu_engine() -> MedicationNLUEngine:
    """Return the process-wide engine, building it on first use."""
    global _engine_instance
    if _engine_instance is None:
        _engine_instance = MedicationNLUEngine.from_settings()
    return _engine_instance


def reset_nlu_engine() -> None:
    """Drop the cached engine so the next call rebuilds it from settings."""
    global _engine_instance
    _engine_instance = None
