# ============================================================================
# SCOPE: DOMAIN (Medication)
# Description: NLU (Natural Language Understanding) system for medication
#              management conversations.
# ============================================================================
"""Medication NLU System.

Usage:
    from medicare_nlu.domains.medication.nlu import get_nlu_engine

    engine = get_nlu_engine()
    intent = engine.classify_intent("I just took my Metformin", medications)
    reply = engine.generate_response(intent, medications)
"""

from .conflict_detector import MedicationConflictDetector, highest_severity
from .engine import MedicationNLUEngine, get_nlu_engine, reset_nlu_engine
from .entity_extractor import MedicationEntityExtractor
from .intent_classifier import MedicationIntentClassifier
from .medication_parser import MedicationTextParser
from .models import (
    ConflictCategory,
    ConflictWarning,
    Entity,
    EntityKind,
    Intent,
    IntentKind,
    MatchSource,
    Medication,
    ParsedMedication,
    Severity,
)
from .pattern_tables import PatternTables, get_default_pattern_tables, load_pattern_tables
from .response_generator import (
    MedicationResponseGenerator,
    append_conflict_warnings,
    find_medication,
)
from .response_templates import ResponseTemplates, load_response_templates
from .similarity import is_probable_duplicate, similarity

__all__ = [
    # Engine
    "MedicationNLUEngine",
    "get_nlu_engine",
    "reset_nlu_engine",
    # Components
    "MedicationEntityExtractor",
    "MedicationTextParser",
    "MedicationIntentClassifier",
    "MedicationConflictDetector",
    "MedicationResponseGenerator",
    "highest_severity",
    "append_conflict_warnings",
    "find_medication",
    "similarity",
    "is_probable_duplicate",
    # Data assets
    "PatternTables",
    "load_pattern_tables",
    "get_default_pattern_tables",
    "ResponseTemplates",
    "load_response_templates",
    # Models
    "ConflictCategory",
    "ConflictWarning",
    "Entity",
    "EntityKind",
    "Intent",
    "IntentKind",
    "MatchSource",
    "Medication",
    "ParsedMedication",
    "Severity",
]
