# ============================================================================
# SCOPE: DOMAIN (Medication)
# Description: Heuristic medication conflict detection.
# ============================================================================
"""Medication Conflict Detector.

Cross-references a candidate medication against the user's existing list:

1. Forward interaction: the candidate's interaction entry names a substance
   contained in the existing medication's name.
2. Reverse interaction: the existing medication's entry names a substance
   contained in the candidate.
3. Duplicate: the names are at least 80% similar (edit distance).

Both interaction directions are checked independently, so one real
interaction may be reported twice. Warnings are never merged.

An empty result only means no rule fired. Medications missing from the
interaction table are not thereby safe.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .models import ConflictCategory, ConflictWarning, Medication, Severity
from .pattern_tables import PatternTables, get_default_pattern_tables
from .similarity import DUPLICATE_THRESHOLD, is_probable_duplicate

logger = logging.getLogger(__name__)

INTERACTION_RECOMMENDATION = "Consult your doctor or pharmacist about this potential interaction."
DUPLICATE_RECOMMENDATION = "Check with your doctor to avoid taking duplicate medications."


class MedicationConflictDetector:
    """Detects interaction and duplicate warnings for a candidate medication."""

    def __init__(
        self,
        tables: PatternTables | None = None,
        duplicate_threshold: float = DUPLICATE_THRESHOLD,
    ) -> None:
        """Initialize conflict detector.

        Args:
            tables: Pattern tables holding the interaction table.
            duplicate_threshold: Minimum similarity to flag a duplicate.
        """
        self._tables = tables or get_default_pattern_tables()
        self._duplicate_threshold = duplicate_threshold

    @property
    def duplicate_threshold(self) -> float:
        return self._duplicate_threshold

    def check_conflicts(
        self,
        candidate_name: str,
        existing_medications: Sequence[Medication],
    ) -> list[ConflictWarning]:
        """Check a candidate medication against existing ones.

        Args:
            candidate_name: Name of the medication being added.
            existing_medications: The user's current medications.

        Returns:
            Warnings in order of existing medication, then rule.
        """
        if not candidate_name or not candidate_name.strip():
            return []

        warnings: list[ConflictWarning] = []
        candidate_lower = candidate_name.lower()
        candidate_interactions = self._tables.interactions_for(candidate_name)

        for existing in existing_medications:
            existing_lower = existing.name.lower()

            if any(substance in existing_lower for substance in candidate_interactions):
                warnings.append(self._interaction_warning(candidate_name, existing.name))

            reverse_interactions = self._tables.interactions_for(existing.name)
            if any(substance in candidate_lower for substance in reverse_interactions):
                warnings.append(self._interaction_warning(existing.name, candidate_name))

            if is_probable_duplicate(candidate_name, existing.name, self._duplicate_threshold):
                warnings.append(
                    ConflictWarning(
                        category=ConflictCategory.DOSAGE,
                        severity=Severity.HIGH,
                        message=f"You may already be taking a similar medication: {existing.name}",
                        recommendation=DUPLICATE_RECOMMENDATION,
                        medications=(candidate_name, existing.name),
                    )
                )

        if warnings:
            logger.info(
                "Found %d conflict warnings for '%s' against %d medications",
                len(warnings),
                candidate_name,
                len(existing_medications),
            )

        return warnings

    @staticmethod
    def _interaction_warning(first: str, second: str) -> ConflictWarning:
        return ConflictWarning(
            category=ConflictCategory.INTERACTION,
            severity=Severity.MEDIUM,
            message=f"{first} may interact with {second}",
            recommendation=INTERACTION_RECOMMENDATION,
            medications=(first, second),
        )


def highest_severity(warnings: Sequence[ConflictWarning]) -> Severity | None:
    """Most severe level among warnings, or None when there are none."""
    return max((w.severity for w in warnings), default=None)
