# ============================================================================
# SCOPE: DOMAIN (Medication)
# Description: Context-aware reply generation for classified intents.
# ============================================================================
"""Medication Response Generator.

Renders a natural-language reply for a classified intent using the user's
live medication list. One template branch per intent kind; a medication
name that cannot be resolved degrades to a clarifying question.

Conflict warnings are never added here. Callers holding warnings append them
with ``append_conflict_warnings``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .models import ConflictWarning, Intent, IntentKind, Medication
from .response_templates import (
    ResponseTemplateRenderer,
    ResponseTemplates,
    get_default_response_templates,
)

logger = logging.getLogger(__name__)

WARNINGS_HEADER = "⚠️ IMPORTANT WARNINGS:"
WARNING_BULLET = "•"


def find_medication(name: str | None, medications: Sequence[Medication]) -> Medication | None:
    """Resolve a name against the user's medications.

    Exact case-insensitive match first, then a substring match in either
    direction.

    Args:
        name: Name to resolve.
        medications: Candidate medications.

    Returns:
        The matching medication or None.
    """
    if not name or not name.strip():
        return None

    name_lower = name.strip().lower()
    for medication in medications:
        if medication.name.lower() == name_lower:
            return medication

    for medication in medications:
        med_lower = medication.name.lower()
        if name_lower in med_lower or med_lower in name_lower:
            return medication

    return None


def describe_schedule(medication: Medication) -> str:
    """Human-readable schedule for a medication."""
    if medication.times:
        return " and ".join(medication.times)
    if medication.interval:
        return f"every {medication.interval} hours"
    return "as prescribed"


def append_conflict_warnings(response: str, warnings: Sequence[ConflictWarning]) -> str:
    """Append a warnings block to a reply.

    Args:
        response: Reply text.
        warnings: Warnings to list, in order.

    Returns:
        The reply unchanged when there are no warnings, otherwise the reply
        followed by the warnings header and one bullet per warning.
    """
    if not warnings:
        return response

    lines = [response, "", WARNINGS_HEADER]
    for warning in warnings:
        lines.append(f"{WARNING_BULLET} {warning.message}")
        lines.append(f"  {warning.recommendation}")
    return "\n".join(lines) + "\n"


class MedicationResponseGenerator:
    """Template-driven reply generator."""

    def __init__(
        self,
        templates: ResponseTemplates | None = None,
        renderer: ResponseTemplateRenderer | None = None,
    ) -> None:
        self._templates = templates or get_default_response_templates()
        self._renderer = renderer or ResponseTemplateRenderer()

    def respond(self, intent: Intent, user_medications: Sequence[Medication]) -> str:
        """Generate a reply for an intent.

        Args:
            intent: Classified intent.
            user_medications: The user's current medications.

        Returns:
            Reply text (never empty).
        """
        medication_name = intent.parameters.get("medication_name")

        if intent.kind is IntentKind.CHECK_STATUS:
            medication = find_medication(medication_name, user_medications)
            if medication:
                return self._render("check_status_resolved", medication)
            return self._render("check_status_unresolved")

        if intent.kind is IntentKind.GET_INFO:
            medication = find_medication(medication_name, user_medications)
            if medication:
                return self._render("get_info_resolved", medication)
            return self._render("get_info_unresolved")

        if intent.kind is IntentKind.MARK_TAKEN:
            if medication_name:
                return self._render("mark_taken_named", medication_name=medication_name)
            return self._render("mark_taken_unnamed")

        if intent.kind is IntentKind.ADD_MEDICATION:
            return self._render("add_medication")

        logger.debug("No dedicated template for %s, using fallback", intent.kind.value)
        return self._render("fallback")

    def _render(
        self,
        key: str,
        medication: Medication | None = None,
        **variables: str,
    ) -> str:
        if medication is not None:
            variables.setdefault("medication_name", medication.name)
            variables.setdefault("dosage", medication.dosage or "your prescribed dose")
            variables.setdefault("schedule", describe_schedule(medication))
            variables.setdefault(
                "instructions",
                f"Instructions: {medication.instructions.rstrip('.')}. " if medication.instructions else "",
            )
        return self._renderer.render(self._templates.get(key), variables)


def get_medication_response_generator(
    templates: ResponseTemplates | None = None,
) -> MedicationResponseGenerator:
    """Factory function to create MedicationResponseGenerator."""
    return MedicationResponseGenerator(templates=templates)
