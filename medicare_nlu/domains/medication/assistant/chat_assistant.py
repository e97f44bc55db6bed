# ============================================================================
# SCOPE: DOMAIN (Medication)
# Description: Rule-based chat assistant on top of the medication NLU engine.
# ============================================================================
"""Medication Chat Assistant.

Runs one user message through the NLU engine and packages the result for a
chat screen: the reply text (with conflict warnings appended), suggested
actions for the action-dispatch layer, and the medications referenced.

Flow:
    1. Classify intent and parse medications from the same text
    2. For add_medication, check conflicts for the candidate name
    3. Render the reply and append any warnings
    4. Suggest actions for the intent

Usage:
    assistant = MedicationChatAssistant()
    response = assistant.respond("I just took my Metformin", ChatContext(medications=meds))
    print(response.message)
    print([a.type for a in response.actions])  # [ChatActionType.TAKE_MEDICATION]
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from medicare_nlu.core.shared.logger import get_nlu_logger

from ..nlu.conflict_detector import highest_severity
from ..nlu.engine import MedicationNLUEngine, get_nlu_engine
from ..nlu.models import (
    ConflictWarning,
    Entity,
    Intent,
    IntentKind,
    MatchSource,
    Medication,
    ParsedMedication,
    Severity,
)
from ..nlu.response_generator import find_medication

logger = get_nlu_logger("chat_assistant")

MAX_SUGGESTIONS = 4
DEFAULT_SUGGESTIONS: tuple[str, ...] = (
    "What medications should I take now?",
    "Did I take my medicine today?",
    "When is my next dose?",
)


class ChatActionType(str, Enum):
    """Actions the app can offer next to a reply."""

    TAKE_MEDICATION = "take_medication"
    SKIP_MEDICATION = "skip_medication"
    SNOOZE_MEDICATION = "snooze_medication"
    VIEW_MEDICATION = "view_medication"
    ADD_MEDICATION = "add_medication"


@dataclass(frozen=True)
class ChatAction:
    """Suggested follow-up action."""

    type: ChatActionType
    label: str
    medication_id: str | None = None
    data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "label": self.label,
            "medication_id": self.medication_id,
            "data": dict(self.data),
        }


@dataclass
class ChatContext:
    """Per-user context for one message."""

    medications: list[Medication] = field(default_factory=list)
    user_id: str | None = None


@dataclass
class AssistantResponse:
    """Everything the chat screen needs for one reply."""

    message: str
    intent: Intent
    actions: list[ChatAction] = field(default_factory=list)
    medications: list[Medication] = field(default_factory=list)
    conflicts: list[ConflictWarning] = field(default_factory=list)
    parsed_medications: list[ParsedMedication] = field(default_factory=list)

    @property
    def confidence(self) -> float:
        return self.intent.confidence

    @property
    def entities(self) -> tuple[Entity, ...]:
        return self.intent.entities

    @property
    def highest_severity(self) -> Severity | None:
        return highest_severity(self.conflicts)

    def to_dict(self) -> dict[str, Any]:
        severity = self.highest_severity
        return {
            "message": self.message,
            "intent": self.intent.kind.value,
            "confidence": self.confidence,
            "parameters": self.intent.to_dict()["parameters"],
            "entities": [entity.to_dict() for entity in self.entities],
            "actions": [action.to_dict() for action in self.actions],
            "medications": [medication.model_dump() for medication in self.medications],
            "conflicts": [conflict.to_dict() for conflict in self.conflicts],
            "highest_severity": severity.value if severity else None,
            "parsed_medications": [parsed.to_dict() for parsed in self.parsed_medications],
        }


class MedicationChatAssistant:
    """Rule-based assistant: NLU engine plus action suggestions."""

    def __init__(self, engine: MedicationNLUEngine | None = None) -> None:
        self._engine = engine or get_nlu_engine()

    def respond(self, message: str, context: ChatContext) -> AssistantResponse:
        """Answer one user message.

        Only active medications take part in name resolution, conflict
        checks and the reply.

        Args:
            message: Raw user text.
            context: The user's medications.

        Returns:
            AssistantResponse with reply, actions and conflicts.
        """
        medications = [m for m in context.medications if m.is_active]
        log = logger.with_context(user_id=context.user_id)

        intent = self._engine.classify_intent(message, medications)
        parsed = self._engine.parse_medications(message)

        conflicts: list[ConflictWarning] = []
        if intent.kind is IntentKind.ADD_MEDICATION:
            candidate = self.candidate_name(intent, parsed)
            if candidate:
                conflicts = self._engine.check_conflicts(candidate, medications)

        reply = self._engine.generate_response(intent, medications, conflicts)
        actions, referenced = self._build_actions(intent, parsed, medications)

        log.info(
            "Assistant reply generated",
            intent=intent.kind.value,
            confidence=intent.confidence,
            actions=len(actions),
            conflicts=len(conflicts),
        )

        return AssistantResponse(
            message=reply,
            intent=intent,
            actions=actions,
            medications=referenced,
            conflicts=conflicts,
            parsed_medications=parsed,
        )

    @staticmethod
    def candidate_name(intent: Intent, parsed: Sequence[ParsedMedication]) -> str | None:
        """Name of the medication being added.

        The intent's medication_name parameter wins; otherwise the first
        parsed catalog name, then the first heuristic name.
        """
        if intent.medication_name:
            return intent.medication_name
        for source in (MatchSource.CATALOG, MatchSource.HEURISTIC):
            for medication in parsed:
                if medication.source is source:
                    return medication.name
        return None

    def _build_actions(
        self,
        intent: Intent,
        parsed: Sequence[ParsedMedication],
        medications: Sequence[Medication],
    ) -> tuple[list[ChatAction], list[Medication]]:
        actions: list[ChatAction] = []
        referenced: list[Medication] = []

        if intent.kind is IntentKind.ADD_MEDICATION:
            # Parsed attributes come from the whole text, so any entry will do
            prefill = parsed[0] if parsed else None
            data: dict[str, Any] = {
                "name": self.candidate_name(intent, parsed),
                "dosage": intent.parameters.get("dosage"),
                "frequency": None,
                "times": list(intent.parameters.get("times") or []),
                "instructions": None,
            }
            if prefill is not None:
                data["frequency"] = prefill.frequency
                data["instructions"] = prefill.instructions
                data["dosage"] = data["dosage"] or prefill.dosage
                data["times"] = data["times"] or list(prefill.times)

            actions.append(
                ChatAction(type=ChatActionType.ADD_MEDICATION, label="Add new medication", data=data)
            )
            return actions, referenced

        if intent.kind is IntentKind.SNOOZE:
            actions.append(
                ChatAction(
                    type=ChatActionType.SNOOZE_MEDICATION,
                    label=_snooze_label(intent),
                    data={
                        "duration": intent.parameters.get("duration"),
                        "unit": intent.parameters.get("unit"),
                    },
                )
            )
            return actions, referenced

        action_type, label_format = _MEDICATION_ACTIONS.get(intent.kind, (None, ""))
        if action_type is None:
            return actions, referenced

        medication = find_medication(intent.medication_name, medications)
        if medication is not None:
            referenced.append(medication)
            actions.append(
                ChatAction(
                    type=action_type,
                    label=label_format.format(name=medication.name),
                    medication_id=medication.id,
                    data={"medication": medication.model_dump(), "time": intent.parameters.get("time")},
                )
            )

        return actions, referenced


# Intents whose action targets a resolved medication
_MEDICATION_ACTIONS: dict[IntentKind, tuple[ChatActionType, str]] = {
    IntentKind.MARK_TAKEN: (ChatActionType.TAKE_MEDICATION, "Mark {name} as taken"),
    IntentKind.CHECK_STATUS: (ChatActionType.VIEW_MEDICATION, "View {name} details"),
    IntentKind.GET_INFO: (ChatActionType.VIEW_MEDICATION, "View {name} details"),
    IntentKind.SKIP_DOSE: (ChatActionType.SKIP_MEDICATION, "Skip this dose of {name}"),
}


def _snooze_label(intent: Intent) -> str:
    duration = intent.parameters.get("duration")
    unit = intent.parameters.get("unit")
    if duration and unit:
        return f"Remind me in {duration} {unit}"
    return "Remind me later"


def quick_suggestions(medications: Sequence[Medication]) -> list[str]:
    """Starter prompts for the chat input, at most four.

    Args:
        medications: The user's medications.

    Returns:
        Fixed prompts plus one about the first active medication.
    """
    suggestions = list(DEFAULT_SUGGESTIONS)
    first_active = next((m for m in medications if m.is_active), None)
    if first_active is not None:
        suggestions.append(f"Tell me about {first_active.name}")
    return suggestions[:MAX_SUGGESTIONS]
