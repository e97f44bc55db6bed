"""Tests for MedicationChatAssistant."""

import json

import pytest

from medicare_nlu.domains.medication.assistant import (
    ChatAction,
    ChatActionType,
    ChatContext,
    MedicationChatAssistant,
    quick_suggestions,
)
from medicare_nlu.domains.medication.nlu.models import (
    Intent,
    IntentKind,
    MatchSource,
    Medication,
    ParsedMedication,
    Severity,
)


@pytest.fixture
def assistant(engine) -> MedicationChatAssistant:
    return MedicationChatAssistant(engine)


@pytest.fixture
def context(mock_medications) -> ChatContext:
    return ChatContext(medications=mock_medications, user_id="user-1")


class TestRespond:
    """Tests for one-message replies."""

    def test_mark_taken(self, assistant, context, metformin):
        response = assistant.respond("I just took my Metformin", context)

        assert response.intent.kind is IntentKind.MARK_TAKEN
        assert response.message.startswith("Great! I'll mark your Metformin as taken.")
        assert response.medications == [metformin]
        assert len(response.actions) == 1
        action = response.actions[0]
        assert action.type is ChatActionType.TAKE_MEDICATION
        assert action.label == "Mark Metformin as taken"
        assert action.medication_id == "1"

    def test_add_medication_with_conflict(self, assistant):
        context = ChatContext(medications=[Medication(id="2", name="Warfarin", dosage="5mg")])

        response = assistant.respond("I need to take Aspirin 325mg twice daily", context)

        assert response.intent.kind is IntentKind.ADD_MEDICATION
        assert [c.message for c in response.conflicts] == ["Warfarin may interact with Aspirin"]
        assert response.highest_severity is Severity.MEDIUM
        assert "⚠️ IMPORTANT WARNINGS:" in response.message
        assert response.actions[0].type is ChatActionType.ADD_MEDICATION
        assert response.actions[0].data == {
            "name": "Aspirin",
            "dosage": "325mg",
            "frequency": "twice daily",
            "times": [],
            "instructions": None,
        }

    def test_inactive_medications_ignored(self, assistant):
        inactive = Medication(id="2", name="Warfarin", dosage="5mg", is_active=False)

        response = assistant.respond("I need to take Aspirin 325mg", ChatContext(medications=[inactive]))

        assert response.conflicts == []
        assert "IMPORTANT WARNINGS" not in response.message

    def test_inactive_medication_not_resolved(self, assistant, metformin):
        inactive = metformin.model_copy(update={"is_active": False})

        response = assistant.respond("I just took my Metformin", ChatContext(medications=[inactive]))

        assert response.actions == []
        assert response.medications == []

    def test_add_medication_without_name(self, assistant, context):
        response = assistant.respond("I want to add a new medication", context)

        assert response.conflicts == []
        assert response.highest_severity is None
        assert response.actions[0].data["name"] is None

    def test_snooze_with_duration(self, assistant, context):
        response = assistant.respond("Remind me in 15 minutes", context)

        action = response.actions[0]
        assert action.type is ChatActionType.SNOOZE_MEDICATION
        assert action.label == "Remind me in 15 minutes"
        assert action.data == {"duration": 15, "unit": "minutes"}

    def test_snooze_without_duration(self, assistant, context):
        response = assistant.respond("Not now", context)

        assert response.actions[0].label == "Remind me later"

    def test_skip_dose(self, assistant, context, warfarin):
        response = assistant.respond("Skip my Warfarin dose", context)

        assert response.actions[0].type is ChatActionType.SKIP_MEDICATION
        assert response.actions[0].label == "Skip this dose of Warfarin"
        assert response.actions[0].medication_id == "2"
        assert response.medications == [warfarin]

    def test_get_info_unresolved(self, assistant, context):
        response = assistant.respond("Tell me about Lipitor", context)

        assert response.intent.kind is IntentKind.GET_INFO
        assert response.actions == []
        assert response.medications == []

    def test_general_question(self, assistant, context):
        response = assistant.respond("Hello", context)

        assert response.intent.kind is IntentKind.GENERAL_QUESTION
        assert response.actions == []
        assert response.message.startswith("I'm here to help with your medications.")

    def test_to_dict_is_json_serializable(self, assistant, context):
        response = assistant.respond("Did I take my Metformin this morning?", context)

        data = json.loads(json.dumps(response.to_dict()))

        assert data["intent"] == "check_status"
        assert data["confidence"] == response.confidence
        assert data["parameters"] == {"medication_name": "Metformin", "time": "morning"}
        assert data["actions"][0]["type"] == "view_medication"
        assert data["medications"][0]["name"] == "Metformin"
        assert data["highest_severity"] is None


class TestCandidateName:
    """Tests for choosing the medication being added."""

    def test_intent_parameter_wins(self):
        intent = Intent(kind=IntentKind.ADD_MEDICATION, confidence=0.8, parameters={"medication_name": "Warfarin"})
        parsed = [ParsedMedication(name="Aspirin", source=MatchSource.CATALOG, confidence=0.8)]

        assert MedicationChatAssistant.candidate_name(intent, parsed) == "Warfarin"

    def test_catalog_before_heuristic(self):
        intent = Intent(kind=IntentKind.ADD_MEDICATION, confidence=0.8)
        parsed = [
            ParsedMedication(name="Started", source=MatchSource.HEURISTIC, confidence=0.8),
            ParsedMedication(name="Lipitor", source=MatchSource.CATALOG, confidence=0.8),
        ]

        assert MedicationChatAssistant.candidate_name(intent, parsed) == "Lipitor"

    def test_heuristic_fallback(self):
        intent = Intent(kind=IntentKind.ADD_MEDICATION, confidence=0.8)
        parsed = [ParsedMedication(name="Eliquis", source=MatchSource.HEURISTIC, confidence=0.8)]

        assert MedicationChatAssistant.candidate_name(intent, parsed) == "Eliquis"

    def test_nothing_found(self):
        intent = Intent(kind=IntentKind.ADD_MEDICATION, confidence=0.8)

        assert MedicationChatAssistant.candidate_name(intent, []) is None


class TestQuickSuggestions:
    """Tests for chat starter prompts."""

    def test_without_medications(self):
        assert len(quick_suggestions([])) == 3

    def test_with_active_medication(self, mock_medications):
        suggestions = quick_suggestions(mock_medications)

        assert len(suggestions) == 4
        assert suggestions[-1] == "Tell me about Metformin"

    def test_skips_inactive(self):
        medications = [
            Medication(name="Prednisone", is_active=False),
            Medication(name="Lasix"),
        ]

        assert quick_suggestions(medications)[-1] == "Tell me about Lasix"


class TestChatAction:
    """Tests for suggested action payloads."""

    def test_data_read_only(self):
        data = {"duration": 15, "unit": "minutes"}
        action = ChatAction(type=ChatActionType.SNOOZE_MEDICATION, label="Remind me in 15 minutes", data=data)
        data["duration"] = 60

        with pytest.raises(TypeError):
            action.data["unit"] = "hours"

        assert action.data == {"duration": 15, "unit": "minutes"}
        assert action.to_dict()["data"] == {"duration": 15, "unit": "minutes"}
