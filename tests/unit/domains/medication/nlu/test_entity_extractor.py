"""Tests for MedicationEntityExtractor."""

import pytest

from medicare_nlu.domains.medication.nlu.entity_extractor import (
    CONFIDENCE_DOSAGE,
    CONFIDENCE_MEDICATION_NAME,
    CONFIDENCE_TIME,
    MedicationEntityExtractor,
)
from medicare_nlu.domains.medication.nlu.models import EntityKind, Medication


@pytest.fixture
def extractor(pattern_tables) -> MedicationEntityExtractor:
    return MedicationEntityExtractor(pattern_tables)


class TestMedicationNames:
    """Tests for matching the user's own medications."""

    def test_known_medication(self, extractor, mock_medications):
        entities = extractor.extract("Did I take my Metformin at 8 am?", mock_medications)

        names = [e for e in entities if e.kind is EntityKind.MEDICATION_NAME]
        assert len(names) == 1
        assert names[0].value == "Metformin"
        assert names[0].span == (14, 23)
        assert names[0].confidence == CONFIDENCE_MEDICATION_NAME

    def test_case_insensitive_keeps_matched_text(self, extractor, mock_medications):
        entities = extractor.extract("did i take my metformin", mock_medications)

        assert entities[0].kind is EntityKind.MEDICATION_NAME
        assert entities[0].value == "metformin"

    def test_whole_word_only(self, extractor):
        entities = extractor.extract("Aspirinex is not aspirin", [Medication(name="Aspirin")])

        assert [e.value for e in entities] == ["aspirin"]

    def test_name_with_regex_characters(self, extractor):
        medication = Medication(name="Vitamin B12 (cyanocobalamin)")

        entities = extractor.extract("I took Vitamin B12 (cyanocobalamin) today", [medication])

        assert entities[0].kind is EntityKind.MEDICATION_NAME
        assert entities[0].value == "Vitamin B12 (cyanocobalamin)"

    def test_unknown_medication_not_extracted(self, extractor, mock_medications):
        entities = extractor.extract("Tell me about Lipitor", mock_medications)

        assert all(e.kind is not EntityKind.MEDICATION_NAME for e in entities)

    def test_without_known_medications(self, extractor):
        entities = extractor.extract("Did I take my Metformin?")

        assert entities == []


class TestDosageAndTime:
    """Tests for table-driven dosage and time entities."""

    def test_dosages(self, extractor):
        entities = extractor.extract("Take 500mg and 2 tablets")

        assert [(e.kind, e.value) for e in entities] == [
            (EntityKind.DOSAGE, "500mg"),
            (EntityKind.DOSAGE, "2 tablets"),
        ]
        assert all(e.confidence == CONFIDENCE_DOSAGE for e in entities)

    def test_time(self, extractor, mock_medications):
        entities = extractor.extract("Did I take my Metformin at 8 am?", mock_medications)

        times = [e for e in entities if e.kind is EntityKind.TIME]
        assert [e.value for e in times] == ["8 am"]
        assert times[0].confidence == CONFIDENCE_TIME

    def test_time_of_day_word(self, extractor):
        entities = extractor.extract("Remind me in the evening")

        assert [(e.kind, e.value) for e in entities] == [(EntityKind.TIME, "evening")]

    def test_discovery_order(self, extractor, mock_medications):
        entities = extractor.extract("at 9 pm take Warfarin 5mg", mock_medications)

        assert [e.kind for e in entities] == [
            EntityKind.MEDICATION_NAME,
            EntityKind.DOSAGE,
            EntityKind.TIME,
        ]

    def test_repeated_value_reported_once(self, extractor):
        entities = extractor.extract("8 am or 8 am")

        assert len(entities) == 1


class TestExtractInvariants:
    """Tests for properties every extraction must hold."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_text(self, extractor, mock_medications, text):
        assert extractor.extract(text, mock_medications) == []

    @pytest.mark.parametrize(
        "text",
        [
            "Did I take my Metformin at 8:00 am?",
            "Warfarin 5mg every evening and Metformin 500 mg at 20:00",
            "take 2 capsules at bedtime",
        ],
    )
    def test_spans_and_confidence(self, extractor, mock_medications, text):
        entities = extractor.extract(text, mock_medications)

        assert entities
        for entity in entities:
            assert 0 <= entity.start < entity.end <= len(text)
            assert text[entity.start:entity.end] == entity.value
            assert 0.0 < entity.confidence <= 1.0

    def test_deterministic(self, extractor, mock_medications):
        text = "Warfarin 5mg at 6 pm"

        assert extractor.extract(text, mock_medications) == extractor.extract(text, mock_medications)

    def test_to_dict(self, extractor):
        entity = extractor.extract("500mg")[0]

        assert entity.to_dict() == {
            "kind": "dosage",
            "value": "500mg",
            "confidence": CONFIDENCE_DOSAGE,
            "start": 0,
            "end": 5,
        }
