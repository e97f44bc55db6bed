"""Tests for the parse_demo CLI."""

import json
import logging

import pytest

from medicare_nlu.scripts.parse_demo import main, parse_medication_arg


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestParseMedicationArg:
    """Tests for --medication values."""

    def test_full_value(self):
        medication = parse_medication_arg("Metformin:500mg:08:00,20:00", 1)

        assert medication.id == "1"
        assert medication.name == "Metformin"
        assert medication.dosage == "500mg"
        assert medication.times == ["08:00", "20:00"]

    def test_name_only(self):
        medication = parse_medication_arg("Warfarin", 2)

        assert medication.dosage == ""
        assert medication.times == []


class TestMain:
    """Tests for the CLI entry point."""

    def test_outputs_json(self, capsys):
        exit_code = main(["I just took my Metformin", "-m", "Metformin:500mg:08:00", "--log-level", "WARNING"])

        output = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert output["intent"] == "mark_taken"
        assert output["actions"][0]["type"] == "take_medication"
        assert output["suggestions"][-1] == "Tell me about Metformin"

    def test_invalid_medication(self, capsys):
        assert main(["hello", "-m", ":5mg", "--log-level", "WARNING"]) == 2

    def test_unknown_log_level_rejected(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["hello", "--log-level", "loud"])

        assert exc_info.value.code == 2
        assert "invalid choice" in capsys.readouterr().err

    def test_log_level_case_insensitive(self, capsys):
        assert main(["hello", "--log-level", "warning"]) == 0
