"""
Shared pytest fixtures for all tests.

This module provides the bundled NLU data assets, a ready engine, and the
sample medication lists used across the medication test suites.
"""

import os

import pytest

from medicare_nlu.domains.medication.nlu import (
    Medication,
    MedicationNLUEngine,
    PatternTables,
    ResponseTemplates,
    get_default_pattern_tables,
    load_response_templates,
)

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"


# ============================================================================
# DATA ASSET FIXTURES
# ============================================================================


@pytest.fixture(scope="session")
def pattern_tables() -> PatternTables:
    """Bundled pattern tables, compiled once per session."""
    return get_default_pattern_tables()


@pytest.fixture(scope="session")
def response_templates() -> ResponseTemplates:
    """Bundled reply templates."""
    return load_response_templates()


@pytest.fixture(scope="session")
def engine(pattern_tables, response_templates) -> MedicationNLUEngine:
    """Engine built from the bundled assets."""
    return MedicationNLUEngine(pattern_tables, response_templates)


# ============================================================================
# MEDICATION FIXTURES
# ============================================================================


@pytest.fixture
def metformin() -> Medication:
    return Medication(
        id="1",
        name="Metformin",
        dosage="500mg",
        times=["08:00", "20:00"],
        instructions="Take with food",
    )


@pytest.fixture
def warfarin() -> Medication:
    return Medication(id="2", name="Warfarin", dosage="5mg", times=["18:00"])


@pytest.fixture
def mock_medications(metformin, warfarin) -> list[Medication]:
    """Typical active medication list."""
    return [metformin, warfarin]
