"""Tests for medication name similarity."""

import pytest

from medicare_nlu.domains.medication.nlu.similarity import (
    DUPLICATE_THRESHOLD,
    is_probable_duplicate,
    similarity,
)


class TestSimilarity:
    """Tests for normalized edit-distance similarity."""

    def test_identity(self):
        assert similarity("Metformin", "Metformin") == 1.0

    @pytest.mark.parametrize(
        "a, b",
        [("kitten", "sitting"), ("Aspirin", "Warfarin"), ("a", "abc")],
    )
    def test_symmetric(self, a, b):
        assert similarity(a, b) == similarity(b, a)

    def test_known_distance(self):
        assert similarity("kitten", "sitting") == pytest.approx(4 / 7)

    def test_case_sensitive(self):
        assert similarity("metformin", "Metformin") == pytest.approx(8 / 9)

    def test_both_empty(self):
        assert similarity("", "") == 1.0

    @pytest.mark.parametrize("a, b", [("", "Aspirin"), ("Aspirin", "")])
    def test_one_empty(self, a, b):
        assert similarity(a, b) == 0.0

    @pytest.mark.parametrize(
        "a, b",
        [("Lisinopril", "Losartan"), ("x", "y"), ("Metformin XR", "Metformin")],
    )
    def test_in_unit_range(self, a, b):
        assert 0.0 <= similarity(a, b) <= 1.0


class TestIsProbableDuplicate:
    """Tests for duplicate-name detection."""

    def test_default_threshold(self):
        assert DUPLICATE_THRESHOLD == 0.8

    def test_ignores_case(self):
        assert is_probable_duplicate("METFORMIN", "metformin")

    def test_threshold_is_inclusive(self):
        assert similarity("abcde", "abcdx") == pytest.approx(0.8)
        assert is_probable_duplicate("abcde", "abcdx")

    def test_different_names(self):
        assert not is_probable_duplicate("Aspirin", "Warfarin")

    def test_custom_threshold(self):
        assert not is_probable_duplicate("Metformin XR", "Metformin")
        assert is_probable_duplicate("Metformin XR", "Metformin", threshold=0.7)
