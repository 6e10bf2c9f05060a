"""
Unit tests for input validation functions.
"""

import pytest

from wattleos.core.models import CurriculumLevel, MasteryStatus
from wattleos.core.validation import (
    ValidationError,
    validate_curriculum_level,
    validate_instance_name,
    validate_mastery_notes,
    validate_mastery_status,
    validate_node_title,
    validate_search_query,
)

# ============================================================================
# Curriculum
# ============================================================================


class TestNodeTitleValidation:
    """Tests for curriculum node title validation."""

    def test_valid_title(self):
        assert validate_node_title("Pink Tower") == "Pink Tower"

    def test_strips_and_collapses_whitespace(self):
        assert validate_node_title("  Pink   Tower \n") == "Pink Tower"

    @pytest.mark.parametrize("title", [None, "", "   "])
    def test_rejects_empty(self, title):
        with pytest.raises(ValidationError, match="cannot be empty"):
            validate_node_title(title)

    def test_rejects_too_long(self):
        with pytest.raises(ValidationError, match="300"):
            validate_node_title("x" * 301)


class TestInstanceNameValidation:
    def test_valid_name(self):
        assert validate_instance_name(" AMI  3-6 ") == "AMI 3-6"

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            validate_instance_name("  ")

    def test_rejects_too_long(self):
        with pytest.raises(ValidationError):
            validate_instance_name("a" * 201)


class TestCurriculumLevelValidation:
    @pytest.mark.parametrize("raw", ["outcome", "Outcome", " OUTCOME "])
    def test_normalizes_case(self, raw):
        assert validate_curriculum_level(raw) == CurriculumLevel.OUTCOME

    def test_rejects_unknown_level(self):
        with pytest.raises(ValidationError, match="Invalid level"):
            validate_curriculum_level("lesson")

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            validate_curriculum_level(None)


class TestSearchQueryValidation:
    def test_strips_query(self):
        assert validate_search_query("  tower ") == "tower"

    @pytest.mark.parametrize("query", [None, "", "  "])
    def test_rejects_empty(self, query):
        with pytest.raises(ValidationError):
            validate_search_query(query)


# ============================================================================
# Mastery
# ============================================================================


class TestMasteryStatusValidation:
    @pytest.mark.parametrize("status", list(MasteryStatus))
    def test_accepts_every_status(self, status):
        assert validate_mastery_status(status.value) == status

    def test_accepts_enum_member(self):
        assert validate_mastery_status(MasteryStatus.MASTERED) == MasteryStatus.MASTERED

    def test_normalizes_case(self):
        assert validate_mastery_status(" Practicing ") == MasteryStatus.PRACTICING

    def test_rejects_unknown_status(self):
        with pytest.raises(ValidationError, match="Invalid status 'archived'"):
            validate_mastery_status("archived")

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            validate_mastery_status("")


class TestMasteryNotesValidation:
    def test_none_passes_through(self):
        assert validate_mastery_notes(None) is None

    def test_blank_becomes_none(self):
        assert validate_mastery_notes("   ") is None

    def test_strips_notes(self):
        assert validate_mastery_notes(" Confident with the red rods ") == (
            "Confident with the red rods"
        )

    def test_rejects_too_long(self):
        with pytest.raises(ValidationError):
            validate_mastery_notes("n" * 2001)
