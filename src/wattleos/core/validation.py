"""
Input validation functions for WattleOS.

All validation functions follow the pattern:
1. Accept raw user input (string, enum, etc.)
2. Normalize/clean the input
3. Validate against business rules
4. Return cleaned value or raise ValidationError
"""

import re

from wattleos.core.models.curriculum import CurriculumLevel
from wattleos.core.models.mastery import MasteryStatus


class ValidationError(Exception):
    """Raised when user input fails validation."""

    pass


# ============================================================================
# Curriculum
# ============================================================================


def validate_node_title(title: str | None) -> str:
    """
    Validate and normalize a curriculum node title.

    Args:
        title: Raw title input

    Returns:
        Title with surrounding whitespace stripped and inner runs collapsed

    Raises:
        ValidationError: If the title is empty or too long
    """
    if title is None:
        raise ValidationError("Title cannot be empty")

    cleaned = re.sub(r"\s+", " ", title.strip())

    if cleaned == "":
        raise ValidationError("Title cannot be empty")

    if len(cleaned) > 300:
        raise ValidationError("Title cannot exceed 300 characters")

    return cleaned


def validate_instance_name(name: str | None) -> str:
    """Validate and normalize a curriculum instance name."""
    if name is None or name.strip() == "":
        raise ValidationError("Curriculum name cannot be empty")

    cleaned = re.sub(r"\s+", " ", name.strip())

    if len(cleaned) > 200:
        raise ValidationError("Curriculum name cannot exceed 200 characters")

    return cleaned


def validate_curriculum_level(level: str | None) -> CurriculumLevel:
    """
    Validate a curriculum level.

    Accepts any casing of area/strand/outcome/activity.

    Raises:
        ValidationError: If the level is unknown
    """
    if level is None or level == "":
        raise ValidationError("Level cannot be empty")

    try:
        return CurriculumLevel(level.strip().lower())
    except ValueError:
        allowed = ", ".join(lvl.value for lvl in CurriculumLevel)
        raise ValidationError(f"Invalid level '{level}' (expected one of: {allowed})") from None


def validate_search_query(query: str | None) -> str:
    """Strip a title search query; empty queries are rejected."""
    if query is None or query.strip() == "":
        raise ValidationError("Search query cannot be empty")

    cleaned = query.strip()

    if len(cleaned) > 100:
        raise ValidationError("Search query cannot exceed 100 characters")

    return cleaned


# ============================================================================
# Mastery
# ============================================================================


def validate_mastery_status(status: str | None) -> MasteryStatus:
    """
    Validate a mastery status value.

    Args:
        status: Raw status (e.g. "practicing", "Mastered")

    Returns:
        The matching MasteryStatus

    Raises:
        ValidationError: If the status is not one of the four known values
    """
    if status is None or status == "":
        raise ValidationError("Status cannot be empty")

    try:
        return MasteryStatus(str(status).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in MasteryStatus)
        raise ValidationError(f"Invalid status '{status}' (expected one of: {allowed})") from None


def validate_mastery_notes(notes: str | None) -> str | None:
    """Strip notes; blank notes become None."""
    if notes is None:
        return None

    cleaned = notes.strip()

    if cleaned == "":
        return None

    if len(cleaned) > 2000:
        raise ValidationError("Notes cannot exceed 2000 characters")

    return cleaned
