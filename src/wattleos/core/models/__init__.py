"""
WattleOS SQLAlchemy Models
"""

from .base import Base, SoftDeleteMixin, TenantMixin, TimestampMixin, UUIDPrimaryKeyMixin
from .curriculum import (
    CurriculumInstance,
    CurriculumLevel,
    CurriculumNode,
    CurriculumTemplate,
    CurriculumTemplateNode,
)
from .mastery import MasteryHistory, MasteryStatus, StudentMastery
from .students import Student

__all__ = [
    # Base
    "Base",
    "UUIDPrimaryKeyMixin",
    "TenantMixin",
    "TimestampMixin",
    "SoftDeleteMixin",
    # Curriculum
    "CurriculumLevel",
    "CurriculumTemplate",
    "CurriculumTemplateNode",
    "CurriculumInstance",
    "CurriculumNode",
    # Students
    "Student",
    # Mastery
    "MasteryStatus",
    "StudentMastery",
    "MasteryHistory",
]
