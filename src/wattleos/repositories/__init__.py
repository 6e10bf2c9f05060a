"""Data access for the pedagogy services."""

from .base import (
    CurriculumInstanceRepository,
    CurriculumNodeRepository,
    CurriculumTemplateRepository,
    MasteryRepository,
    StudentRepository,
)
from .sql import (
    SqlCurriculumInstanceRepository,
    SqlCurriculumNodeRepository,
    SqlCurriculumTemplateRepository,
    SqlMasteryRepository,
    SqlStudentRepository,
)

__all__ = [
    "CurriculumInstanceRepository",
    "CurriculumNodeRepository",
    "CurriculumTemplateRepository",
    "StudentRepository",
    "MasteryRepository",
    "SqlCurriculumInstanceRepository",
    "SqlCurriculumNodeRepository",
    "SqlCurriculumTemplateRepository",
    "SqlStudentRepository",
    "SqlMasteryRepository",
]
