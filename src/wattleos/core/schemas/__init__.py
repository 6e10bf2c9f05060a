"""Pydantic schemas for API validation."""

from .curriculum import (
    CurriculumInstanceCreate,
    CurriculumInstanceSchema,
    CurriculumNodeCreate,
    CurriculumNodeSchema,
    CurriculumNodeUpdate,
    CurriculumTemplateFork,
    CurriculumTemplateSchema,
    CurriculumTreeNodeSchema,
    NodeReorder,
)
from .mastery import (
    ClassHeatmapRowSchema,
    ClassHeatmapSchema,
    MasteryBulkResponse,
    MasteryBulkUpdate,
    MasteryEntrySchema,
    MasteryHistorySchema,
    MasteryStatusCycle,
    MasteryStatusUpdate,
    MasterySummarySchema,
    StudentMasterySchema,
)

__all__ = [
    # Curriculum
    "CurriculumTemplateSchema",
    "CurriculumTemplateFork",
    "CurriculumInstanceSchema",
    "CurriculumInstanceCreate",
    "CurriculumNodeSchema",
    "CurriculumNodeCreate",
    "CurriculumNodeUpdate",
    "CurriculumTreeNodeSchema",
    "NodeReorder",
    # Mastery
    "StudentMasterySchema",
    "MasteryEntrySchema",
    "MasterySummarySchema",
    "MasteryStatusUpdate",
    "MasteryStatusCycle",
    "MasteryBulkUpdate",
    "MasteryBulkResponse",
    "MasteryHistorySchema",
    "ClassHeatmapRowSchema",
    "ClassHeatmapSchema",
]
