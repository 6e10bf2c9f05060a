"""
Mastery Pydantic Schemas

Request and response models for mastery API endpoints.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from wattleos.core.models.mastery import MasteryStatus
from wattleos.core.schemas.curriculum import CurriculumNodeSchema
from wattleos.mastery.aggregator import MasteryEntry, MasterySummary
from wattleos.mastery.service import MasteryHistoryItem
from wattleos.mastery.status import mastery_percentage


class StudentMasterySchema(BaseModel):
    """Persisted mastery row."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    curriculum_node_id: UUID
    status: MasteryStatus
    date_achieved: date | None = None
    assessed_by: UUID | None = None
    notes: str | None = None


class MasteryEntrySchema(BaseModel):
    """One outcome in a student's mastery grid.

    ``kind`` is "synthesized" when no row is stored yet; ``id`` is then null.
    """

    kind: Literal["persisted", "synthesized"]
    id: UUID | None = None
    student_id: UUID
    curriculum_node_id: UUID
    status: MasteryStatus
    date_achieved: date | None = None
    assessed_by: UUID | None = None
    notes: str | None = None
    curriculum_node: CurriculumNodeSchema

    @classmethod
    def from_entry(cls, entry: MasteryEntry) -> MasteryEntrySchema:
        return cls(
            kind=entry.kind,
            id=entry.record_id,
            student_id=entry.student_id,
            curriculum_node_id=entry.node.id,
            status=MasteryStatus(entry.status),
            date_achieved=entry.date_achieved,
            assessed_by=entry.assessed_by,
            notes=entry.notes,
            curriculum_node=CurriculumNodeSchema.model_validate(entry.node),
        )


class MasterySummarySchema(BaseModel):
    """Status counts; the four buckets sum to ``total``."""

    total: int
    not_started: int
    presented: int
    practicing: int
    mastered: int
    percentage: int = Field(ge=0, le=100)

    @classmethod
    def from_summary(cls, summary: MasterySummary) -> MasterySummarySchema:
        return cls(
            total=summary.total,
            not_started=summary.not_started,
            presented=summary.presented,
            practicing=summary.practicing,
            mastered=summary.mastered,
            percentage=mastery_percentage(summary),
        )


class MasteryStatusUpdate(BaseModel):
    """Set one student's status on one curriculum node."""

    student_id: UUID
    curriculum_node_id: UUID
    new_status: MasteryStatus
    notes: str | None = Field(None, max_length=2000)


class MasteryStatusCycle(BaseModel):
    """Advance a cell to the next status in the progression."""

    student_id: UUID
    curriculum_node_id: UUID


class MasteryBulkItem(BaseModel):
    curriculum_node_id: UUID
    new_status: MasteryStatus
    notes: str | None = Field(None, max_length=2000)


class MasteryBulkUpdate(BaseModel):
    """Several status changes for one student, applied in order."""

    student_id: UUID
    updates: list[MasteryBulkItem] = Field(..., min_length=1, max_length=500)


class MasteryBulkFailure(BaseModel):
    curriculum_node_id: UUID
    message: str
    code: str


class MasteryBulkResponse(BaseModel):
    updated: int
    failed: list[MasteryBulkFailure] = []


class MasteryHistorySchema(BaseModel):
    """One status transition."""

    id: UUID
    student_mastery_id: UUID
    student_id: UUID
    curriculum_node_id: UUID
    curriculum_node_title: str
    previous_status: MasteryStatus | None = None
    new_status: MasteryStatus
    changed_by: UUID | None = None
    changed_at: datetime

    @classmethod
    def from_item(cls, item: MasteryHistoryItem) -> MasteryHistorySchema:
        entry = item.entry
        return cls(
            id=entry.id,
            student_mastery_id=entry.student_mastery_id,
            student_id=entry.student_id,
            curriculum_node_id=entry.curriculum_node_id,
            curriculum_node_title=item.curriculum_node_title,
            previous_status=entry.previous_status,
            new_status=entry.new_status,
            changed_by=entry.changed_by,
            changed_at=entry.changed_at,
        )


class ClassHeatmapRowSchema(BaseModel):
    """A student's statuses keyed by curriculum node ID.

    Nodes missing from ``statuses`` are not started.
    """

    model_config = ConfigDict(from_attributes=True)

    student_id: UUID
    student_first_name: str
    student_last_name: str
    statuses: dict[UUID, MasteryStatus] = {}


class ClassHeatmapSchema(BaseModel):
    """Heatmap rows plus roster IDs that matched no student of the tenant."""

    model_config = ConfigDict(from_attributes=True)

    rows: list[ClassHeatmapRowSchema] = []
    unresolved_student_ids: list[UUID] = []
