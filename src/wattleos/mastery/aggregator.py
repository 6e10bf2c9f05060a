"""
Mastery Aggregator

Merges the sparse set of persisted mastery rows for one student with the
full list of outcome nodes, and reduces statuses to summary counts.

A node with no persisted row is reported as a SynthesizedMastery entry:
status ``not_started``, no audit fields, and nothing written to the
database until the first explicit status change.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Literal
from uuid import UUID

from wattleos.core.models.curriculum import CurriculumLevel, CurriculumNode
from wattleos.core.models.mastery import MasteryStatus, StudentMastery


@dataclass(frozen=True)
class PersistedMastery:
    """A stored mastery row joined with its curriculum node."""

    record: StudentMastery
    node: CurriculumNode
    kind: Literal["persisted"] = "persisted"

    @property
    def student_id(self) -> UUID:
        return self.record.student_id

    @property
    def status(self) -> str:
        return self.record.status

    @property
    def record_id(self) -> UUID | None:
        return self.record.id

    @property
    def date_achieved(self) -> date | None:
        return self.record.date_achieved

    @property
    def assessed_by(self) -> UUID | None:
        return self.record.assessed_by

    @property
    def notes(self) -> str | None:
        return self.record.notes


@dataclass(frozen=True)
class SynthesizedMastery:
    """Placeholder for a node the student has no mastery row for yet."""

    student_id: UUID
    node: CurriculumNode
    kind: Literal["synthesized"] = "synthesized"

    status: str = MasteryStatus.NOT_STARTED.value
    record_id: None = None
    date_achieved: None = None
    assessed_by: None = None
    notes: None = None


MasteryEntry = PersistedMastery | SynthesizedMastery


@dataclass(frozen=True)
class MasterySummary:
    """Status bucket counts for one student over one curriculum instance.

    ``not_started + presented + practicing + mastered == total`` always.
    """

    total: int
    not_started: int
    presented: int
    practicing: int
    mastered: int


def outcome_nodes(nodes: Iterable[CurriculumNode]) -> list[CurriculumNode]:
    """Non-hidden, non-deleted outcome-level nodes, in sequence order."""
    outcomes = [
        n
        for n in nodes
        if n.level == CurriculumLevel.OUTCOME and not n.is_hidden and n.deleted_at is None
    ]
    outcomes.sort(key=lambda n: n.sequence_order)
    return outcomes


def merge_student_mastery(
    student_id: UUID,
    nodes: Sequence[CurriculumNode],
    records: Iterable[StudentMastery],
) -> list[MasteryEntry]:
    """Produce exactly one entry per non-hidden outcome node.

    Args:
        student_id: Student the records belong to
        nodes: Curriculum nodes of the instance (any level; filtered here)
        records: Persisted mastery rows for the student

    Returns:
        One entry per outcome node, in node order. Rows for other students,
        for nodes outside ``nodes``, or soft-deleted rows are ignored.
    """
    by_node: dict[UUID, StudentMastery] = {}
    for record in records:
        if record.student_id != student_id or record.deleted_at is not None:
            continue
        by_node[record.curriculum_node_id] = record

    entries: list[MasteryEntry] = []
    for node in outcome_nodes(nodes):
        existing = by_node.get(node.id)
        if existing is not None:
            entries.append(PersistedMastery(record=existing, node=node))
        else:
            entries.append(SynthesizedMastery(student_id=student_id, node=node))
    return entries


def summarize_statuses(total: int, statuses: Iterable[str]) -> MasterySummary:
    """Count statuses into buckets.

    ``not_started`` is derived as the remainder of ``total`` rather than
    counted, so rows with an unrecognised status fall into it instead of
    skewing the sum.
    """
    presented = practicing = mastered = 0
    for status in statuses:
        if status == MasteryStatus.PRESENTED:
            presented += 1
        elif status == MasteryStatus.PRACTICING:
            practicing += 1
        elif status == MasteryStatus.MASTERED:
            mastered += 1

    return MasterySummary(
        total=total,
        not_started=total - (presented + practicing + mastered),
        presented=presented,
        practicing=practicing,
        mastered=mastered,
    )


def summarize_entries(entries: Sequence[MasteryEntry]) -> MasterySummary:
    """Summary over merged entries; ``total`` is the entry count."""
    return summarize_statuses(len(entries), (e.status for e in entries))
