"""
Class Heatmap Assembler

Cross-joins a roster with mastery rows into one status map per student.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from uuid import UUID

from wattleos.core.models.mastery import StudentMastery
from wattleos.core.models.students import Student


@dataclass
class ClassHeatmapRow:
    """One student's row; a node missing from ``statuses`` is not started."""

    student_id: UUID
    student_first_name: str
    student_last_name: str
    statuses: dict[UUID, str] = field(default_factory=dict)


@dataclass
class ClassHeatmap:
    rows: list[ClassHeatmapRow] = field(default_factory=list)
    unresolved_student_ids: list[UUID] = field(default_factory=list)


def assemble_heatmap(
    students: Iterable[Student],
    records: Iterable[StudentMastery],
    outcome_ids: Iterable[UUID] | None = None,
) -> list[ClassHeatmapRow]:
    """Build heatmap rows sorted by last name, then first name.

    Every student appears exactly once, with an empty map when they have no
    rows. Only persisted statuses are included; no not_started entries are
    synthesized.

    Args:
        students: Roster to report on
        records: Mastery rows for those students
        outcome_ids: When given, rows for other nodes are dropped
    """
    allowed = set(outcome_ids) if outcome_ids is not None else None

    by_student: dict[UUID, dict[UUID, str]] = {}
    for record in records:
        if record.deleted_at is not None:
            continue
        if allowed is not None and record.curriculum_node_id not in allowed:
            continue
        by_student.setdefault(record.student_id, {})[record.curriculum_node_id] = record.status

    roster: dict[UUID, Student] = {}
    for student in students:
        roster.setdefault(student.id, student)

    ordered = sorted(
        roster.values(),
        key=lambda s: ((s.last_name or "").casefold(), (s.first_name or "").casefold()),
    )

    return [
        ClassHeatmapRow(
            student_id=student.id,
            student_first_name=student.first_name,
            student_last_name=student.last_name,
            statuses=dict(by_student.get(student.id, {})),
        )
        for student in ordered
    ]
