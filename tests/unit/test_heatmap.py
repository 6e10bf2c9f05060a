"""
Unit Tests for the Class Heatmap Assembler
"""

from uuid import uuid4

from wattleos.core.models import Student, StudentMastery
from wattleos.mastery.heatmap import assemble_heatmap

TENANT_ID = uuid4()


def make_student(first_name, last_name):
    return Student(tenant_id=TENANT_ID, first_name=first_name, last_name=last_name)


def make_record(student, node_id, status):
    return StudentMastery(
        tenant_id=TENANT_ID,
        student_id=student.id,
        curriculum_node_id=node_id,
        status=status,
    )


def test_every_student_gets_a_row():
    """5 students, only 2 with mastery rows → 5 rows, 3 with empty maps."""
    students = [
        make_student("Ava", "Nguyen"),
        make_student("Leo", "Brown"),
        make_student("Mia", "Smith"),
        make_student("Oscar", "Adams"),
        make_student("Isla", "Clark"),
    ]
    outcome_a, outcome_b = uuid4(), uuid4()
    records = [
        make_record(students[0], outcome_a, "mastered"),
        make_record(students[0], outcome_b, "presented"),
        make_record(students[2], outcome_a, "practicing"),
    ]

    rows = assemble_heatmap(students, records)

    assert len(rows) == 5
    by_id = {r.student_id: r for r in rows}
    assert by_id[students[0].id].statuses == {outcome_a: "mastered", outcome_b: "presented"}
    assert by_id[students[2].id].statuses == {outcome_a: "practicing"}
    assert sum(1 for r in rows if r.statuses == {}) == 3


def test_sorted_by_last_then_first_name():
    students = [
        make_student("Zoe", "Brown"),
        make_student("Amy", "Young"),
        make_student("Ben", "Brown"),
        make_student("Cara", "adams"),
    ]

    rows = assemble_heatmap(students, [])

    assert [(r.student_last_name, r.student_first_name) for r in rows] == [
        ("adams", "Cara"),
        ("Brown", "Ben"),
        ("Brown", "Zoe"),
        ("Young", "Amy"),
    ]


def test_duplicate_students_appear_once():
    student = make_student("Ava", "Nguyen")

    rows = assemble_heatmap([student, student], [])

    assert len(rows) == 1


def test_outcome_filter_and_deleted_rows():
    student = make_student("Ava", "Nguyen")
    kept, dropped, deleted = uuid4(), uuid4(), uuid4()
    stale = make_record(student, deleted, "mastered")
    stale.soft_delete()

    rows = assemble_heatmap(
        [student],
        [make_record(student, kept, "presented"), make_record(student, dropped, "mastered"), stale],
        outcome_ids=[kept, deleted],
    )

    assert rows[0].statuses == {kept: "presented"}


def test_empty_roster():
    assert assemble_heatmap([], []) == []
