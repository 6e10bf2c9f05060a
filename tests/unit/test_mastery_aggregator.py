"""
Unit Tests for the Mastery Aggregator
"""

import itertools
from datetime import date
from uuid import uuid4

import pytest

from wattleos.core.models import CurriculumLevel, CurriculumNode, MasteryStatus, StudentMastery
from wattleos.mastery.aggregator import (
    PersistedMastery,
    SynthesizedMastery,
    merge_student_mastery,
    outcome_nodes,
    summarize_entries,
    summarize_statuses,
)

TENANT_ID = uuid4()
INSTANCE_ID = uuid4()


def make_node(title, level=CurriculumLevel.OUTCOME, sequence_order=0, is_hidden=False):
    return CurriculumNode(
        tenant_id=TENANT_ID,
        instance_id=INSTANCE_ID,
        level=level.value,
        title=title,
        sequence_order=sequence_order,
        is_hidden=is_hidden,
    )


def make_record(student_id, node, status):
    return StudentMastery(
        tenant_id=TENANT_ID,
        student_id=student_id,
        curriculum_node_id=node.id,
        status=status.value if isinstance(status, MasteryStatus) else status,
        date_achieved=date(2026, 3, 2),
        assessed_by=uuid4(),
    )


@pytest.fixture
def student_id():
    return uuid4()


@pytest.fixture
def outcomes():
    return [make_node(f"Outcome {i}", sequence_order=i) for i in range(5)]


class TestOutcomeNodes:
    def test_filters_level_hidden_and_deleted(self, outcomes):
        strand = make_node("Strand", level=CurriculumLevel.STRAND)
        hidden = make_node("Hidden", is_hidden=True)
        deleted = make_node("Deleted")
        deleted.soft_delete()

        result = outcome_nodes([strand, hidden, deleted, *reversed(outcomes)])

        assert result == outcomes


class TestMergeStudentMastery:
    def test_synthesizes_not_started_for_missing_rows(self, student_id, outcomes):
        records = [make_record(student_id, outcomes[1], MasteryStatus.PRACTICING)]

        entries = merge_student_mastery(student_id, outcomes, records)

        assert len(entries) == 5
        assert isinstance(entries[1], PersistedMastery)
        assert entries[1].status == "practicing"
        assert entries[1].record_id == records[0].id

        placeholder = entries[0]
        assert isinstance(placeholder, SynthesizedMastery)
        assert placeholder.kind == "synthesized"
        assert placeholder.status == MasteryStatus.NOT_STARTED
        assert placeholder.record_id is None
        assert placeholder.date_achieved is None
        assert placeholder.assessed_by is None
        assert placeholder.notes is None
        assert placeholder.student_id == student_id
        assert placeholder.node is outcomes[0]

    def test_no_outcomes_returns_empty(self, student_id):
        assert merge_student_mastery(student_id, [], []) == []

    @pytest.mark.parametrize("persisted", [0, 1, 3, 5])
    def test_length_equals_visible_outcome_count(self, student_id, outcomes, persisted):
        records = [
            make_record(student_id, node, MasteryStatus.MASTERED) for node in outcomes[:persisted]
        ]
        hidden = make_node("Hidden", is_hidden=True)
        activity = make_node("Activity", level=CurriculumLevel.ACTIVITY)

        entries = merge_student_mastery(student_id, [*outcomes, hidden, activity], records)

        assert len(entries) == len(outcomes)
        assert sum(isinstance(e, PersistedMastery) for e in entries) == persisted

    def test_ignores_rows_for_other_students_and_nodes(self, student_id, outcomes):
        stray_node = make_node("Other instance")
        records = [
            make_record(uuid4(), outcomes[0], MasteryStatus.MASTERED),
            make_record(student_id, stray_node, MasteryStatus.MASTERED),
        ]

        entries = merge_student_mastery(student_id, outcomes, records)

        assert all(isinstance(e, SynthesizedMastery) for e in entries)

    def test_ignores_soft_deleted_rows(self, student_id, outcomes):
        record = make_record(student_id, outcomes[0], MasteryStatus.PRESENTED)
        record.soft_delete()

        entries = merge_student_mastery(student_id, outcomes, [record])

        assert isinstance(entries[0], SynthesizedMastery)


class TestSummarizeStatuses:
    def test_counts_buckets(self):
        summary = summarize_statuses(
            10, ["presented", "practicing", "practicing", "mastered", "not_started"]
        )

        assert summary.presented == 1
        assert summary.practicing == 2
        assert summary.mastered == 1
        assert summary.not_started == 6
        assert summary.total == 10

    def test_unknown_status_falls_into_not_started(self):
        summary = summarize_statuses(3, ["mastered", "archived"])

        assert summary.mastered == 1
        assert summary.not_started == 2

    def test_zero_total(self):
        summary = summarize_statuses(0, [])

        assert summary.not_started == 0
        assert summary.total == 0

    def test_buckets_always_sum_to_total(self):
        values = [s.value for s in MasteryStatus] + ["bogus"]
        for combo in itertools.combinations_with_replacement(values, 4):
            summary = summarize_statuses(6, combo)
            assert (
                summary.not_started + summary.presented + summary.practicing + summary.mastered
                == summary.total
            )

    def test_summarize_entries(self, student_id, outcomes):
        records = [
            make_record(student_id, outcomes[0], MasteryStatus.MASTERED),
            make_record(student_id, outcomes[1], MasteryStatus.PRESENTED),
        ]
        entries = merge_student_mastery(student_id, outcomes, records)

        summary = summarize_entries(entries)

        assert summary.total == 5
        assert summary.mastered == 1
        assert summary.presented == 1
        assert summary.not_started == 3
