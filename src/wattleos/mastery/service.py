"""
Mastery Service

Reads and writes student mastery for one tenant. Every operation takes an
explicit TenantContext and returns an ActionResult; database errors are
reported, never raised.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from wattleos.config import settings
from wattleos.core.context import TenantContext
from wattleos.core.models import (
    CurriculumLevel,
    MasteryHistory,
    MasteryStatus,
    StudentMastery,
)
from wattleos.core.results import ActionError, ActionResult, ErrorCode, failure, success
from wattleos.core.validation import (
    ValidationError,
    validate_mastery_notes,
    validate_mastery_status,
)
from wattleos.mastery.aggregator import (
    MasteryEntry,
    MasterySummary,
    merge_student_mastery,
    summarize_entries,
)
from wattleos.mastery.heatmap import ClassHeatmap, assemble_heatmap
from wattleos.mastery.status import MASTERY_STATUS_ORDER, next_mastery_status
from wattleos.repositories import CurriculumNodeRepository, MasteryRepository, StudentRepository

logger = logging.getLogger(__name__)


def _utc_today() -> date:
    return datetime.now(UTC).date()


@dataclass(frozen=True)
class StatusChange:
    """One item of a bulk update."""

    curriculum_node_id: UUID
    new_status: MasteryStatus | str
    notes: str | None = None


@dataclass
class BulkUpdateResult:
    updated: int = 0
    failures: list[tuple[UUID, ActionError]] = field(default_factory=list)


@dataclass(frozen=True)
class MasteryHistoryItem:
    """History row joined with the title of its curriculum node."""

    entry: MasteryHistory
    curriculum_node_title: str


class MasteryService:
    """Mastery tracking operations for the pedagogy module."""

    def __init__(
        self,
        nodes: CurriculumNodeRepository,
        students: StudentRepository,
        mastery: MasteryRepository,
        today: Callable[[], date] = _utc_today,
    ):
        self.nodes = nodes
        self.students = students
        self.mastery = mastery
        self._today = today

    # ========================================================================
    # READS
    # ========================================================================

    async def get_student_mastery(
        self, ctx: TenantContext, student_id: UUID, instance_id: UUID
    ) -> ActionResult[list[MasteryEntry]]:
        """One entry per visible outcome node of the instance.

        Nodes without a stored row come back as SynthesizedMastery
        (not started).
        """
        try:
            outcomes = await self.nodes.list_by_instance(
                ctx.tenant_id, instance_id, level=CurriculumLevel.OUTCOME, include_hidden=False
            )
            if not outcomes:
                return success([])

            records = await self.mastery.list_for_student(
                ctx.tenant_id, student_id, [n.id for n in outcomes]
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load mastery for student {student_id}: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        return success(merge_student_mastery(student_id, outcomes, records))

    async def get_student_mastery_summary(
        self, ctx: TenantContext, student_id: UUID, instance_id: UUID
    ) -> ActionResult[MasterySummary]:
        """Status bucket counts over the instance's visible outcomes."""
        try:
            outcomes = await self.nodes.list_by_instance(
                ctx.tenant_id, instance_id, level=CurriculumLevel.OUTCOME, include_hidden=False
            )
            records = (
                await self.mastery.list_for_student(
                    ctx.tenant_id, student_id, [n.id for n in outcomes]
                )
                if outcomes
                else []
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to summarise mastery for student {student_id}: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        return success(summarize_entries(merge_student_mastery(student_id, outcomes, records)))

    async def get_student_mastery_history(
        self, ctx: TenantContext, student_id: UUID, limit: int | None = None
    ) -> ActionResult[list[MasteryHistoryItem]]:
        """Status transitions for a student, newest first."""
        limit = limit or settings.MASTERY_HISTORY_DEFAULT_LIMIT
        if limit < 1:
            return failure("Limit must be positive", ErrorCode.VALIDATION_ERROR)

        try:
            entries = await self.mastery.list_history(ctx.tenant_id, student_id, limit)
            node_ids = list({e.curriculum_node_id for e in entries})
            nodes = await self.nodes.list_by_ids(ctx.tenant_id, node_ids)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load mastery history for student {student_id}: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        titles = {n.id: n.title for n in nodes}
        return success(
            [
                MasteryHistoryItem(entry=e, curriculum_node_title=titles.get(e.curriculum_node_id, ""))
                for e in entries
            ]
        )

    async def get_class_mastery_heatmap(
        self, ctx: TenantContext, instance_id: UUID, student_ids: Sequence[UUID]
    ) -> ActionResult[ClassHeatmap]:
        """Student × outcome status grid for a class roster.

        Roster IDs that match no live student of the tenant are left out of
        the rows and returned in ``unresolved_student_ids``, in roster order.
        """
        if not student_ids:
            return success(ClassHeatmap())

        unique_ids = list(dict.fromkeys(student_ids))

        try:
            outcomes = await self.nodes.list_by_instance(
                ctx.tenant_id, instance_id, level=CurriculumLevel.OUTCOME, include_hidden=False
            )
            outcome_ids = [n.id for n in outcomes]
            records = await self.mastery.list_for_students(ctx.tenant_id, unique_ids, outcome_ids)
            students = await self.students.list_by_ids(ctx.tenant_id, unique_ids)
        except SQLAlchemyError as e:
            logger.error(f"Failed to build heatmap for instance {instance_id}: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        found = {s.id for s in students}
        unresolved = [sid for sid in unique_ids if sid not in found]
        if unresolved:
            logger.warning(
                f"Heatmap for instance {instance_id}: {len(unresolved)} student(s) not found"
            )

        return success(
            ClassHeatmap(
                rows=assemble_heatmap(students, records, outcome_ids),
                unresolved_student_ids=unresolved,
            )
        )

    # ========================================================================
    # WRITES
    # ========================================================================

    async def update_mastery_status(
        self,
        ctx: TenantContext,
        student_id: UUID,
        curriculum_node_id: UUID,
        new_status: MasteryStatus | str,
        notes: str | None = None,
    ) -> ActionResult[StudentMastery]:
        """Set a student's status on one node and record the transition.

        Updates the active row in place, or inserts one if none exists, then
        appends a history entry. Both writes share one transaction: if the
        history insert fails the status change is rolled back too.
        """
        try:
            status = validate_mastery_status(new_status)
            cleaned_notes = validate_mastery_notes(notes)
        except ValidationError as e:
            return failure(str(e), ErrorCode.VALIDATION_ERROR)

        try:
            node = await self.nodes.get(ctx.tenant_id, curriculum_node_id)
            if node is None:
                return failure(
                    f"Curriculum node not found: {curriculum_node_id}", ErrorCode.NOT_FOUND
                )

            student = await self.students.get(ctx.tenant_id, student_id)
            if student is None:
                return failure(f"Student not found: {student_id}", ErrorCode.NOT_FOUND)

            today = self._today()

            async with self.mastery.transaction():
                existing = await self.mastery.get_active(
                    ctx.tenant_id, student_id, curriculum_node_id
                )

                if existing is not None:
                    previous_status: str | None = existing.status
                    record = await self.mastery.update(
                        existing,
                        status=status.value,
                        date_achieved=today,
                        assessed_by=ctx.acting_user_id,
                        notes=cleaned_notes if cleaned_notes is not None else existing.notes,
                    )
                else:
                    previous_status = None
                    record = await self.mastery.insert(
                        StudentMastery(
                            tenant_id=ctx.tenant_id,
                            student_id=student_id,
                            curriculum_node_id=curriculum_node_id,
                            status=status.value,
                            date_achieved=today,
                            assessed_by=ctx.acting_user_id,
                            notes=cleaned_notes,
                        )
                    )

                await self.mastery.append_history(
                    MasteryHistory(
                        tenant_id=ctx.tenant_id,
                        student_mastery_id=record.id,
                        student_id=student_id,
                        curriculum_node_id=curriculum_node_id,
                        previous_status=previous_status,
                        new_status=status.value,
                        changed_by=ctx.acting_user_id,
                    )
                )
        except IntegrityError as e:
            logger.warning(
                f"Conflicting mastery write for student {student_id}, node {curriculum_node_id}: {e}"
            )
            return failure(str(e.orig or e), ErrorCode.CONFLICT)
        except SQLAlchemyError as e:
            logger.error(
                f"Mastery update failed for student {student_id}, node {curriculum_node_id}: {e}"
            )
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        logger.info(
            f"Mastery {previous_status or 'none'} -> {status.value} "
            f"(student={student_id}, node={curriculum_node_id}, by={ctx.acting_user_id})"
        )
        return success(record)

    async def cycle_mastery_status(
        self, ctx: TenantContext, student_id: UUID, curriculum_node_id: UUID
    ) -> ActionResult[StudentMastery]:
        """Advance one grid cell to the next status, wrapping mastered to not_started.

        A cell with no row, or with a status outside the progression, counts
        as not_started.
        """
        try:
            record = await self.mastery.get_active(ctx.tenant_id, student_id, curriculum_node_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read mastery for student {student_id}: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        current: MasteryStatus | str = MasteryStatus.NOT_STARTED
        if record is not None and record.status in MASTERY_STATUS_ORDER:
            current = record.status

        return await self.update_mastery_status(
            ctx, student_id, curriculum_node_id, next_mastery_status(current)
        )

    async def bulk_update_mastery_status(
        self, ctx: TenantContext, student_id: UUID, updates: Sequence[StatusChange]
    ) -> ActionResult[BulkUpdateResult]:
        """Apply status changes one by one.

        Best effort: a failing item is recorded and the loop moves on.
        """
        outcome = BulkUpdateResult()

        for change in updates:
            result = await self.update_mastery_status(
                ctx,
                student_id,
                change.curriculum_node_id,
                change.new_status,
                change.notes,
            )
            if result.error is not None:
                outcome.failures.append((change.curriculum_node_id, result.error))
            else:
                outcome.updated += 1

        if outcome.failures:
            logger.warning(
                f"Bulk mastery update for student {student_id}: "
                f"{outcome.updated} updated, {len(outcome.failures)} failed"
            )

        return success(outcome)
