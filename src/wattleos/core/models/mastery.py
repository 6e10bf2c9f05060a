"""
Mastery Models

Per-student progress against curriculum outcomes, and the append-only
history of every status transition.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from enum import StrEnum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from .curriculum import CurriculumNode
    from .students import Student

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, String, Text, event, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, SoftDeleteMixin, TenantMixin, TimestampMixin, UUIDPrimaryKeyMixin

_STATUS_VALUES = "('not_started', 'presented', 'practicing', 'mastered')"


class MasteryStatus(StrEnum):
    """A student's progression state against one outcome."""

    NOT_STARTED = "not_started"
    PRESENTED = "presented"
    PRACTICING = "practicing"
    MASTERED = "mastered"


class StudentMastery(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin, SoftDeleteMixin):
    """Current status of one student against one curriculum node.

    Rows are created lazily on the first explicit status change; a missing
    row means ``not_started``.
    """

    __tablename__ = "student_mastery"
    __table_args__ = (
        CheckConstraint(f"status IN {_STATUS_VALUES}", name="check_mastery_status"),
        Index(
            "uq_student_mastery_active",
            "student_id",
            "curriculum_node_id",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
        ),
        Index("idx_student_mastery_node", "curriculum_node_id"),
    )

    student_id: Mapped[UUID] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    curriculum_node_id: Mapped[UUID] = mapped_column(
        ForeignKey("curriculum_nodes.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MasteryStatus.NOT_STARTED.value
    )
    date_achieved: Mapped[date | None] = mapped_column(Date, nullable=True)
    assessed_by: Mapped[UUID | None] = mapped_column(nullable=True, comment="Acting staff user")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    student: Mapped[Student] = relationship(back_populates="mastery_records")
    curriculum_node: Mapped[CurriculumNode] = relationship()


class MasteryHistory(Base, UUIDPrimaryKeyMixin, TenantMixin):
    """Append-only audit of mastery transitions.

    One row per status change; never updated or deleted.
    """

    __tablename__ = "mastery_history"
    __table_args__ = (
        CheckConstraint(f"new_status IN {_STATUS_VALUES}", name="check_history_new_status"),
        CheckConstraint(
            f"previous_status IS NULL OR previous_status IN {_STATUS_VALUES}",
            name="check_history_previous_status",
        ),
        Index("idx_mastery_history_student_changed", "student_id", "changed_at"),
    )

    student_mastery_id: Mapped[UUID] = mapped_column(
        ForeignKey("student_mastery.id", ondelete="CASCADE"), nullable=False
    )
    student_id: Mapped[UUID] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    curriculum_node_id: Mapped[UUID] = mapped_column(
        ForeignKey("curriculum_nodes.id", ondelete="CASCADE"), nullable=False
    )
    previous_status: Mapped[str | None] = mapped_column(
        String(20), nullable=True, comment="NULL when the mastery row was just created"
    )
    new_status: Mapped[str] = mapped_column(String(20), nullable=False)
    changed_by: Mapped[UUID | None] = mapped_column(nullable=True)
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=text("NOW()"),
        nullable=False,
    )

    # Relationships
    curriculum_node: Mapped[CurriculumNode] = relationship()


@event.listens_for(MasteryHistory, "init")
def receive_init_history(target, args, kwargs):  # type: ignore[no-untyped-def]
    """Stamp in-memory history rows with the transition time."""
    if "changed_at" not in kwargs:
        target.changed_at = datetime.now(UTC)
