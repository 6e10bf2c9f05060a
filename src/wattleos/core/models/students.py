"""
Student Models

Only the columns the pedagogy features read; enrollment and guardian
records live with the SIS.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .mastery import StudentMastery

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, SoftDeleteMixin, TenantMixin, TimestampMixin, UUIDPrimaryKeyMixin


class Student(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin, SoftDeleteMixin):
    """A student enrolled at a tenant school."""

    __tablename__ = "students"
    __table_args__ = (Index("idx_students_tenant_name", "tenant_id", "last_name", "first_name"),)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    preferred_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Relationships
    mastery_records: Mapped[list[StudentMastery]] = relationship(
        back_populates="student", cascade="all, delete-orphan"
    )

    @property
    def display_name(self) -> str:
        """Name shown in rosters and timelines."""
        return f"{self.preferred_name or self.first_name} {self.last_name}".strip()
