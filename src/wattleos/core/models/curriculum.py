"""
Curriculum Models

Global curriculum templates, the tenant instances forked from them, and
the hierarchical nodes inside both (area → strand → outcome → activity).
"""

from __future__ import annotations

from enum import StrEnum
from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, SoftDeleteMixin, TenantMixin, TimestampMixin, UUIDPrimaryKeyMixin


class CurriculumLevel(StrEnum):
    """Depth of a node within a curriculum framework."""

    AREA = "area"
    STRAND = "strand"
    OUTCOME = "outcome"
    ACTIVITY = "activity"


class CurriculumTemplate(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A global curriculum framework that tenants fork into instances.

    Templates are shared by every tenant and are read-only from the
    pedagogy service.
    """

    __tablename__ = "curriculum_templates"
    __table_args__ = (Index("idx_curriculum_templates_active_name", "is_active", "name"),)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    framework: Mapped[str] = mapped_column(
        String(50), nullable=False, comment="Framework family, e.g. AMI, EYLF"
    )
    age_range: Mapped[str | None] = mapped_column(String(20), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(default=True)

    # Relationships
    nodes: Mapped[list[CurriculumTemplateNode]] = relationship(
        back_populates="template", cascade="all, delete-orphan"
    )


class CurriculumTemplateNode(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """One entry of a template tree; copied into CurriculumNode on fork."""

    __tablename__ = "curriculum_template_nodes"
    __table_args__ = (
        CheckConstraint(
            "level IN ('area', 'strand', 'outcome', 'activity')",
            name="check_template_node_level",
        ),
        Index("idx_curriculum_template_nodes_template", "template_id", "sequence_order"),
    )

    template_id: Mapped[UUID] = mapped_column(
        ForeignKey("curriculum_templates.id", ondelete="CASCADE"), nullable=False
    )
    parent_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("curriculum_template_nodes.id", ondelete="CASCADE"), nullable=True
    )
    level: Mapped[str] = mapped_column(String(10), nullable=False)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    sequence_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    template: Mapped[CurriculumTemplate] = relationship(back_populates="nodes")


class CurriculumInstance(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin, SoftDeleteMixin):
    """A tenant's working copy of a curriculum framework.

    Either forked from a global template or created blank.
    """

    __tablename__ = "curriculum_instances"
    __table_args__ = (Index("idx_curriculum_instances_tenant_active", "tenant_id", "is_active"),)

    source_template_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("curriculum_templates.id", ondelete="SET NULL"),
        nullable=True,
        comment="Template this instance was forked from (NULL = blank)",
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True)

    # Relationships
    nodes: Mapped[list[CurriculumNode]] = relationship(
        back_populates="instance", cascade="all, delete-orphan"
    )


class CurriculumNode(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin, SoftDeleteMixin):
    """One entry in a curriculum instance.

    Nodes form a forest: roots have ``parent_id = NULL`` and children are
    ordered among their siblings by ``sequence_order``.
    """

    __tablename__ = "curriculum_nodes"
    __table_args__ = (
        CheckConstraint(
            "level IN ('area', 'strand', 'outcome', 'activity')",
            name="check_curriculum_level",
        ),
        CheckConstraint("parent_id IS NULL OR parent_id != id", name="check_no_self_parent"),
        Index("idx_curriculum_nodes_instance", "instance_id", "sequence_order"),
        Index("idx_curriculum_nodes_parent", "parent_id"),
        Index("idx_curriculum_nodes_instance_level", "instance_id", "level"),
    )

    instance_id: Mapped[UUID] = mapped_column(
        ForeignKey("curriculum_instances.id", ondelete="CASCADE"), nullable=False
    )
    parent_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("curriculum_nodes.id", ondelete="CASCADE"),
        nullable=True,
        comment="Parent node (NULL = root)",
    )
    source_template_node_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("curriculum_template_nodes.id", ondelete="SET NULL"), nullable=True
    )

    level: Mapped[str] = mapped_column(
        String(10), nullable=False, comment="Level: area/strand/outcome/activity"
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    sequence_order: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="Order among siblings"
    )
    is_hidden: Mapped[bool] = mapped_column(default=False, comment="Hidden from mastery tracking")

    # Relationships
    instance: Mapped[CurriculumInstance] = relationship(back_populates="nodes")


@event.listens_for(CurriculumTemplate, "init")
def receive_init_template(target, args, kwargs):  # type: ignore[no-untyped-def]
    if "is_active" not in kwargs:
        target.is_active = True
    if "version" not in kwargs:
        target.version = 1


@event.listens_for(CurriculumTemplateNode, "init")
def receive_init_template_node(target, args, kwargs):  # type: ignore[no-untyped-def]
    if "sequence_order" not in kwargs:
        target.sequence_order = 0


@event.listens_for(CurriculumInstance, "init")
def receive_init_instance(target, args, kwargs):  # type: ignore[no-untyped-def]
    """Apply column defaults to in-memory instances."""
    if "is_active" not in kwargs:
        target.is_active = True


@event.listens_for(CurriculumNode, "init")
def receive_init_node(target, args, kwargs):  # type: ignore[no-untyped-def]
    """Apply column defaults to in-memory nodes."""
    if "sequence_order" not in kwargs:
        target.sequence_order = 0
    if "is_hidden" not in kwargs:
        target.is_hidden = False
