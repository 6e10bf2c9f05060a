"""Create curriculum, student and mastery tables

Revision ID: 3f1c2a7d9b10
Revises:
Create Date: 2026-10-18 09:00:00.000000+00:00

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a7d9b10"  # pragma: allowlist secret
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_STATUS_VALUES = "('not_started', 'presented', 'practicing', 'mastered')"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "curriculum_instances",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("source_template_id", sa.Uuid(), nullable=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_curriculum_instances_tenant_id", "curriculum_instances", ["tenant_id"])
    op.create_index(
        "idx_curriculum_instances_tenant_active", "curriculum_instances", ["tenant_id", "is_active"]
    )

    op.create_table(
        "curriculum_nodes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column(
            "instance_id",
            sa.Uuid(),
            sa.ForeignKey("curriculum_instances.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "parent_id",
            sa.Uuid(),
            sa.ForeignKey("curriculum_nodes.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("source_template_node_id", sa.Uuid(), nullable=True),
        sa.Column("level", sa.String(10), nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("sequence_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_hidden", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.CheckConstraint(
            "level IN ('area', 'strand', 'outcome', 'activity')", name="check_curriculum_level"
        ),
        sa.CheckConstraint("parent_id IS NULL OR parent_id != id", name="check_no_self_parent"),
    )
    op.create_index("ix_curriculum_nodes_tenant_id", "curriculum_nodes", ["tenant_id"])
    op.create_index(
        "idx_curriculum_nodes_instance", "curriculum_nodes", ["instance_id", "sequence_order"]
    )
    op.create_index("idx_curriculum_nodes_parent", "curriculum_nodes", ["parent_id"])
    op.create_index(
        "idx_curriculum_nodes_instance_level", "curriculum_nodes", ["instance_id", "level"]
    )

    op.create_table(
        "students",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("preferred_name", sa.String(100), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_students_tenant_id", "students", ["tenant_id"])
    op.create_index(
        "idx_students_tenant_name", "students", ["tenant_id", "last_name", "first_name"]
    )

    op.create_table(
        "student_mastery",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column(
            "student_id", sa.Uuid(), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column(
            "curriculum_node_id",
            sa.Uuid(),
            sa.ForeignKey("curriculum_nodes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="not_started"),
        sa.Column("date_achieved", sa.Date(), nullable=True),
        sa.Column("assessed_by", sa.Uuid(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(f"status IN {_STATUS_VALUES}", name="check_mastery_status"),
    )
    op.create_index("ix_student_mastery_tenant_id", "student_mastery", ["tenant_id"])
    op.create_index("idx_student_mastery_node", "student_mastery", ["curriculum_node_id"])
    op.create_index(
        "uq_student_mastery_active",
        "student_mastery",
        ["student_id", "curriculum_node_id"],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL"),
    )

    op.create_table(
        "mastery_history",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column(
            "student_mastery_id",
            sa.Uuid(),
            sa.ForeignKey("student_mastery.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "student_id", sa.Uuid(), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column(
            "curriculum_node_id",
            sa.Uuid(),
            sa.ForeignKey("curriculum_nodes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("previous_status", sa.String(20), nullable=True),
        sa.Column("new_status", sa.String(20), nullable=False),
        sa.Column("changed_by", sa.Uuid(), nullable=True),
        sa.Column(
            "changed_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False
        ),
        sa.CheckConstraint(f"new_status IN {_STATUS_VALUES}", name="check_history_new_status"),
        sa.CheckConstraint(
            f"previous_status IS NULL OR previous_status IN {_STATUS_VALUES}",
            name="check_history_previous_status",
        ),
    )
    op.create_index("ix_mastery_history_tenant_id", "mastery_history", ["tenant_id"])
    op.create_index(
        "idx_mastery_history_student_changed", "mastery_history", ["student_id", "changed_at"]
    )


def downgrade() -> None:
    op.drop_table("mastery_history")
    op.drop_table("student_mastery")
    op.drop_table("students")
    op.drop_table("curriculum_nodes")
    op.drop_table("curriculum_instances")
