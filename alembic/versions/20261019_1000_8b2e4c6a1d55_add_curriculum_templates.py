"""Add global curriculum templates and fork links

Revision ID: 8b2e4c6a1d55
Revises: 3f1c2a7d9b10
Create Date: 2026-10-19 10:00:00.000000+00:00

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8b2e4c6a1d55"  # pragma: allowlist secret
down_revision: str | None = "3f1c2a7d9b10"  # pragma: allowlist secret
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "curriculum_templates",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("framework", sa.String(50), nullable=False),
        sa.Column("age_range", sa.String(20), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
    )
    op.create_index(
        "idx_curriculum_templates_active_name", "curriculum_templates", ["is_active", "name"]
    )

    op.create_table(
        "curriculum_template_nodes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "template_id",
            sa.Uuid(),
            sa.ForeignKey("curriculum_templates.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "parent_id",
            sa.Uuid(),
            sa.ForeignKey("curriculum_template_nodes.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("level", sa.String(10), nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("sequence_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.CheckConstraint(
            "level IN ('area', 'strand', 'outcome', 'activity')", name="check_template_node_level"
        ),
    )
    op.create_index(
        "idx_curriculum_template_nodes_template",
        "curriculum_template_nodes",
        ["template_id", "sequence_order"],
    )

    op.create_foreign_key(
        "fk_curriculum_instances_source_template",
        "curriculum_instances",
        "curriculum_templates",
        ["source_template_id"],
        ["id"],
        ondelete="SET NULL",
    )
    op.create_foreign_key(
        "fk_curriculum_nodes_source_template_node",
        "curriculum_nodes",
        "curriculum_template_nodes",
        ["source_template_node_id"],
        ["id"],
        ondelete="SET NULL",
    )


def downgrade() -> None:
    op.drop_constraint(
        "fk_curriculum_nodes_source_template_node", "curriculum_nodes", type_="foreignkey"
    )
    op.drop_constraint(
        "fk_curriculum_instances_source_template", "curriculum_instances", type_="foreignkey"
    )
    op.drop_table("curriculum_template_nodes")
    op.drop_table("curriculum_templates")
