"""
Curriculum Pydantic Schemas

Request and response models for curriculum API endpoints.
"""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from wattleos.core.models.curriculum import CurriculumLevel
from wattleos.curriculum.tree import TreeNode


class CurriculumTemplateSchema(BaseModel):
    """Global curriculum template response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    framework: str
    age_range: str | None = None
    description: str | None = None
    version: int


class CurriculumTemplateFork(BaseModel):
    """Fork a template into a new instance; description defaults to the template's."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None


class CurriculumInstanceSchema(BaseModel):
    """Curriculum instance response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    source_template_id: UUID | None = None
    name: str
    description: str | None = None
    is_active: bool = True


class CurriculumInstanceCreate(BaseModel):
    """Create a blank curriculum instance."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None


class CurriculumNodeSchema(BaseModel):
    """Curriculum node response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    instance_id: UUID
    parent_id: UUID | None = None
    level: CurriculumLevel
    title: str
    description: str | None = None
    sequence_order: int
    is_hidden: bool = False


class CurriculumTreeNodeSchema(CurriculumNodeSchema):
    """Curriculum node with nested children."""

    children: list[CurriculumTreeNodeSchema] = []

    @classmethod
    def from_tree(cls, tree_node: TreeNode) -> CurriculumTreeNodeSchema:
        base = CurriculumNodeSchema.model_validate(tree_node.node)
        return cls(
            **base.model_dump(),
            children=[cls.from_tree(child) for child in tree_node.children],
        )


class CurriculumNodeCreate(BaseModel):
    """Add a node to an instance."""

    parent_id: UUID | None = None
    level: CurriculumLevel
    title: str = Field(..., min_length=1, max_length=300)
    description: str | None = None


class CurriculumNodeUpdate(BaseModel):
    """Rename a node; only provided fields change."""

    title: str | None = Field(None, min_length=1, max_length=300)
    description: str | None = None


class NodeReorder(BaseModel):
    direction: Literal["up", "down"]


CurriculumTreeNodeSchema.model_rebuild()
