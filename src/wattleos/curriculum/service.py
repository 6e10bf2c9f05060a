"""
Curriculum Service

Management of a tenant's curriculum instances and their node trees,
including forking an instance from a global template.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Literal
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from wattleos.config import settings
from wattleos.core.context import TenantContext
from wattleos.core.models import (
    CurriculumInstance,
    CurriculumLevel,
    CurriculumNode,
    CurriculumTemplate,
    CurriculumTemplateNode,
)
from wattleos.core.results import ActionResult, ErrorCode, failure, success
from wattleos.core.validation import (
    ValidationError,
    validate_curriculum_level,
    validate_instance_name,
    validate_node_title,
    validate_search_query,
)
from wattleos.curriculum.tree import TreeNode, build_tree, child_level
from wattleos.repositories import (
    CurriculumInstanceRepository,
    CurriculumNodeRepository,
    CurriculumTemplateRepository,
)

logger = logging.getLogger(__name__)

# Copy order for forks: every parent level before its children
_LEVEL_ORDER = {level.value: rank for rank, level in enumerate(CurriculumLevel)}


def _utc_now() -> datetime:
    return datetime.now(UTC)


class CurriculumService:
    """Curriculum instance and node operations."""

    def __init__(
        self,
        instances: CurriculumInstanceRepository,
        nodes: CurriculumNodeRepository,
        templates: CurriculumTemplateRepository,
        now: Callable[[], datetime] = _utc_now,
    ):
        self.instances = instances
        self.nodes = nodes
        self.templates = templates
        self._now = now

    # ========================================================================
    # INSTANCES
    # ========================================================================

    async def list_instances(self, ctx: TenantContext) -> ActionResult[list[CurriculumInstance]]:
        try:
            return success(await self.instances.list_active(ctx.tenant_id))
        except SQLAlchemyError as e:
            logger.error(f"Failed to list curriculum instances: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

    async def create_blank_instance(
        self, ctx: TenantContext, name: str, description: str | None = None
    ) -> ActionResult[CurriculumInstance]:
        """Create an empty curriculum (not forked from a template)."""
        try:
            cleaned_name = validate_instance_name(name)
        except ValidationError as e:
            return failure(str(e), ErrorCode.VALIDATION_ERROR)

        instance = CurriculumInstance(
            tenant_id=ctx.tenant_id,
            name=cleaned_name,
            description=description,
            source_template_id=None,
        )

        try:
            async with self.instances.transaction():
                await self.instances.add(instance)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create curriculum instance '{cleaned_name}': {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        logger.info(f"Created curriculum instance {instance.id} ({cleaned_name})")
        return success(instance)

    async def delete_instance(self, ctx: TenantContext, instance_id: UUID) -> ActionResult[bool]:
        try:
            instance = await self.instances.get(ctx.tenant_id, instance_id)
            if instance is None:
                return failure("Curriculum not found", ErrorCode.NOT_FOUND)

            async with self.instances.transaction():
                await self.instances.soft_delete(instance, self._now())
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete curriculum instance {instance_id}: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        return success(True)

    # ========================================================================
    # TEMPLATES
    # ========================================================================

    async def list_templates(self) -> ActionResult[list[CurriculumTemplate]]:
        """Active global templates, by name."""
        try:
            return success(await self.templates.list_active())
        except SQLAlchemyError as e:
            logger.error(f"Failed to list curriculum templates: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

    async def fork_template(
        self,
        ctx: TenantContext,
        template_id: UUID,
        name: str,
        description: str | None = None,
    ) -> ActionResult[CurriculumInstance]:
        """Create a tenant instance holding a copy of a template's tree.

        Copied nodes keep their template's level, title, description and
        order, start visible, and point back at their source through
        ``source_template_node_id``. The instance and every node are written
        in one transaction.
        """
        try:
            cleaned_name = validate_instance_name(name)
        except ValidationError as e:
            return failure(str(e), ErrorCode.VALIDATION_ERROR)

        try:
            template = await self.templates.get(template_id)
            if template is None:
                return failure("Template not found", ErrorCode.NOT_FOUND)

            template_nodes = await self.templates.list_nodes(template_id)

            instance = CurriculumInstance(
                tenant_id=ctx.tenant_id,
                name=cleaned_name,
                description=description if description is not None else template.description,
                source_template_id=template.id,
            )
            copies = _copy_template_nodes(ctx, instance.id, template_nodes)

            async with self.instances.transaction():
                await self.instances.add(instance)
                await self.nodes.add_many(copies)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fork template {template_id}: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        logger.info(
            f"Forked template {template_id} into instance {instance.id} ({len(copies)} nodes)"
        )
        return success(instance)

    # ========================================================================
    # NODES
    # ========================================================================

    async def get_curriculum_tree(
        self, ctx: TenantContext, instance_id: UUID, include_hidden: bool = False
    ) -> ActionResult[list[TreeNode]]:
        """Nested node tree for an instance."""
        try:
            nodes = await self.nodes.list_by_instance(
                ctx.tenant_id, instance_id, include_hidden=include_hidden
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load curriculum tree for {instance_id}: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        return success(build_tree(nodes, include_hidden=include_hidden))

    async def create_node(
        self,
        ctx: TenantContext,
        instance_id: UUID,
        parent_id: UUID | None,
        level: str,
        title: str,
        description: str | None = None,
    ) -> ActionResult[CurriculumNode]:
        """Add a node as the last child of ``parent_id`` (or last root)."""
        try:
            cleaned_level = validate_curriculum_level(level)
            cleaned_title = validate_node_title(title)
        except ValidationError as e:
            return failure(str(e), ErrorCode.VALIDATION_ERROR)

        try:
            instance = await self.instances.get(ctx.tenant_id, instance_id)
            if instance is None:
                return failure("Curriculum not found", ErrorCode.NOT_FOUND)

            if parent_id is not None:
                parent = await self.nodes.get(ctx.tenant_id, parent_id)
                if parent is None or parent.instance_id != instance_id:
                    return failure("Parent node not found", ErrorCode.NOT_FOUND)
                if child_level(parent.level) is None:
                    return failure(
                        f"A {parent.level} node cannot have children", ErrorCode.VALIDATION_ERROR
                    )

            siblings = await self.nodes.list_siblings(ctx.tenant_id, instance_id, parent_id)
            next_order = max((s.sequence_order for s in siblings), default=-1) + 1

            node = CurriculumNode(
                tenant_id=ctx.tenant_id,
                instance_id=instance_id,
                parent_id=parent_id,
                level=cleaned_level.value,
                title=cleaned_title,
                description=description,
                sequence_order=next_order,
                source_template_node_id=None,
                is_hidden=False,
            )

            async with self.nodes.transaction():
                await self.nodes.add(node)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create curriculum node in {instance_id}: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        return success(node)

    async def update_node(
        self,
        ctx: TenantContext,
        node_id: UUID,
        title: str | None = None,
        description: str | None = None,
    ) -> ActionResult[CurriculumNode]:
        """Rename a node and/or change its description."""
        changes: dict[str, str | None] = {}
        try:
            if title is not None:
                changes["title"] = validate_node_title(title)
        except ValidationError as e:
            return failure(str(e), ErrorCode.VALIDATION_ERROR)
        if description is not None:
            changes["description"] = description or None

        try:
            node = await self.nodes.get(ctx.tenant_id, node_id)
            if node is None:
                return failure("Node not found", ErrorCode.NOT_FOUND)

            if changes:
                async with self.nodes.transaction():
                    node = await self.nodes.update(node, **changes)
        except SQLAlchemyError as e:
            logger.error(f"Failed to update curriculum node {node_id}: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        return success(node)

    async def toggle_node_visibility(
        self, ctx: TenantContext, node_id: UUID
    ) -> ActionResult[CurriculumNode]:
        """Hide a visible node or show a hidden one."""
        try:
            node = await self.nodes.get(ctx.tenant_id, node_id)
            if node is None:
                return failure("Node not found", ErrorCode.NOT_FOUND)

            async with self.nodes.transaction():
                node = await self.nodes.update(node, is_hidden=not node.is_hidden)
        except SQLAlchemyError as e:
            logger.error(f"Failed to toggle visibility of node {node_id}: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        return success(node)

    async def reorder_node(
        self, ctx: TenantContext, node_id: UUID, direction: Literal["up", "down"]
    ) -> ActionResult[bool]:
        """Swap a node's position with its previous or next sibling.

        Moving the first node up or the last node down is a no-op.
        """
        if direction not in ("up", "down"):
            return failure("Direction must be 'up' or 'down'", ErrorCode.VALIDATION_ERROR)

        try:
            node = await self.nodes.get(ctx.tenant_id, node_id)
            if node is None:
                return failure("Node not found", ErrorCode.NOT_FOUND)

            siblings = await self.nodes.list_siblings(ctx.tenant_id, node.instance_id, node.parent_id)
            if len(siblings) < 2:
                return success(True)

            index = next(i for i, s in enumerate(siblings) if s.id == node.id)
            swap_index = index - 1 if direction == "up" else index + 1
            if swap_index < 0 or swap_index >= len(siblings):
                return success(True)

            current, other = siblings[index], siblings[swap_index]
            current_order, other_order = current.sequence_order, other.sequence_order
            if current_order == other_order:
                # Equal orders would make the swap invisible
                other_order = current_order + (1 if direction == "down" else -1)

            async with self.nodes.transaction():
                await self.nodes.update(current, sequence_order=other_order)
                await self.nodes.update(other, sequence_order=current_order)
        except SQLAlchemyError as e:
            logger.error(f"Failed to reorder node {node_id}: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        return success(True)

    async def delete_node(self, ctx: TenantContext, node_id: UUID) -> ActionResult[bool]:
        """Soft-delete a node together with all of its descendants."""
        try:
            node = await self.nodes.get(ctx.tenant_id, node_id)
            if node is None:
                return failure("Node not found", ErrorCode.NOT_FOUND)

            when = self._now()
            doomed: list[UUID] = [node.id]
            seen = {node.id}
            frontier: list[UUID] = [node.id]
            while frontier:
                children = await self.nodes.list_children(ctx.tenant_id, frontier)
                frontier = [c.id for c in children if c.id not in seen]
                seen.update(frontier)
                doomed.extend(frontier)

            async with self.nodes.transaction():
                await self.nodes.soft_delete(ctx.tenant_id, doomed, when)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete node {node_id}: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        logger.info(f"Soft-deleted node {node_id} and {len(doomed) - 1} descendant(s)")
        return success(True)

    async def search_nodes(
        self, ctx: TenantContext, instance_id: UUID, query: str
    ) -> ActionResult[list[CurriculumNode]]:
        """Case-insensitive title search within one instance."""
        try:
            cleaned = validate_search_query(query)
        except ValidationError as e:
            return failure(str(e), ErrorCode.VALIDATION_ERROR)

        try:
            nodes = await self.nodes.search(
                ctx.tenant_id, instance_id, cleaned, settings.CURRICULUM_SEARCH_LIMIT
            )
        except SQLAlchemyError as e:
            logger.error(f"Curriculum search failed in {instance_id}: {e}")
            return failure(str(e), ErrorCode.INTERNAL_ERROR)

        return success(nodes)


def _copy_template_nodes(
    ctx: TenantContext, instance_id: UUID, template_nodes: list[CurriculumTemplateNode]
) -> list[CurriculumNode]:
    """Copy template nodes into an instance, parents first.

    Parent IDs are remapped from template node IDs to the new node IDs. A
    node whose parent is not copied ahead of it becomes a root.
    """
    ordered = sorted(
        template_nodes,
        key=lambda n: (_LEVEL_ORDER.get(n.level, len(_LEVEL_ORDER)), n.sequence_order),
    )

    id_map: dict[UUID, UUID] = {}
    copies: list[CurriculumNode] = []
    for source in ordered:
        parent_id = id_map.get(source.parent_id) if source.parent_id is not None else None
        if source.parent_id is not None and parent_id is None:
            logger.warning(
                f"Template node {source.id} copied as a root: "
                f"parent {source.parent_id} not copied before it"
            )

        copy = CurriculumNode(
            tenant_id=ctx.tenant_id,
            instance_id=instance_id,
            parent_id=parent_id,
            source_template_node_id=source.id,
            level=source.level,
            title=source.title,
            description=source.description,
            sequence_order=source.sequence_order,
            is_hidden=False,
        )
        id_map[source.id] = copy.id
        copies.append(copy)

    return copies
