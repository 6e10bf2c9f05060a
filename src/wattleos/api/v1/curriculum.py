"""
Curriculum API Endpoints

Curriculum instances and the node trees inside them.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from wattleos.api.dependencies import get_curriculum_service, get_tenant_context, unwrap_or_raise
from wattleos.core.context import TenantContext
from wattleos.core.models import CurriculumInstance, CurriculumNode, CurriculumTemplate
from wattleos.core.schemas import (
    CurriculumInstanceCreate,
    CurriculumInstanceSchema,
    CurriculumNodeCreate,
    CurriculumNodeSchema,
    CurriculumNodeUpdate,
    CurriculumTemplateFork,
    CurriculumTemplateSchema,
    CurriculumTreeNodeSchema,
    NodeReorder,
)
from wattleos.curriculum.service import CurriculumService

router = APIRouter()


@router.get("/instances", response_model=list[CurriculumInstanceSchema])
async def list_instances(
    ctx: TenantContext = Depends(get_tenant_context),
    service: CurriculumService = Depends(get_curriculum_service),
) -> list[CurriculumInstance]:
    """List the tenant's active curriculum instances."""
    return unwrap_or_raise(await service.list_instances(ctx))


@router.post(
    "/instances", response_model=CurriculumInstanceSchema, status_code=status.HTTP_201_CREATED
)
async def create_instance(
    payload: CurriculumInstanceCreate,
    ctx: TenantContext = Depends(get_tenant_context),
    service: CurriculumService = Depends(get_curriculum_service),
) -> CurriculumInstance:
    """Create a blank curriculum instance."""
    return unwrap_or_raise(
        await service.create_blank_instance(ctx, payload.name, payload.description)
    )


@router.get("/templates", response_model=list[CurriculumTemplateSchema])
async def list_templates(
    service: CurriculumService = Depends(get_curriculum_service),
) -> list[CurriculumTemplate]:
    """List active global curriculum templates."""
    return unwrap_or_raise(await service.list_templates())


@router.post(
    "/templates/{template_id}/fork",
    response_model=CurriculumInstanceSchema,
    status_code=status.HTTP_201_CREATED,
)
async def fork_template(
    template_id: UUID,
    payload: CurriculumTemplateFork,
    ctx: TenantContext = Depends(get_tenant_context),
    service: CurriculumService = Depends(get_curriculum_service),
) -> CurriculumInstance:
    """Create an instance holding a copy of a template's tree."""
    return unwrap_or_raise(
        await service.fork_template(ctx, template_id, payload.name, payload.description)
    )


@router.delete("/instances/{instance_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_instance(
    instance_id: UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    service: CurriculumService = Depends(get_curriculum_service),
) -> None:
    """Soft-delete a curriculum instance."""
    unwrap_or_raise(await service.delete_instance(ctx, instance_id))


@router.get("/instances/{instance_id}/tree", response_model=list[CurriculumTreeNodeSchema])
async def get_tree(
    instance_id: UUID,
    include_hidden: bool = Query(False, description="Include hidden nodes (editor view)"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: CurriculumService = Depends(get_curriculum_service),
) -> list[CurriculumTreeNodeSchema]:
    """Nested node tree for a curriculum instance."""
    roots = unwrap_or_raise(await service.get_curriculum_tree(ctx, instance_id, include_hidden))
    return [CurriculumTreeNodeSchema.from_tree(root) for root in roots]


@router.get("/instances/{instance_id}/search", response_model=list[CurriculumNodeSchema])
async def search_nodes(
    instance_id: UUID,
    q: str = Query(..., min_length=1, max_length=100, description="Title search text"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: CurriculumService = Depends(get_curriculum_service),
) -> list[CurriculumNode]:
    """Search nodes by title."""
    return unwrap_or_raise(await service.search_nodes(ctx, instance_id, q))


@router.post(
    "/instances/{instance_id}/nodes",
    response_model=CurriculumNodeSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_node(
    instance_id: UUID,
    payload: CurriculumNodeCreate,
    ctx: TenantContext = Depends(get_tenant_context),
    service: CurriculumService = Depends(get_curriculum_service),
) -> CurriculumNode:
    """Add a node as the last child of its parent."""
    return unwrap_or_raise(
        await service.create_node(
            ctx,
            instance_id,
            payload.parent_id,
            payload.level.value,
            payload.title,
            payload.description,
        )
    )


@router.patch("/nodes/{node_id}", response_model=CurriculumNodeSchema)
async def update_node(
    node_id: UUID,
    payload: CurriculumNodeUpdate,
    ctx: TenantContext = Depends(get_tenant_context),
    service: CurriculumService = Depends(get_curriculum_service),
) -> CurriculumNode:
    """Update a node's title or description.

    Only updates fields that are explicitly provided.
    """
    return unwrap_or_raise(
        await service.update_node(ctx, node_id, payload.title, payload.description)
    )


@router.post("/nodes/{node_id}/toggle-visibility", response_model=CurriculumNodeSchema)
async def toggle_visibility(
    node_id: UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    service: CurriculumService = Depends(get_curriculum_service),
) -> CurriculumNode:
    """Hide or show a node."""
    return unwrap_or_raise(await service.toggle_node_visibility(ctx, node_id))


@router.post("/nodes/{node_id}/reorder", status_code=status.HTTP_204_NO_CONTENT)
async def reorder_node(
    node_id: UUID,
    payload: NodeReorder,
    ctx: TenantContext = Depends(get_tenant_context),
    service: CurriculumService = Depends(get_curriculum_service),
) -> None:
    """Move a node up or down among its siblings."""
    unwrap_or_raise(await service.reorder_node(ctx, node_id, payload.direction))


@router.delete("/nodes/{node_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_node(
    node_id: UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    service: CurriculumService = Depends(get_curriculum_service),
) -> None:
    """Soft-delete a node and its descendants."""
    unwrap_or_raise(await service.delete_node(ctx, node_id))
