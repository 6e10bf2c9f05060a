"""
Mastery API Endpoints

Student mastery grid, status updates, history and the class heatmap.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from wattleos.api.dependencies import get_mastery_service, get_tenant_context, unwrap_or_raise
from wattleos.core.context import TenantContext
from wattleos.core.models import StudentMastery
from wattleos.core.schemas import (
    ClassHeatmapSchema,
    MasteryBulkResponse,
    MasteryBulkUpdate,
    MasteryEntrySchema,
    MasteryHistorySchema,
    MasteryStatusCycle,
    MasteryStatusUpdate,
    MasterySummarySchema,
    StudentMasterySchema,
)
from wattleos.core.schemas.mastery import MasteryBulkFailure
from wattleos.mastery.heatmap import ClassHeatmap
from wattleos.mastery.service import MasteryService, StatusChange

router = APIRouter()


@router.get(
    "/students/{student_id}/instances/{instance_id}", response_model=list[MasteryEntrySchema]
)
async def get_student_mastery(
    student_id: UUID,
    instance_id: UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    service: MasteryService = Depends(get_mastery_service),
) -> list[MasteryEntrySchema]:
    """Status of every visible outcome for a student (not-started included)."""
    entries = unwrap_or_raise(await service.get_student_mastery(ctx, student_id, instance_id))
    return [MasteryEntrySchema.from_entry(e) for e in entries]


@router.get(
    "/students/{student_id}/instances/{instance_id}/summary",
    response_model=MasterySummarySchema,
)
async def get_student_mastery_summary(
    student_id: UUID,
    instance_id: UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    service: MasteryService = Depends(get_mastery_service),
) -> MasterySummarySchema:
    """Status counts and weighted progress for a student."""
    summary = unwrap_or_raise(
        await service.get_student_mastery_summary(ctx, student_id, instance_id)
    )
    return MasterySummarySchema.from_summary(summary)


@router.get("/students/{student_id}/history", response_model=list[MasteryHistorySchema])
async def get_student_mastery_history(
    student_id: UUID,
    limit: int | None = Query(None, ge=1, le=500, description="Max transitions to return"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MasteryService = Depends(get_mastery_service),
) -> list[MasteryHistorySchema]:
    """Status transitions for a student, newest first."""
    items = unwrap_or_raise(await service.get_student_mastery_history(ctx, student_id, limit))
    return [MasteryHistorySchema.from_item(item) for item in items]


@router.put("/status", response_model=StudentMasterySchema)
async def update_mastery_status(
    payload: MasteryStatusUpdate,
    ctx: TenantContext = Depends(get_tenant_context),
    service: MasteryService = Depends(get_mastery_service),
) -> StudentMastery:
    """Set one student's status on one curriculum node."""
    return unwrap_or_raise(
        await service.update_mastery_status(
            ctx,
            payload.student_id,
            payload.curriculum_node_id,
            payload.new_status,
            payload.notes,
        )
    )


@router.post("/status/cycle", response_model=StudentMasterySchema)
async def cycle_mastery_status(
    payload: MasteryStatusCycle,
    ctx: TenantContext = Depends(get_tenant_context),
    service: MasteryService = Depends(get_mastery_service),
) -> StudentMastery:
    """Advance a grid cell to the next status in the progression."""
    return unwrap_or_raise(
        await service.cycle_mastery_status(ctx, payload.student_id, payload.curriculum_node_id)
    )


@router.put("/status/bulk", response_model=MasteryBulkResponse)
async def bulk_update_mastery_status(
    payload: MasteryBulkUpdate,
    ctx: TenantContext = Depends(get_tenant_context),
    service: MasteryService = Depends(get_mastery_service),
) -> MasteryBulkResponse:
    """Apply several status changes; failures do not stop the rest."""
    changes = [
        StatusChange(
            curriculum_node_id=item.curriculum_node_id,
            new_status=item.new_status,
            notes=item.notes,
        )
        for item in payload.updates
    ]
    outcome = unwrap_or_raise(
        await service.bulk_update_mastery_status(ctx, payload.student_id, changes)
    )
    return MasteryBulkResponse(
        updated=outcome.updated,
        failed=[
            MasteryBulkFailure(
                curriculum_node_id=node_id, message=err.message, code=err.code.value
            )
            for node_id, err in outcome.failures
        ],
    )


@router.get("/instances/{instance_id}/heatmap", response_model=ClassHeatmapSchema)
async def get_class_heatmap(
    instance_id: UUID,
    student_ids: list[UUID] = Query(..., description="Class roster"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MasteryService = Depends(get_mastery_service),
) -> ClassHeatmap:
    """Student × outcome status grid, plus roster IDs that matched no student."""
    return unwrap_or_raise(await service.get_class_mastery_heatmap(ctx, instance_id, student_ids))
