"""
Shared API Dependencies

Request-scoped tenant context, service construction, and translation of
ActionResult failures into HTTP errors.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from typing import TypeVar
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from wattleos.core.context import TenantContext
from wattleos.core.database import get_db
from wattleos.core.results import ActionResult, ErrorCode
from wattleos.curriculum.service import CurriculumService
from wattleos.mastery.service import MasteryService
from wattleos.repositories import (
    SqlCurriculumInstanceRepository,
    SqlCurriculumNodeRepository,
    SqlCurriculumTemplateRepository,
    SqlMasteryRepository,
    SqlStudentRepository,
)

T = TypeVar("T")

_STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def get_tenant_context(
    x_tenant_id: UUID = Header(..., description="Tenant (school) the request acts on"),
    x_user_id: UUID = Header(..., description="Acting staff user"),
) -> TenantContext:
    """Tenant and acting user, supplied by the auth gateway."""
    return TenantContext(tenant_id=x_tenant_id, acting_user_id=x_user_id)


async def get_curriculum_service(db: AsyncSession = Depends(get_db)) -> CurriculumService:
    return CurriculumService(
        instances=SqlCurriculumInstanceRepository(db),
        nodes=SqlCurriculumNodeRepository(db),
        templates=SqlCurriculumTemplateRepository(db),
    )


async def get_mastery_service(db: AsyncSession = Depends(get_db)) -> MasteryService:
    return MasteryService(
        nodes=SqlCurriculumNodeRepository(db),
        students=SqlStudentRepository(db),
        mastery=SqlMasteryRepository(db),
    )


def unwrap_or_raise(result: ActionResult[T]) -> T:
    """Return the result's data or raise the matching HTTPException."""
    if result.error is not None:
        raise HTTPException(
            status_code=_STATUS_BY_CODE.get(result.error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
            detail=result.error.message,
        )
    return result.data  # type: ignore[return-value]
