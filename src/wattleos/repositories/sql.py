"""
SQLAlchemy Repositories

Async implementations of the repository interfaces. All repositories built
for one request share that request's AsyncSession, so a ``transaction()``
block on any of them commits every write staged through the session.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from wattleos.core.models import (
    CurriculumInstance,
    CurriculumNode,
    CurriculumTemplate,
    CurriculumTemplateNode,
    MasteryHistory,
    Student,
    StudentMastery,
)

logger = logging.getLogger(__name__)


def escape_like(text: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so ``text`` matches literally."""
    return (
        text.replace(escape, escape * 2).replace("%", f"{escape}%").replace("_", f"{escape}_")
    )


class SqlRepository:
    """Shared session handling."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        try:
            yield
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            logger.debug("Transaction rolled back", exc_info=True)
            raise


class SqlCurriculumTemplateRepository(SqlRepository):
    async def list_active(self) -> list[CurriculumTemplate]:
        result = await self.session.execute(
            select(CurriculumTemplate)
            .where(CurriculumTemplate.is_active.is_(True))
            .order_by(CurriculumTemplate.name)
        )
        return list(result.scalars().all())

    async def get(self, template_id: UUID) -> CurriculumTemplate | None:
        return await self.session.get(CurriculumTemplate, template_id)

    async def list_nodes(self, template_id: UUID) -> list[CurriculumTemplateNode]:
        result = await self.session.execute(
            select(CurriculumTemplateNode)
            .where(CurriculumTemplateNode.template_id == template_id)
            .order_by(CurriculumTemplateNode.sequence_order)
        )
        return list(result.scalars().all())


class SqlCurriculumInstanceRepository(SqlRepository):
    async def list_active(self, tenant_id: UUID) -> list[CurriculumInstance]:
        result = await self.session.execute(
            select(CurriculumInstance)
            .where(
                CurriculumInstance.tenant_id == tenant_id,
                CurriculumInstance.deleted_at.is_(None),
                CurriculumInstance.is_active.is_(True),
            )
            .order_by(CurriculumInstance.name)
        )
        return list(result.scalars().all())

    async def get(self, tenant_id: UUID, instance_id: UUID) -> CurriculumInstance | None:
        result = await self.session.execute(
            select(CurriculumInstance).where(
                CurriculumInstance.id == instance_id,
                CurriculumInstance.tenant_id == tenant_id,
                CurriculumInstance.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def add(self, instance: CurriculumInstance) -> CurriculumInstance:
        self.session.add(instance)
        await self.session.flush()
        return instance

    async def soft_delete(self, instance: CurriculumInstance, when: datetime) -> None:
        instance.soft_delete(when)
        await self.session.flush()


class SqlCurriculumNodeRepository(SqlRepository):
    async def get(self, tenant_id: UUID, node_id: UUID) -> CurriculumNode | None:
        result = await self.session.execute(
            select(CurriculumNode).where(
                CurriculumNode.id == node_id,
                CurriculumNode.tenant_id == tenant_id,
                CurriculumNode.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def list_by_instance(
        self,
        tenant_id: UUID,
        instance_id: UUID,
        *,
        level: str | None = None,
        include_hidden: bool = True,
    ) -> list[CurriculumNode]:
        query = select(CurriculumNode).where(
            CurriculumNode.instance_id == instance_id,
            CurriculumNode.tenant_id == tenant_id,
            CurriculumNode.deleted_at.is_(None),
        )

        if level is not None:
            query = query.where(CurriculumNode.level == level)

        if not include_hidden:
            query = query.where(CurriculumNode.is_hidden.is_(False))

        query = query.order_by(CurriculumNode.sequence_order)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_by_ids(self, tenant_id: UUID, node_ids: Sequence[UUID]) -> list[CurriculumNode]:
        if not node_ids:
            return []
        result = await self.session.execute(
            select(CurriculumNode).where(
                CurriculumNode.id.in_(node_ids),
                CurriculumNode.tenant_id == tenant_id,
            )
        )
        return list(result.scalars().all())

    async def list_siblings(
        self, tenant_id: UUID, instance_id: UUID, parent_id: UUID | None
    ) -> list[CurriculumNode]:
        query = select(CurriculumNode).where(
            CurriculumNode.instance_id == instance_id,
            CurriculumNode.tenant_id == tenant_id,
            CurriculumNode.deleted_at.is_(None),
        )

        if parent_id is None:
            query = query.where(CurriculumNode.parent_id.is_(None))
        else:
            query = query.where(CurriculumNode.parent_id == parent_id)

        result = await self.session.execute(query.order_by(CurriculumNode.sequence_order))
        return list(result.scalars().all())

    async def list_children(self, tenant_id: UUID, parent_ids: Sequence[UUID]) -> list[CurriculumNode]:
        if not parent_ids:
            return []
        result = await self.session.execute(
            select(CurriculumNode).where(
                CurriculumNode.parent_id.in_(parent_ids),
                CurriculumNode.tenant_id == tenant_id,
                CurriculumNode.deleted_at.is_(None),
            )
        )
        return list(result.scalars().all())

    async def search(
        self, tenant_id: UUID, instance_id: UUID, query: str, limit: int
    ) -> list[CurriculumNode]:
        result = await self.session.execute(
            select(CurriculumNode)
            .where(
                CurriculumNode.instance_id == instance_id,
                CurriculumNode.tenant_id == tenant_id,
                CurriculumNode.deleted_at.is_(None),
                CurriculumNode.title.ilike(f"%{escape_like(query)}%", escape="\\"),
            )
            .order_by(CurriculumNode.sequence_order)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def add(self, node: CurriculumNode) -> CurriculumNode:
        self.session.add(node)
        await self.session.flush()
        return node

    async def add_many(self, nodes: Sequence[CurriculumNode]) -> None:
        self.session.add_all(nodes)
        await self.session.flush()

    async def update(self, node: CurriculumNode, **changes: Any) -> CurriculumNode:
        for field, value in changes.items():
            setattr(node, field, value)
        await self.session.flush()
        return node

    async def soft_delete(self, tenant_id: UUID, node_ids: Sequence[UUID], when: datetime) -> None:
        if not node_ids:
            return
        await self.session.execute(
            update(CurriculumNode)
            .where(CurriculumNode.id.in_(node_ids), CurriculumNode.tenant_id == tenant_id)
            .values(deleted_at=when)
            .execution_options(synchronize_session="fetch")
        )


class SqlStudentRepository(SqlRepository):
    async def get(self, tenant_id: UUID, student_id: UUID) -> Student | None:
        result = await self.session.execute(
            select(Student).where(
                Student.id == student_id,
                Student.tenant_id == tenant_id,
                Student.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def list_by_ids(self, tenant_id: UUID, student_ids: Sequence[UUID]) -> list[Student]:
        if not student_ids:
            return []
        result = await self.session.execute(
            select(Student)
            .where(
                Student.id.in_(student_ids),
                Student.tenant_id == tenant_id,
                Student.deleted_at.is_(None),
            )
            .order_by(Student.last_name, Student.first_name)
        )
        return list(result.scalars().all())


class SqlMasteryRepository(SqlRepository):
    async def get_active(
        self, tenant_id: UUID, student_id: UUID, curriculum_node_id: UUID
    ) -> StudentMastery | None:
        result = await self.session.execute(
            select(StudentMastery).where(
                StudentMastery.tenant_id == tenant_id,
                StudentMastery.student_id == student_id,
                StudentMastery.curriculum_node_id == curriculum_node_id,
                StudentMastery.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def list_for_student(
        self, tenant_id: UUID, student_id: UUID, node_ids: Sequence[UUID]
    ) -> list[StudentMastery]:
        return await self.list_for_students(tenant_id, [student_id], node_ids)

    async def list_for_students(
        self, tenant_id: UUID, student_ids: Sequence[UUID], node_ids: Sequence[UUID]
    ) -> list[StudentMastery]:
        if not student_ids or not node_ids:
            return []
        result = await self.session.execute(
            select(StudentMastery).where(
                StudentMastery.tenant_id == tenant_id,
                StudentMastery.student_id.in_(student_ids),
                StudentMastery.curriculum_node_id.in_(node_ids),
                StudentMastery.deleted_at.is_(None),
            )
        )
        return list(result.scalars().all())

    async def insert(self, record: StudentMastery) -> StudentMastery:
        self.session.add(record)
        await self.session.flush()
        return record

    async def update(
        self,
        record: StudentMastery,
        *,
        status: str,
        date_achieved: date,
        assessed_by: UUID,
        notes: str | None,
    ) -> StudentMastery:
        record.status = status
        record.date_achieved = date_achieved
        record.assessed_by = assessed_by
        record.notes = notes
        await self.session.flush()
        return record

    async def append_history(self, entry: MasteryHistory) -> MasteryHistory:
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def list_history(self, tenant_id: UUID, student_id: UUID, limit: int) -> list[MasteryHistory]:
        result = await self.session.execute(
            select(MasteryHistory)
            .where(MasteryHistory.tenant_id == tenant_id, MasteryHistory.student_id == student_id)
            .order_by(MasteryHistory.changed_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
