"""
Repository Interfaces

Narrow per-entity data access used by the services. Every read of
tenant-owned data is scoped to a tenant and skips soft-deleted rows. Writes only stage changes; they become
durable when the enclosing ``transaction()`` block exits cleanly.
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager
from datetime import date, datetime
from typing import Any, Protocol
from uuid import UUID

from wattleos.core.models import (
    CurriculumInstance,
    CurriculumNode,
    CurriculumTemplate,
    CurriculumTemplateNode,
    MasteryHistory,
    Student,
    StudentMastery,
)


class Transactional(Protocol):
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Commit staged writes on clean exit, roll back on exception."""
        ...


class CurriculumTemplateRepository(Protocol):
    """Global templates; not tenant scoped."""

    async def list_active(self) -> list[CurriculumTemplate]: ...

    async def get(self, template_id: UUID) -> CurriculumTemplate | None: ...

    async def list_nodes(self, template_id: UUID) -> list[CurriculumTemplateNode]:
        """Template nodes ordered by ``sequence_order``."""
        ...


class CurriculumInstanceRepository(Transactional, Protocol):
    async def list_active(self, tenant_id: UUID) -> list[CurriculumInstance]: ...

    async def get(self, tenant_id: UUID, instance_id: UUID) -> CurriculumInstance | None: ...

    async def add(self, instance: CurriculumInstance) -> CurriculumInstance: ...

    async def soft_delete(self, instance: CurriculumInstance, when: datetime) -> None: ...


class CurriculumNodeRepository(Transactional, Protocol):
    async def get(self, tenant_id: UUID, node_id: UUID) -> CurriculumNode | None: ...

    async def list_by_instance(
        self,
        tenant_id: UUID,
        instance_id: UUID,
        *,
        level: str | None = None,
        include_hidden: bool = True,
    ) -> list[CurriculumNode]:
        """Nodes of an instance ordered by ``sequence_order``."""
        ...

    async def list_by_ids(self, tenant_id: UUID, node_ids: Sequence[UUID]) -> list[CurriculumNode]: ...

    async def list_siblings(
        self, tenant_id: UUID, instance_id: UUID, parent_id: UUID | None
    ) -> list[CurriculumNode]:
        """Children of ``parent_id`` (roots when None) ordered by ``sequence_order``."""
        ...

    async def list_children(self, tenant_id: UUID, parent_ids: Sequence[UUID]) -> list[CurriculumNode]: ...

    async def search(
        self, tenant_id: UUID, instance_id: UUID, query: str, limit: int
    ) -> list[CurriculumNode]:
        """Case-insensitive substring match on title."""
        ...

    async def add(self, node: CurriculumNode) -> CurriculumNode: ...

    async def add_many(self, nodes: Sequence[CurriculumNode]) -> None:
        """Stage nodes in the given order; parents must precede their children."""
        ...

    async def update(self, node: CurriculumNode, **changes: Any) -> CurriculumNode: ...

    async def soft_delete(self, tenant_id: UUID, node_ids: Sequence[UUID], when: datetime) -> None: ...


class StudentRepository(Protocol):
    async def get(self, tenant_id: UUID, student_id: UUID) -> Student | None: ...

    async def list_by_ids(self, tenant_id: UUID, student_ids: Sequence[UUID]) -> list[Student]: ...


class MasteryRepository(Transactional, Protocol):
    async def get_active(
        self, tenant_id: UUID, student_id: UUID, curriculum_node_id: UUID
    ) -> StudentMastery | None: ...

    async def list_for_student(
        self, tenant_id: UUID, student_id: UUID, node_ids: Sequence[UUID]
    ) -> list[StudentMastery]: ...

    async def list_for_students(
        self, tenant_id: UUID, student_ids: Sequence[UUID], node_ids: Sequence[UUID]
    ) -> list[StudentMastery]: ...

    async def insert(self, record: StudentMastery) -> StudentMastery: ...

    async def update(
        self,
        record: StudentMastery,
        *,
        status: str,
        date_achieved: date,
        assessed_by: UUID,
        notes: str | None,
    ) -> StudentMastery: ...

    async def append_history(self, entry: MasteryHistory) -> MasteryHistory: ...

    async def list_history(self, tenant_id: UUID, student_id: UUID, limit: int) -> list[MasteryHistory]:
        """Newest first."""
        ...
