"""
Pytest Configuration and Fixtures

Shared test fixtures for unit, service, API and integration tests.
"""

import os
from uuid import UUID, uuid4

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import configure_mappers

from tests.fakes import (
    FakeCurriculumInstanceRepository,
    FakeCurriculumNodeRepository,
    FakeCurriculumTemplateRepository,
    FakeMasteryRepository,
    FakeStore,
    FakeStudentRepository,
)
from wattleos.core.context import TenantContext
from wattleos.core.models import (
    Base,
    CurriculumInstance,
    CurriculumLevel,
    CurriculumNode,
    CurriculumTemplate,
    CurriculumTemplateNode,
    Student,
)
from wattleos.curriculum.service import CurriculumService
from wattleos.mastery.service import MasteryService

# Ensure all mappers are configured
configure_mappers()

TEST_DATABASE_URL = os.getenv("WATTLEOS_TEST_DATABASE_URL")


# ============================================================================
# Tenant context
# ============================================================================


@pytest.fixture
def tenant_id() -> UUID:
    return uuid4()


@pytest.fixture
def ctx(tenant_id: UUID) -> TenantContext:
    return TenantContext(tenant_id=tenant_id, acting_user_id=uuid4())


# ============================================================================
# In-memory repositories and services
# ============================================================================


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def curriculum_service(store: FakeStore) -> CurriculumService:
    return CurriculumService(
        instances=FakeCurriculumInstanceRepository(store),
        nodes=FakeCurriculumNodeRepository(store),
        templates=FakeCurriculumTemplateRepository(store),
    )


@pytest.fixture
def mastery_service(store: FakeStore) -> MasteryService:
    return MasteryService(
        nodes=FakeCurriculumNodeRepository(store),
        students=FakeStudentRepository(store),
        mastery=FakeMasteryRepository(store),
    )


@pytest.fixture
def instance(store: FakeStore, tenant_id: UUID) -> CurriculumInstance:
    inst = CurriculumInstance(tenant_id=tenant_id, name="Montessori 3-6")
    store.instances[inst.id] = inst
    return inst


@pytest.fixture
def add_node(store: FakeStore, tenant_id: UUID, instance: CurriculumInstance):
    """Factory that stores a node in the instance and returns it."""

    def _add(
        title: str,
        level: CurriculumLevel = CurriculumLevel.OUTCOME,
        parent: CurriculumNode | None = None,
        sequence_order: int = 0,
        is_hidden: bool = False,
    ) -> CurriculumNode:
        node = CurriculumNode(
            tenant_id=tenant_id,
            instance_id=instance.id,
            parent_id=parent.id if parent else None,
            level=level.value,
            title=title,
            sequence_order=sequence_order,
            is_hidden=is_hidden,
        )
        store.nodes[node.id] = node
        return node

    return _add


@pytest.fixture
def add_student(store: FakeStore, tenant_id: UUID):
    """Factory that stores a student and returns it."""

    def _add(first_name: str, last_name: str) -> Student:
        student = Student(tenant_id=tenant_id, first_name=first_name, last_name=last_name)
        store.students[student.id] = student
        return student

    return _add


@pytest.fixture
def add_template(store: FakeStore):
    """Factory that stores a template built from (key, parent_key, level, title) rows.

    Returns the template and a dict of its nodes by key.
    """

    def _add(
        name: str,
        rows: list[tuple[str, str | None, CurriculumLevel, str]],
        is_active: bool = True,
    ) -> tuple[CurriculumTemplate, dict[str, CurriculumTemplateNode]]:
        template = CurriculumTemplate(
            name=name,
            framework="montessori",
            age_range="3-6",
            description=f"{name} scope and sequence",
            is_active=is_active,
        )
        store.templates[template.id] = template
        by_key: dict[str, CurriculumTemplateNode] = {}
        for order, (key, parent_key, level, title) in enumerate(rows):
            node = CurriculumTemplateNode(
                template_id=template.id,
                parent_id=by_key[parent_key].id if parent_key else None,
                level=level.value,
                title=title,
                sequence_order=order,
            )
            by_key[key] = node
            store.template_nodes[node.id] = node
        return template, by_key

    return _add


# ============================================================================
# Real database (integration tests only)
# ============================================================================


@pytest.fixture
async def async_engine():
    """Create async engine for testing."""
    if TEST_DATABASE_URL is None:
        pytest.skip("WATTLEOS_TEST_DATABASE_URL not set")

    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    # Drop and recreate all tables
    async with engine.begin() as conn:
        await conn.execute(text("DROP SCHEMA public CASCADE"))
        await conn.execute(text("CREATE SCHEMA public"))
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine) -> AsyncSession:
    """Create database session for testing."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session
