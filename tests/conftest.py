"""
Pytest configuration and fixtures for testing.

This module provides common fixtures for:
- In-memory catalogs and grant matrices for the unit tests
- A temporary SQLite database with a seeded catalog
- An HTTP client wired to that database
"""
import os

# Keep the global rate limit out of the way of the route tests
os.environ.setdefault("RATE_LIMIT", "10000/minute")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.database.base import Base
from app.core.database.engine import get_db, get_session_factory
from app.features.catalog.loaders import CatalogSnapshot
from app.features.catalog.models import Permission, Resource, ResourceType, Verb
from app.features.role_matrix.matrix import build_matrix
from app.main import app
from tests.factories import make_permission, make_resource, make_verb


SYSTEM = ResourceType.SYSTEM
GENERAL = ResourceType.GENERAL


# ==================== CATALOG FIXTURES ====================

@pytest.fixture
def scenario_snapshot():
    """Root R with one child C; C carries read (P1) and write (P2)."""
    return CatalogSnapshot(
        resources=[
            make_resource("R", code="root"),
            make_resource("C", code="child", pid="R"),
        ],
        verbs=[make_verb("V1", "read"), make_verb("V2", "write")],
        permissions=[
            make_permission("P1", "child:read", resource_id="C", verb_id="V1"),
            make_permission("P2", "child:write", resource_id="C", verb_id="V2"),
        ],
    )


@pytest.fixture
def scenario_matrix(scenario_snapshot):
    return build_matrix(scenario_snapshot)


@pytest.fixture
def catalog_snapshot():
    """
    A catalog shaped like the conference admin menus.

    system:  SYS (grouping) -> ROL, USR
    general: FAQ, CONF_MENU (grouping) -> CONF, WS; LOC (no permissions)
    """
    return CatalogSnapshot(
        resources=[
            make_resource("SYS", code="system", name="System", type=SYSTEM, sequence=1),
            make_resource("USR", code="user", name="Users", pid="SYS", type=SYSTEM, sequence=2),
            make_resource("ROL", code="role", name="Roles", pid="SYS", type=SYSTEM, sequence=1),
            make_resource("CONF_MENU", code="conference_menu", name="Conference", sequence=2),
            make_resource("CONF", code="conference", name="Conferences", pid="CONF_MENU", sequence=1),
            make_resource("WS", code="workshop", key="WorkshopManagement", name="Workshops", pid="CONF_MENU", sequence=1),
            make_resource("FAQ", code="faq", name="FAQs", sequence=1),
            # parent lives in the system partition, so this is a general root
            make_resource("LOC", code="location", name="Locations", pid="ROL", sequence=3),
        ],
        verbs=[make_verb("VC", "create"), make_verb("VR", "read")],
        permissions=[
            make_permission("P_USR_C", "user:create", resource_id="USR", verb_id="VC"),
            make_permission("P_USR_R", "user:read", resource_id="USR", verb_id="VR"),
            make_permission("P_ROL_R", "role:read", resource_id="ROL", verb_id="VR"),
            make_permission("P_CONF_C", "conference:create", resource_id="CONF", verb_id="VC"),
            make_permission("P_CONF_R", "conference:read", resource_id="CONF", verb_id="VR"),
            # resolved through the code fallback
            make_permission("P_WS_C", "workshop:create"),
            make_permission("P_WS_R", "WorkshopManagement:read"),
            make_permission("P_FAQ_R", "FAQ:READ", verb_id="VR"),
            # unresolvable
            make_permission("P_GHOST", "ghost:read"),
            make_permission("P_BAD", "nocolon"),
            make_permission("P_BOGUS", "nope:create", resource_id="NOPE", verb_id="VC"),
        ],
    )


@pytest.fixture
def catalog_matrix(catalog_snapshot):
    return build_matrix(catalog_snapshot)


# ==================== DATABASE FIXTURES ====================

@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Session factory bound to a fresh SQLite file database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def seeded_catalog(session_factory):
    """Seed a small catalog: System -> Users; Conference -> Conferences."""
    async with session_factory() as session:
        session.add_all([
            Verb(id="VC", action="create", display_name="Create"),
            Verb(id="VR", action="read", display_name="Read"),
        ])
        session.add_all([
            Resource(id="SYS", code="system", key="SystemMenu", name="System", type=SYSTEM, sequence=1),
            Resource(id="CONF_MENU", code="conference_menu", key="ConferenceMenu", name="Conference", type=GENERAL, sequence=1),
        ])
        await session.flush()
        session.add_all([
            Resource(id="USR", pid="SYS", code="user", key="UserManagement", name="Users", type=SYSTEM, sequence=1),
            Resource(id="CONF", pid="CONF_MENU", code="conference", key="ConferenceManagement", name="Conferences", type=GENERAL, sequence=1),
        ])
        await session.flush()
        session.add_all([
            Permission(id="P_USR_C", resource_id="USR", verb_id="VC", code="user:create"),
            Permission(id="P_USR_R", resource_id="USR", verb_id="VR", code="user:read"),
            Permission(id="P_CONF_C", resource_id="CONF", verb_id="VC", code="conference:create"),
            Permission(id="P_CONF_R", code="conference:read"),
            Permission(id="P_GHOST", code="ghost:read"),
        ])
        await session.commit()


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client with the app's database dependencies pointed at the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
