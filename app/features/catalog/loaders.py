"""
Catalog loaders.

Each loader opens its own session so the three catalogs can be fetched
concurrently; an AsyncSession cannot run overlapping queries.
"""
import asyncio
from dataclasses import dataclass
from typing import List
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.features.catalog.models import Resource, Verb, Permission
from app.features.catalog.schemas import ResourceItem, VerbItem, PermissionItem
from app.utils import get_logger


log = get_logger(__name__)


@dataclass(frozen=True)
class CatalogSnapshot:
    """The three catalogs as loaded together for one matrix session."""
    resources: List[ResourceItem]
    verbs: List[VerbItem]
    permissions: List[PermissionItem]


async def load_resources(session_factory: async_sessionmaker[AsyncSession]) -> List[ResourceItem]:
    """Load all resources in catalog order."""
    async with session_factory() as session:
        stmt = (
            select(Resource)
            .options(selectinload(Resource.parent))
            .order_by(Resource.created_at, Resource.id)
        )
        result = await session.execute(stmt)
        return [ResourceItem.model_validate(r) for r in result.scalars().all()]


async def load_verbs(session_factory: async_sessionmaker[AsyncSession]) -> List[VerbItem]:
    async with session_factory() as session:
        result = await session.execute(select(Verb).order_by(Verb.created_at, Verb.id))
        return [VerbItem.model_validate(v) for v in result.scalars().all()]


async def load_permissions(session_factory: async_sessionmaker[AsyncSession]) -> List[PermissionItem]:
    async with session_factory() as session:
        result = await session.execute(select(Permission).order_by(Permission.created_at, Permission.id))
        return [PermissionItem.model_validate(p) for p in result.scalars().all()]


async def load_catalogs(session_factory: async_sessionmaker[AsyncSession]) -> CatalogSnapshot:
    """
    Fetch resources, verbs and permissions concurrently.

    All three loaders run to completion; the first failure is then
    re-raised. There is no retry here.
    """
    results = await asyncio.gather(
        load_resources(session_factory),
        load_verbs(session_factory),
        load_permissions(session_factory),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    resources, verbs, permissions = results
    log.debug(
        "Loaded catalogs: %d resources, %d verbs, %d permissions",
        len(resources), len(verbs), len(permissions)
    )
    return CatalogSnapshot(resources=resources, verbs=verbs, permissions=permissions)
