"""
Catalog API routes.

Read-only list endpoints for resources, verbs and permissions. The catalogs
are maintained by the resource management feature; nothing here writes.
"""
from typing import Annotated, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.catalog.models import Resource, Verb, Permission
from app.features.catalog.schemas import (
    ResourceItem,
    ResourceListResponse,
    VerbListResponse,
    PermissionItem,
    PermissionListResponse,
)


router = APIRouter()


# ============================================================================
# Resource Routes
# ============================================================================

@router.get("/resources", response_model=ResourceListResponse)
async def list_resources(
    db: Annotated[AsyncSession, Depends(get_db)],
    type: Optional[int] = Query(None, description="0 = system, 1 = general"),
):
    """List resources, optionally restricted to one partition."""
    stmt = (
        select(Resource)
        .options(selectinload(Resource.parent))
        .order_by(Resource.created_at, Resource.id)
    )
    if type is not None:
        stmt = stmt.where(Resource.type == type)

    result = await db.execute(stmt)
    return {"items": result.scalars().all()}


@router.get("/resources/{resource_id}", response_model=ResourceItem)
async def get_resource(
    resource_id: str,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get a resource by ID."""
    result = await db.execute(
        select(Resource)
        .options(selectinload(Resource.parent))
        .where(Resource.id == resource_id)
    )
    resource = result.scalar_one_or_none()

    if resource is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Resource not found"
        )

    return resource


# ============================================================================
# Verb Routes
# ============================================================================

@router.get("/verbs", response_model=VerbListResponse)
async def list_verbs(db: Annotated[AsyncSession, Depends(get_db)]):
    """List all verbs."""
    result = await db.execute(select(Verb).order_by(Verb.created_at, Verb.id))
    return {"items": result.scalars().all()}


# ============================================================================
# Permission Routes
# ============================================================================

@router.get("/permissions", response_model=PermissionListResponse)
async def list_permissions(
    db: Annotated[AsyncSession, Depends(get_db)],
    resource_id: Optional[str] = None,
    verb_id: Optional[str] = None,
):
    """List permissions with optional filtering."""
    stmt = select(Permission).order_by(Permission.created_at, Permission.id)

    if resource_id:
        stmt = stmt.where(Permission.resource_id == resource_id)
    if verb_id:
        stmt = stmt.where(Permission.verb_id == verb_id)

    result = await db.execute(stmt)
    return {"items": result.scalars().all()}


@router.get("/permissions/{permission_id}", response_model=PermissionItem)
async def get_permission(
    permission_id: str,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get a permission by ID."""
    result = await db.execute(select(Permission).where(Permission.id == permission_id))
    permission = result.scalar_one_or_none()

    if permission is None:
        raise HTTPException(status_code=404, detail="Permission not found")

    return permission
