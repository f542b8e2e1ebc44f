"""
FastAPI dependencies for the role matrix.

The three catalogs are loaded concurrently on every request, and the tree,
index and matrix are built once all of them have returned.
"""
from typing import Annotated
from fastapi import Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.database.engine import get_session_factory
from app.features.catalog.loaders import load_catalogs
from app.features.role_matrix.matrix import GrantMatrix, build_matrix
from app.utils import get_logger


log = get_logger(__name__)


async def get_matrix(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]
) -> GrantMatrix:
    """
    Load the catalogs and build the grant matrix.

    A failed catalog query is reported as 503; the client reloads to retry.
    """
    try:
        snapshot = await load_catalogs(session_factory)
    except SQLAlchemyError:
        log.exception("Failed to load permission catalogs")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to load permission catalogs"
        )

    return build_matrix(snapshot)
