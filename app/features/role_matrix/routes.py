"""
Role permission matrix API routes.

The role editor owns the selection. It posts the current selection (and, for
toggles, the clicked checkbox) and gets back the next selection together with
the rendered matrix. Nothing is persisted here; the role save endpoint
submits the final selection.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, status

from app.features.role_matrix.dependencies import get_matrix
from app.features.role_matrix.matrix import GrantMatrix, Selection, UnknownResourceError, UnknownVerbError
from app.features.role_matrix.schemas import (
    SelectionRequest,
    ToggleIntent,
    ToggleRequest,
    ToggleResponse,
    MatrixViewResponse,
    DiagnosticsResponse,
    SkippedPermissionResponse,
)
from app.features.role_matrix.view import render_matrix
from app.utils import get_logger


log = get_logger(__name__)
router = APIRouter()


def apply_intent(matrix: GrantMatrix, selection: Selection, intent: ToggleIntent) -> Selection:
    """Dispatch a toggle intent to the matching matrix operation."""
    if intent.kind == "permission":
        if intent.permission_id and intent.permission_id not in matrix.index:
            log.debug("Ignoring toggle of unindexed permission %s", intent.permission_id)
            return selection
        return matrix.toggle_single_permission(selection, intent.permission_id)
    if intent.kind == "resource":
        return matrix.toggle_resource_row(selection, intent.resource_id)
    if intent.kind == "resource_verb":
        return matrix.toggle_verb_for_resource(selection, intent.resource_id, intent.verb_id)
    if intent.kind == "column":
        return matrix.toggle_column(selection, intent.verb_id, matrix.partition_ids(intent.partition))
    return matrix.toggle_all(selection, matrix.partition_ids(intent.partition))


@router.post("/view", response_model=MatrixViewResponse)
async def view_matrix(
    request: SelectionRequest,
    matrix: Annotated[GrantMatrix, Depends(get_matrix)]
):
    """Render the matrix for the given selection."""
    return render_matrix(matrix, request.selection)


@router.post("/toggle", response_model=ToggleResponse)
async def toggle(
    request: ToggleRequest,
    matrix: Annotated[GrantMatrix, Depends(get_matrix)]
):
    """Apply one checkbox click and return the next selection."""
    selection = frozenset(request.selection)
    try:
        next_selection = apply_intent(matrix, selection, request.intent)
    except UnknownResourceError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found")
    except UnknownVerbError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Verb not found")

    return ToggleResponse(
        selection=sorted(next_selection),
        changed=next_selection != selection,
        view=render_matrix(matrix, next_selection),
    )


@router.get("/diagnostics", response_model=DiagnosticsResponse)
async def diagnostics(matrix: Annotated[GrantMatrix, Depends(get_matrix)]):
    """Report permissions that could not be placed in the matrix."""
    forest = matrix.forest
    return DiagnosticsResponse(
        resources=len(forest.system_resources) + len(forest.general_resources),
        verbs=len(matrix.verbs),
        indexed_permissions=len(matrix.index),
        skipped_permissions=[
            SkippedPermissionResponse(
                permission_id=s.permission_id,
                code=s.code,
                resource_id=s.resource_id,
                verb_id=s.verb_id,
            )
            for s in matrix.index.skipped
        ],
    )
