"""
Pydantic schemas for the role permission matrix.

Request models carry the caller-owned selection; response models describe the
rendered matrix tables.
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, model_validator


Partition = Literal["system", "general"]


# ============================================================================
# Requests
# ============================================================================

class SelectionRequest(BaseModel):
    """Current selection of the role being edited."""
    selection: List[str] = Field(default_factory=list, description="Granted permission IDs")


class ToggleIntent(BaseModel):
    """
    A checkbox click forwarded from the matrix view.

    kind:
    - permission: one cell of a resource that carries its own permissions
    - resource: a whole row (cascades to descendants for grouping rows)
    - resource_verb: one verb of a row (cascades for grouping rows)
    - column: one verb across a partition
    - all: every permission of a partition
    """
    kind: Literal["permission", "resource", "resource_verb", "column", "all"]
    permission_id: Optional[str] = None
    resource_id: Optional[str] = None
    verb_id: Optional[str] = None
    partition: Optional[Partition] = None

    @model_validator(mode="after")
    def check_required_fields(self) -> "ToggleIntent":
        """Ensure each kind carries the ids it needs."""
        required = {
            "permission": (),
            "resource": ("resource_id",),
            "resource_verb": ("resource_id", "verb_id"),
            "column": ("verb_id", "partition"),
            "all": ("partition",),
        }[self.kind]
        missing = [name for name in required if not getattr(self, name)]
        if missing:
            raise ValueError(f"{self.kind} toggle requires {', '.join(missing)}")
        return self


class ToggleRequest(SelectionRequest):
    intent: ToggleIntent


# ============================================================================
# Responses
# ============================================================================

class MatrixCell(BaseModel):
    verb_id: str
    permission_id: Optional[str] = None
    checked: bool
    disabled: bool
    label: str


class MatrixRow(BaseModel):
    resource_id: str
    name: str
    code: str
    icon: Optional[str] = None
    depth: int
    grouping: bool = Field(..., description="True when the row aggregates its descendants")
    checked: bool
    disabled: bool
    cells: List[MatrixCell]


class MatrixColumn(BaseModel):
    verb_id: str
    action: str
    label: str
    checked: bool
    disabled: bool


class MatrixTable(BaseModel):
    partition: Partition
    title: str
    all_checked: bool
    all_disabled: bool
    columns: List[MatrixColumn]
    rows: List[MatrixRow]


class MatrixViewResponse(BaseModel):
    selection: List[str]
    tables: List[MatrixTable]


class ToggleResponse(BaseModel):
    selection: List[str]
    changed: bool
    view: MatrixViewResponse


class SkippedPermissionResponse(BaseModel):
    permission_id: str
    code: str
    resource_id: Optional[str] = None
    verb_id: Optional[str] = None


class DiagnosticsResponse(BaseModel):
    """Catalog data-quality report for operators."""
    resources: int
    verbs: int
    indexed_permissions: int
    skipped_permissions: List[SkippedPermissionResponse]
