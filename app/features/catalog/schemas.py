"""
Pydantic schemas for the resource, verb and permission catalogs.

These are also the input types of the role matrix engine, so the engine
never touches ORM objects.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.features.catalog.models import ResourceType


# ============================================================================
# Resource Schemas
# ============================================================================

class ResourceParent(BaseModel):
    """Minimal parent reference embedded in a resource."""
    id: str
    name: str
    key: str

    model_config = ConfigDict(from_attributes=True)


class ResourceItem(BaseModel):
    """Schema for a resource catalog entry."""
    id: str
    pid: Optional[str] = Field(None, description="Parent resource ID (null for roots)")
    parent: Optional[ResourceParent] = None
    name: str = Field(..., description="Display name")
    key: str = Field("", description="Front-end component registration key")
    code: str = Field(..., description="Human-readable slug, unique in the catalog")
    icon: Optional[str] = None
    path: Optional[str] = None
    type: int = Field(int(ResourceType.GENERAL), description="0 = system, anything else renders as general")
    sequence: Optional[int] = Field(None, description="Sort order among siblings")

    model_config = ConfigDict(from_attributes=True)

    @property
    def parent_id(self) -> Optional[str]:
        """Declared parent, from `pid` or the embedded parent reference."""
        if self.pid:
            return self.pid
        return self.parent.id if self.parent else None


class ResourceListResponse(BaseModel):
    items: List[ResourceItem]


# ============================================================================
# Verb Schemas
# ============================================================================

class VerbItem(BaseModel):
    """Schema for a verb catalog entry."""
    id: str
    action: str = Field(..., description="Short code, e.g. create/read/update/delete")
    display_name: str

    model_config = ConfigDict(from_attributes=True)


class VerbListResponse(BaseModel):
    items: List[VerbItem]


# ============================================================================
# Permission Schemas
# ============================================================================

class PermissionItem(BaseModel):
    """
    Schema for a permission catalog entry.

    `resource_id` / `verb_id` may be missing on incomplete catalogs; the
    role matrix then falls back to parsing `code`.
    """
    id: str
    resource_id: Optional[str] = None
    verb_id: Optional[str] = None
    code: str = Field(..., description="Conventionally '<resource-code>:<verb-action>'")
    display_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PermissionListResponse(BaseModel):
    items: List[PermissionItem]
