"""
Builders for catalog items used across the test suite.
"""
from app.features.catalog.models import ResourceType
from app.features.catalog.schemas import PermissionItem, ResourceItem, VerbItem


def make_resource(id, code=None, pid=None, type=ResourceType.GENERAL, sequence=None, name=None, key=""):
    return ResourceItem(
        id=id,
        pid=pid,
        name=name or id,
        key=key,
        code=code or id.lower(),
        type=type,
        sequence=sequence,
    )


def make_verb(id, action, display_name=None):
    return VerbItem(id=id, action=action, display_name=display_name or action.title())


def make_permission(id, code, resource_id=None, verb_id=None, display_name=None):
    return PermissionItem(
        id=id,
        code=code,
        resource_id=resource_id,
        verb_id=verb_id,
        display_name=display_name,
    )
