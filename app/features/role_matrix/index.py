"""
Permission lookup table for the role matrix.

Maps (resource_id, verb_id) to the permission granting it. Resolution has two
stages:

1. Direct foreign keys on the permission (`resource_id`, `verb_id`).
2. Compatibility shim for incomplete catalogs: split `code` on ":" and look
   the halves up by resource code/key and verb action.

Permissions that still cannot be placed are left out of the matrix and kept
as diagnostics. They are a catalog data-quality issue, not a user error.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from app.features.catalog.schemas import PermissionItem, ResourceItem, VerbItem
from app.utils import get_logger


log = get_logger(__name__)


@dataclass(frozen=True)
class SkippedPermission:
    """Diagnostic record for a permission left out of the index."""
    permission_id: str
    code: str
    resource_id: Optional[str]
    verb_id: Optional[str]


class PermissionIndex:
    """
    Lookup of `index[resource_id][verb_id] -> permission_id`.

    Build with `PermissionIndex.build(permissions, resources, verbs)`.
    """

    def __init__(self) -> None:
        self._by_resource: Dict[str, Dict[str, str]] = {}
        self._codes: Dict[str, str] = {}
        self.skipped: List[SkippedPermission] = []

    @classmethod
    def build(
        cls,
        permissions: Iterable[PermissionItem],
        resources: Iterable[ResourceItem],
        verbs: Iterable[VerbItem],
    ) -> "PermissionIndex":
        resources = list(resources)
        verbs = list(verbs)
        index = cls()

        known_resources = {r.id for r in resources}
        known_verbs = {v.id for v in verbs}

        resource_by_code: Dict[str, str] = {}
        for r in resources:
            if r.code:
                resource_by_code[r.code.lower()] = r.id
        # keys only fill slots no code has claimed
        for r in resources:
            if r.key:
                resource_by_code.setdefault(r.key.lower(), r.id)

        verb_by_action: Dict[str, str] = {}
        for v in verbs:
            if v.action:
                verb_by_action[v.action.lower()] = v.id

        for permission in permissions:
            resource_id, verb_id = index._resolve(
                permission, known_resources, known_verbs, resource_by_code, verb_by_action
            )
            if not resource_id or not verb_id:
                log.warning(
                    "Permission skipped: id=%s code=%s resource_id=%s verb_id=%s",
                    permission.id, permission.code, resource_id, verb_id
                )
                index.skipped.append(SkippedPermission(
                    permission_id=permission.id,
                    code=permission.code,
                    resource_id=resource_id,
                    verb_id=verb_id,
                ))
                continue

            row = index._by_resource.setdefault(resource_id, {})
            previous = row.get(verb_id)
            if previous is not None and previous != permission.id:
                log.warning(
                    "Duplicate permission for resource=%s verb=%s: %s replaces %s",
                    resource_id, verb_id, permission.id, previous
                )
                index._codes.pop(previous, None)
            row[verb_id] = permission.id
            index._codes[permission.id] = permission.code or permission.display_name or ""

        return index

    @staticmethod
    def _resolve(
        permission: PermissionItem,
        known_resources,
        known_verbs,
        resource_by_code: Dict[str, str],
        verb_by_action: Dict[str, str],
    ) -> Tuple[Optional[str], Optional[str]]:
        resource_id = permission.resource_id if permission.resource_id in known_resources else None
        verb_id = permission.verb_id if permission.verb_id in known_verbs else None

        if (not resource_id or not verb_id) and permission.code and ":" in permission.code:
            prefix, action = permission.code.split(":")[:2]
            if not resource_id:
                resource_id = resource_by_code.get(prefix.lower())
            if not verb_id:
                verb_id = verb_by_action.get(action.lower())

        return resource_id, verb_id

    def permission_id(self, resource_id: str, verb_id: str) -> Optional[str]:
        """The permission granting `verb_id` on `resource_id`, if any."""
        return self._by_resource.get(resource_id, {}).get(verb_id)

    def verbs_for(self, resource_id: str) -> Dict[str, str]:
        """verb_id -> permission_id for one resource."""
        return dict(self._by_resource.get(resource_id, {}))

    def has_direct_permissions(self, resource_id: str) -> bool:
        return bool(self._by_resource.get(resource_id))

    def code_of(self, permission_id: str) -> str:
        return self._codes.get(permission_id, "")

    def __contains__(self, permission_id: object) -> bool:
        return permission_id in self._codes

    def __len__(self) -> int:
        return len(self._codes)
