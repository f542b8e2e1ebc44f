"""
Grant matrix: checkbox state and toggle logic for role permissions.

The matrix never stores a selection. Every query takes the caller's current
selection (a set of permission IDs) and every toggle returns a new one.

A resource with no permission of its own is a grouping node. Its row and
cells stand for the aggregate of every descendant's permissions, never for a
permission of its own.

Toggles are all-or-nothing: if the controlled set is fully selected it is
removed, otherwise all of it is added. "Fully selected" is computed by the
same helpers the queries use.
"""
from typing import AbstractSet, Dict, FrozenSet, Iterable, List, Optional

from app.features.catalog.loaders import CatalogSnapshot
from app.features.catalog.schemas import VerbItem
from app.features.role_matrix.index import PermissionIndex
from app.features.role_matrix.tree import ResourceForest, ResourceNode, build_forest, descendant_ids, index_nodes


Selection = FrozenSet[str]


class UnknownResourceError(LookupError):
    """Raised when a resource id is not part of the matrix."""


class UnknownVerbError(LookupError):
    """Raised when a verb id is not part of the matrix."""


def _fully_selected(permission_ids: List[str], selection: AbstractSet[str]) -> bool:
    return len(permission_ids) > 0 and all(pid in selection for pid in permission_ids)


def _toggle_all_or_nothing(selection: AbstractSet[str], permission_ids: List[str]) -> Selection:
    current = frozenset(selection)
    if not permission_ids:
        return current
    if _fully_selected(permission_ids, current):
        return current.difference(permission_ids)
    return current.union(permission_ids)


def _id_of(resource) -> str:
    return resource if isinstance(resource, str) else resource.id


class GrantMatrix:
    """
    Queries and toggles over (forest, verbs, permission index).

    Resources and verbs may be passed as ids or as catalog items / tree nodes.
    """

    def __init__(self, forest: ResourceForest, verbs: Iterable[VerbItem], index: PermissionIndex):
        self.forest = forest
        self.verbs: List[VerbItem] = list(verbs)
        self.index = index
        self._nodes: Dict[str, ResourceNode] = index_nodes(forest.system, forest.general)
        self._verbs_by_id: Dict[str, VerbItem] = {v.id: v for v in self.verbs}

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def node(self, resource) -> ResourceNode:
        resource_id = _id_of(resource)
        try:
            return self._nodes[resource_id]
        except KeyError:
            raise UnknownResourceError(resource_id) from None

    def verb(self, verb) -> VerbItem:
        verb_id = _id_of(verb)
        try:
            return self._verbs_by_id[verb_id]
        except KeyError:
            raise UnknownVerbError(verb_id) from None

    def partition_ids(self, partition: str) -> List[str]:
        """Resource ids of one partition, in catalog order."""
        return [r.id for r in self.forest.resources(partition)]

    def is_grouping(self, resource) -> bool:
        """True for a resource with no permission of its own."""
        return not self.index.has_direct_permissions(self.node(resource).id)

    # ------------------------------------------------------------------
    # Controlled permission sets
    # ------------------------------------------------------------------

    def _direct_ids(self, resource_id: str, verb_id: Optional[str] = None) -> List[str]:
        verbs = [verb_id] if verb_id else [v.id for v in self.verbs]
        ids = [self.index.permission_id(resource_id, vid) for vid in verbs]
        return [pid for pid in ids if pid]

    def descendant_permission_ids(self, resource, verb=None) -> List[str]:
        """Permissions of every resource under `resource` (pre-order), for one verb or all."""
        node = self.node(resource)
        verb_id = self.verb(verb).id if verb is not None else None
        permission_ids: List[str] = []
        for child_id in descendant_ids(node):
            permission_ids.extend(self._direct_ids(child_id, verb_id))
        return permission_ids

    def row_permission_ids(self, resource) -> List[str]:
        """The set a row checkbox controls."""
        node = self.node(resource)
        own = self._direct_ids(node.id)
        if own:
            return own
        return self.descendant_permission_ids(node.id)

    def cell_permission_ids(self, resource, verb) -> List[str]:
        """The set a (resource, verb) checkbox controls."""
        node = self.node(resource)
        verb_id = self.verb(verb).id
        if self.index.has_direct_permissions(node.id):
            return self._direct_ids(node.id, verb_id)
        return self.descendant_permission_ids(node.id, verb_id)

    def column_permission_ids(self, verb, resources: Iterable) -> List[str]:
        verb_id = self.verb(verb).id
        ids = [self.index.permission_id(_id_of(r), verb_id) for r in resources]
        return [pid for pid in ids if pid]

    def table_permission_ids(self, resources: Iterable) -> List[str]:
        permission_ids: List[str] = []
        for resource in resources:
            permission_ids.extend(self._direct_ids(_id_of(resource)))
        return permission_ids

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    def is_resource_fully_selected(self, resource, selection: AbstractSet[str]) -> bool:
        return _fully_selected(self.row_permission_ids(resource), selection)

    def is_verb_fully_selected_for_resource(self, resource, verb, selection: AbstractSet[str]) -> bool:
        return _fully_selected(self.cell_permission_ids(resource, verb), selection)

    def is_column_fully_selected(self, verb, resources: Iterable, selection: AbstractSet[str]) -> bool:
        return _fully_selected(self.column_permission_ids(verb, resources), selection)

    def is_everything_selected(self, resources: Iterable, selection: AbstractSet[str]) -> bool:
        return _fully_selected(self.table_permission_ids(resources), selection)

    # ------------------------------------------------------------------
    # Toggles
    # ------------------------------------------------------------------

    def toggle_single_permission(self, selection: AbstractSet[str], permission_id: Optional[str]) -> Selection:
        current = frozenset(selection)
        if not permission_id:
            return current
        if permission_id in current:
            return current - {permission_id}
        return current | {permission_id}

    def toggle_resource_row(self, selection: AbstractSet[str], resource) -> Selection:
        return _toggle_all_or_nothing(selection, self.row_permission_ids(resource))

    def toggle_verb_for_resource(self, selection: AbstractSet[str], resource, verb) -> Selection:
        return _toggle_all_or_nothing(selection, self.cell_permission_ids(resource, verb))

    def toggle_column(self, selection: AbstractSet[str], verb, resources: Iterable) -> Selection:
        return _toggle_all_or_nothing(selection, self.column_permission_ids(verb, resources))

    def toggle_all(self, selection: AbstractSet[str], resources: Iterable) -> Selection:
        return _toggle_all_or_nothing(selection, self.table_permission_ids(resources))


def build_matrix(snapshot: CatalogSnapshot) -> GrantMatrix:
    """Build tree, index and matrix from one catalog load."""
    forest = build_forest(snapshot.resources)
    index = PermissionIndex.build(snapshot.permissions, snapshot.resources, snapshot.verbs)
    return GrantMatrix(forest, snapshot.verbs, index)
