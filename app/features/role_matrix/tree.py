"""
Resource tree construction.

Resources arrive as a flat list with parent pointers. They are split into the
system and general partitions, and each partition is linked into a forest
through an id -> node map, so a rebuild never reuses nodes from a previous
catalog load.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from app.features.catalog.models import ResourceType
from app.features.catalog.schemas import ResourceItem


@dataclass
class ResourceNode:
    """A resource plus its ordered children."""
    resource: ResourceItem
    children: List["ResourceNode"] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.resource.id


@dataclass(frozen=True)
class FlatRow:
    node: ResourceNode
    depth: int


@dataclass
class ResourceForest:
    """
    Both partitions of the resource catalog.

    `system` / `general` hold the sorted root nodes. `system_resources` /
    `general_resources` keep the flat partition in catalog order; column and
    whole-table operations work over those.
    """
    system: List[ResourceNode] = field(default_factory=list)
    general: List[ResourceNode] = field(default_factory=list)
    system_resources: List[ResourceItem] = field(default_factory=list)
    general_resources: List[ResourceItem] = field(default_factory=list)

    def roots(self, partition: str) -> List[ResourceNode]:
        if partition == "system":
            return self.system
        if partition == "general":
            return self.general
        raise ValueError(f"Unknown partition: {partition}")

    def resources(self, partition: str) -> List[ResourceItem]:
        if partition == "system":
            return self.system_resources
        if partition == "general":
            return self.general_resources
        raise ValueError(f"Unknown partition: {partition}")


def _sort_key(node: ResourceNode):
    resource = node.resource
    name = resource.name or ""
    return (resource.sequence or 0, name.casefold(), name)


def _sort_nodes(nodes: List[ResourceNode]) -> None:
    nodes.sort(key=_sort_key)
    for node in nodes:
        _sort_nodes(node.children)


def build_tree(resources: Iterable[ResourceItem]) -> List[ResourceNode]:
    """
    Link one partition into a sorted forest.

    A resource whose parent is not in `resources` becomes a root. Siblings
    are ordered by sequence, then by display name.
    """
    resources = list(resources)
    by_id: Dict[str, ResourceNode] = {r.id: ResourceNode(resource=r) for r in resources}

    roots: List[ResourceNode] = []
    for resource in resources:
        node = by_id[resource.id]
        parent_id = resource.parent_id
        if parent_id and parent_id in by_id and parent_id != resource.id:
            by_id[parent_id].children.append(node)
        else:
            roots.append(node)

    _sort_nodes(roots)
    return roots


def partition_resources(resources: Iterable[ResourceItem]):
    """Split resources into (system, general), keeping catalog order."""
    system: List[ResourceItem] = []
    general: List[ResourceItem] = []
    for resource in resources:
        if resource.type == ResourceType.SYSTEM:
            system.append(resource)
        else:
            general.append(resource)
    return system, general


def build_forest(resources: Iterable[ResourceItem]) -> ResourceForest:
    """Build the system and general trees from the flat resource catalog."""
    system, general = partition_resources(resources)
    return ResourceForest(
        system=build_tree(system),
        general=build_tree(general),
        system_resources=system,
        general_resources=general,
    )


def flatten_tree(nodes: List[ResourceNode], depth: int = 0) -> List[FlatRow]:
    """Pre-order walk of a forest into display rows."""
    rows: List[FlatRow] = []

    def walk(level: List[ResourceNode], d: int) -> None:
        for node in level:
            rows.append(FlatRow(node=node, depth=d))
            if node.children:
                walk(node.children, d + 1)

    walk(nodes, depth)
    return rows


def index_nodes(*forests: List[ResourceNode]) -> Dict[str, ResourceNode]:
    """Map every node id in the given forests to its node."""
    nodes: Dict[str, ResourceNode] = {}
    for forest in forests:
        for row in flatten_tree(forest):
            nodes[row.node.id] = row.node
    return nodes


def descendant_ids(node: ResourceNode) -> List[str]:
    """Ids of every node under `node`, pre-order, excluding `node` itself."""
    return [row.node.id for row in flatten_tree(node.children)]
