"""
Matrix view: turns matrix state into table rows for the role editor.

Holds no state of its own; every checkbox value comes from GrantMatrix.
"""
from typing import AbstractSet, Iterable, List

from app.features.catalog.schemas import VerbItem
from app.features.role_matrix.matrix import GrantMatrix
from app.features.role_matrix.schemas import (
    MatrixCell,
    MatrixColumn,
    MatrixRow,
    MatrixTable,
    MatrixViewResponse,
)
from app.features.role_matrix.tree import ResourceNode, flatten_tree


# General resources are listed before system resources
PARTITIONS = (
    ("general", "General resources"),
    ("system", "System resources"),
)


def _grouping_cell(matrix: GrantMatrix, node: ResourceNode, verb: VerbItem, selection: AbstractSet[str]) -> MatrixCell:
    child_ids = matrix.descendant_permission_ids(node.id, verb.id)
    return MatrixCell(
        verb_id=verb.id,
        checked=matrix.is_verb_fully_selected_for_resource(node.id, verb.id, selection),
        disabled=not child_ids,
        label=f"All child resources: {verb.display_name}" if child_ids else "",
    )


def _permission_cell(matrix: GrantMatrix, node: ResourceNode, verb: VerbItem, selection: AbstractSet[str]) -> MatrixCell:
    permission_id = matrix.index.permission_id(node.id, verb.id)
    if permission_id:
        label = matrix.index.code_of(permission_id)
    else:
        label = f"{node.resource.code or node.resource.key or ''}:{verb.action}"
    return MatrixCell(
        verb_id=verb.id,
        permission_id=permission_id,
        checked=bool(permission_id) and permission_id in selection,
        disabled=not permission_id,
        label=label,
    )


def render_row(matrix: GrantMatrix, node: ResourceNode, depth: int, selection: AbstractSet[str]) -> MatrixRow:
    grouping = matrix.is_grouping(node.id)
    make_cell = _grouping_cell if grouping else _permission_cell
    return MatrixRow(
        resource_id=node.id,
        name=node.resource.name,
        code=node.resource.code,
        icon=node.resource.icon,
        depth=depth,
        grouping=grouping,
        checked=matrix.is_resource_fully_selected(node.id, selection),
        disabled=not matrix.row_permission_ids(node.id),
        cells=[make_cell(matrix, node, verb, selection) for verb in matrix.verbs],
    )


def render_table(matrix: GrantMatrix, partition: str, title: str, selection: AbstractSet[str]) -> MatrixTable:
    resource_ids = matrix.partition_ids(partition)
    columns = [
        MatrixColumn(
            verb_id=verb.id,
            action=verb.action,
            label=f"{verb.display_name} ({verb.action})",
            checked=matrix.is_column_fully_selected(verb.id, resource_ids, selection),
            disabled=not matrix.column_permission_ids(verb.id, resource_ids),
        )
        for verb in matrix.verbs
    ]
    rows = [
        render_row(matrix, row.node, row.depth, selection)
        for row in flatten_tree(matrix.forest.roots(partition))
    ]
    return MatrixTable(
        partition=partition,
        title=title,
        all_checked=matrix.is_everything_selected(resource_ids, selection),
        all_disabled=not matrix.table_permission_ids(resource_ids),
        columns=columns,
        rows=rows,
    )


def render_matrix(matrix: GrantMatrix, selection: Iterable[str]) -> MatrixViewResponse:
    """Render both partitions; a partition without resources is left out."""
    selected = frozenset(selection)
    tables: List[MatrixTable] = [
        render_table(matrix, partition, title, selected)
        for partition, title in PARTITIONS
        if matrix.forest.roots(partition)
    ]
    return MatrixViewResponse(selection=sorted(selected), tables=tables)
