"""
Unit tests for the rendered matrix tables.
"""
import pytest

from app.features.role_matrix.view import render_matrix


def row_by_id(table, resource_id):
    return next(row for row in table.rows if row.resource_id == resource_id)


@pytest.mark.unit
class TestRenderMatrix:

    def test_general_table_comes_first(self, catalog_matrix):
        view = render_matrix(catalog_matrix, [])

        assert [t.partition for t in view.tables] == ["general", "system"]
        assert view.tables[0].title == "General resources"

    def test_empty_partition_is_omitted(self, scenario_matrix):
        view = render_matrix(scenario_matrix, [])

        assert [t.partition for t in view.tables] == ["general"]

    def test_rows_are_preorder_with_depth(self, catalog_matrix):
        general = render_matrix(catalog_matrix, []).tables[0]

        assert [(r.resource_id, r.depth) for r in general.rows] == [
            ("FAQ", 0),
            ("CONF_MENU", 0),
            ("CONF", 1),
            ("WS", 1),
            ("LOC", 0),
        ]

    def test_column_headers(self, catalog_matrix):
        system = render_matrix(catalog_matrix, ["P_USR_C"]).tables[1]

        assert [c.label for c in system.columns] == ["Create (create)", "Read (read)"]
        assert system.columns[0].checked
        assert not system.columns[1].checked
        assert not system.all_checked

    def test_grouping_row_cells(self, catalog_matrix):
        general = render_matrix(catalog_matrix, ["P_CONF_C", "P_WS_C"]).tables[0]
        row = row_by_id(general, "CONF_MENU")

        assert row.grouping
        assert not row.checked
        create, read = row.cells
        assert create.checked
        assert create.label == "All child resources: Create"
        assert create.permission_id is None
        assert not read.checked

    def test_grouping_row_without_descendants_is_disabled(self, catalog_matrix):
        row = row_by_id(render_matrix(catalog_matrix, []).tables[0], "LOC")

        assert row.disabled
        assert all(cell.disabled and cell.label == "" for cell in row.cells)

    def test_leaf_row_cells(self, catalog_matrix):
        row = row_by_id(render_matrix(catalog_matrix, ["P_FAQ_R"]).tables[0], "FAQ")

        assert not row.grouping
        assert row.checked
        create, read = row.cells
        assert create.disabled
        assert create.permission_id is None
        assert create.label == "faq:create"
        assert read.permission_id == "P_FAQ_R"
        assert read.checked
        assert read.label == "FAQ:READ"

    def test_selection_is_sorted(self, catalog_matrix):
        view = render_matrix(catalog_matrix, ["P_USR_R", "P_CONF_C", "P_USR_R"])

        assert view.selection == ["P_CONF_C", "P_USR_R"]
