from dsmanalysis.model.grid import CellKind


def kinds(line):
    return [cell.kind for cell in line]


def test_symmetric_layout(symmetric_matrix):
    a, col_a = symmetric_matrix.add_symmetric_item("A")
    b, col_b = symmetric_matrix.add_symmetric_item("B")

    grid = symmetric_matrix.get_grid_array()

    # header, index header, one line per row
    assert len(grid) == 4
    assert [cell.value for cell in grid[0][:3]] == ["", "", "Column Items"]
    assert [cell.value for cell in grid[0][3:]] == [col_a, col_b]
    assert kinds(grid[1]) == [CellKind.PLAIN_TEXT] * 5
    assert [cell.value for cell in grid[1][:3]] == ["Grouping", "Row Items", "Re-Sort Index"]

    assert kinds(grid[2][:3]) == [CellKind.GROUPING_ITEM, CellKind.ITEM_NAME, CellKind.INDEX_ITEM]
    assert grid[2][3].kind == CellKind.UNEDITABLE_CONNECTION
    assert grid[2][4].kind == CellKind.EDITABLE_CONNECTION
    assert grid[2][4].value == (a, col_b)
    assert grid[3][4].kind == CellKind.UNEDITABLE_CONNECTION


def test_asymmetric_layout_has_grouping_header(asymmetric_matrix):
    asymmetric_matrix.add_item("r", is_row=True)
    col = asymmetric_matrix.add_item("c", is_row=False)

    grid = asymmetric_matrix.get_grid_array()

    assert len(grid) == 4
    assert grid[1][2].value == "Grouping"
    assert grid[1][3].kind == CellKind.GROUPING_ITEM_V
    assert grid[2][3].kind == CellKind.INDEX_ITEM
    assert grid[2][3].value == col
    assert grid[3][3].kind == CellKind.EDITABLE_CONNECTION


def test_follows_sort_index_without_reordering_storage(asymmetric_matrix):
    first = asymmetric_matrix.add_item("first", is_row=True)
    second = asymmetric_matrix.add_item("second", is_row=True)
    asymmetric_matrix.set_item_sort_index(first, 5.0)

    grid = asymmetric_matrix.get_grid_array()

    assert [line[1].value for line in grid[3:]] == [second, first]
    assert [row.name for row in asymmetric_matrix.rows] == ["first", "second"]
