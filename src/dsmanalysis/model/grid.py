"""
Grid Projection
===============
Turns a matrix into a 2D array of tagged cells for a rendering collaborator.

Every cell is a (kind, value) pair. The value depends on the kind:

    plain_text / plain_text_v        : str   -> text (v = vertical)
    item_name / item_name_v          : Item  -> the row / column item
    grouping_item / grouping_item_v  : Item  -> item whose grouping is shown
    index_item                       : Item  -> item whose sort index is shown
    uneditable_connection            : None
    editable_connection              : (row Item, column Item)

This is a read-only view; it does not reorder the stored rows and columns.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, List

if TYPE_CHECKING:
    from dsmanalysis.model.matrix import MatrixEngine


class CellKind(StrEnum):
    PLAIN_TEXT = "plain_text"
    PLAIN_TEXT_V = "plain_text_v"
    ITEM_NAME = "item_name"
    ITEM_NAME_V = "item_name_v"
    GROUPING_ITEM = "grouping_item"
    GROUPING_ITEM_V = "grouping_item_v"
    INDEX_ITEM = "index_item"
    UNEDITABLE_CONNECTION = "uneditable_connection"
    EDITABLE_CONNECTION = "editable_connection"


@dataclass
class GridCell:
    kind: CellKind
    value: Any = None


GridArray = List[List[GridCell]]


def build_grid_array(matrix: MatrixEngine) -> GridArray:
    rows = sorted(matrix.items.rows, key=lambda item: item.sort_index)
    cols = sorted(matrix.items.cols, key=lambda item: item.sort_index)
    grid: GridArray = []

    # Header row with the column names
    header = [GridCell(CellKind.PLAIN_TEXT_V, ""), GridCell(CellKind.PLAIN_TEXT_V, ""),
              GridCell(CellKind.PLAIN_TEXT_V, "Column Items")]
    header += [GridCell(CellKind.ITEM_NAME_V, col) for col in cols]
    grid.append(header)

    # Columns have their own groupings only in asymmetric matrices
    if not matrix.symmetric:
        grouping_header = [GridCell(CellKind.PLAIN_TEXT_V, ""), GridCell(CellKind.PLAIN_TEXT_V, ""),
                           GridCell(CellKind.PLAIN_TEXT_V, "Grouping")]
        grouping_header += [GridCell(CellKind.GROUPING_ITEM_V, col) for col in cols]
        grid.append(grouping_header)

    index_header = [GridCell(CellKind.PLAIN_TEXT, "Grouping"), GridCell(CellKind.PLAIN_TEXT, "Row Items"),
                    GridCell(CellKind.PLAIN_TEXT, "Re-Sort Index")]
    if matrix.symmetric:
        index_header += [GridCell(CellKind.PLAIN_TEXT, "") for _ in cols]
    else:
        index_header += [GridCell(CellKind.INDEX_ITEM, col) for col in cols]
    grid.append(index_header)

    for row in rows:
        line = [GridCell(CellKind.GROUPING_ITEM, row), GridCell(CellKind.ITEM_NAME, row),
                GridCell(CellKind.INDEX_ITEM, row)]
        for col in cols:
            if matrix.symmetric and col.alias_uid == row.uid:
                line.append(GridCell(CellKind.UNEDITABLE_CONNECTION))
            else:
                line.append(GridCell(CellKind.EDITABLE_CONNECTION, (row, col)))
        grid.append(line)

    return grid
