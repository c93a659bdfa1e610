"""
Matrix Engine
=============
The facade every collaborator talks to. It owns the item, connection and
grouping stores of one document and routes every mutation through the
TransactionLog.

Why is this file needed?
------------------------
1. Single entry point: Views and persistence code never touch the stores
   directly; they call the named mutators below so that every change can be
   undone.
2. Symmetric invariants: In a symmetric matrix every row has exactly one
   column mirroring it (the column's 'alias_uid' is the row's uid). The
   '*_symmetric' mutators keep the two halves in step.

None of the mutators set checkpoints. After a logical unit of work the caller
calls `history.mark_current_as_checkpoint()` (see controller.session).

Thread safety: none. Serialize access per document.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Tuple

import numpy as np

from dsmanalysis.config import DEFAULT_GROUP_NAME, DEFAULT_GROUP_COLOR
from dsmanalysis.model.commands import (
    AddConnection, AddGrouping, AddItem, ClearItems, Command, RemoveConnections, RemoveGrouping,
    RemoveItem, ResetGroupings, SetGroupingColor, SetItemAttribute, SetMetadata, SwapRowsAndColumns,
    UpdateConnection,
)
from dsmanalysis.model.connections import ConnectionStore
from dsmanalysis.model.entities import Connection, Grouping, Item
from dsmanalysis.model.errors import NotSymmetricError
from dsmanalysis.model.groupings import GroupingRegistry
from dsmanalysis.model.grid import GridArray, build_grid_array
from dsmanalysis.model.history import TransactionLog
from dsmanalysis.model.items import ItemStore

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

UidPair = Tuple[int, int]
Color = Tuple[float, float, float]


class MatrixEngine:
    """
    A Design Structure Matrix document.

    Args:
        symmetric: Rows mirror columns. Fixed for the lifetime of the matrix.
    """

    def __init__(self, symmetric: bool = False) -> None:
        self._symmetric = symmetric
        self.items = ItemStore()
        self.connections = ConnectionStore()
        self.groupings = GroupingRegistry()

        self.title: str = ""
        self.project_name: str = ""
        self.customer: str = ""
        self.version_number: str = ""

        self.modified: bool = True
        self.history = TransactionLog(self)

    # ------------------------------------------------------------------
    # Basic accessors
    # ------------------------------------------------------------------

    @property
    def symmetric(self) -> bool:
        return self._symmetric

    @property
    def rows(self) -> List[Item]:
        return list(self.items.rows)

    @property
    def cols(self) -> List[Item]:
        return list(self.items.cols)

    def get_item(self, uid: int) -> Optional[Item]:
        return self.items.get(uid)

    def get_row_item(self, uid: int) -> Optional[Item]:
        return self.items.get_row(uid)

    def get_col_item(self, uid: int) -> Optional[Item]:
        return self.items.get_col(uid)

    def get_item_by_alias(self, uid: int) -> Optional[Item]:
        """The column mirroring the row with 'uid'."""
        return self.items.get_by_alias(uid)

    def get_alias_partner(self, item: Item) -> Optional[Item]:
        """The other half of a symmetric pair, looked up from either side."""
        if item.alias_uid is not None:
            return self.items.get(item.alias_uid)
        return self.items.get_by_alias(item.uid)

    def is_row(self, uid: int) -> bool:
        return self.items.is_row(uid)

    def is_col(self, uid: int) -> bool:
        return self.items.is_col(uid)

    def get_connection(self, row_uid: int, col_uid: int) -> Optional[Connection]:
        return self.connections.get(row_uid, col_uid)

    def get_row_max_sort_index(self) -> float:
        return self.items.max_sort_index(is_row=True)

    def get_col_max_sort_index(self) -> float:
        return self.items.max_sort_index(is_row=False)

    def group_members(self, name: str, rows_only: bool = False) -> List[Item]:
        members = [item for item in self.items.rows if item.group == name]
        if not rows_only:
            members += [item for item in self.items.cols if item.group == name]
        return members

    def clear_modified_flag(self) -> None:
        """Called by a persistence collaborator once the document has been saved."""
        self.modified = False

    def _push(self, command: Command) -> None:
        self.history.push(command)

    def _require_symmetric(self, operation: str) -> None:
        if not self._symmetric:
            raise NotSymmetricError(operation)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def _insert_item(self, item: Item, is_row: bool) -> None:
        if item.group not in self.groupings:
            self._push(AddGrouping(Grouping(item.group, DEFAULT_GROUP_COLOR)))
        self._push(AddItem(item, is_row))

    def add_item(self, name: str, is_row: bool) -> Item:
        """Create a new row or column at the end of the sort order."""
        item = self.items.create(name, is_row)
        self._insert_item(item, is_row)
        return item

    def add_existing_item(self, item: Item, is_row: bool) -> None:
        """
        Insert an item with an explicit uid (used when loading a document).
        The uid allocator is advanced past 'item.uid'.
        """
        if self.items.get(item.uid) is not None:
            raise ValueError(f"Item with uid {item.uid} already exists.")
        self.items.reserve_uid(item.uid)
        self._insert_item(item, is_row)

    def add_symmetric_item(self, name: str) -> Tuple[Item, Item]:
        """
        Create a row and its mirroring column.

        Returns:
            (row, column); column.alias_uid == row.uid
        """
        self._require_symmetric("add_symmetric_item")
        index = self.items.next_sort_index(is_row=True)
        row = Item(uid=self.items.allocate_uid(), name=name, sort_index=index)
        col = Item(uid=self.items.allocate_uid(), name=name, sort_index=index, alias_uid=row.uid)
        self._insert_item(row, True)
        self._insert_item(col, False)
        return row, col

    def delete_item(self, item: Item) -> None:
        """Remove an item together with all of its connections."""
        if self.items.get(item.uid) is None:
            logger.warning(f"Cannot delete item {item.uid}: not part of the matrix.")
            return

        connections = self.connections.involving(item.uid)
        if connections:
            self._push(RemoveConnections(tuple(connections)))

        is_row = self.items.is_row(item.uid)
        target = self.items.rows if is_row else self.items.cols
        position = next(i for i, other in enumerate(target) if other.uid == item.uid)
        self._push(RemoveItem(self.items.get(item.uid), is_row, position))

    def delete_symmetric_item(self, row_item: Item) -> None:
        self._require_symmetric("delete_symmetric_item")
        col = self.items.get_by_alias(row_item.uid)
        self.delete_item(row_item)
        if col is not None:
            self.delete_item(col)

    def delete_rows(self) -> None:
        self._clear_side(is_row=True)

    def delete_cols(self) -> None:
        self._clear_side(is_row=False)

    def _clear_side(self, is_row: bool) -> None:
        removed = self.items.rows if is_row else self.items.cols
        if not removed:
            return
        uids = {item.uid for item in removed}
        connections = [conn for conn in self.connections if conn.row_uid in uids or conn.col_uid in uids]
        if connections:
            self._push(RemoveConnections(tuple(connections)))

        other_side = self.items.cols if is_row else self.items.rows
        aliases = {item.uid: item.alias_uid for item in other_side if item.alias_uid in uids}
        self._push(ClearItems(is_row, tuple(removed), aliases))

    def _set_item_attribute(self, item: Item, attribute: str, value: object) -> None:
        self._push(SetItemAttribute(item.uid, attribute, getattr(item, attribute), value))

    def set_item_name(self, item: Item, name: str) -> None:
        self._set_item_attribute(item, "name", name)

    def set_item_sort_index(self, item: Item, index: float) -> None:
        self._set_item_attribute(item, "sort_index", float(index))

    def set_item_group(self, item: Item, group: str) -> None:
        if group not in self.groupings:
            self._push(AddGrouping(Grouping(group, DEFAULT_GROUP_COLOR)))
        self._set_item_attribute(item, "group", group)

    def set_item_name_symmetric(self, item: Item, name: str) -> None:
        self.set_item_name(item, name)
        partner = self.get_alias_partner(item)
        if partner is not None:
            self.set_item_name(partner, name)

    def set_item_sort_index_symmetric(self, item: Item, index: float) -> None:
        self.set_item_sort_index(item, index)
        partner = self.get_alias_partner(item)
        if partner is not None:
            self.set_item_sort_index(partner, index)

    def set_item_group_symmetric(self, item: Item, group: str) -> None:
        self.set_item_group(item, group)
        partner = self.get_alias_partner(item)
        if partner is not None:
            self.set_item_group(partner, group)

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    def _is_alias_pair(self, row_uid: int, col_uid: int) -> bool:
        col = self.items.get(col_uid)
        return col is not None and col.alias_uid == row_uid

    def modify_connection(self, row_uid: int, col_uid: int, name: str, weight: float) -> bool:
        """
        Create the connection row -> col, or update its name and weight if it exists.

        Returns:
            False when nothing was recorded (unknown item, 'row_uid' not a row or
            'col_uid' not a column, or a connection between a row and its own
            mirror in a symmetric matrix).
        """
        existing = self.connections.get(row_uid, col_uid)
        if existing is not None:
            self._push(UpdateConnection(row_uid, col_uid, existing.name, existing.weight, name, float(weight)))
            return True

        if self.items.get(row_uid) is None or self.items.get(col_uid) is None:
            logger.warning(f"Cannot create connection ({row_uid}, {col_uid}): unknown item.")
            return False
        if not (self.items.is_row(row_uid) and self.items.is_col(col_uid)):
            logger.warning(f"Cannot create connection ({row_uid}, {col_uid}): connections run from a row to a column.")
            return False
        if self._symmetric and self._is_alias_pair(row_uid, col_uid):
            logger.debug(f"Refusing connection between row {row_uid} and its own mirror.")
            return False

        self._push(AddConnection(Connection(row_uid, col_uid, name, float(weight))))
        return True

    def get_symmetric_connection_uids(self, row_uid: int, col_uid: int) -> Optional[UidPair]:
        """
        The uids of the mirror image of connection (row, col): (alias of col, column aliasing row).

        Returns:
            None when either half cannot be resolved.
        """
        self._require_symmetric("get_symmetric_connection_uids")
        col = self.items.get(col_uid)
        mirror_row_uid = col.alias_uid if col is not None else None
        mirror_col = self.items.get_by_alias(row_uid)
        if mirror_row_uid is None or mirror_col is None:
            return None
        return mirror_row_uid, mirror_col.uid

    def get_symmetric_connection(self, row_uid: int, col_uid: int) -> Optional[Connection]:
        uids = self.get_symmetric_connection_uids(row_uid, col_uid)
        return self.connections.get(*uids) if uids is not None else None

    def modify_connection_symmetric(self, row_uid: int, col_uid: int, name: str, weight: float) -> None:
        self._require_symmetric("modify_connection_symmetric")
        uids = self.get_symmetric_connection_uids(row_uid, col_uid)
        self.modify_connection(row_uid, col_uid, name, weight)
        if uids is None:
            logger.warning(f"No mirror found for connection ({row_uid}, {col_uid}).")
            return
        self.modify_connection(uids[0], uids[1], name, weight)

    def delete_connection(self, row_uid: int, col_uid: int) -> None:
        conn = self.connections.get(row_uid, col_uid)
        if conn is not None:
            self._push(RemoveConnections((conn,)))

    def delete_row_connections(self, row_uid: int) -> None:
        for conn in self.connections.for_row(row_uid):
            self.delete_connection(conn.row_uid, conn.col_uid)

    def delete_col_connections(self, col_uid: int) -> None:
        for conn in self.connections.for_col(col_uid):
            self.delete_connection(conn.row_uid, conn.col_uid)

    def delete_all_connections(self) -> None:
        for conn in self.connections:
            self.delete_connection(conn.row_uid, conn.col_uid)

    # ------------------------------------------------------------------
    # Groupings
    # ------------------------------------------------------------------

    def add_grouping(self, name: str, color: Optional[Color] = None) -> None:
        if name in self.groupings:
            logger.debug(f"Grouping '{name}' already exists.")
            return
        self._push(AddGrouping(Grouping(name, color if color is not None else DEFAULT_GROUP_COLOR)))

    def remove_grouping(self, name: str) -> None:
        """Remove a grouping; its members fall back to the default grouping."""
        if name == DEFAULT_GROUP_NAME:
            raise ValueError("The default grouping cannot be removed.")
        grouping = self.groupings.get(name)
        if grouping is None:
            return
        for item in self.group_members(name):
            self.set_item_group(item, DEFAULT_GROUP_NAME)
        self._push(RemoveGrouping(grouping))

    def rename_grouping(self, old_name: str, new_name: str) -> None:
        if old_name == DEFAULT_GROUP_NAME:
            raise ValueError("The default grouping cannot be renamed.")
        grouping = self.groupings.get(old_name)
        if grouping is None or old_name == new_name:
            return
        self.add_grouping(new_name, grouping.color)
        for item in self.group_members(old_name):
            self.set_item_group(item, new_name)
        self._push(RemoveGrouping(grouping))

    def update_grouping_color(self, name: str, color: Color) -> None:
        grouping = self.groupings.get(name)
        if grouping is None:
            logger.warning(f"Cannot recolor unknown grouping '{name}'.")
            return
        self._push(SetGroupingColor(name, grouping.color, color))

    def clear_groupings(self) -> None:
        """Every item goes back to the default grouping; only the default grouping remains."""
        for item in list(self.items):
            if item.group != DEFAULT_GROUP_NAME:
                self.set_item_group(item, DEFAULT_GROUP_NAME)
        dropped = tuple(g for g in self.groupings if g.name != DEFAULT_GROUP_NAME)
        if dropped:
            self._push(ResetGroupings(dropped))

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def _set_metadata(self, field_name: str, value: str) -> None:
        self._push(SetMetadata(field_name, getattr(self, field_name), value))

    def set_title(self, title: str) -> None:
        self._set_metadata("title", title)

    def set_project_name(self, project_name: str) -> None:
        self._set_metadata("project_name", project_name)

    def set_customer(self, customer: str) -> None:
        self._set_metadata("customer", customer)

    def set_version_number(self, version_number: str) -> None:
        self._set_metadata("version_number", version_number)

    # ------------------------------------------------------------------
    # Whole-matrix operations
    # ------------------------------------------------------------------

    def invert_matrix(self) -> None:
        """Swap rows and columns, turning every connection (r, c) into (c, r)."""
        for conn in self.connections:
            self.delete_connection(conn.row_uid, conn.col_uid)
            self._push(AddConnection(Connection(conn.col_uid, conn.row_uid, conn.name, conn.weight)))
        self._push(SwapRowsAndColumns(relink_aliases=self._symmetric))

    def _display_order(self, is_row: bool) -> List[Item]:
        items = self.items.rows if is_row else self.items.cols
        return sorted(items, key=lambda item: item.sort_index)

    def _assign_indices(self, ordered: List[Item]) -> None:
        for i, item in enumerate(ordered, start=1):
            if item.sort_index != i:
                self.set_item_sort_index(item, float(i))

    def redistribute_sort_indices(self) -> None:
        """Renumber rows and columns 1..n (independently) keeping their current order."""
        self._assign_indices(self._display_order(is_row=True))
        self._assign_indices(self._display_order(is_row=False))

    def redistribute_sort_index_by_group(self) -> None:
        """Renumber 1..n so that members of a grouping are adjacent (sorted by group, then name)."""
        rows = sorted(self.items.rows, key=lambda item: (item.group, item.name))
        if self._symmetric:
            # columns follow their mirrored row
            cols = [col for col in (self.items.get_by_alias(row.uid) for row in rows) if col is not None]
        else:
            cols = sorted(self.items.cols, key=lambda item: (item.group, item.name))
        self._assign_indices(rows)
        self._assign_indices(cols)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_symmetry_errors(self) -> List[UidPair]:
        """
        Connections whose mirror image is missing or differs in name or weight.

        Returns:
            Flat list of (row_uid, col_uid): each offending connection followed by its mirror.
        """
        self._require_symmetric("find_symmetry_errors")
        errors: List[UidPair] = []
        for conn in self.connections:
            mirror_uids = self.get_symmetric_connection_uids(conn.row_uid, conn.col_uid)
            if mirror_uids is None:
                continue
            mirror = self.connections.get(*mirror_uids)
            if mirror is None or mirror.name != conn.name or mirror.weight != conn.weight:
                errors.append(conn.key)
                errors.append(mirror_uids)
        return errors

    def is_symmetry_consistent(self) -> bool:
        """|rows| == |cols| and column aliases map bijectively onto the rows."""
        if not self._symmetric:
            return False
        if len(self.items.rows) != len(self.items.cols):
            return False
        row_uids = {row.uid for row in self.items.rows}
        aliases = [col.alias_uid for col in self.items.cols]
        return None not in aliases and set(aliases) == row_uids and len(set(aliases)) == len(aliases)

    def get_grid_array(self) -> GridArray:
        return build_grid_array(self)

    def get_weight_matrix(self) -> npt.NDArray[np.float64]:
        """Dense weights, rows and columns in display order; 0 where there is no connection."""
        rows = self._display_order(is_row=True)
        cols = self._display_order(is_row=False)
        row_pos = {item.uid: i for i, item in enumerate(rows)}
        col_pos = {item.uid: j for j, item in enumerate(cols)}

        weights = np.zeros((len(rows), len(cols)), dtype=np.float64)
        for conn in self.connections:
            if conn.row_uid in row_pos and conn.col_uid in col_pos:
                weights[row_pos[conn.row_uid], col_pos[conn.col_uid]] = conn.weight
        return weights

    def copy(self) -> MatrixEngine:
        """Deep copy of the document state. The copy starts with an empty history."""
        other = MatrixEngine(symmetric=self._symmetric)
        other.items = self.items.copy()
        other.connections = self.connections.copy()
        other.groupings = self.groupings.copy()
        other.title = self.title
        other.project_name = self.project_name
        other.customer = self.customer
        other.version_number = self.version_number
        other.modified = self.modified
        return other

    def __repr__(self) -> str:
        kind = "symmetric" if self._symmetric else "asymmetric"
        return (f"<MatrixEngine {kind} rows={len(self.items.rows)} cols={len(self.items.cols)} "
                f"connections={len(self.connections)}>")
