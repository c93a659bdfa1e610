"""
Matrix Commands
===============
Reversible operations recorded by the TransactionLog.

Why is this file needed?
------------------------
Every mutation of a matrix is expressed as a small command object that
carries both its forward and its inverse data as plain fields.

A command never pushes other commands; composite operations (delete an item
together with its connections, rename a grouping, ...) are built by the
engine from several commands executed back-to-back.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Literal, Optional, Tuple

from dsmanalysis.model.entities import Connection, Grouping, Item

if TYPE_CHECKING:
    from dsmanalysis.model.matrix import MatrixEngine

ItemAttribute = Literal["name", "sort_index", "group"]
MetadataField = Literal["title", "project_name", "customer", "version_number"]


class Command(ABC):
    @abstractmethod
    def apply(self, matrix: MatrixEngine) -> None:
        pass

    @abstractmethod
    def revert(self, matrix: MatrixEngine) -> None:
        pass


# --- Items ---

@dataclass
class AddItem(Command):
    item: Item
    is_row: bool
    position: Optional[int] = None

    def apply(self, matrix: MatrixEngine) -> None:
        matrix.items.insert(self.item, self.is_row, self.position)

    def revert(self, matrix: MatrixEngine) -> None:
        matrix.items.remove(self.item.uid)


@dataclass
class RemoveItem(Command):
    item: Item
    is_row: bool
    position: int

    def apply(self, matrix: MatrixEngine) -> None:
        matrix.items.remove(self.item.uid)

    def revert(self, matrix: MatrixEngine) -> None:
        matrix.items.insert(self.item, self.is_row, self.position)


@dataclass
class SetItemAttribute(Command):
    uid: int
    attribute: ItemAttribute
    old_value: object
    new_value: object

    def apply(self, matrix: MatrixEngine) -> None:
        setattr(matrix.items.get(self.uid), self.attribute, self.new_value)

    def revert(self, matrix: MatrixEngine) -> None:
        setattr(matrix.items.get(self.uid), self.attribute, self.old_value)


@dataclass
class ClearItems(Command):
    """Remove every row (or every column) and detach aliases pointing across."""
    is_row: bool
    items: Tuple[Item, ...]
    aliases: Dict[int, Optional[int]] = field(default_factory=dict)

    def apply(self, matrix: MatrixEngine) -> None:
        matrix.items.clear(self.is_row)
        for uid in self.aliases:
            matrix.items.get(uid).alias_uid = None

    def revert(self, matrix: MatrixEngine) -> None:
        matrix.items.restore(list(self.items), self.is_row)
        for uid, alias in self.aliases.items():
            matrix.items.get(uid).alias_uid = alias


@dataclass
class SwapRowsAndColumns(Command):
    """
    Exchange the row and column sequences.

    For symmetric matrices the alias links are moved along so that the new
    columns alias the new rows. The operation is its own inverse.
    """
    relink_aliases: bool

    def _swap(self, matrix: MatrixEngine) -> None:
        store = matrix.items
        links = {item.alias_uid: item.uid for item in store.cols if item.alias_uid is not None}
        store.swap()
        if not self.relink_aliases:
            return
        for row in store.rows:
            row.alias_uid = None
        for col in store.cols:
            col.alias_uid = links.get(col.uid)

    def apply(self, matrix: MatrixEngine) -> None:
        self._swap(matrix)

    def revert(self, matrix: MatrixEngine) -> None:
        self._swap(matrix)


# --- Connections ---

@dataclass
class AddConnection(Command):
    connection: Connection

    def apply(self, matrix: MatrixEngine) -> None:
        matrix.connections.add(self.connection)

    def revert(self, matrix: MatrixEngine) -> None:
        matrix.connections.remove(self.connection.row_uid, self.connection.col_uid)


@dataclass
class UpdateConnection(Command):
    row_uid: int
    col_uid: int
    old_name: str
    old_weight: float
    new_name: str
    new_weight: float

    def _set(self, matrix: MatrixEngine, name: str, weight: float) -> None:
        conn = matrix.connections.get(self.row_uid, self.col_uid)
        conn.name = name
        conn.weight = weight

    def apply(self, matrix: MatrixEngine) -> None:
        self._set(matrix, self.new_name, self.new_weight)

    def revert(self, matrix: MatrixEngine) -> None:
        self._set(matrix, self.old_name, self.old_weight)


@dataclass
class RemoveConnections(Command):
    connections: Tuple[Connection, ...]

    def apply(self, matrix: MatrixEngine) -> None:
        for conn in self.connections:
            matrix.connections.remove(conn.row_uid, conn.col_uid)

    def revert(self, matrix: MatrixEngine) -> None:
        for conn in self.connections:
            matrix.connections.add(conn)


# --- Groupings ---

@dataclass
class AddGrouping(Command):
    grouping: Grouping

    def apply(self, matrix: MatrixEngine) -> None:
        matrix.groupings.add(self.grouping)

    def revert(self, matrix: MatrixEngine) -> None:
        matrix.groupings.remove(self.grouping.name)


@dataclass
class RemoveGrouping(Command):
    """Members must have been moved out of the grouping by earlier commands."""
    grouping: Grouping

    def apply(self, matrix: MatrixEngine) -> None:
        matrix.groupings.remove(self.grouping.name)

    def revert(self, matrix: MatrixEngine) -> None:
        matrix.groupings.add(self.grouping)


@dataclass
class SetGroupingColor(Command):
    name: str
    old_color: Tuple[float, float, float]
    new_color: Tuple[float, float, float]

    def apply(self, matrix: MatrixEngine) -> None:
        matrix.groupings.set_color(self.name, self.new_color)

    def revert(self, matrix: MatrixEngine) -> None:
        matrix.groupings.set_color(self.name, self.old_color)


@dataclass
class ResetGroupings(Command):
    dropped: Tuple[Grouping, ...]

    def apply(self, matrix: MatrixEngine) -> None:
        matrix.groupings.reset()

    def revert(self, matrix: MatrixEngine) -> None:
        for grouping in self.dropped:
            matrix.groupings.add(grouping)


# --- Metadata ---

@dataclass
class SetMetadata(Command):
    field_name: MetadataField
    old_value: str
    new_value: str

    def apply(self, matrix: MatrixEngine) -> None:
        setattr(matrix, self.field_name, self.new_value)

    def revert(self, matrix: MatrixEngine) -> None:
        setattr(matrix, self.field_name, self.old_value)
