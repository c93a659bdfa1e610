"""
Matrix Entities
===============
Defines the plain data objects a matrix is made of.

Classes:
    Item: A row or column of the matrix.
    Connection: A directed, weighted edge from a row item to a column item.
    Grouping: A named, coloured partition that items can be assigned to.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from dsmanalysis.config import DEFAULT_GROUP_NAME, DEFAULT_GROUP_COLOR


@dataclass
class Item:
    """
    A row or column of the matrix.

    The uid is assigned once (by the allocator of the owning document or by a
    persistence collaborator) and must never change afterwards. For a column of
    a symmetric matrix 'alias_uid' holds the uid of the mirrored row.
    """
    uid: int
    name: str
    sort_index: float
    group: str = DEFAULT_GROUP_NAME
    alias_uid: Optional[int] = None

    def copy(self) -> Item:
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uid": self.uid,
            "alias_uid": self.alias_uid,
            "name": self.name,
            "sort_index": self.sort_index,
            "group": self.group,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Item:
        alias = data.get("alias_uid")
        return Item(
            uid=int(data["uid"]),
            name=str(data["name"]),
            sort_index=float(data["sort_index"]),
            group=str(data.get("group", DEFAULT_GROUP_NAME)),
            alias_uid=None if alias is None else int(alias),
        )

    def __str__(self) -> str:
        return self.name


@dataclass
class Connection:
    """Directed edge; the direction is always row -> column, even in symmetric matrices."""
    row_uid: int
    col_uid: int
    name: str = ""
    weight: float = 1.0

    @property
    def key(self) -> Tuple[int, int]:
        return self.row_uid, self.col_uid

    def copy(self) -> Connection:
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {"row_uid": self.row_uid, "col_uid": self.col_uid, "name": self.name, "weight": self.weight}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Connection:
        return Connection(
            row_uid=int(data["row_uid"]),
            col_uid=int(data["col_uid"]),
            name=str(data.get("name", "")),
            weight=float(data.get("weight", 1.0)),
        )


@dataclass
class Grouping:
    name: str
    color: Tuple[float, float, float] = DEFAULT_GROUP_COLOR

    def copy(self) -> Grouping:
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "color": list(self.color)}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Grouping:
        color = data.get("color", DEFAULT_GROUP_COLOR)
        r, g, b = (float(c) for c in color)
        return Grouping(name=str(data["name"]), color=(r, g, b))
