"""
Item Store
==========
Ordered collections of row and column items plus uid allocation.

The store does not log anything: it is the raw container the engine's
commands operate on. Collaborators must go through MatrixEngine instead.

uid contract
------------
Items created through `create()` receive a uid from a monotonic counter owned
by the store. The counter is advanced past every uid inserted explicitly (e.g.
by a persistence collaborator), so a uid is unique for the lifetime of the
open document.
"""
from __future__ import annotations

import logging
import math
from typing import Dict, Iterator, List, Optional, Tuple

from dsmanalysis.model.entities import Item

logger = logging.getLogger(__name__)


class ItemStore:
    def __init__(self, first_uid: int = 1) -> None:
        self.rows: List[Item] = []
        self.cols: List[Item] = []
        self._by_uid: Dict[int, Item] = {}
        self._next_uid = first_uid

    # --- uid allocation ---

    def allocate_uid(self) -> int:
        uid = self._next_uid
        self._next_uid += 1
        return uid

    def reserve_uid(self, uid: int) -> None:
        """Make sure the allocator never hands out 'uid' (or anything below it)."""
        if uid >= self._next_uid:
            self._next_uid = uid + 1

    @property
    def next_uid(self) -> int:
        return self._next_uid

    # --- sort index bookkeeping ---

    def max_sort_index(self, is_row: bool) -> float:
        """Largest sort index of the rows (or columns); 0 when empty."""
        items = self.rows if is_row else self.cols
        return max((item.sort_index for item in items), default=0.0)

    def next_sort_index(self, is_row: bool) -> float:
        """Whole number one greater than the current maximum."""
        return float(math.floor(self.max_sort_index(is_row)) + 1)

    def create(self, name: str, is_row: bool) -> Item:
        """Allocate a new item. It is NOT inserted into the store."""
        return Item(uid=self.allocate_uid(), name=name, sort_index=self.next_sort_index(is_row))

    # --- structure ---

    def insert(self, item: Item, is_row: bool, position: Optional[int] = None) -> None:
        if item.uid in self._by_uid:
            raise ValueError(f"Item with uid {item.uid} already exists.")
        target = self.rows if is_row else self.cols
        if position is None or position > len(target):
            target.append(item)
        else:
            target.insert(position, item)
        self._by_uid[item.uid] = item
        self.reserve_uid(item.uid)

    def remove(self, uid: int) -> Tuple[bool, int]:
        """
        Remove an item.

        Returns:
            (is_row, position) so that the removal can be reverted exactly.
        """
        for is_row, target in ((True, self.rows), (False, self.cols)):
            for position, item in enumerate(target):
                if item.uid == uid:
                    del target[position]
                    del self._by_uid[uid]
                    return is_row, position
        raise KeyError(uid)

    def clear(self, is_row: bool) -> List[Item]:
        target = self.rows if is_row else self.cols
        removed = list(target)
        target.clear()
        for item in removed:
            del self._by_uid[item.uid]
        return removed

    def restore(self, items: List[Item], is_row: bool) -> None:
        for item in items:
            self.insert(item, is_row)

    def swap(self) -> None:
        self.rows, self.cols = self.cols, self.rows

    # --- lookups (misses return None) ---

    def get(self, uid: int) -> Optional[Item]:
        return self._by_uid.get(uid)

    def get_row(self, uid: int) -> Optional[Item]:
        item = self._by_uid.get(uid)
        return item if item is not None and self.is_row(uid) else None

    def get_col(self, uid: int) -> Optional[Item]:
        item = self._by_uid.get(uid)
        return item if item is not None and self.is_col(uid) else None

    def is_row(self, uid: int) -> bool:
        return any(item.uid == uid for item in self.rows)

    def is_col(self, uid: int) -> bool:
        return any(item.uid == uid for item in self.cols)

    def get_by_alias(self, uid: int) -> Optional[Item]:
        """The column whose alias points at 'uid'."""
        for col in self.cols:
            if col.alias_uid is not None and col.alias_uid == uid:
                return col
        return None

    def __iter__(self) -> Iterator[Item]:
        yield from self.rows
        yield from self.cols

    def __len__(self) -> int:
        return len(self._by_uid)

    def copy(self) -> ItemStore:
        """Deep copy; the copy keeps allocating from the same counter value."""
        other = ItemStore(first_uid=self._next_uid)
        for row in self.rows:
            other.insert(row.copy(), True)
        for col in self.cols:
            other.insert(col.copy(), False)
        return other
