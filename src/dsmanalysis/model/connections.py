"""
Connection Store
================
Set of directed, weighted edges keyed by (row_uid, col_uid). At most one
connection exists per key.
"""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from dsmanalysis.model.entities import Connection


class ConnectionStore:
    def __init__(self, connections: Iterable[Connection] = ()) -> None:
        self._connections: Dict[Tuple[int, int], Connection] = {}
        for conn in connections:
            self.add(conn)

    def add(self, connection: Connection) -> None:
        if connection.key in self._connections:
            raise ValueError(f"Connection {connection.key} already exists.")
        self._connections[connection.key] = connection

    def remove(self, row_uid: int, col_uid: int) -> Connection:
        return self._connections.pop((row_uid, col_uid))

    def get(self, row_uid: int, col_uid: int) -> Optional[Connection]:
        return self._connections.get((row_uid, col_uid))

    def for_row(self, row_uid: int) -> List[Connection]:
        return [conn for conn in self._connections.values() if conn.row_uid == row_uid]

    def for_col(self, col_uid: int) -> List[Connection]:
        return [conn for conn in self._connections.values() if conn.col_uid == col_uid]

    def involving(self, uid: int) -> List[Connection]:
        """Every connection that has 'uid' on either end."""
        return [conn for conn in self._connections.values() if uid in conn.key]

    def __contains__(self, key: Tuple[int, int]) -> bool:
        return key in self._connections

    def __iter__(self) -> Iterator[Connection]:
        return iter(list(self._connections.values()))

    def __len__(self) -> int:
        return len(self._connections)

    def copy(self) -> ConnectionStore:
        return ConnectionStore(conn.copy() for conn in self._connections.values())
