"""
The MODEL layer contains the pure data structures of a Design Structure Matrix
and the transactional engine that mutates them.
It has NO knowledge of the GUI (Qt) or of any file format.
"""
from dsmanalysis.model.entities import Item, Connection, Grouping
from dsmanalysis.model.errors import NotSymmetricError, MatrixParseError
from dsmanalysis.model.matrix import MatrixEngine

__all__ = [
    "Item",
    "Connection",
    "Grouping",
    "MatrixEngine",
    "NotSymmetricError",
    "MatrixParseError",
]
