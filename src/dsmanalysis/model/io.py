"""
Matrix Interchange
==================
Converts a MatrixEngine to and from plain, JSON compatible dictionaries.

Persistence collaborators (file formats, clipboard, ...) build on this: they
write the dictionary wherever they like and hand a dictionary back to load.
Corrupt or incomplete data is reported as MatrixParseError; the engine is
never left half-built.
"""
import logging
from importlib.metadata import version, PackageNotFoundError
from typing import Any, Dict

from dsmanalysis.model.entities import Connection, Grouping, Item
from dsmanalysis.model.errors import MatrixParseError
from dsmanalysis.model.matrix import MatrixEngine

logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("dsmanalysis")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"

_METADATA_FIELDS = ("title", "project_name", "customer", "version_number")


class MatrixIO:
    @staticmethod
    def to_dict(matrix: MatrixEngine) -> Dict[str, Any]:
        return {
            "version": APP_VERSION,
            "symmetric": matrix.symmetric,
            "metadata": {name: getattr(matrix, name) for name in _METADATA_FIELDS},
            "groupings": [g.to_dict() for g in matrix.groupings],
            "rows": [row.to_dict() for row in matrix.items.rows],
            "cols": [col.to_dict() for col in matrix.items.cols],
            "connections": [conn.to_dict() for conn in matrix.connections],
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> MatrixEngine:
        """
        Rebuild a matrix. Items keep their stored uids; the returned matrix has an
        empty history and is not flagged as modified.

        Raises:
            MatrixParseError: if a section is missing or malformed.
        """
        if not isinstance(data, dict):
            raise MatrixParseError(f"Expected a mapping, got {type(data).__name__}.")

        try:
            matrix = MatrixEngine(symmetric=bool(data["symmetric"]))

            for name, value in data.get("metadata", {}).items():
                if name not in _METADATA_FIELDS:
                    logger.warning(f"Ignoring unknown metadata field '{name}'.")
                    continue
                setattr(matrix, name, str(value))

            for entry in data.get("groupings", []):
                grouping = Grouping.from_dict(entry)
                if grouping.name in matrix.groupings:
                    matrix.update_grouping_color(grouping.name, grouping.color)
                else:
                    matrix.add_grouping(grouping.name, grouping.color)

            for key, is_row in (("rows", True), ("cols", False)):
                for entry in data[key]:
                    matrix.add_existing_item(Item.from_dict(entry), is_row)

            for entry in data.get("connections", []):
                conn = Connection.from_dict(entry)
                if not matrix.modify_connection(conn.row_uid, conn.col_uid, conn.name, conn.weight):
                    raise MatrixParseError(f"Invalid connection ({conn.row_uid}, {conn.col_uid}).")

        except MatrixParseError:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to parse matrix data: {e!r}")
            raise MatrixParseError(f"Malformed matrix data: {e!r}") from e

        if matrix.symmetric and not matrix.is_symmetry_consistent():
            raise MatrixParseError("Symmetric matrix has rows and columns that do not mirror each other.")

        matrix.history.clear()
        matrix.clear_modified_flag()
        logger.info(f"Loaded matrix with {len(matrix.items.rows)} rows and {len(matrix.items.cols)} columns.")
        return matrix


def matrix_to_dict(matrix: MatrixEngine) -> Dict[str, Any]:
    return MatrixIO.to_dict(matrix)


def matrix_from_dict(data: Dict[str, Any]) -> MatrixEngine:
    return MatrixIO.from_dict(data)
