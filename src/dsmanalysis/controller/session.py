"""
Document Session
================
Owns one open MatrixEngine and serializes every access to it.

Why is this file needed?
------------------------
1. Units of work: A single user action (paste a block, rename a symmetric
   pair, apply a clustering result) is several engine calls. `transaction()`
   groups them and marks ONE checkpoint at the end, so one undo reverts the
   whole action.
2. Atomicity: If an exception escapes the block, everything recorded inside
   it is reverted and the error is re-raised.
3. Signals: Views listen to `matrix_changed` instead of polling the engine.

The engine itself is not thread safe. Background workers never touch it;
they operate on `snapshot()` copies.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from PySide6.QtCore import QObject, Signal

from dsmanalysis.model.matrix import MatrixEngine

logger = logging.getLogger(__name__)


class DocumentSession(QObject):
    """One open document with undo/redo by unit of work."""
    matrix_changed = Signal(object)
    modified_changed = Signal(bool)

    def __init__(self, matrix: Optional[MatrixEngine] = None, symmetric: bool = False) -> None:
        super().__init__()
        self._matrix = matrix if matrix is not None else MatrixEngine(symmetric=symmetric)
        self._lock = threading.RLock()
        self._last_modified = self._matrix.modified

    @property
    def matrix(self) -> MatrixEngine:
        return self._matrix

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def _notify(self) -> None:
        self.matrix_changed.emit(self._matrix)
        if self._matrix.modified != self._last_modified:
            self._last_modified = self._matrix.modified
            self.modified_changed.emit(self._last_modified)

    @contextmanager
    def transaction(self) -> Iterator[MatrixEngine]:
        """
        Run engine calls as one undoable unit.

        Usage:
            with session.transaction() as matrix:
                matrix.set_item_name_symmetric(row, "Pump")
        """
        with self._lock:
            mark = len(self._matrix.history)
            try:
                yield self._matrix
            except Exception:
                discarded = self._matrix.history.discard_since(mark)
                logger.warning(f"Transaction failed, reverted {discarded} change(s).")
                raise

            if len(self._matrix.history) > mark:
                self._matrix.history.mark_current_as_checkpoint()
                self._notify()

    def undo(self) -> bool:
        with self._lock:
            changed = self._matrix.history.undo_to_checkpoint() > 0
            if changed:
                self._notify()
            return changed

    def redo(self) -> bool:
        with self._lock:
            changed = self._matrix.history.redo_to_checkpoint() > 0
            if changed:
                self._notify()
            return changed

    def can_undo(self) -> bool:
        with self._lock:
            return self._matrix.history.can_undo()

    def can_redo(self) -> bool:
        with self._lock:
            return self._matrix.history.can_redo()

    def snapshot(self) -> MatrixEngine:
        """Independent copy of the current state (e.g. input for a background worker)."""
        with self._lock:
            return self._matrix.copy()

    def replace_matrix(self, matrix: MatrixEngine) -> None:
        """Swap in a new document (after loading, or a finished clustering run). History starts empty."""
        with self._lock:
            self._matrix = matrix
            logger.info(f"Session now holds {matrix!r}.")
            self._notify()

    def mark_saved(self) -> None:
        with self._lock:
            self._matrix.clear_modified_flag()
            self._notify()
