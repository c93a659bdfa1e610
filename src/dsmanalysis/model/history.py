"""
Transaction Log (Undo / Redo)
=============================
Stack based history of reversible matrix commands with checkpoint tagging.

Why is this file needed?
------------------------
1. Undo/Redo: A user-visible unit of work (rename, paste a block of
   connections, run a sort) is usually several commands. Checkpoints mark
   where such units end so that undo/redo move one unit at a time.
2. Dirty tracking: Every recorded command sets the owner's 'modified' flag.

Checkpoint semantics
--------------------
* undo_to_checkpoint() always reverts the top entry, then keeps reverting
  until the next entry to revert is itself a checkpoint (which stays applied)
  or the stack is empty.
* redo_to_checkpoint() re-applies entries up to and including the next
  checkpoint.
* mark_current_as_checkpoint() flags the top entry and clears the redo stack
  (history never branches).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Tuple

from dsmanalysis.model.commands import Command

if TYPE_CHECKING:
    from dsmanalysis.model.matrix import MatrixEngine

logger = logging.getLogger(__name__)


@dataclass
class LogEntry:
    command: Command
    checkpoint: bool = False


class TransactionLog:
    def __init__(self, target: MatrixEngine) -> None:
        self._target = target
        self._undo_stack: List[LogEntry] = []
        self._redo_stack: List[LogEntry] = []

    def push(self, command: Command) -> None:
        """Execute the command and record it (not as a checkpoint)."""
        command.apply(self._target)
        self._undo_stack.append(LogEntry(command))
        self._target.modified = True

    def undo_to_checkpoint(self) -> int:
        """
        Revert entries back to the last checkpoint (the checkpoint itself is kept).

        Returns:
            Number of reverted entries.
        """
        reverted = 0
        while self._undo_stack:
            entry = self._undo_stack[-1]
            if entry.checkpoint and reverted > 0:
                break
            self._undo_stack.pop()
            entry.command.revert(self._target)
            self._redo_stack.append(entry)
            reverted += 1

        if reverted:
            self._target.modified = True
            logger.debug(f"Undo reverted {reverted} change(s).")
        return reverted

    def redo_to_checkpoint(self) -> int:
        """
        Re-apply entries up to and including the next checkpoint.

        Returns:
            Number of re-applied entries.
        """
        applied = 0
        while self._redo_stack:
            entry = self._redo_stack.pop()
            entry.command.apply(self._target)
            self._undo_stack.append(entry)
            applied += 1
            if entry.checkpoint:
                break

        if applied:
            self._target.modified = True
            logger.debug(f"Redo applied {applied} change(s).")
        return applied

    def mark_current_as_checkpoint(self) -> None:
        if not self._undo_stack:
            raise RuntimeError("Cannot set a checkpoint: there are no changes on the undo stack.")
        self._undo_stack[-1].checkpoint = True
        self._redo_stack.clear()

    def discard_since(self, mark: int) -> int:
        """
        Revert and forget every entry pushed after the undo stack had 'mark' entries.
        Used to roll back a unit of work that failed half-way. The redo stack is untouched.
        """
        discarded = 0
        while len(self._undo_stack) > mark:
            entry = self._undo_stack.pop()
            entry.command.revert(self._target)
            discarded += 1
        return discarded

    def can_undo(self) -> bool:
        return len(self._undo_stack) > 0

    def can_redo(self) -> bool:
        return len(self._redo_stack) > 0

    def clear(self) -> None:
        """Drop both stacks (e.g. right after a document has been loaded)."""
        self._undo_stack.clear()
        self._redo_stack.clear()

    @property
    def undo_entries(self) -> Tuple[LogEntry, ...]:
        return tuple(self._undo_stack)

    @property
    def redo_entries(self) -> Tuple[LogEntry, ...]:
        return tuple(self._redo_stack)

    def __len__(self) -> int:
        return len(self._undo_stack)
