"""
Propagation Analysis
====================
Finds which items are affected, level by level, when a start item changes.

Level 1 holds the items the start item connects to directly, level 2 the
items those connect to, and so on. Excluded items are still counted when they
are reached, but the search does not continue through them.

Direction of travel
-------------------
The search always leaves an item through the side of the matrix it lives on:
a row reaches columns (row -> col connections), a column reaches rows
(col <- row connections). In an asymmetric matrix this alternates
rows -> columns -> rows ... starting from the side of the start item. In a
symmetric matrix every reached column is translated to its mirrored row, so
the search keeps following row -> column connections.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from dsmanalysis.model.matrix import MatrixEngine

logger = logging.getLogger(__name__)

PropagationResult = Dict[int, Dict[int, float]]


class PropagationAnalyzer:
    """Read-only traversal over the connections of one matrix."""

    def __init__(self, matrix: MatrixEngine) -> None:
        self.matrix = matrix

    def _canonical(self, uid: int) -> int:
        """In symmetric matrices a column stands for its mirrored row."""
        if self.matrix.symmetric:
            col = self.matrix.get_col_item(uid)
            if col is not None and col.alias_uid is not None:
                return col.alias_uid
        return uid

    def analyze(
        self,
        start_uid: int,
        num_levels: int,
        exclusions: Iterable[int] = (),
        min_weight: float = 0.0,
        count_by_weight: bool = True,
    ) -> PropagationResult:
        """
        Run the analysis.

        Args:
            start_uid: Item to start from (row or column).
            num_levels: Number of levels to compute (>= 1).
            exclusions: Uids that are counted but not propagated through.
            min_weight: Connections lighter than this are ignored.
            count_by_weight: Accumulate connection weights instead of occurrences.

        Returns:
            {level: {uid: accumulated value}} for every level 1..num_levels.
        """
        if num_levels < 1:
            raise ValueError(f"num_levels must be at least 1, got {num_levels}.")
        if self.matrix.get_item(start_uid) is None:
            raise ValueError(f"Start item {start_uid} is not part of the matrix.")

        start = self._canonical(start_uid)
        excluded = {self._canonical(uid) for uid in exclusions}
        excluded.add(start)

        results: PropagationResult = {}
        frontier: List[int] = [start]

        for level in range(1, num_levels + 1):
            level_result: Dict[int, float] = {}
            next_frontier: List[int] = []

            for uid in frontier:
                if self.matrix.is_row(uid):
                    reached = [(conn, conn.col_uid) for conn in self.matrix.connections.for_row(uid)]
                else:
                    reached = [(conn, conn.row_uid) for conn in self.matrix.connections.for_col(uid)]

                for conn, target_uid in reached:
                    if conn.weight < min_weight:
                        continue

                    target = self._canonical(target_uid)
                    increment = conn.weight if count_by_weight else 1.0
                    level_result[target] = level_result.get(target, 0.0) + increment

                    if target not in excluded and target not in next_frontier:
                        next_frontier.append(target)

            results[level] = level_result
            frontier = next_frontier
            logger.debug(f"Propagation level {level}: {len(level_result)} item(s) reached.")

        return results


def propagation_analysis(
    matrix: MatrixEngine,
    start_uid: int,
    num_levels: int,
    exclusions: Iterable[int] = (),
    min_weight: float = 0.0,
    count_by_weight: bool = True,
) -> PropagationResult:
    """Shortcut for PropagationAnalyzer(matrix).analyze(...)."""
    return PropagationAnalyzer(matrix).analyze(start_uid, num_levels, exclusions, min_weight, count_by_weight)
