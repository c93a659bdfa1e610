"""
Thebeau Clustering
==================
Stochastic search for groupings of a symmetric matrix with a low
coordination cost (Thebeau 2001, MIT thesis).

Algorithm:
    1. Every row (and its mirrored column) starts in its own grouping.
    2. Compute the coordination cost of that matrix; it is the best so far.
    3. Repeat for a fixed number of iterations:
       a. pick a random row,
       b. every grouping bids for it,
       c. draw 0..rand_bid; on rand_bid take the second highest bid,
          otherwise the highest,
       d. move the row (and its mirror) in a scratch copy, drop the grouping
          it left if no row remains in it, and score the copy,
       e. draw 0..rand_accept; keep the scratch copy when the draw equals
          rand_accept or when the cost went down,
       f. remember the cheapest matrix seen.

All random draws come from one seeded numpy Generator so that a run is
reproducible from (input matrix, parameters, seed).
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from dsmanalysis.config import (
    DEFAULT_GROUP_NAME, DEFAULT_OPTIMAL_SIZE_CLUSTER, DEFAULT_POWDEP, DEFAULT_POWBID, DEFAULT_POWCC,
    DEFAULT_RAND_BID, DEFAULT_RAND_ACCEPT, DEFAULT_ITERATIONS, DEFAULT_SEED,
)
from dsmanalysis.analysis.coordination import CoordinationScorer
from dsmanalysis.model.entities import Item
from dsmanalysis.model.errors import NotSymmetricError
from dsmanalysis.model.matrix import MatrixEngine
from dsmanalysis.utils import golden_ratio_colors

logger = logging.getLogger(__name__)


@dataclass
class ThebeauParameters:
    optimal_size_cluster: float = DEFAULT_OPTIMAL_SIZE_CLUSTER
    powdep: float = DEFAULT_POWDEP
    powbid: float = DEFAULT_POWBID
    powcc: float = DEFAULT_POWCC
    rand_bid: int = DEFAULT_RAND_BID
    rand_accept: int = DEFAULT_RAND_ACCEPT
    calculate_by_weight: bool = True
    iterations: int = DEFAULT_ITERATIONS
    seed: int = DEFAULT_SEED
    exclusions: Sequence[int] = field(default_factory=tuple)  # row uids that are never moved

    def validate(self) -> None:
        if self.rand_bid < 0 or self.rand_accept < 0:
            raise ValueError("rand_bid and rand_accept must not be negative.")
        if self.iterations < 0:
            raise ValueError("iterations must not be negative.")


@dataclass
class ClusterResult:
    matrix: MatrixEngine
    cost: float
    history: List[float] = field(default_factory=list)  # cost of the proposal of every iteration
    iterations_run: int = 0
    cancelled: bool = False


def _divide(numerator: float, denominator: float) -> float:
    if denominator == 0.0:
        return math.inf if numerator > 0.0 else 0.0
    return numerator / denominator


def calculate_cluster_bid(
    matrix: MatrixEngine,
    group: str,
    row_item: Item,
    optimal_size_cluster: float,
    powdep: float,
    powbid: float,
    calculate_by_weight: bool = True,
) -> float:
    """
    Bid of a grouping for a row: (interactions with its members) ^ powdep / |optimal - size| ^ powbid.

    The connection between the row and its own mirrored column is not counted.
    A zero denominator (grouping already has the optimal size) gives an infinite
    bid when the row interacts with the grouping, otherwise 0.
    """
    cluster_size = sum(1 for row in matrix.items.rows if row.group == group)

    inout = 0.0
    for col in matrix.items.cols:
        if col.group != group or col.alias_uid == row_item.uid:
            continue
        conn = matrix.get_connection(row_item.uid, col.uid)
        if conn is not None:
            inout += conn.weight if calculate_by_weight else 1.0

    return _divide(inout ** powdep, abs(optimal_size_cluster - cluster_size) ** powbid)


def select_bidders(bids: Dict[str, float]) -> Tuple[str, Optional[str]]:
    """
    Highest and second highest bidder, scanning in order; the first seen wins ties.
    A previous leader is demoted to second place when it is overtaken.
    """
    highest: Optional[str] = None
    second: Optional[str] = None
    for group, bid in bids.items():
        if highest is None or bid > bids[highest]:
            second = highest
            highest = group
        elif second is None or bid > bids[second]:
            second = group
    return highest, second


def delete_cluster_if_empty(matrix: MatrixEngine, group: str) -> None:
    """Remove 'group' once no row belongs to it any more."""
    if group == DEFAULT_GROUP_NAME or group not in matrix.groupings:
        return
    if not matrix.group_members(group, rows_only=True):
        matrix.remove_grouping(group)


class ClusterOptimizer:
    def __init__(self, parameters: Optional[ThebeauParameters] = None) -> None:
        self.parameters = parameters or ThebeauParameters()
        self.scorer = CoordinationScorer(
            optimal_size_cluster=self.parameters.optimal_size_cluster,
            powcc=self.parameters.powcc,
            calculate_by_weight=self.parameters.calculate_by_weight,
        )

    def _initial_clusters(self, input_matrix: MatrixEngine) -> MatrixEngine:
        """Copy of the input with every row (and its mirror) in its own grouping."""
        matrix = input_matrix.copy()
        matrix.clear_groupings()

        colors = golden_ratio_colors()
        for i, row in enumerate(matrix.rows):
            name = f"G{i}"
            matrix.set_item_group_symmetric(row, name)
            matrix.update_grouping_color(name, next(colors))

        matrix.history.clear()
        return matrix

    def _bids(self, matrix: MatrixEngine, item: Item) -> Dict[str, float]:
        p = self.parameters
        return {
            group.name: calculate_cluster_bid(
                matrix, group.name, item, p.optimal_size_cluster, p.powdep, p.powbid, p.calculate_by_weight
            )
            for group in matrix.groupings
            if group.name != DEFAULT_GROUP_NAME
        }

    def run(
        self,
        input_matrix: MatrixEngine,
        should_stop: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[int], None]] = None,
    ) -> ClusterResult:
        """
        Cluster a symmetric matrix. The input matrix is not modified.

        Args:
            input_matrix: Matrix to cluster.
            should_stop: Polled before every iteration; returning True ends the search early.
            progress_callback: Receives the progress in percent whenever it changes.

        Returns:
            ClusterResult holding the cheapest matrix found.
        """
        if not input_matrix.symmetric:
            raise NotSymmetricError("thebeau clustering")
        p = self.parameters
        p.validate()

        rng = np.random.default_rng(p.seed)
        matrix = self._initial_clusters(input_matrix)
        coordination_cost = self.scorer.score(matrix).total_cost
        best = matrix.copy()
        best_cost = coordination_cost

        result = ClusterResult(matrix=best, cost=best_cost)
        row_count = len(matrix.items.rows)
        excluded = set(p.exclusions)
        candidates = [row.uid for row in matrix.items.rows if row.uid not in excluded]
        if row_count == 0 or not candidates:
            logger.warning("Nothing to cluster: no rows available to move.")
            return result

        logger.info(f"Starting Thebeau clustering: {p.iterations} iterations, initial cost {coordination_cost:.4f}.")
        last_percentage = -1
        for i in range(p.iterations):
            if should_stop is not None and should_stop():
                logger.info(f"Clustering stopped after {i} iterations.")
                result.cancelled = True
                break

            # a. random row, re-drawn while excluded
            n = int(rng.integers(row_count))
            while matrix.items.rows[n].uid in excluded:
                n = int(rng.integers(row_count))
            item = matrix.items.rows[n]

            # b./c. bids and the winning grouping
            bids = self._bids(matrix, item)
            highest, second = select_bidders(bids)
            n_bid = int(rng.integers(0, p.rand_bid, endpoint=True))
            chosen = second if n_bid == p.rand_bid and second is not None else highest

            # d. proposal in a scratch copy
            scratch = matrix.copy()
            scratch.set_item_group_symmetric(scratch.get_item(item.uid), chosen)
            delete_cluster_if_empty(scratch, item.group)
            new_cost = self.scorer.score(scratch).total_cost

            # e./f. accept and remember the best
            n_accept = int(rng.integers(0, p.rand_accept, endpoint=True))
            if n_accept == p.rand_accept or new_cost < coordination_cost:
                scratch.history.clear()
                matrix = scratch
                coordination_cost = new_cost
                if coordination_cost < best_cost:
                    best = matrix.copy()
                    best_cost = coordination_cost

            result.history.append(new_cost)
            result.iterations_run = i + 1
            logger.debug(f"Iteration {i}: proposal cost {new_cost:.4f}, current {coordination_cost:.4f}.")

            if progress_callback is not None:
                percentage = int(100 * (i + 1) / p.iterations)
                if percentage != last_percentage:
                    last_percentage = percentage
                    progress_callback(percentage)

        result.matrix = best
        result.cost = best_cost
        logger.info(f"Clustering finished: best cost {best_cost:.4f}.")
        return result


def thebeau_algorithm(input_matrix: MatrixEngine, parameters: Optional[ThebeauParameters] = None) -> MatrixEngine:
    """Shortcut returning only the best matrix."""
    return ClusterOptimizer(parameters).run(input_matrix).matrix
