"""
Coordination Cost
=================
Scores how well the groupings of a symmetric matrix cluster its connections
(Thebeau, "Knowledge management of system interfaces and interactions for
product development processes", MIT 2001, p. 28-29).

For each connection (r, c):
    same grouping      -> intra cost  (weight or 1) * |optimal size - group size| ^ powcc
    different grouping -> extra cost  (weight or 1) * (number of rows) ^ powcc

Group size is the number of ROWS in the grouping.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict

from dsmanalysis.model.errors import NotSymmetricError
from dsmanalysis.model.matrix import MatrixEngine


@dataclass
class CoordinationScore:
    intra_breakdown: Dict[str, float] = field(default_factory=dict)
    total_intra_cost: float = 0.0
    total_extra_cost: float = 0.0
    total_cost: float = 0.0


class CoordinationScorer:
    """
    Args:
        optimal_size_cluster: Cluster size that receives no intra penalty.
        powcc: Exponent penalizing the cluster size.
        calculate_by_weight: Use connection weights instead of a flat 1 per connection.
    """

    def __init__(self, optimal_size_cluster: float, powcc: float, calculate_by_weight: bool = True) -> None:
        self.optimal_size_cluster = optimal_size_cluster
        self.powcc = powcc
        self.calculate_by_weight = calculate_by_weight

    def score(self, matrix: MatrixEngine) -> CoordinationScore:
        if not matrix.symmetric:
            raise NotSymmetricError("coordination score")

        rows = matrix.items.rows
        dsm_size = len(rows)
        cluster_sizes = Counter(row.group for row in rows)

        breakdown: Dict[str, float] = {}
        total_intra = 0.0
        total_extra = 0.0
        for conn in matrix.connections:
            row_group = matrix.get_item(conn.row_uid).group
            col_group = matrix.get_item(conn.col_uid).group
            factor = conn.weight if self.calculate_by_weight else 1.0

            if row_group == col_group:
                intra = factor * abs(self.optimal_size_cluster - cluster_sizes[row_group]) ** self.powcc
                breakdown[row_group] = breakdown.get(row_group, 0.0) + intra
                total_intra += intra
            else:
                total_extra += factor * dsm_size ** self.powcc

        return CoordinationScore(
            intra_breakdown=breakdown,
            total_intra_cost=total_intra,
            total_extra_cost=total_extra,
            total_cost=total_intra + total_extra,
        )


def get_coordination_score(
    matrix: MatrixEngine,
    optimal_size_cluster: float,
    powcc: float,
    calculate_by_weight: bool = True,
) -> CoordinationScore:
    return CoordinationScorer(optimal_size_cluster, powcc, calculate_by_weight).score(matrix)
