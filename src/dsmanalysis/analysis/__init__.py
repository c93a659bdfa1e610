"""
The ANALYSIS layer contains read-only algorithms over a MatrixEngine:
propagation of changes, coordination cost and Thebeau clustering.
None of them modify the matrix they are given.
"""
from dsmanalysis.analysis.clustering import ClusterOptimizer, ClusterResult, ThebeauParameters, thebeau_algorithm
from dsmanalysis.analysis.coordination import CoordinationScore, CoordinationScorer, get_coordination_score
from dsmanalysis.analysis.propagation import PropagationAnalyzer, propagation_analysis

__all__ = [
    "ClusterOptimizer",
    "ClusterResult",
    "ThebeauParameters",
    "thebeau_algorithm",
    "CoordinationScore",
    "CoordinationScorer",
    "get_coordination_score",
    "PropagationAnalyzer",
    "propagation_analysis",
]
