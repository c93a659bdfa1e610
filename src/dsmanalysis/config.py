"""
Configuration & Constants
=========================
This module serves as the central registry for global constants.

Why is this file needed?
------------------------
1. Consistency: The default grouping name and colour are referenced by the
   model, the analysis code and the interchange layer. Keeping them here
   prevents the string "(None)" from being scattered throughout the code.
2. Tuning: Default parameters of the clustering algorithm live in one place
   so that callers (GUI dialogs, scripts) start from the same values.

Exports:
    DEFAULT_GROUP_NAME (str): Name of the grouping that always exists.
    DEFAULT_GROUP_COLOR (tuple): RGB colour of the default grouping.
    GOLDEN_RATIO_CONJUGATE (float): Hue step of the cluster colour sequence.
    CLUSTER_COLOR_START_HUE (float): First hue of the cluster colour sequence.
"""
from typing import Tuple

# Groupings
DEFAULT_GROUP_NAME: str = "(None)"
DEFAULT_GROUP_COLOR: Tuple[float, float, float] = (1.0, 1.0, 1.0)

# Colour generation (golden ratio method)
GOLDEN_RATIO_CONJUGATE: float = 0.618033988749895
CLUSTER_COLOR_START_HUE: float = 0.2423353
CLUSTER_COLOR_SATURATION: float = 0.5
CLUSTER_COLOR_VALUE: float = 0.95

# Thebeau clustering defaults
DEFAULT_OPTIMAL_SIZE_CLUSTER: float = 4.5
DEFAULT_POWDEP: float = 4.0
DEFAULT_POWBID: float = 1.0
DEFAULT_POWCC: float = 1.0
DEFAULT_RAND_BID: int = 122
DEFAULT_RAND_ACCEPT: int = 122
DEFAULT_ITERATIONS: int = 1000
DEFAULT_SEED: int = 30
