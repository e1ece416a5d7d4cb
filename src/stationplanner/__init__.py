"""
Station planner: k-median placement of stations over map resource nodes.

Clusters a fixed set of 2D points into K groups and moves one station per
group to the approximate geometric median of its points, minimizing the
total distance from every point to its station. Because stations start at
random positions, the driver keeps the best solution over repeated runs.

Example usage:
    >>> import torch
    >>> from stationplanner import KMedian, Bounds
    >>>
    >>> # Resource node positions
    >>> X = torch.rand(500, 2) * 1000
    >>>
    >>> # Place 5 stations, best of 10 randomized runs
    >>> model = KMedian(n_clusters=5, bounds=Bounds(0, 0, 1000, 1000),
    ...                 n_init=10, random_state=0)
    >>> model.fit(X)
    >>>
    >>> model.best_error_, model.best_centers_
"""

__version__ = '0.1.0'

# Import main algorithm
from .algorithms.kmedian import KMedian, KMedianObjective

# Median search
from .updates import SteepestDescentSearch, find_median
from .assignments import partition

# Visualization
from .visualization import (
    plot_stations,
    plot_model,
    plot_error_history
)

# Convenience imports
from .base import (
    Bounds,
    PointSet,
    Partition,
    RunResult,
    DriverState,
    InvalidConfigurationError,
    EmptyClusterError,
    ConvergenceWarning
)

__all__ = [
    # Algorithms
    'KMedian',
    'KMedianObjective',

    # Components
    'SteepestDescentSearch',
    'find_median',
    'partition',

    # Core data structures
    'Bounds',
    'PointSet',
    'Partition',
    'RunResult',
    'DriverState',

    # Errors
    'InvalidConfigurationError',
    'EmptyClusterError',
    'ConvergenceWarning',

    # Visualization
    'plot_stations',
    'plot_model',
    'plot_error_history',

    # Version
    '__version__'
]
