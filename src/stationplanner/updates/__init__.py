"""Parameter update strategies for the station planner."""

from .steepest_descent import SteepestDescentSearch, find_median, weighted_distance_sum
from .median import MedianUpdater

__all__ = [
    'SteepestDescentSearch',
    'find_median',
    'weighted_distance_sum',
    'MedianUpdater'
]
