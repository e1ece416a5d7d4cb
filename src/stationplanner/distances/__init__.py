"""Distance metrics for the station planner."""

from .euclidean import EuclideanDistance

__all__ = [
    'EuclideanDistance'
]
