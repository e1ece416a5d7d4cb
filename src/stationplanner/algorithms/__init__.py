"""Clustering algorithm implementations."""

from .kmedian import KMedian, KMedianObjective

__all__ = [
    'KMedian',
    'KMedianObjective'
]
