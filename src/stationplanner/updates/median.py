"""
Median update strategy for k-median clustering.
"""

from typing import Optional
from torch import Tensor

from ..base.interfaces import ParameterUpdater, ClusterRepresentation
from .steepest_descent import SteepestDescentSearch


class MedianUpdater(ParameterUpdater):
    """Moves a station to the approximate geometric median of its points."""

    def __init__(self, search: Optional[SteepestDescentSearch] = None):
        """
        Args:
            search: Median search to run (default step and epsilon if None)
        """
        self.search = search if search is not None else SteepestDescentSearch()

    def update(self, representation: ClusterRepresentation,
               points: Tensor,
               weights: Optional[Tensor] = None,
               **kwargs) -> None:
        """Update station position.

        Args:
            representation: Station to move
            points: Points assigned to this station (already filtered, nonempty)
            weights: Optional point weights
            **kwargs: Ignored
        """
        representation.update_from_points(points, weights=weights, search=self.search)
