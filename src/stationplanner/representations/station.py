"""
Station representation for k-median clustering.

A station is a single position on the map; its cost for a point is the plain
(unsquared) Euclidean distance.
"""

from typing import Optional
import torch
from torch import Tensor

from .base_representation import BaseRepresentation
from ..updates.steepest_descent import SteepestDescentSearch


class StationRepresentation(BaseRepresentation):
    """Cluster represented by one station position.

    Moved to the approximate geometric median of its assigned points.
    """

    def __init__(self, dimension: int = 2, device: Optional[torch.device] = None,
                 dtype: torch.dtype = torch.float64):
        super().__init__(dimension, device if device is not None else torch.device('cpu'), dtype)

    def distance_to_point(self, points: Tensor) -> Tensor:
        """Compute Euclidean distance from points to the station.

        Args:
            points: (n, 2) tensor of positions

        Returns:
            (n,) tensor of distances
        """
        self._check_points_shape(points)

        diff = points - self._mean.unsqueeze(0)
        return torch.sqrt(torch.sum(diff * diff, dim=1))

    def update_from_points(self, points: Tensor, weights: Optional[Tensor] = None,
                          search: Optional[SteepestDescentSearch] = None,
                          **kwargs) -> None:
        """Move the station to the median of its assigned points.

        Args:
            points: (m, 2) tensor of assigned points
            weights: Optional (m,) point weights
            search: Median search to use (default settings if None)
        """
        self._check_points_shape(points)

        if len(points) == 0:
            # No points assigned - keep current position
            return

        if search is None:
            search = SteepestDescentSearch()
        self.mean = search.find(points, weights)

    def __repr__(self) -> str:
        x, y = self._mean.tolist()[:2]
        return f"StationRepresentation(x={x:.1f}, y={y:.1f})"
