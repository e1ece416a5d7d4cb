"""
Euclidean distance metric for station placement.

The k-median objective sums plain distances, so unlike k-means the default
here is the unsquared norm.
"""

import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric, ClusterRepresentation


class EuclideanDistance(DistanceMetric):
    """Euclidean distance metric.

    Computes ||x - c|| where c is the station position.
    """

    def __init__(self, squared: bool = False):
        """
        Args:
            squared: If True, return squared distances.
                    If False, return actual Euclidean distances (default).
        """
        self.squared = squared

    def compute(self, points: Tensor, representation: ClusterRepresentation,
                **kwargs) -> Tensor:
        """Compute Euclidean distances from points to a station.

        Args:
            points: (n, 2) tensor of points
            representation: Cluster representation with 'mean' parameter

        Returns:
            (n,) tensor of distances
        """
        params = representation.get_parameters()
        if 'mean' not in params:
            raise ValueError("Euclidean distance requires representation with 'mean' parameter")

        center = params['mean']

        diff = points - center.unsqueeze(0)
        squared_distances = torch.sum(diff * diff, dim=1)

        if self.squared:
            return squared_distances
        else:
            return torch.sqrt(squared_distances)
