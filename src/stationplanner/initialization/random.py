"""
Random initialization by selecting points from the dataset.
"""

from typing import List, Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, ClusterRepresentation
from ..base.errors import InvalidConfigurationError
from ..representations.station import StationRepresentation


class RandomPointsInit(InitializationStrategy):
    """Start each station on a distinct randomly chosen point.

    Selects n_clusters points without replacement.
    """

    def __init__(self, generator: Optional[torch.Generator] = None):
        """
        Args:
            generator: CPU random generator (global RNG if None)
        """
        self.generator = generator

    def initialize(self, points: Tensor, n_clusters: int,
                  **kwargs) -> List[ClusterRepresentation]:
        n_points, dimension = points.shape

        if n_clusters > n_points:
            raise InvalidConfigurationError(
                f"Cannot create {n_clusters} clusters from {n_points} points")

        indices = torch.randperm(n_points, generator=self.generator)[:n_clusters]

        representations = []
        for idx in indices.tolist():
            rep = StationRepresentation(dimension, points.device, points.dtype)
            rep.mean = points[idx].clone()
            representations.append(rep)

        return representations
