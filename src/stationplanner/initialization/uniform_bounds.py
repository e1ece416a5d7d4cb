"""
Uniform initialization inside the map rectangle.

Each station starts at an independent uniform random position within the
bounds, regardless of where the points are.
"""

from typing import List, Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, ClusterRepresentation
from ..base.data_structures import Bounds
from ..representations.station import StationRepresentation


class UniformBoundsInit(InitializationStrategy):
    """Seed stations uniformly at random inside a rectangle."""

    def __init__(self, bounds: Bounds, generator: Optional[torch.Generator] = None):
        """
        Args:
            bounds: Rectangle to sample from
            generator: CPU random generator (global RNG if None)
        """
        self.bounds = bounds
        self.generator = generator

    def initialize(self, points: Tensor, n_clusters: int,
                  **kwargs) -> List[ClusterRepresentation]:
        """Initialize stations at uniform random positions.

        Args:
            points: (n, 2) positions (only their device and dtype are used)
            n_clusters: Number of stations

        Returns:
            List of StationRepresentations
        """
        positions = self.bounds.sample(n_clusters, generator=self.generator,
                                       device=points.device, dtype=points.dtype)

        representations = []
        for position in positions:
            rep = StationRepresentation(points.shape[1], points.device, points.dtype)
            rep.mean = position
            representations.append(rep)

        return representations
