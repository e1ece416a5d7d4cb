"""
Hard assignment strategy (the partitioner).

Assigns each point to its nearest station; the result partitions the point
set into K disjoint, possibly empty groups.
"""

from typing import List, Optional
import torch
from torch import Tensor

from ..base.interfaces import AssignmentStrategy, ClusterRepresentation, DistanceMetric
from ..base.data_structures import Partition
from ..distances.euclidean import EuclideanDistance
from ..representations.station import StationRepresentation


class HardAssignment(AssignmentStrategy):
    """Hard (discrete) assignment to nearest station.

    Each point is assigned to exactly one station based on minimum distance.
    Ties go to the station with the lowest index. Cost is O(n·K) per call.
    """

    def __init__(self, metric: Optional[DistanceMetric] = None):
        """
        Args:
            metric: Distance metric (Euclidean if None)
        """
        super().__init__()
        self.metric = metric if metric is not None else EuclideanDistance()

    def distance_matrix(self, points: Tensor,
                        representations: List[ClusterRepresentation]) -> Tensor:
        """(n, K) distances from every point to every station."""
        n_points = points.shape[0]
        n_clusters = len(representations)

        distances = torch.zeros(n_points, n_clusters, device=points.device, dtype=points.dtype)
        for k, representation in enumerate(representations):
            distances[:, k] = self.metric.compute(points, representation)

        return distances

    def compute_assignments(self, points: Tensor,
                          representations: List[ClusterRepresentation],
                          **kwargs) -> Tensor:
        """Assign each point to nearest station.

        Args:
            points: (n, 2) positions
            representations: List of K station representations
            **kwargs: Ignored for basic hard assignment

        Returns:
            (n,) tensor of station indices
        """
        if len(representations) == 0:
            raise ValueError("Need at least one station to assign points")

        distances = self.distance_matrix(points, representations)

        # argmin returns the first minimal index, so ties go to the lowest station
        return torch.argmin(distances, dim=1)

    def partition(self, points: Tensor, centers: Tensor) -> Partition:
        """Group point indices by nearest center.

        Args:
            points: (n, 2) positions
            centers: (K, 2) station positions

        Returns:
            Partition with K groups covering every point exactly once
        """
        representations = []
        for center in centers:
            rep = StationRepresentation(centers.shape[1], points.device, points.dtype)
            rep.mean = center
            representations.append(rep)
        labels = self.compute_assignments(points, representations)
        return Partition(labels, len(representations))


def partition(points: Tensor, centers: Tensor) -> Partition:
    """Partition ``points`` by nearest of ``centers`` (Euclidean)."""
    return HardAssignment().partition(points, centers)
