"""
Evaluation metrics for station placements.

Functions here work on plain tensors so a caller can score any set of
stations, not only the ones a fitted driver holds.
"""

from typing import Optional
import torch
from torch import Tensor


def pairwise_distances(X: Tensor, Y: Optional[Tensor] = None) -> Tensor:
    """Euclidean distances between the rows of X and Y.

    Args:
        X: (n, d) tensor
        Y: (m, d) tensor (X if None)

    Returns:
        (n, m) tensor of distances
    """
    if Y is None:
        Y = X
    diff = X.unsqueeze(1) - Y.unsqueeze(0)
    return torch.sqrt(torch.sum(diff * diff, dim=2))


def total_distance(X: Tensor, labels: Tensor, centers: Tensor,
                   weights: Optional[Tensor] = None) -> float:
    """k-median objective: summed distance from each point to its station.

    Args:
        X: (n, 2) positions
        labels: (n,) station index per point
        centers: (K, 2) station positions
        weights: Optional (n,) point weights

    Returns:
        Total (weighted) distance
    """
    diff = X - centers[labels]
    distances = torch.sqrt(torch.sum(diff * diff, dim=1))
    if weights is not None:
        distances = distances * weights
    return distances.sum().item()


def nearest_center(X: Tensor, centers: Tensor) -> Tensor:
    """Index of the nearest center for every point; ties go to the lowest index."""
    return torch.argmin(pairwise_distances(X, centers), dim=1)


def cluster_sizes(labels: Tensor, n_clusters: int) -> Tensor:
    """Number of points assigned to each station."""
    return torch.bincount(labels.long(), minlength=n_clusters)
