"""
Core data structures for the station planner.

This module provides containers for the input point set, the map rectangle
stations are seeded in, the current centers and partition, and the results
recorded by the driver.
"""

import math
from collections import Counter
from typing import Optional, List, Dict, Any, Sequence, Mapping, Hashable
import torch
from torch import Tensor
from dataclasses import dataclass, field

from .errors import InvalidConfigurationError


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned map rectangle ``(left, top, right, bottom)``.

    ``top`` is the smaller y value, matching screen coordinates of the map.
    """

    left: float
    top: float
    right: float
    bottom: float

    def __post_init__(self):
        values = (self.left, self.top, self.right, self.bottom)
        if not all(math.isfinite(v) for v in values):
            raise InvalidConfigurationError(f"Bounds must be finite, got {values}")
        if not self.left < self.right:
            raise InvalidConfigurationError(
                f"Bounds left ({self.left}) must be smaller than right ({self.right})")
        if not self.top < self.bottom:
            raise InvalidConfigurationError(
                f"Bounds top ({self.top}) must be smaller than bottom ({self.bottom})")

    @classmethod
    def satisfactory(cls) -> 'Bounds':
        """Rectangle covering the Satisfactory world map."""
        return cls(left=-324600.0, top=-375000.0, right=425300.0, bottom=375000.0)

    @classmethod
    def from_points(cls, points: Tensor, margin: float = 0.0) -> 'Bounds':
        """Smallest rectangle containing all points, padded by ``margin``.

        Degenerate extents (all points on one line) are padded by 1.0 so the
        rectangle is never empty.
        """
        lo = points.min(dim=0)[0]
        hi = points.max(dim=0)[0]
        pad = torch.where(hi > lo, torch.zeros_like(lo), torch.ones_like(lo)) + margin
        return cls(left=float(lo[0] - pad[0]), top=float(lo[1] - pad[1]),
                   right=float(hi[0] + pad[0]), bottom=float(hi[1] + pad[1]))

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def contains(self, points: Tensor) -> Tensor:
        """(n,) boolean mask of points inside the closed rectangle."""
        x, y = points[:, 0], points[:, 1]
        return (x >= self.left) & (x <= self.right) & (y >= self.top) & (y <= self.bottom)

    def sample(self, n: int, generator: Optional[torch.Generator] = None,
               device: Optional[torch.device] = None,
               dtype: torch.dtype = torch.float64) -> Tensor:
        """Draw ``n`` independent uniform positions inside the rectangle.

        Args:
            n: Number of positions
            generator: CPU random generator (global RNG if None)
            device: Device of the returned tensor
            dtype: Floating point type

        Returns:
            (n, 2) tensor of positions
        """
        u = torch.rand(n, 2, generator=generator, dtype=dtype)
        low = torch.tensor([self.left, self.top], dtype=dtype)
        span = torch.tensor([self.width, self.height], dtype=dtype)
        samples = low + u * span
        return samples.to(device) if device is not None else samples


@dataclass
class PointSet:
    """Fixed collection of candidate points.

    A point's identity is its row index. ``tags`` carries opaque metadata
    (resource purity on the game map) that never enters the distance maths.
    """

    positions: Tensor  # (n, 2)
    weights: Optional[Tensor] = None  # (n,)
    tags: Optional[List[Hashable]] = None

    def __post_init__(self):
        if self.positions.dim() != 2 or self.positions.shape[1] != 2:
            raise InvalidConfigurationError(
                f"Expected (n, 2) positions, got shape {tuple(self.positions.shape)}")
        if self.weights is not None and self.weights.shape != (self.positions.shape[0],):
            raise InvalidConfigurationError(
                f"Expected weights of shape ({self.positions.shape[0]},), "
                f"got {tuple(self.weights.shape)}")
        if self.tags is not None and len(self.tags) != self.positions.shape[0]:
            raise InvalidConfigurationError(
                f"Got {len(self.tags)} tags for {self.positions.shape[0]} points")

    @classmethod
    def from_records(cls, records: Sequence[Mapping[str, Any]],
                     x_key: str = 'x', y_key: str = 'y',
                     tag_key: Optional[str] = 'purity',
                     weight_key: Optional[str] = None,
                     dtype: torch.dtype = torch.float64) -> 'PointSet':
        """Build a point set from flat records such as resource markers.

        Args:
            records: Sequence of mappings with at least ``x_key`` and ``y_key``
            tag_key: Key of the opaque tag, or None to skip tags
            weight_key: Key of a per-record weight, or None for unit weights
        """
        positions = torch.tensor([[float(r[x_key]), float(r[y_key])] for r in records],
                                 dtype=dtype).reshape(-1, 2)
        weights = None
        if weight_key is not None:
            weights = torch.tensor([float(r[weight_key]) for r in records], dtype=dtype)
        tags = None
        if tag_key is not None:
            tags = [r.get(tag_key) for r in records]
        return cls(positions=positions, weights=weights, tags=tags)

    def __len__(self) -> int:
        return self.positions.shape[0]

    @property
    def device(self) -> torch.device:
        return self.positions.device

    def get_weights(self) -> Tensor:
        """Point weights, unit weights when none were given."""
        if self.weights is None:
            return torch.ones(len(self), dtype=self.positions.dtype, device=self.device)
        return self.weights

    def subset(self, indices: Sequence[int]) -> Tensor:
        """Positions of the given point indices."""
        idx = torch.as_tensor(list(indices), dtype=torch.long, device=self.device)
        return self.positions[idx]

    def tag_counts(self, indices: Optional[Sequence[int]] = None) -> Dict[Hashable, int]:
        """Count tags over all points or over the given indices."""
        if self.tags is None:
            return {}
        if indices is None:
            return dict(Counter(self.tags))
        return dict(Counter(self.tags[i] for i in indices))

    def to(self, device: torch.device) -> 'PointSet':
        return PointSet(
            positions=self.positions.to(device),
            weights=self.weights.to(device) if self.weights is not None else None,
            tags=list(self.tags) if self.tags is not None else None,
        )


@dataclass
class ClusterState:
    """Positions of all K centers at a given iteration."""

    centers: Tensor  # (K, 2)
    n_clusters: int
    dimension: int
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        assert self.centers.shape == (self.n_clusters, self.dimension)


class Partition:
    """Hard assignment of every point to exactly one of K clusters.

    Built fresh from a label vector on every call; groups may be empty.
    """

    def __init__(self, labels: Tensor, n_clusters: int):
        """
        Args:
            labels: (n,) tensor of cluster indices
            n_clusters: Number of clusters K
        """
        assert labels.dim() == 1
        if labels.numel() > 0:
            assert labels.max() < n_clusters
            assert labels.min() >= 0
        self.labels = labels.long()
        self.n_clusters = n_clusters
        self._groups: Optional[List[List[int]]] = None

    @property
    def n_points(self) -> int:
        return self.labels.shape[0]

    def get_cluster_indices(self, cluster_idx: int) -> Tensor:
        """Indices of points assigned to a specific cluster."""
        return torch.where(self.labels == cluster_idx)[0]

    @property
    def groups(self) -> List[List[int]]:
        """Point indices per cluster, in ascending index order."""
        if self._groups is None:
            self._groups = [[] for _ in range(self.n_clusters)]
            for i, k in enumerate(self.labels.tolist()):
                self._groups[k].append(i)
        return self._groups

    def count_per_cluster(self) -> Tensor:
        return torch.bincount(self.labels, minlength=self.n_clusters)

    def empty_clusters(self) -> List[int]:
        """Indices of clusters that received no points."""
        return torch.where(self.count_per_cluster() == 0)[0].tolist()


@dataclass
class RunResult:
    """Outcome of one driver iteration.

    ``centers`` and ``clusters`` are snapshots; later iterations do not
    mutate them.
    """
    total_error: float
    centers: Tensor  # (K, 2)
    clusters: List[List[int]]
    iteration: int = 0
    converged: bool = False

    @property
    def n_clusters(self) -> int:
        return self.centers.shape[0]


@dataclass
class AlgorithmState:
    """Complete state of the driver at a given iteration.

    Used for convergence checking, history and debugging.
    """
    iteration: int
    cluster_state: ClusterState
    assignments: Partition
    objective_value: float

    converged: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)
