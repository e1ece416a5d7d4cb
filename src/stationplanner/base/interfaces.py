"""
Core interfaces for the station planner.

This module defines the abstract base classes that the pluggable pieces of the
k-median driver implement: how a station is represented, how points are
assigned to stations, how a station is moved, where stations start, and when
the loop stops.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List
import torch
from torch import Tensor


class ClusterRepresentation(ABC):
    """Abstract base class for a cluster's representative location."""

    @abstractmethod
    def distance_to_point(self, points: Tensor) -> Tensor:
        """Compute distance from points to this cluster representative.

        Args:
            points: (n, 2) tensor of positions

        Returns:
            (n,) tensor of distances
        """
        pass

    @abstractmethod
    def update_from_points(self, points: Tensor, weights: Optional[Tensor] = None,
                          **kwargs) -> None:
        """Move the representative given its assigned points.

        Args:
            points: (m, 2) tensor of assigned points
            weights: Optional (m,) tensor of point weights
            **kwargs: Additional update-specific parameters
        """
        pass

    @abstractmethod
    def get_parameters(self) -> Dict[str, Tensor]:
        """Return all parameters defining this representation."""
        pass

    @abstractmethod
    def set_parameters(self, params: Dict[str, Tensor]) -> None:
        """Set parameters from dictionary."""
        pass

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Ambient dimension of the data."""
        pass

    @abstractmethod
    def to(self, device: torch.device) -> 'ClusterRepresentation':
        """Move representation to specified device."""
        pass


class AssignmentStrategy(ABC):
    """Abstract base class for point-to-cluster assignment strategies."""

    @abstractmethod
    def compute_assignments(self, points: Tensor,
                          representations: List[ClusterRepresentation],
                          **kwargs) -> Tensor:
        """Compute cluster assignments for points.

        Args:
            points: (n, 2) tensor of positions
            representations: List of K cluster representations

        Returns:
            (n,) tensor of cluster indices
        """
        pass


class ParameterUpdater(ABC):
    """Abstract base class for cluster parameter update strategies."""

    @abstractmethod
    def update(self, representation: ClusterRepresentation,
               points: Tensor,
               weights: Optional[Tensor] = None,
               **kwargs) -> None:
        """Update a representation from the points assigned to it.

        Args:
            representation: Cluster representation to update
            points: (m, 2) tensor of the cluster's points (already filtered)
            weights: Optional (m,) tensor of point weights
        """
        pass


class DistanceMetric(ABC):
    """Abstract base class for distance computations."""

    @abstractmethod
    def compute(self, points: Tensor, representation: ClusterRepresentation,
                **kwargs) -> Tensor:
        """Compute distances from points to a cluster representative.

        Returns:
            (n,) tensor of distances
        """
        pass


class InitializationStrategy(ABC):
    """Abstract base class for cluster initialization strategies."""

    @abstractmethod
    def initialize(self, points: Tensor, n_clusters: int,
                  **kwargs) -> List[ClusterRepresentation]:
        """Initialize cluster representations.

        Args:
            points: (n, 2) tensor of positions
            n_clusters: Number of clusters to initialize

        Returns:
            List of initialized cluster representations
        """
        pass


class ConvergenceCriterion(ABC):
    """Abstract base class for convergence checking."""

    def __init__(self):
        self.history = []

    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if algorithm has converged.

        Args:
            current_state: Dictionary containing current algorithm state

        Returns:
            True if converged, False otherwise
        """
        pass

    def reset(self):
        """Reset convergence history."""
        self.history = []


class ClusteringObjective(ABC):
    """Abstract base class for clustering objective functions."""

    @abstractmethod
    def compute(self, points: Tensor,
                representations: List[ClusterRepresentation],
                assignments: Tensor,
                weights: Optional[Tensor] = None) -> Tensor:
        """Compute objective function value.

        Args:
            points: (n, 2) tensor of positions
            representations: List of cluster representations
            assignments: (n,) hard cluster assignments
            weights: Optional (n,) point weights

        Returns:
            Scalar objective value
        """
        pass

    @property
    @abstractmethod
    def minimize(self) -> bool:
        """Whether to minimize (True) or maximize (False) this objective."""
        pass
