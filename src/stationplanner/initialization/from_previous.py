"""
Initialization from previous solution or custom centers.

Useful for warm starts, e.g. continuing from the best stations of an
earlier session.
"""

from typing import List, Union
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, ClusterRepresentation
from ..base.data_structures import ClusterState
from ..base.errors import InvalidConfigurationError
from ..representations.station import StationRepresentation


class FromPreviousInit(InitializationStrategy):
    """Initialize from previous station positions.

    Accepts either:
    - A tensor of shape (n_clusters, 2) with initial positions
    - A ClusterState object from a previous run
    """

    def __init__(self, initial_state: Union[Tensor, ClusterState]):
        """
        Args:
            initial_state: Previous solution to use for initialization
        """
        self.initial_state = initial_state

    def initialize(self, points: Tensor, n_clusters: int,
                  **kwargs) -> List[ClusterRepresentation]:
        """Initialize from previous state.

        Args:
            points: (n, 2) positions (used for validation)
            n_clusters: Expected number of stations

        Returns:
            List of initialized representations
        """
        dimension = points.shape[1]

        if isinstance(self.initial_state, ClusterState):
            centers = self.initial_state.centers
        elif isinstance(self.initial_state, Tensor):
            centers = self.initial_state
        else:
            raise TypeError(f"Unknown initial_state type: {type(self.initial_state)}")

        centers = centers.to(device=points.device, dtype=points.dtype)

        if centers.shape[0] != n_clusters:
            raise InvalidConfigurationError(f"Initial centers has {centers.shape[0]} clusters, "
                                            f"but n_clusters={n_clusters}")
        if centers.shape[1] != dimension:
            raise InvalidConfigurationError(f"Initial centers has dimension {centers.shape[1]}, "
                                            f"but data has dimension {dimension}")

        representations = []
        for k in range(n_clusters):
            rep = StationRepresentation(dimension, points.device, points.dtype)
            rep.mean = centers[k].clone()
            representations.append(rep)

        return representations
