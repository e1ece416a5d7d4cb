"""
K-median station placement.

Lloyd-style k-median implemented using the modular framework: partition
points by nearest station, move every station to the approximate geometric
median of its points, repeat until the total distance settles.
"""

from typing import Optional, List, Union
import torch
from torch import Tensor
import numpy as np

from ..base.clustering_base import BaseClusteringAlgorithm
from ..base.data_structures import Bounds
from ..base.interfaces import ClusterRepresentation, ClusteringObjective
from ..representations.station import StationRepresentation
from ..assignments.hard import HardAssignment
from ..distances.euclidean import EuclideanDistance
from ..initialization.uniform_bounds import UniformBoundsInit
from ..initialization.random import RandomPointsInit
from ..initialization.from_previous import FromPreviousInit
from ..updates.steepest_descent import SteepestDescentSearch
from ..updates.median import MedianUpdater
from ..utils.convergence import AbsoluteChangeInObjective
from ..utils.validation import check_positive, validate_init_params


class KMedianObjective(ClusteringObjective):
    """K-median objective: sum of distances from points to their station."""

    def compute(self, points: Tensor, representations: List[ClusterRepresentation],
                assignments: Tensor, weights: Optional[Tensor] = None) -> Tensor:
        """Compute total (weighted) distance."""
        total = torch.zeros((), dtype=points.dtype, device=points.device)

        for k, rep in enumerate(representations):
            cluster_points_mask = (assignments == k)
            if cluster_points_mask.any():
                distances = rep.distance_to_point(points[cluster_points_mask])
                if weights is not None:
                    distances = distances * weights[cluster_points_mask]
                total = total + distances.sum()

        return total

    @property
    def minimize(self) -> bool:
        return True


class KMedian(BaseClusteringAlgorithm):
    """K-median station placement.

    Places K stations so that the summed Euclidean distance from every
    point to its nearest station is small. Stations start at random
    positions, so ``fit`` performs ``n_init`` runs and keeps the best.

    Parameters
    ----------
    n_clusters : int, default=10
        Number of stations
    bounds : Bounds, optional
        Rectangle stations are seeded in (bounding box of the points if None)
    init : str or array-like, default='bounds'
        Initialization method:
        - 'bounds' : uniform random positions inside ``bounds``
        - 'points' : distinct random data points
        - array of shape (n_clusters, 2) : use as initial stations
    anneal_step : float, default=10000.0
        Initial step of the median search, in map units
    anneal_epsilon : float, default=1.0
        Median search stops once its step is no larger than this
    max_iter : int, default=10
        Maximum partition/update iterations per run
    tol : float, default=10.0
        A run converges when the total distance changes by less than this
    n_init : int, default=1
        Number of randomized runs performed by ``fit``
    empty_cluster : {'keep', 'reseed'}, default='keep'
        What to do with a station that attracts no points
    verbose : int, default=0
        Verbosity level
    random_state : int or torch.Generator, optional
        Seed or generator for reproducible seeding
    device : torch.device, optional
        Device for computation (CPU/GPU)

    Attributes
    ----------
    cluster_centers_ : Tensor of shape (n_clusters, 2)
        Current station positions
    labels_ : Tensor of shape (n_samples,)
        Station index of every point from the latest iteration
    clusters_ : list of list of int
        Point indices per station from the latest iteration
    total_error_ : float
        Total distance of the latest iteration
    best_error_ : float
        Smallest total distance seen in this session
    best_centers_ : Tensor of shape (n_clusters, 2)
        Station positions that produced ``best_error_``
    state_ : DriverState
        Where the driver is in its run lifecycle
    n_iter_ : int
        Number of iterations of the current run
    """

    def __init__(self,
                 n_clusters: int = 10,
                 bounds: Optional[Bounds] = None,
                 init: Union[str, Tensor, np.ndarray] = 'bounds',
                 anneal_step: float = 10000.0,
                 anneal_epsilon: float = 1.0,
                 max_iter: int = 10,
                 tol: float = 10.0,
                 n_init: int = 1,
                 empty_cluster: str = 'keep',
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[torch.device] = None):
        """Initialize K-median algorithm."""
        self.init = init
        self.anneal_step = anneal_step
        self.anneal_epsilon = anneal_epsilon
        super().__init__(
            n_clusters=n_clusters,
            max_iter=max_iter,
            tol=tol,
            n_init=n_init,
            bounds=bounds,
            empty_cluster=empty_cluster,
            verbose=verbose,
            random_state=random_state,
            device=device
        )

    def _validate_params(self) -> None:
        super()._validate_params()
        check_positive('anneal_step', self.anneal_step)
        check_positive('anneal_epsilon', self.anneal_epsilon)
        self._init = validate_init_params(self.init, self.n_clusters)

    def _create_components(self) -> None:
        """Create k-median specific components."""
        self.assignment_strategy = HardAssignment(EuclideanDistance())

        self.update_strategy = MedianUpdater(
            SteepestDescentSearch(step=self.anneal_step, epsilon=self.anneal_epsilon)
        )

        if isinstance(self._init, str):
            if self._init == 'bounds':
                self.initialization_strategy = UniformBoundsInit(self.bounds_, self._generator)
            else:
                self.initialization_strategy = RandomPointsInit(self._generator)
        else:
            # Custom initial stations provided
            self.initialization_strategy = FromPreviousInit(self._init)

        self.convergence_criterion = AbsoluteChangeInObjective(tol=self.tol)

        self.objective = KMedianObjective()

    def _refresh_components(self) -> None:
        """Apply new search and tolerance settings without re-seeding."""
        super()._refresh_components()
        self.update_strategy = MedianUpdater(
            SteepestDescentSearch(step=self.anneal_step, epsilon=self.anneal_epsilon)
        )

    def _create_representations(self, data: Tensor) -> List[ClusterRepresentation]:
        """Create station representations."""
        representations = []
        dimension = data.shape[1]

        initial_representations = self.initialization_strategy.initialize(
            data, self.n_clusters
        )

        for init_rep in initial_representations:
            if isinstance(init_rep, StationRepresentation):
                representations.append(init_rep)
            else:
                station = StationRepresentation(dimension, self.device, self.dtype)
                station.mean = init_rep.get_parameters()['mean']
                representations.append(station)

        return representations

    def tag_summary(self, best: bool = False) -> List[dict]:
        """Count point tags (e.g. purity) per station.

        Args:
            best: Summarize the clusters of the session best instead of the
                latest iteration
        """
        self._require_points()
        if best:
            clusters = self.best_result_.clusters if self.best_result_ is not None else []
        else:
            clusters = self.clusters_
        return [self.points_.tag_counts(group) for group in clusters]

    def get_params(self, deep: bool = True) -> dict:
        params = super().get_params(deep)
        params.update({
            'init': self.init,
            'anneal_step': self.anneal_step,
            'anneal_epsilon': self.anneal_epsilon
        })
        return params
