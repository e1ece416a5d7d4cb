"""
Base class for the station placement driver.

Provides the algorithmic skeleton for alternating optimization between the
assignment step (partition points by nearest station) and the update step
(move each station to its cluster's median), together with the run state
machine and the best solution recorded over the whole session.
"""

from abc import abstractmethod
from enum import Enum
from typing import Optional, Dict, Any, List, Union, Sequence, Hashable
import math
import time
import warnings

import numpy as np
import torch
from torch import Tensor

from .interfaces import (
    ClusterRepresentation, AssignmentStrategy, ParameterUpdater,
    InitializationStrategy, ConvergenceCriterion, ClusteringObjective
)
from .data_structures import (
    Bounds, PointSet, ClusterState, Partition, RunResult, AlgorithmState
)
from .errors import ConvergenceWarning
from ..utils.validation import (
    validate_point_set, check_n_clusters, check_positive, check_positive_int, check_choice,
    check_random_state
)


EMPTY_CLUSTER_POLICIES = ('keep', 'reseed')


class DriverState(Enum):
    """Lifecycle of a driver run."""
    UNINITIALIZED = 'uninitialized'
    READY = 'ready'
    ITERATING = 'iterating'
    CONVERGED = 'converged'
    ITERATION_LIMIT_REACHED = 'iteration_limit_reached'


class BaseClusteringAlgorithm:
    """Base class implementing the partition/update loop.

    Subclasses need to specify:
    - Cluster representation type
    - Assignment strategy
    - Parameter update strategy
    - Initialization strategy
    - Convergence criterion
    - Objective function

    The driver owns its centers and partition exclusively. ``reinitialize``
    re-seeds the centers, ``run`` iterates to convergence or the iteration
    budget, and the best result seen is kept across runs until new points
    are set.
    """

    def __init__(self,
                 n_clusters: int,
                 max_iter: int = 10,
                 tol: float = 10.0,
                 n_init: int = 1,
                 bounds: Optional[Bounds] = None,
                 empty_cluster: str = 'keep',
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[torch.device] = None):
        """
        Args:
            n_clusters: Number of stations K
            max_iter: Maximum iterations per run
            tol: Stop when the total error changes by less than this
            n_init: Number of randomized runs performed by ``fit``
            bounds: Rectangle for random seeding (bounding box of the
                points if None)
            empty_cluster: 'keep' leaves a station without points in place,
                'reseed' moves it to a new random position inside ``bounds``
            verbose: Verbosity level (0=silent, 1=per run, 2=per iteration)
            random_state: Seed or generator for reproducible seeding
            device: Torch device (None for auto-detect)
        """
        self.n_clusters = n_clusters
        self.max_iter = max_iter
        self.tol = tol
        self.n_init = n_init
        self.bounds = bounds
        self.empty_cluster = empty_cluster
        self.verbose = verbose
        self.random_state = random_state
        self._validate_params()

        if device is None:
            self.device = torch.device('cuda' if torch.cuda.is_available() else 'cpu')
        else:
            self.device = device
        self.dtype = torch.float64

        self._generator = check_random_state(random_state)

        # These will be set by subclasses
        self.representations: Optional[List[ClusterRepresentation]] = None
        self.assignment_strategy: Optional[AssignmentStrategy] = None
        self.update_strategy: Optional[ParameterUpdater] = None
        self.initialization_strategy: Optional[InitializationStrategy] = None
        self.convergence_criterion: Optional[ConvergenceCriterion] = None
        self.objective: Optional[ClusteringObjective] = None

        # Session state
        self.points_: Optional[PointSet] = None
        self.bounds_: Optional[Bounds] = None
        self.partition_: Optional[Partition] = None
        self.state_ = DriverState.UNINITIALIZED
        self.total_error_: Optional[float] = None
        self.last_error_ = math.inf
        self.best_result_: Optional[RunResult] = None
        self.best_history_: List[float] = []
        self.history_: List[AlgorithmState] = []
        self.n_iter_ = 0
        self.n_runs_ = 0
        self.fitted_ = False

    def _validate_params(self) -> None:
        """Reject parameters that cannot define a run."""
        check_n_clusters(self.n_clusters)
        check_positive_int('max_iter', self.max_iter)
        check_positive('tol', self.tol)
        check_positive_int('n_init', self.n_init)
        check_choice('empty_cluster', self.empty_cluster, EMPTY_CLUSTER_POLICIES)
        if self.bounds is not None and not isinstance(self.bounds, Bounds):
            raise TypeError(f"bounds must be a Bounds instance, got {type(self.bounds)}")

    @abstractmethod
    def _create_components(self) -> None:
        """Create algorithm-specific components.

        Subclasses must implement this to instantiate:
        - self.assignment_strategy
        - self.update_strategy
        - self.initialization_strategy
        - self.convergence_criterion
        - self.objective
        """
        pass

    @abstractmethod
    def _create_representations(self, data: Tensor) -> List[ClusterRepresentation]:
        """Create K freshly seeded cluster representations.

        Args:
            data: (n, 2) positions

        Returns:
            List of K cluster representations
        """
        pass

    # ------------------------------------------------------------------
    # Session control
    # ------------------------------------------------------------------
    def set_points(self, X: Union[Tensor, np.ndarray, list, PointSet],
                   weights: Optional[Union[Tensor, np.ndarray, list]] = None,
                   tags: Optional[Sequence[Hashable]] = None) -> 'BaseClusteringAlgorithm':
        """Load the point set and start a new session.

        Clears any centers, partition and best-so-far record.

        Raises:
            InvalidConfigurationError: If the points are malformed or fewer
                than ``n_clusters``
        """
        points = validate_point_set(X, weights=weights, tags=tags,
                                    dtype=self.dtype, device=self.device)
        check_n_clusters(self.n_clusters, len(points))

        self.points_ = points
        self.bounds_ = self.bounds if self.bounds is not None else Bounds.from_points(points.positions)
        self.representations = None
        self.partition_ = None
        self.total_error_ = None
        self.last_error_ = math.inf
        self.best_result_ = None
        self.best_history_ = []
        self.history_ = []
        self.n_iter_ = 0
        self.n_runs_ = 0
        self.fitted_ = False
        self.state_ = DriverState.UNINITIALIZED
        return self

    def reinitialize(self) -> None:
        """Seed K new centers and clear the partition (state becomes READY)."""
        self._require_points()
        self._create_components()

        if self.verbose:
            print(f"Initializing {self.n_clusters} stations...")

        self.representations = self._create_representations(self.points_.positions)
        self.partition_ = None
        self.total_error_ = None
        self.last_error_ = math.inf
        self.convergence_criterion.reset()
        self.history_ = []
        self.n_iter_ = 0
        self.state_ = DriverState.READY

    def iterate(self) -> RunResult:
        """Run a single partition/update/evaluate iteration.

        Reinitializes first if no centers exist or their number no longer
        matches ``n_clusters``.

        Returns:
            RunResult of this iteration; ``converged`` is set when the change
            in total error fell below ``tol``
        """
        self._require_points()
        if self.representations is None or len(self.representations) != self.n_clusters:
            self.reinitialize()

        iter_start_time = time.time()
        X = self.points_.positions
        weights = self.points_.get_weights()
        iteration = self.n_iter_

        # Assignment step
        assignments = self.assignment_strategy.compute_assignments(X, self.representations)
        partition = Partition(assignments, self.n_clusters)

        # Update step
        empty = []
        for k, representation in enumerate(self.representations):
            cluster_indices = partition.get_cluster_indices(k)
            if len(cluster_indices) > 0:
                self.update_strategy.update(
                    representation,
                    X[cluster_indices],
                    weights[cluster_indices]
                )
            else:
                empty.append(k)
                self._handle_empty_cluster(k, representation)

        # Objective against the new centers with this iteration's groups
        objective_value = self.objective.compute(
            X, self.representations, assignments, weights
        )
        total_error = float(objective_value)

        converged = self.convergence_criterion.check({
            'iteration': iteration,
            'objective': total_error,
            'assignments': assignments
        })
        self.last_error_ = total_error
        self.total_error_ = total_error
        self.partition_ = partition

        cluster_state = self._extract_cluster_state()
        result = RunResult(
            total_error=total_error,
            centers=cluster_state.centers.clone(),
            clusters=[list(group) for group in partition.groups],
            iteration=iteration,
            converged=converged
        )
        self._record_best(result)

        self.history_.append(AlgorithmState(
            iteration=iteration,
            cluster_state=cluster_state,
            assignments=partition,
            objective_value=total_error,
            converged=converged,
            metadata={'empty_clusters': empty}
        ))
        self.n_iter_ = iteration + 1
        self.state_ = DriverState.CONVERGED if converged else DriverState.ITERATING

        iter_time = time.time() - iter_start_time
        if self.verbose >= 2:
            obj_direction = "↓" if self.objective.minimize else "↑"
            print(f"Iteration {iteration:3d}: total error = {total_error:.3f} "
                  f"{obj_direction} ({iter_time:.3f}s)")

        return result

    def run(self) -> RunResult:
        """Iterate until convergence or ``max_iter`` iterations.

        From READY this is a fresh run. From a terminal state it continues
        from the current centers, so repeated calls keep refining the same
        solution.

        Returns:
            RunResult of the last iteration
        """
        self._require_points()
        if self.representations is None or len(self.representations) != self.n_clusters:
            self.reinitialize()

        start_time = time.time()
        self.state_ = DriverState.ITERATING
        result = None

        for _ in range(self.max_iter):
            result = self.iterate()
            if result.converged:
                if self.verbose:
                    print(f"Converged at iteration {result.iteration}")
                break
        else:
            self.state_ = DriverState.ITERATION_LIMIT_REACHED

        total_time = time.time() - start_time
        self.n_runs_ += 1
        self.fitted_ = True

        if self.verbose:
            if self.state_ is DriverState.ITERATION_LIMIT_REACHED:
                warnings.warn(f"Failed to converge after {self.max_iter} iterations",
                              ConvergenceWarning)
            print(f"Run {self.n_runs_}: total error = {result.total_error:.3f}, "
                  f"best so far = {self.best_error_:.3f} ({total_time:.3f}s)")

        return result

    def restart(self) -> RunResult:
        """Re-seed the centers and run; the session best is kept."""
        self.reinitialize()
        return self.run()

    def run_session(self, n_runs: int) -> RunResult:
        """Perform ``n_runs`` randomized restarts and return the session best."""
        check_positive_int('n_runs', n_runs)
        for _ in range(n_runs):
            self.restart()
        return self.best_result_

    # ------------------------------------------------------------------
    # sklearn-style API
    # ------------------------------------------------------------------
    def fit(self, X: Union[Tensor, np.ndarray, list, PointSet], y: Optional[Tensor] = None,
            weights: Optional[Union[Tensor, np.ndarray, list]] = None,
            tags: Optional[Sequence[Hashable]] = None) -> 'BaseClusteringAlgorithm':
        """Load the points and perform ``n_init`` randomized runs.

        Args:
            X: (n, 2) positions or a PointSet
            y: Ignored (for sklearn compatibility)
            weights: Optional (n,) point weights
            tags: Optional per-point tags

        Returns:
            Self
        """
        self.set_points(X, weights=weights, tags=tags)
        self.run_session(self.n_init)
        return self

    def fit_predict(self, X: Union[Tensor, np.ndarray, list, PointSet],
                    y: Optional[Tensor] = None,
                    weights: Optional[Union[Tensor, np.ndarray, list]] = None,
                    tags: Optional[Sequence[Hashable]] = None) -> Tensor:
        """Fit and return the labels of the last run."""
        self.fit(X, y, weights=weights, tags=tags)
        return self.labels_

    def predict(self, X: Union[Tensor, np.ndarray, list]) -> Tensor:
        """Assign new positions to the nearest current station.

        Args:
            X: (n, 2) positions

        Returns:
            (n,) tensor of station indices
        """
        if not self.fitted_:
            raise RuntimeError("Model must be fitted before calling predict")

        points = validate_point_set(X, dtype=self.dtype, device=self.device)
        return self.assignment_strategy.compute_assignments(
            points.positions, self.representations
        )

    def score(self, X: Union[Tensor, np.ndarray, list]) -> float:
        """Negative total distance of X to its nearest current station."""
        points = validate_point_set(X, dtype=self.dtype, device=self.device)
        labels = self.predict(points.positions)
        return -float(self.objective.compute(
            points.positions, self.representations, labels, points.get_weights()
        ))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _require_points(self) -> None:
        if self.points_ is None:
            raise RuntimeError("No points loaded; call set_points() or fit() first")

    def _handle_empty_cluster(self, cluster_idx: int,
                              representation: ClusterRepresentation) -> None:
        """Apply the empty-cluster policy to a station with no points."""
        if self.empty_cluster == 'reseed':
            representation.set_parameters({
                'mean': self.bounds_.sample(1, generator=self._generator,
                                            device=self.device, dtype=self.dtype)[0]
            })
            if self.verbose >= 2:
                print(f"Station {cluster_idx} has no points; reseeded")
        elif self.verbose >= 2:
            print(f"Station {cluster_idx} has no points; kept in place")

    def _refresh_components(self) -> None:
        """Push changed parameters into the components of the current run.

        The convergence criterion keeps its previous objective so a
        continued run is judged against the last iteration.
        """
        if self.convergence_criterion is not None:
            self.convergence_criterion.tol = self.tol

    def _record_best(self, result: RunResult) -> None:
        """Replace the session best only on a strictly smaller error."""
        if self.best_result_ is None or result.total_error < self.best_result_.total_error:
            self.best_result_ = result
        self.best_history_.append(self.best_result_.total_error)

    def _extract_cluster_state(self) -> ClusterState:
        """Extract current center positions into a ClusterState object."""
        centers = torch.stack([
            rep.get_parameters()['mean']
            for rep in self.representations
        ])
        return ClusterState(
            centers=centers,
            n_clusters=len(self.representations),
            dimension=centers.shape[1]
        )

    @property
    def cluster_centers_(self) -> Tensor:
        """Current station positions (K, 2)."""
        if self.representations is None:
            raise RuntimeError("No centers yet; call reinitialize() or fit() first")
        return self._extract_cluster_state().centers

    @property
    def labels_(self) -> Optional[Tensor]:
        """Station index of every point from the latest partition."""
        return self.partition_.labels if self.partition_ is not None else None

    @property
    def clusters_(self) -> List[List[int]]:
        """Point indices per station from the latest partition."""
        if self.partition_ is None:
            return [[] for _ in range(self.n_clusters)]
        return self.partition_.groups

    @property
    def best_error_(self) -> float:
        """Smallest total error seen in this session (inf before any run)."""
        return self.best_result_.total_error if self.best_result_ is not None else math.inf

    @property
    def best_centers_(self) -> Optional[Tensor]:
        """Station positions that produced ``best_error_``."""
        return self.best_result_.centers if self.best_result_ is not None else None

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {
            'n_clusters': self.n_clusters,
            'max_iter': self.max_iter,
            'tol': self.tol,
            'n_init': self.n_init,
            'bounds': self.bounds,
            'empty_cluster': self.empty_cluster,
            'verbose': self.verbose,
            'random_state': self.random_state,
            'device': self.device
        }

    def set_params(self, **params) -> 'BaseClusteringAlgorithm':
        """Set parameters (sklearn compatibility) and validate them again."""
        for key, value in params.items():
            setattr(self, key, value)
        self._validate_params()
        if 'random_state' in params:
            self._generator = check_random_state(self.random_state)
        if self.points_ is not None:
            check_n_clusters(self.n_clusters, len(self.points_))
            if 'bounds' in params:
                self.bounds_ = (self.bounds if self.bounds is not None
                                else Bounds.from_points(self.points_.positions))
        if self.representations is not None:
            self._refresh_components()
        return self
