"""Base classes and interfaces for the station planner."""

from .interfaces import (
    ClusterRepresentation,
    AssignmentStrategy,
    ParameterUpdater,
    DistanceMetric,
    InitializationStrategy,
    ConvergenceCriterion,
    ClusteringObjective
)

from .data_structures import (
    Bounds,
    PointSet,
    ClusterState,
    Partition,
    RunResult,
    AlgorithmState
)

from .errors import (
    InvalidConfigurationError,
    EmptyClusterError,
    ConvergenceWarning
)

from .clustering_base import BaseClusteringAlgorithm, DriverState

__all__ = [
    # Interfaces
    'ClusterRepresentation',
    'AssignmentStrategy',
    'ParameterUpdater',
    'DistanceMetric',
    'InitializationStrategy',
    'ConvergenceCriterion',
    'ClusteringObjective',

    # Data structures
    'Bounds',
    'PointSet',
    'ClusterState',
    'Partition',
    'RunResult',
    'AlgorithmState',

    # Errors
    'InvalidConfigurationError',
    'EmptyClusterError',
    'ConvergenceWarning',

    # Base algorithm
    'BaseClusteringAlgorithm',
    'DriverState'
]
