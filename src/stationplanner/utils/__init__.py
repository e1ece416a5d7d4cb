"""Utility functions for the station planner."""

from .convergence import AbsoluteChangeInObjective

from .metrics import (
    pairwise_distances,
    total_distance,
    nearest_center,
    cluster_sizes
)

from .validation import (
    validate_data,
    validate_sample_weight,
    validate_point_set,
    check_n_clusters,
    check_positive,
    check_positive_int,
    check_choice,
    check_random_state,
    validate_init_params
)

__all__ = [
    # Convergence criteria
    'AbsoluteChangeInObjective',

    # Metrics
    'pairwise_distances',
    'total_distance',
    'nearest_center',
    'cluster_sizes',

    # Validation
    'validate_data',
    'validate_sample_weight',
    'validate_point_set',
    'check_n_clusters',
    'check_positive',
    'check_positive_int',
    'check_choice',
    'check_random_state',
    'validate_init_params'
]
