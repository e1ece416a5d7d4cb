"""
Input and configuration validation.

Provides functions for validating point data and driver parameters before a
run, converting inputs to tensors and rejecting configurations that cannot
define a run.
"""

from typing import Optional, Union, Sequence, Hashable
import math
import torch
from torch import Tensor
import numpy as np

from ..base.data_structures import PointSet
from ..base.errors import InvalidConfigurationError


INIT_METHODS = ('bounds', 'points')


def validate_data(X: Union[Tensor, np.ndarray, list],
                 dtype: torch.dtype = torch.float64,
                 device: Optional[torch.device] = None,
                 ensure_finite: bool = True,
                 ensure_min_samples: int = 1) -> Tensor:
    """Validate and convert positions to an (n, 2) tensor.

    Args:
        X: Input positions (tensor, numpy array, or list of pairs)
        dtype: Target data type
        device: Target device
        ensure_finite: Whether to check for inf/nan
        ensure_min_samples: Minimum number of points required

    Returns:
        Validated tensor

    Raises:
        InvalidConfigurationError: If validation fails
    """
    if isinstance(X, Tensor):
        X = X.to(dtype=dtype, device=device)
    elif isinstance(X, np.ndarray):
        X = torch.from_numpy(X).to(dtype=dtype, device=device)
    elif isinstance(X, (list, tuple)):
        X = torch.tensor(X, dtype=dtype, device=device)
    else:
        raise TypeError(f"Cannot convert {type(X)} to tensor")

    if X.dim() == 1 and X.numel() == 0:
        X = X.reshape(0, 2)
    if X.dim() != 2 or X.shape[1] != 2:
        raise InvalidConfigurationError(
            f"Expected (n, 2) positions, got shape {tuple(X.shape)}")

    n_samples = X.shape[0]
    if n_samples < ensure_min_samples:
        raise InvalidConfigurationError(
            f"Found {n_samples} points, but need at least {ensure_min_samples}")

    if ensure_finite:
        if torch.isnan(X).any():
            raise InvalidConfigurationError("Input contains NaN values")
        if torch.isinf(X).any():
            raise InvalidConfigurationError("Input contains infinite values")

    return X


def validate_sample_weight(sample_weight: Optional[Union[Tensor, np.ndarray, list]],
                          n_samples: int,
                          dtype: torch.dtype = torch.float64,
                          device: Optional[torch.device] = None) -> Optional[Tensor]:
    """Validate point weights.

    Args:
        sample_weight: Point weights or None
        n_samples: Number of points

    Returns:
        Validated weight tensor or None
    """
    if sample_weight is None:
        return None

    if isinstance(sample_weight, np.ndarray):
        sample_weight = torch.from_numpy(sample_weight)
    elif not isinstance(sample_weight, Tensor):
        sample_weight = torch.tensor(sample_weight)
    sample_weight = sample_weight.to(dtype=dtype, device=device)

    if sample_weight.dim() != 1:
        raise InvalidConfigurationError(
            f"Sample weights must be 1D, got {sample_weight.dim()}D")

    if len(sample_weight) != n_samples:
        raise InvalidConfigurationError(
            f"Expected {n_samples} weights, got {len(sample_weight)}")

    if not torch.isfinite(sample_weight).all():
        raise InvalidConfigurationError("Sample weights must be finite")

    if (sample_weight < 0).any():
        raise InvalidConfigurationError("Sample weights must be non-negative")

    if sample_weight.sum() == 0:
        raise InvalidConfigurationError("Sample weights sum to zero")

    return sample_weight


def validate_point_set(X: Union[Tensor, np.ndarray, list, PointSet],
                       weights: Optional[Union[Tensor, np.ndarray, list]] = None,
                       tags: Optional[Sequence[Hashable]] = None,
                       dtype: torch.dtype = torch.float64,
                       device: Optional[torch.device] = None) -> PointSet:
    """Validate positions, weights and tags and bundle them as a PointSet.

    Weights and tags given explicitly override those carried by a PointSet.
    """
    if isinstance(X, PointSet):
        if weights is None:
            weights = X.weights
        if tags is None:
            tags = X.tags
        X = X.positions

    positions = validate_data(X, dtype=dtype, device=device)
    weights = validate_sample_weight(weights, positions.shape[0], dtype=dtype, device=device)
    if tags is not None:
        tags = list(tags)
    return PointSet(positions=positions, weights=weights, tags=tags)


def check_n_clusters(n_clusters: int, n_samples: Optional[int] = None) -> None:
    """Validate number of clusters.

    Args:
        n_clusters: Number of clusters
        n_samples: Number of points, when known

    Raises:
        InvalidConfigurationError: If invalid
    """
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, (int, np.integer)):
        raise TypeError(f"n_clusters must be int, got {type(n_clusters)}")

    if n_clusters <= 0:
        raise InvalidConfigurationError(f"n_clusters must be positive, got {n_clusters}")

    if n_samples is not None and n_clusters > n_samples:
        raise InvalidConfigurationError(f"n_clusters ({n_clusters}) cannot be larger than "
                                        f"the number of points ({n_samples})")


def check_positive(name: str, value: float) -> None:
    """Require a finite, strictly positive number."""
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise TypeError(f"{name} must be a number, got {type(value)}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidConfigurationError(f"{name} must be positive and finite, got {value}")


def check_positive_int(name: str, value: int) -> None:
    """Require a strictly positive integer."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{name} must be int, got {type(value)}")
    if value < 1:
        raise InvalidConfigurationError(f"{name} must be at least 1, got {value}")


def check_choice(name: str, value: str, choices: Sequence[str]) -> None:
    """Require ``value`` to be one of ``choices``."""
    if value not in choices:
        raise InvalidConfigurationError(f"{name} must be one of {list(choices)}, got {value!r}")


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> Optional[torch.Generator]:
    """Create generator from random state.

    Args:
        random_state: Seed or generator

    Returns:
        Generator or None (global RNG)
    """
    if random_state is None:
        return None
    elif isinstance(random_state, (int, np.integer)) and not isinstance(random_state, bool):
        generator = torch.Generator()
        generator.manual_seed(int(random_state))
        return generator
    elif isinstance(random_state, torch.Generator):
        return random_state
    else:
        raise TypeError(f"random_state must be int or Generator, got {type(random_state)}")


def validate_init_params(init: Union[str, Tensor, np.ndarray, list],
                        n_clusters: int,
                        dtype: torch.dtype = torch.float64) -> Union[str, Tensor]:
    """Validate initialization parameters.

    Args:
        init: Initialization method or explicit starting centers
        n_clusters: Number of clusters

    Returns:
        Validated method name or (n_clusters, 2) tensor
    """
    if isinstance(init, str):
        check_choice('init', init, INIT_METHODS)
        return init

    elif isinstance(init, (Tensor, np.ndarray, list, tuple)):
        init_tensor = validate_data(init, dtype=dtype)
        if init_tensor.shape != (n_clusters, 2):
            raise InvalidConfigurationError(
                f"init array must have shape ({n_clusters}, 2), "
                f"got {tuple(init_tensor.shape)}")
        return init_tensor

    else:
        raise TypeError(f"init must be str or array, got {type(init)}")
