"""
Approximate geometric median by directional step-halving search.

The geometric median (the point minimizing the summed Euclidean distance to
a point set) has no closed form in 2D. This module approximates it with a
deterministic hill-climb:

1. Start at the (weighted) centroid.
2. Try moving ``step`` map units along +x, -x, +y, -y, in that order.
   The first move that strictly lowers the summed distance is taken and
   a new pass starts at the same step.
3. If no move helps, halve ``step``.
4. Stop once ``step`` is no longer larger than ``epsilon``.

No randomness and no acceptance of worse moves are involved, so the result
depends only on the points, the weights and the two step parameters.
"""

from typing import Optional, List, Dict, Any
import warnings
import torch
from torch import Tensor

from ..base.errors import EmptyClusterError, ConvergenceWarning
from ..utils.validation import check_positive, check_positive_int


# Scan order matters: the first improving direction wins.
DIRECTIONS = ((1.0, 0.0), (-1.0, 0.0), (0.0, 1.0), (0.0, -1.0))


def weighted_distance_sum(points: Tensor, weights: Tensor, position: Tensor) -> Tensor:
    """Summed weighted distance from ``position`` (or a batch of positions).

    Args:
        points: (m, 2) positions
        weights: (m,) weights
        position: (2,) or (b, 2) candidate positions

    Returns:
        Scalar tensor, or (b,) tensor for a batch
    """
    if position.dim() == 1:
        diff = points - position.unsqueeze(0)
        return torch.sum(weights * torch.sqrt(torch.sum(diff * diff, dim=1)))
    diff = points.unsqueeze(0) - position.unsqueeze(1)  # (b, m, 2)
    return torch.sum(weights.unsqueeze(0) * torch.sqrt(torch.sum(diff * diff, dim=2)), dim=1)


class SteepestDescentSearch:
    """Directional hill-climb with step halving.

    Parameters
    ----------
    step : float, default=10000.0
        Initial move length in map units
    epsilon : float, default=1.0
        The search stops once the step is no longer larger than this
    max_passes : int, default=100000
        Hard cap on scan passes; hitting it warns and returns the best
        position found so far

    Attributes
    ----------
    history_ : list of dict
        One entry per pass with keys 'step', 'objective' and 'improved'.
        'objective' is the summed distance at the adopted position after the
        pass and never increases.
    n_passes_ : int
        Number of passes performed by the last call to ``find``
    """

    def __init__(self, step: float = 10000.0, epsilon: float = 1.0,
                 max_passes: int = 100000):
        check_positive('step', step)
        check_positive('epsilon', epsilon)
        check_positive_int('max_passes', max_passes)
        self.step = float(step)
        self.epsilon = float(epsilon)
        self.max_passes = max_passes
        self.history_: List[Dict[str, Any]] = []
        self.n_passes_ = 0

    def find(self, points: Tensor, weights: Optional[Tensor] = None) -> Tensor:
        """Approximate the geometric median of ``points``.

        Args:
            points: (m, 2) positions, m >= 1
            weights: Optional (m,) non-negative weights

        Returns:
            (2,) tensor with the final candidate position

        Raises:
            EmptyClusterError: If ``points`` is empty
        """
        if points.dim() != 2 or points.shape[1] != 2:
            raise ValueError(f"Expected (m, 2) points, got shape {tuple(points.shape)}")
        if points.shape[0] == 0:
            raise EmptyClusterError("Cannot compute the median of an empty cluster")

        if weights is None:
            weights = torch.ones(points.shape[0], dtype=points.dtype, device=points.device)
        else:
            weights = weights.to(dtype=points.dtype, device=points.device)

        total_weight = weights.sum()
        if total_weight > 0:
            candidate = torch.sum(points * weights.unsqueeze(1), dim=0) / total_weight
        else:
            # All-zero weights: every position is optimal, the centroid will do
            candidate = points.mean(dim=0)

        best = weighted_distance_sum(points, weights, candidate).item()
        directions = torch.tensor(DIRECTIONS, dtype=points.dtype, device=points.device)

        self.history_ = []
        step = self.step
        n_passes = 0

        while step > self.epsilon:
            if n_passes >= self.max_passes:
                warnings.warn(f"Median search stopped after {self.max_passes} passes "
                              f"with step {step:.3g}", ConvergenceWarning)
                break
            n_passes += 1

            trials = candidate.unsqueeze(0) + step * directions
            distances = weighted_distance_sum(points, weights, trials)
            better = torch.nonzero(distances < best)

            improved = better.numel() > 0
            if improved:
                first = better[0, 0]
                candidate = trials[first]
                best = distances[first].item()

            self.history_.append({'step': step, 'objective': best, 'improved': improved})

            if not improved:
                step *= 0.5

        self.n_passes_ = n_passes
        return candidate

    def __repr__(self) -> str:
        return f"SteepestDescentSearch(step={self.step}, epsilon={self.epsilon})"


def find_median(points: Tensor, weights: Optional[Tensor] = None,
                step: float = 10000.0, epsilon: float = 1.0) -> Tensor:
    """Approximate geometric median of a nonempty point set.

    Convenience wrapper around :class:`SteepestDescentSearch`.

    Example:
        >>> pts = torch.tensor([[0., 0.], [10., 0.], [0., 10.], [10., 10.]])
        >>> find_median(pts)
        tensor([5., 5.])
    """
    return SteepestDescentSearch(step=step, epsilon=epsilon).find(points, weights)
