"""
Convergence criteria for the station placement loop.

The driver stops once the total error stops moving: the absolute change
between consecutive iterations falls below a threshold in map units.
"""

import math
from typing import Dict, Any

from ..base.interfaces import ConvergenceCriterion


class AbsoluteChangeInObjective(ConvergenceCriterion):
    """Convergence when ``|objective - previous objective| < tol``.

    The previous objective starts at infinity, so the first iteration after a
    reset never converges.
    """

    def __init__(self, tol: float = 10.0, patience: int = 1):
        """
        Args:
            tol: Absolute tolerance on the change in objective
            patience: Number of consecutive stable iterations required
        """
        super().__init__()
        self.tol = tol
        self.patience = patience
        self._prev_objective = math.inf
        self._stable_count = 0

    @property
    def previous_objective(self) -> float:
        """Objective seen on the last call to ``check`` (inf after reset)."""
        return self._prev_objective

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if the objective has stabilized."""
        current_objective = current_state['objective']
        abs_change = abs(current_objective - self._prev_objective)

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'objective': current_objective,
            'abs_change': abs_change
        })

        if abs_change < self.tol:
            self._stable_count += 1
            converged = self._stable_count >= self.patience
        else:
            self._stable_count = 0
            converged = False

        self._prev_objective = current_objective

        return converged

    def reset(self):
        """Forget the previous objective."""
        super().reset()
        self._prev_objective = math.inf
        self._stable_count = 0
