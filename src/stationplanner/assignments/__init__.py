"""Assignment strategies for the station planner."""

from .hard import HardAssignment, partition

__all__ = [
    'HardAssignment',
    'partition'
]
