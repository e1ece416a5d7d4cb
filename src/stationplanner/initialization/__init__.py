"""Initialization strategies for the station planner."""

from .uniform_bounds import UniformBoundsInit
from .random import RandomPointsInit
from .from_previous import FromPreviousInit

__all__ = [
    'UniformBoundsInit',
    'RandomPointsInit',
    'FromPreviousInit'
]
