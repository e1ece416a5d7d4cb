"""Cluster representations for the station planner."""

from .base_representation import BaseRepresentation
from .station import StationRepresentation

__all__ = [
    'BaseRepresentation',
    'StationRepresentation'
]
