"""Visualization utilities for station placements."""

from .plot_stations import (
    plot_stations,
    plot_model,
    plot_error_history
)

__all__ = [
    'plot_stations',
    'plot_model',
    'plot_error_history'
]
