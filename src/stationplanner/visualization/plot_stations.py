"""
Station placement visualization.

Draws resource nodes coloured by their nearest station over the map
rectangle, the current stations, and optionally the best stations of the
session. Also plots the error trace of a driver.
"""

from typing import Optional, Sequence
import torch
from torch import Tensor
import matplotlib.pyplot as plt
import numpy as np

from ..base.data_structures import Bounds
from ..utils.metrics import nearest_center


def _to_numpy(x) -> np.ndarray:
    if isinstance(x, Tensor):
        return x.detach().cpu().numpy()
    return np.asarray(x)


def plot_stations(X: Tensor,
                  centers: Tensor,
                  labels: Optional[Tensor] = None,
                  bounds: Optional[Bounds] = None,
                  best_centers: Optional[Tensor] = None,
                  ax: Optional[plt.Axes] = None,
                  cmap: str = 'viridis',
                  point_size: int = 9,
                  center_size: int = 120,
                  screen_orientation: bool = True,
                  show_legend: bool = True,
                  title: Optional[str] = None) -> plt.Axes:
    """Plot points coloured by station and the station markers.

    Args:
        X: (n, 2) point positions
        centers: (k, 2) current station positions
        labels: Optional (n,) station index per point (nearest station if None)
        bounds: Map rectangle used as plot limits
        best_centers: Optional (k, 2) best stations of the session
        ax: Matplotlib axes (created if None)
        cmap: Colormap spreading the k stations
        point_size: Size of point markers
        center_size: Size of station markers
        screen_orientation: Put ``bounds.top`` at the top of the plot, as on
            the in-game map
        show_legend: Whether to show legend
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 8))

    if labels is None:
        labels = nearest_center(torch.as_tensor(X), torch.as_tensor(centers))

    X_np = _to_numpy(X)
    labels_np = _to_numpy(labels)
    centers_np = _to_numpy(centers)
    n_clusters = max(len(centers_np), 1)

    colormap = plt.get_cmap(cmap)
    colors = colormap(labels_np / max(n_clusters - 1, 1))

    ax.scatter(X_np[:, 0], X_np[:, 1], c=colors, s=point_size, label='Resource nodes')

    ax.scatter(centers_np[:, 0], centers_np[:, 1],
               c='limegreen',
               marker='o',
               s=center_size,
               edgecolors='black',
               linewidth=1,
               label='Stations',
               zorder=10)

    if best_centers is not None:
        best_np = _to_numpy(best_centers)
        ax.scatter(best_np[:, 0], best_np[:, 1],
                   facecolors='none',
                   marker='s',
                   s=center_size * 1.5,
                   edgecolors='red',
                   linewidth=1.5,
                   label='Best so far',
                   zorder=11)

    if bounds is not None:
        ax.set_xlim(bounds.left, bounds.right)
        ax.set_ylim(bounds.top, bounds.bottom)
    if screen_orientation:
        ax.invert_yaxis()

    ax.set_aspect('equal', adjustable='box')
    ax.set_xlabel('x')
    ax.set_ylabel('y')

    if title:
        ax.set_title(title)

    if show_legend:
        ax.legend(loc='upper right')

    return ax


def plot_model(model, ax: Optional[plt.Axes] = None, show_best: bool = True,
               **kwargs) -> plt.Axes:
    """Plot the points and stations held by a fitted KMedian driver."""
    if model.points_ is None or model.representations is None:
        raise RuntimeError("Model has no points or stations to plot")

    title = kwargs.pop('title', None)
    if title is None and model.total_error_ is not None:
        title = (f"Total error {model.total_error_:.1f}, "
                 f"best so far {model.best_error_:.1f}")

    return plot_stations(
        model.points_.positions,
        model.cluster_centers_,
        labels=model.labels_,
        bounds=model.bounds_,
        best_centers=model.best_centers_ if show_best else None,
        ax=ax,
        title=title,
        **kwargs
    )


def plot_error_history(errors: Sequence[float],
                       best: Optional[Sequence[float]] = None,
                       ax: Optional[plt.Axes] = None,
                       title: Optional[str] = None) -> plt.Axes:
    """Plot total error per iteration and, optionally, the running best.

    Args:
        errors: Total error of each iteration
        best: Best-so-far error after each iteration
        ax: Matplotlib axes (created if None)
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 4))

    ax.plot(np.arange(len(errors)), errors, marker='o', markersize=3, label='Total error')
    if best is not None:
        ax.step(np.arange(len(best)), best, where='post', label='Best so far')

    ax.set_xlabel('Iteration')
    ax.set_ylabel('Total distance')
    if title:
        ax.set_title(title)
    ax.legend()

    return ax
