# tests/test_components.py
"""
Smaller building blocks: metrics, distances, representations, initializers.
"""

from __future__ import annotations

import pytest
import torch

from stationplanner.base.data_structures import Bounds, PointSet, ClusterState
from stationplanner.base.errors import InvalidConfigurationError
from stationplanner.distances import EuclideanDistance
from stationplanner.representations import StationRepresentation
from stationplanner.initialization import UniformBoundsInit, RandomPointsInit, FromPreviousInit
from stationplanner.updates import MedianUpdater, SteepestDescentSearch
from stationplanner.utils.metrics import (
    pairwise_distances,
    total_distance,
    nearest_center,
    cluster_sizes,
)


def _station(x, y):
    rep = StationRepresentation()
    rep.mean = torch.tensor([x, y], dtype=torch.float64)
    return rep


def test_metrics_on_tiny_layout():
    X = torch.tensor([[0.0, 0.0], [3.0, 4.0], [10.0, 0.0]], dtype=torch.float64)
    C = torch.tensor([[0.0, 0.0], [10.0, 0.0]], dtype=torch.float64)

    D = pairwise_distances(X, C)
    assert D.shape == (3, 2)
    assert D[1, 0].item() == pytest.approx(5.0)

    labels = nearest_center(X, C)
    assert labels.tolist() == [0, 0, 1]
    assert total_distance(X, labels, C) == pytest.approx(5.0)
    assert total_distance(X, labels, C, weights=torch.tensor([1.0, 2.0, 1.0],
                                                             dtype=torch.float64)) == pytest.approx(10.0)
    assert cluster_sizes(labels, 3).tolist() == [2, 1, 0]


def test_euclidean_squared_and_plain():
    X = torch.tensor([[3.0, 4.0]], dtype=torch.float64)
    rep = _station(0.0, 0.0)
    assert EuclideanDistance().compute(X, rep).item() == pytest.approx(5.0)
    assert EuclideanDistance(squared=True).compute(X, rep).item() == pytest.approx(25.0)


def test_station_representation_basics():
    rep = _station(1.0, 2.0)
    assert rep.dimension == 2
    assert "x=1.0" in repr(rep)

    moved = rep.to(torch.device("cpu"))
    assert torch.equal(moved.mean, rep.mean)
    assert moved is not rep

    with pytest.raises(ValueError):
        rep.mean = torch.tensor([float("nan"), 0.0], dtype=torch.float64)
    with pytest.raises(ValueError):
        rep.distance_to_point(torch.zeros(3, 3, dtype=torch.float64))


def test_station_ignores_empty_update():
    rep = _station(7.0, 7.0)
    rep.update_from_points(torch.zeros(0, 2, dtype=torch.float64))
    assert rep.mean.tolist() == [7.0, 7.0]


def test_median_updater_moves_station():
    rep = _station(1000.0, 1000.0)
    pts = torch.tensor([[0.0, 0.0], [10.0, 0.0], [0.0, 10.0], [10.0, 10.0]], dtype=torch.float64)
    MedianUpdater(SteepestDescentSearch(step=100.0, epsilon=0.5)).update(rep, pts)
    assert rep.mean.tolist() == [5.0, 5.0]


def test_uniform_bounds_init_inside_rectangle():
    bounds = Bounds(0.0, 0.0, 10.0, 10.0)
    g = torch.Generator().manual_seed(0)
    reps = UniformBoundsInit(bounds, g).initialize(torch.zeros(5, 2, dtype=torch.float64), 4)
    centers = torch.stack([r.mean for r in reps])
    assert centers.shape == (4, 2)
    assert bounds.contains(centers).all()


def test_random_points_init_distinct_points():
    X = torch.arange(20, dtype=torch.float64).reshape(10, 2)
    reps = RandomPointsInit(torch.Generator().manual_seed(0)).initialize(X, 5)
    chosen = {tuple(r.mean.tolist()) for r in reps}
    assert len(chosen) == 5
    assert chosen <= {tuple(p) for p in X.tolist()}

    with pytest.raises(InvalidConfigurationError):
        RandomPointsInit().initialize(X, 11)


def test_from_previous_init_accepts_cluster_state():
    centers = torch.tensor([[1.0, 2.0], [3.0, 4.0]], dtype=torch.float64)
    state = ClusterState(centers=centers, n_clusters=2, dimension=2)
    X = torch.zeros(4, 2, dtype=torch.float64)

    reps = FromPreviousInit(state).initialize(X, 2)
    assert torch.equal(torch.stack([r.mean for r in reps]), centers)

    with pytest.raises(InvalidConfigurationError):
        FromPreviousInit(centers).initialize(X, 3)


def test_point_set_subset_and_to():
    ps = PointSet(torch.tensor([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0]], dtype=torch.float64),
                  tags=["a", "b", "a"])
    assert ps.subset([2, 0]).tolist() == [[2.0, 2.0], [0.0, 0.0]]

    moved = ps.to(torch.device("cpu"))
    assert moved.tags == ps.tags and moved.tags is not ps.tags
    assert ps.device == torch.device("cpu")
