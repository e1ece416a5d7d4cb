# tests/test_data_structures.py
"""
Core containers: Bounds, PointSet, Partition, RunResult
"""

from __future__ import annotations

import math

import pytest
import torch

from stationplanner.base.data_structures import Bounds, PointSet, Partition, RunResult
from stationplanner.base.errors import InvalidConfigurationError
from data_gen import make_resource_nodes


def test_satisfactory_bounds():
    b = Bounds.satisfactory()
    assert (b.left, b.top, b.right, b.bottom) == (-324600.0, -375000.0, 425300.0, 375000.0)
    assert b.width == pytest.approx(749900.0)
    assert b.height == pytest.approx(750000.0)


@pytest.mark.parametrize("args", [
    (0.0, 0.0, 0.0, 10.0),
    (10.0, 0.0, 0.0, 10.0),
    (0.0, 10.0, 10.0, 0.0),
    (0.0, 0.0, math.inf, 10.0),
    (math.nan, 0.0, 10.0, 10.0),
])
def test_bounds_rejects_empty_or_non_finite(args):
    with pytest.raises(InvalidConfigurationError):
        Bounds(*args)


def test_bounds_sample_inside_and_reproducible():
    b = Bounds(-100.0, -50.0, 100.0, 50.0)
    g1 = torch.Generator().manual_seed(3)
    g2 = torch.Generator().manual_seed(3)

    s1 = b.sample(500, generator=g1)
    s2 = b.sample(500, generator=g2)

    assert s1.shape == (500, 2)
    assert s1.dtype == torch.float64
    assert b.contains(s1).all()
    assert torch.equal(s1, s2)


def test_bounds_from_points_pads_degenerate_axis():
    pts = torch.tensor([[0.0, 5.0], [10.0, 5.0]], dtype=torch.float64)
    b = Bounds.from_points(pts)
    assert (b.left, b.right) == (0.0, 10.0)
    assert (b.top, b.bottom) == (4.0, 6.0)
    assert b.contains(pts).all()


def test_point_set_from_records_and_tag_counts():
    records = make_resource_nodes(n=50, seed=1)
    ps = PointSet.from_records(records)

    assert len(ps) == 50
    assert ps.positions.dtype == torch.float64
    assert ps.weights is None
    assert torch.equal(ps.get_weights(), torch.ones(50, dtype=torch.float64))

    counts = ps.tag_counts()
    assert sum(counts.values()) == 50
    assert set(counts) <= {"impure", "normal", "pure"}

    sub = ps.tag_counts([0, 1, 2])
    assert sum(sub.values()) == 3


def test_point_set_from_records_with_weights():
    records = [{"x": 0, "y": 0, "w": 2}, {"x": 1, "y": 1, "w": 3}]
    ps = PointSet.from_records(records, tag_key=None, weight_key="w")
    assert ps.tags is None
    assert ps.tag_counts() == {}
    assert ps.weights.tolist() == [2.0, 3.0]


def test_point_set_rejects_bad_shapes():
    with pytest.raises(InvalidConfigurationError):
        PointSet(torch.zeros(3, 3))
    with pytest.raises(InvalidConfigurationError):
        PointSet(torch.zeros(3, 2), weights=torch.ones(2))


def test_partition_groups_and_empty_clusters():
    labels = torch.tensor([2, 0, 2, 2, 0])
    part = Partition(labels, 4)

    assert part.n_points == 5
    assert part.groups == [[1, 4], [], [0, 2, 3], []]
    assert part.empty_clusters() == [1, 3]
    assert part.count_per_cluster().tolist() == [2, 0, 3, 0]
    assert part.get_cluster_indices(2).tolist() == [0, 2, 3]


def test_run_result_n_clusters():
    result = RunResult(total_error=1.0, centers=torch.zeros(3, 2), clusters=[[0], [1], [2]])
    assert result.n_clusters == 3
    assert result.iteration == 0
    assert result.converged is False
