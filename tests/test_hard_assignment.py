# tests/test_hard_assignment.py
"""
Partitioner (hard nearest-station assignment)

Covers:
- every point lands in exactly one group
- groups agree with a brute-force nearest search
- ties go to the lowest station index
- stations far from every point yield empty groups
"""

from __future__ import annotations

import numpy as np
import pytest
import torch

from stationplanner.assignments import HardAssignment, partition
from stationplanner.base.data_structures import Partition
import utils


def test_groups_cover_every_point_once(rng):
    X = torch.tensor(rng.uniform(0, 1000, size=(200, 2)))
    C = torch.tensor(rng.uniform(0, 1000, size=(7, 2)))

    part = partition(X, C)

    assert isinstance(part, Partition)
    assert len(part.groups) == 7
    flat = sorted(i for group in part.groups for i in group)
    assert flat == list(range(200))


def test_matches_brute_force(rng):
    X = torch.tensor(rng.uniform(-500, 500, size=(150, 2)))
    C = torch.tensor(rng.uniform(-500, 500, size=(5, 2)))

    part = partition(X, C)
    expected = utils.brute_force_nearest(X, C)

    assert np.array_equal(part.labels.numpy(), expected)
    for k, group in enumerate(part.groups):
        assert group == sorted(group), "Indices within a group should ascend"
        assert all(expected[i] == k for i in group)


def test_tie_goes_to_lowest_index():
    # (5, 0) is equidistant from both stations
    X = torch.tensor([[5.0, 0.0], [1.0, 0.0], [9.0, 0.0]], dtype=torch.float64)
    C = torch.tensor([[0.0, 0.0], [10.0, 0.0]], dtype=torch.float64)

    part = partition(X, C)
    assert part.groups == [[0, 1], [2]]


def test_duplicate_centers_prefer_first():
    X = torch.tensor([[1.0, 1.0], [2.0, 2.0]], dtype=torch.float64)
    C = torch.tensor([[0.0, 0.0], [0.0, 0.0]], dtype=torch.float64)

    part = partition(X, C)
    assert part.groups == [[0, 1], []]
    assert part.empty_clusters() == [1]


def test_far_station_gets_empty_group():
    X = torch.tensor([[0.0, 0.0], [1.0, 1.0], [2.0, 0.0]], dtype=torch.float64)
    C = torch.tensor([[1.0, 0.0], [1e6, 1e6]], dtype=torch.float64)

    part = partition(X, C)
    assert part.groups[1] == []
    assert part.count_per_cluster().tolist() == [3, 0]


def test_distance_matrix_shape_and_values():
    X = torch.tensor([[0.0, 0.0], [3.0, 4.0]], dtype=torch.float64)
    C = torch.tensor([[0.0, 0.0], [3.0, 0.0]], dtype=torch.float64)
    strategy = HardAssignment()

    from stationplanner.representations import StationRepresentation
    stations = []
    for c in C:
        rep = StationRepresentation()
        rep.mean = c
        stations.append(rep)

    D = strategy.distance_matrix(X, stations)
    assert D.shape == (2, 2)
    assert torch.allclose(D, torch.tensor([[0.0, 3.0], [5.0, 4.0]], dtype=torch.float64))


def test_no_stations_rejected():
    with pytest.raises(ValueError):
        HardAssignment().compute_assignments(torch.zeros(3, 2, dtype=torch.float64), [])
