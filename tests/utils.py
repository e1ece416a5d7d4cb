# tests/utils.py
"""
Small, reusable helpers used across the station planner test suite.

Functions:
- brute_force_nearest(X, C): nearest center per point by explicit loops.
- brute_force_total_distance(X, labels, C): k-median objective by explicit loops.
- match_centers(A, B): best total distance over pairings of two center sets.
- is_non_increasing(values, atol): whether a sequence never goes up.
- time_block(label, meta=None): context manager that prints wall-clock time with optional metadata.
- print_timing(label, seconds, **meta): convenience printer for timings (used by time_block).
"""

from __future__ import annotations

import itertools
import json
import math
import time
from contextlib import contextmanager
from typing import Any, Dict, Sequence, Tuple

import numpy as np
import torch


def _to_numpy_2d(x) -> np.ndarray:
    if isinstance(x, torch.Tensor):
        x = x.detach().cpu().numpy()
    x = np.asarray(x, dtype=np.float64)
    if x.ndim != 2:
        raise ValueError(f"Expected 2D array, got shape {x.shape}")
    return x


def brute_force_nearest(X, C) -> np.ndarray:
    """Nearest center index per point; first strictly closer center wins."""
    X_np = _to_numpy_2d(X)
    C_np = _to_numpy_2d(C)
    labels = np.zeros(len(X_np), dtype=np.int64)
    for i, p in enumerate(X_np):
        best = math.inf
        for k, c in enumerate(C_np):
            d = math.hypot(p[0] - c[0], p[1] - c[1])
            if d < best:
                best = d
                labels[i] = k
    return labels


def brute_force_total_distance(X, labels, C) -> float:
    X_np = _to_numpy_2d(X)
    C_np = _to_numpy_2d(C)
    labels = np.asarray(labels.cpu() if isinstance(labels, torch.Tensor) else labels)
    return float(sum(math.hypot(*(X_np[i] - C_np[labels[i]])) for i in range(len(X_np))))


def match_centers(A, B) -> Tuple[float, Tuple[int, ...]]:
    """
    Smallest summed distance between rows of A and a permutation of rows of B.

    Returns (best_total, best_perm) where B[best_perm[i]] is matched to A[i].
    Brute force over permutations; keep k small.
    """
    A_np = _to_numpy_2d(A)
    B_np = _to_numpy_2d(B)
    if A_np.shape != B_np.shape:
        raise ValueError(f"Shape mismatch: A {A_np.shape} vs B {B_np.shape}")
    k = A_np.shape[0]
    best_total = math.inf
    best_perm: Tuple[int, ...] = tuple(range(k))
    for perm in itertools.permutations(range(k)):
        total = float(np.sum(np.linalg.norm(A_np - B_np[list(perm)], axis=1)))
        if total < best_total:
            best_total = total
            best_perm = perm
    return best_total, best_perm


def is_non_increasing(values: Sequence[float], atol: float = 0.0) -> bool:
    return all(b <= a + atol for a, b in zip(values, values[1:]))


@contextmanager
def time_block(label: str, meta: Dict[str, Any] | None = None):
    """
    Context manager to time a block and print a single-line summary.

    Output
    ------
    [timing] fit {"n":400,"K":2} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        print_timing(label, dt, **(meta or {}))


def print_timing(label: str, seconds: float, **meta: Any) -> None:
    meta_str = ""
    if meta:
        meta_str = " " + json.dumps(meta, separators=(",", ":"), default=repr)
    print(f"[timing] {label}{meta_str} {seconds:.3f}s")
