"""Shared fixtures for histboost tests."""

import numpy as np
import pytest


@pytest.fixture
def step_data() -> tuple[np.ndarray, np.ndarray]:
    """Four rows on one feature with a step in the target."""
    X = np.array([[0.0], [1.0], [2.0], [3.0]])
    Y = np.array([[0.0], [0.0], [5.0], [5.0]])
    return X, Y


@pytest.fixture
def regression_data() -> tuple[np.ndarray, np.ndarray]:
    """Small integer grid with two unrelated targets."""
    rng = np.random.default_rng(42)
    X = rng.integers(0, 50, size=(120, 3)).astype(np.float64)
    y0 = (X[:, 0] > 25).astype(np.float64) * 3.0 + (X[:, 1] > 10)
    y1 = np.floor(X[:, 2] / 10.0)
    return X, np.column_stack([y0, y1])
