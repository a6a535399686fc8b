"""Tests for tree evaluation."""

import mlx.core as mx
import numpy as np
import pytest

from histboost.trees import (
    build_histogram_tree,
    evaluate_tree,
    predict_regression,
    predict_tree,
    to_mlx_tree,
)


@pytest.fixture
def fitted_tree():
    """Depth-3 tree on a two-feature integer grid."""
    rng = np.random.default_rng(5)
    X = rng.integers(0, 32, size=(80, 2)).astype(np.float64)
    grad = np.where(X[:, 0] > 15, -1.0, 1.0) + 0.25 * (X[:, 1] > 20)
    tree = build_histogram_tree(X, grad, np.ones(80), max_depth=3, min_samples=2, n_bins=8)
    return tree, X


class TestEvaluateTree:
    """Tests for single-vector evaluation."""

    def test_leaf_only_tree(self) -> None:
        """Test a lone leaf returns its value for any input."""
        tree = build_histogram_tree(np.zeros((3, 2)), [1.0, 1.0, 1.0], np.ones(3))
        assert evaluate_tree(tree, [9.0, -9.0]) == tree.values[0]

    def test_threshold_goes_left(self) -> None:
        """Test a value equal to the threshold routes left."""
        X = np.array([[0.0], [1.0], [2.0], [3.0]])
        tree = build_histogram_tree(
            X, [0.0, 0.0, -5.0, -5.0], np.ones(4), max_depth=1, min_samples=1, n_bins=2
        )

        assert evaluate_tree(tree, [1.5]) == tree.values[1]
        assert evaluate_tree(tree, [1.5000001]) == tree.values[2]

    def test_accepts_lists_and_arrays(self, fitted_tree) -> None:
        """Test list and numpy feature vectors give the same value."""
        tree, X = fitted_tree
        for row in X[:10]:
            assert evaluate_tree(tree, list(row)) == evaluate_tree(tree, row)

    def test_short_vector_raises(self) -> None:
        """Test a vector missing a split feature is rejected."""
        X = np.column_stack([np.ones(6), np.arange(6, dtype=np.float64)])
        grad = np.array([1.0, 1.0, 1.0, -1.0, -1.0, -1.0])
        tree = build_histogram_tree(X, grad, np.ones(6), max_depth=1, min_samples=1)

        assert tree.max_feature_index == 1
        with pytest.raises(IndexError):
            evaluate_tree(tree, np.array([0.0]))


class TestPredictTree:
    """Tests for vectorized evaluation."""

    def test_matches_evaluate_exactly(self, fitted_tree) -> None:
        """Test batch values are bit-identical to per-row evaluation."""
        tree, X = fitted_tree
        batch = predict_tree(tree, X)
        expected = np.array([evaluate_tree(tree, row) for row in X])
        np.testing.assert_array_equal(batch, expected)

    def test_unseen_rows(self, fitted_tree) -> None:
        """Test rows outside the training range still reach a leaf."""
        tree, _ = fitted_tree
        X_new = np.array([[-100.0, -100.0], [100.0, 100.0], [15.5, 20.5]])
        batch = predict_tree(tree, X_new)
        expected = np.array([evaluate_tree(tree, row) for row in X_new])
        np.testing.assert_array_equal(batch, expected)

    def test_empty_batch(self, fitted_tree) -> None:
        """Test zero rows give an empty prediction."""
        tree, _ = fitted_tree
        assert predict_tree(tree, np.empty((0, 2))).shape == (0,)


class TestPredictRegressionMLX:
    """Tests for the MLX device path."""

    def test_close_to_host(self, fitted_tree) -> None:
        """Test float32 device predictions track the float64 host ones."""
        tree, X = fitted_tree
        preds = predict_regression(to_mlx_tree(tree), mx.array(X.astype(np.float32)))
        mx.eval(preds)

        assert preds.shape == (80,)
        np.testing.assert_allclose(
            np.array(preds), predict_tree(tree, X), rtol=1e-5, atol=1e-6
        )

    def test_leaf_only_tree(self) -> None:
        """Test a lone leaf broadcasts its value."""
        tree = build_histogram_tree(np.zeros((2, 1)), [2.0, 2.0], np.ones(2))
        preds = predict_regression(to_mlx_tree(tree), mx.zeros((3, 1)))
        mx.eval(preds)
        np.testing.assert_allclose(np.array(preds), np.full(3, tree.values[0]), rtol=1e-6)

    def test_narrow_matrix_raises(self, fitted_tree) -> None:
        """Test a matrix missing a split feature is not read from another column."""
        tree, X = fitted_tree
        X_narrow = X[:, : tree.max_feature_index].astype(np.float32)

        with pytest.raises(IndexError):
            predict_regression(to_mlx_tree(tree), mx.array(X_narrow))
