"""Tests for data, validation and metric helpers."""

import mlx.core as mx
import numpy as np
import pytest

from histboost.utils import (
    check_training_inputs,
    clamp_class_index,
    mae,
    mse,
    per_target_accuracy,
    rmse,
    shuffle_split,
    to_mlx_array,
    to_numpy_array,
)


class TestConversion:
    """Tests for array conversion."""

    def test_to_numpy_array(self) -> None:
        """Test lists, numpy and MLX arrays become float64 numpy arrays."""
        for data in ([[1, 2], [3, 4]], np.array([[1, 2], [3, 4]]), mx.array([[1, 2], [3, 4]])):
            result = to_numpy_array(data)
            assert result.dtype == np.float64
            np.testing.assert_array_equal(result, [[1.0, 2.0], [3.0, 4.0]])

    def test_to_mlx_array(self) -> None:
        """Test numpy arrays and lists become MLX arrays."""
        assert isinstance(to_mlx_array(np.ones(3)), mx.array)
        assert to_mlx_array([1.0, 2.0]).shape == (2,)

    def test_unsupported_type(self) -> None:
        """Test unsupported containers are rejected."""
        with pytest.raises(TypeError):
            to_numpy_array("abc")
        with pytest.raises(TypeError):
            to_mlx_array({"a": 1})


class TestShuffleSplit:
    """Tests for shuffle_split."""

    def test_sizes_and_coverage(self) -> None:
        """Test the split is a partition of all indices."""
        train, val = shuffle_split(10, 0.8, np.random.default_rng(0))

        assert len(train) == 8
        assert len(val) == 2
        assert sorted(np.concatenate([train, val]).tolist()) == list(range(10))

    def test_reproducible_with_seed(self) -> None:
        """Test the same seed gives the same split."""
        a = shuffle_split(50, 0.7, np.random.default_rng(123))
        b = shuffle_split(50, 0.7, np.random.default_rng(123))

        np.testing.assert_array_equal(a[0], b[0])
        np.testing.assert_array_equal(a[1], b[1])

    @pytest.mark.parametrize(
        "fraction,expected_train",
        [(1.5, 8), (-0.1, 8), (1.0, 9), (0.0, 1), (0.05, 1)],
    )
    def test_fraction_clamping(self, fraction: float, expected_train: int) -> None:
        """Test invalid fractions fall back and both sides stay non-empty."""
        train, val = shuffle_split(10, fraction, np.random.default_rng(1))

        assert len(train) == expected_train
        assert len(val) == 10 - expected_train

    def test_single_row(self) -> None:
        """Test a single row ends up in validation."""
        train, val = shuffle_split(1, 0.8, np.random.default_rng(0))
        assert len(train) == 0
        assert len(val) == 1


class TestCheckTrainingInputs:
    """Tests for the boundary validation."""

    def test_valid_inputs(self) -> None:
        """Test valid inputs are returned as 2-D float64 arrays."""
        X, Y = check_training_inputs([[1, 2], [3, 4]], [1, 0], n_targets=1)

        assert X.shape == (2, 2)
        assert Y.shape == (2, 1)
        assert X.dtype == np.float64

    def test_ragged_rows(self) -> None:
        """Test non-rectangular feature rows are rejected."""
        with pytest.raises(ValueError, match="different lengths"):
            check_training_inputs([[1, 2], [3]], [[0], [1]])

    def test_row_mismatch(self) -> None:
        """Test mismatched row counts are rejected."""
        with pytest.raises(ValueError, match="row counts"):
            check_training_inputs(np.ones((3, 2)), np.ones((2, 1)))

    def test_empty(self) -> None:
        """Test empty feature matrices are rejected."""
        with pytest.raises(ValueError, match="at least one row"):
            check_training_inputs(np.empty((0, 2)), np.empty((0, 1)))

    def test_target_count(self) -> None:
        """Test the number of target columns is enforced."""
        with pytest.raises(ValueError, match="target columns"):
            check_training_inputs(np.ones((3, 2)), np.ones((3, 2)), n_targets=3)

    def test_non_finite(self) -> None:
        """Test NaN features are rejected."""
        X = np.array([[1.0, np.nan]])
        with pytest.raises(ValueError, match="NaN"):
            check_training_inputs(X, [[0.0]])


class TestMetrics:
    """Tests for evaluation metrics."""

    def test_regression_metrics(self) -> None:
        """Test MSE, RMSE and MAE on a simple case."""
        y_true = np.array([1.0, 2.0, 3.0])
        y_pred = np.array([2.0, 2.0, 1.0])

        assert mse(y_true, y_pred) == pytest.approx(5.0 / 3.0)
        assert rmse(y_true, y_pred) == pytest.approx(np.sqrt(5.0 / 3.0))
        assert mae(y_true, y_pred) == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "value,n_classes,expected",
        [(1.5, 5, 2), (2.5, 5, 3), (2.49, 5, 2), (-0.4, 5, 0), (-3.0, 5, 0), (10.0, 4, 3)],
    )
    def test_clamp_class_index(self, value: float, n_classes: int, expected: int) -> None:
        """Test rounding half away from zero and clamping."""
        assert clamp_class_index(value, n_classes) == expected

    def test_per_target_accuracy(self) -> None:
        """Test accuracy is computed per column after decoding."""
        Y_true = np.array([[0, 1], [2, 1]])
        Y_pred = np.array([[0.2, 0.6], [1.4, 3.0]])

        assert per_target_accuracy(Y_true, Y_pred, [3, 2]) == [0.5, 1.0]

    def test_per_target_accuracy_empty(self) -> None:
        """Test empty validation sets give no accuracies."""
        assert per_target_accuracy(np.empty((0, 2)), np.empty((0, 2)), [2, 2]) == []
