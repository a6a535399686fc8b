"""Multi-target gradient boosting with histogram trees.

This module implements squared-error gradient boosting where every
target column owns its own sequence of trees. Each round grows exactly
one tree per target, in column order, and adds its learning-rate scaled
output to the running predictions.
"""

import logging

import mlx.core as mx
import numpy as np

from histboost.base import BaseEstimator
from histboost.losses.regression import MSELoss
from histboost.trees._predictor import evaluate_tree, predict_regression, predict_tree
from histboost.trees._tree_builder import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MIN_SAMPLES,
    DEFAULT_N_BINS,
    build_histogram_tree,
)
from histboost.trees._tree_structure import MLXTreeArrays, TreeArrays, to_mlx_tree
from histboost.utils.data import to_mlx_array, to_numpy_array

logger = logging.getLogger(__name__)

DEFAULT_LEARNING_RATE: float = 0.1


class HistogramBooster(BaseEstimator):
    """Gradient boosted histogram trees for several numeric targets.

    Running predictions start at 0.0 (no base score). For target ``j`` the
    gradient is ``pred[:, j] - Y[:, j]`` and the Hessian is 1.0, so each tree
    fits the current residuals.

    ``fit`` trusts its inputs: X must be (n_samples, n_features), Y must be
    (n_samples, n_targets) with matching row counts. Use
    :func:`histboost.utils.check_training_inputs` at the boundary when the
    data comes from outside.

    Args:
        n_targets: Number of target columns. Default is 1.
        learning_rate: Shrinkage factor for each tree's contribution.
            Default is 0.1.
        max_depth: Maximum depth of individual trees. Default is 3.
        min_samples: Nodes with at most this many rows are not split, and
            each child must keep at least this many rows. Default is 5.
        n_bins: Number of histogram bins per feature. Default is 256.
        verbose: Verbosity level. Default is 0.

    Attributes:
        trees_: One list of fitted trees per target, in boosting round order.
        train_predictions_: Running predictions on the training rows,
            shape (n_samples, n_targets).
        train_score_: Per-round list of per-target training MSE.
        n_features_in_: Number of features seen during fit.

    Example:
        >>> import numpy as np
        >>> from histboost import HistogramBooster
        >>> X = np.array([[0.0], [1.0], [2.0], [3.0]])
        >>> Y = np.array([[0.0], [0.0], [5.0], [5.0]])
        >>> model = HistogramBooster(n_targets=1, learning_rate=1.0, max_depth=1,
        ...                          min_samples=1, n_bins=2)
        >>> model.fit(X, Y, rounds=1)
        >>> model.predict([3.0])
    """

    def __init__(
        self,
        n_targets: int = 1,
        learning_rate: float = DEFAULT_LEARNING_RATE,
        max_depth: int = DEFAULT_MAX_DEPTH,
        min_samples: int = DEFAULT_MIN_SAMPLES,
        n_bins: int = DEFAULT_N_BINS,
        verbose: int = 0,
    ) -> None:
        self.n_targets = n_targets
        self.learning_rate = learning_rate
        self.max_depth = max_depth
        self.min_samples = min_samples
        self.n_bins = n_bins
        self.verbose = verbose

        self.trees_: list[list[TreeArrays]] = []
        self.train_predictions_: np.ndarray | None = None
        self.train_score_: list[list[float]] = []
        self.n_features_in_: int | None = None
        self._loss_fn = MSELoss()
        self._mlx_trees: list[list[MLXTreeArrays]] | None = None

    def fit(self, X: np.ndarray, Y: np.ndarray, rounds: int) -> "HistogramBooster":
        """Fit the ensemble, replacing any previously fitted trees.

        Args:
            X: Training features of shape (n_samples, n_features).
            Y: Target values of shape (n_samples, n_targets).
            rounds: Number of boosting rounds.

        Returns:
            Self for method chaining.
        """
        self._check_params(rounds)

        X = self._validate_X(X)
        Y = self._validate_Y(Y)

        n_samples = X.shape[0]
        self.n_features_in_ = X.shape[1]

        predictions = np.zeros((n_samples, self.n_targets), dtype=np.float64)

        self.trees_ = [[] for _ in range(self.n_targets)]
        self.train_score_ = []
        self._mlx_trees = None

        for iteration in range(rounds):
            round_scores = []
            for j in range(self.n_targets):
                # Squared error: gradient is the residual, curvature is constant
                gradients = self._loss_fn.gradient(Y[:, j], predictions[:, j])
                hessians = self._loss_fn.hessian(Y[:, j], predictions[:, j])

                tree = build_histogram_tree(
                    X=X,
                    gradients=gradients,
                    hessians=hessians,
                    depth=0,
                    max_depth=self.max_depth,
                    min_samples=self.min_samples,
                    n_bins=self.n_bins,
                )
                self.trees_[j].append(tree)

                predictions[:, j] += self.learning_rate * predict_tree(tree, X)

                round_scores.append(self._loss_fn.loss(Y[:, j], predictions[:, j]))

            self.train_score_.append(round_scores)

            if self.verbose > 0 and (iteration + 1) % 10 == 0:
                losses = ", ".join(f"{score:.6f}" for score in round_scores)
                logger.info(f"Round {iteration + 1}/{rounds}, Loss per target: [{losses}]")

        self.train_predictions_ = predictions
        return self

    def predict(self, x: np.ndarray) -> np.ndarray:
        """Predict every target for one feature vector.

        Args:
            x: Features of shape (n_features,).

        Returns:
            Raw predictions of shape (n_targets,).

        Raises:
            ValueError: If model has not been fitted.
        """
        self._check_fitted()

        x = to_numpy_array(x).ravel()
        output = np.zeros(self.n_targets, dtype=np.float64)
        for j, trees in enumerate(self.trees_):
            total = 0.0
            # Insertion order keeps float summation reproducible
            for tree in trees:
                total += self.learning_rate * evaluate_tree(tree, x)
            output[j] = total
        return output

    def predict_batch(self, X: np.ndarray) -> np.ndarray:
        """Predict every target for many rows.

        Row ``i`` of the result is bit-identical to ``predict(X[i])``.

        Args:
            X: Features of shape (n_samples, n_features).

        Returns:
            Raw predictions of shape (n_samples, n_targets).

        Raises:
            ValueError: If model has not been fitted.
        """
        self._check_fitted()

        X = self._validate_X(X)
        output = np.zeros((X.shape[0], self.n_targets), dtype=np.float64)
        for j, trees in enumerate(self.trees_):
            for tree in trees:
                output[:, j] += self.learning_rate * predict_tree(tree, X)
        return output

    def predict_mlx(self, X: mx.array) -> mx.array:
        """Predict every target for many rows on the MLX device.

        Computation is float32, so results match :meth:`predict_batch` only
        up to float32 rounding.

        Args:
            X: Features of shape (n_samples, n_features).

        Returns:
            Raw predictions of shape (n_samples, n_targets).

        Raises:
            ValueError: If model has not been fitted.
            IndexError: If X lacks a column used by any split.
        """
        self._check_fitted()

        X = to_mlx_array(X)
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        X = X.astype(mx.float32)
        n_samples = X.shape[0]

        if self._mlx_trees is None:
            self._mlx_trees = [
                [to_mlx_tree(tree) for tree in trees] for trees in self.trees_
            ]

        columns = []
        for trees in self._mlx_trees:
            y_pred = mx.zeros((n_samples,), dtype=mx.float32)
            for tree in trees:
                y_pred = y_pred + self.learning_rate * predict_regression(tree, X)
            columns.append(y_pred)

        predictions = mx.stack(columns, axis=1)
        mx.eval(predictions)
        return predictions

    def _check_fitted(self) -> None:
        """Raise if fit() has not been called."""
        if self.n_features_in_ is None:
            raise ValueError("Model not fitted. Call fit() first.")

    def _check_params(self, rounds: int) -> None:
        """Validate hyperparameters once per fit."""
        if self.n_targets < 1:
            raise ValueError(f"n_targets must be >= 1, got {self.n_targets}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.min_samples < 1:
            raise ValueError(f"min_samples must be >= 1, got {self.min_samples}")
        if self.n_bins < 2:
            raise ValueError(f"n_bins must be >= 2, got {self.n_bins}")
        if rounds < 0:
            raise ValueError(f"rounds must be >= 0, got {rounds}")

    def _validate_X(self, X: np.ndarray | mx.array | list) -> np.ndarray:
        """Convert input features to a contiguous float64 matrix."""
        X = to_numpy_array(X)
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        return np.ascontiguousarray(X)

    def _validate_Y(self, Y: np.ndarray | mx.array | list) -> np.ndarray:
        """Convert target values to a float64 matrix."""
        Y = to_numpy_array(Y)
        if Y.ndim == 1:
            Y = Y.reshape(-1, 1)
        return Y
