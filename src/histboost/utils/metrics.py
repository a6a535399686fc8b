"""Evaluation metrics for histboost."""

import math
from collections.abc import Sequence

import numpy as np


def mse(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Compute Mean Squared Error.

    Args:
        y_true: Ground truth values.
        y_pred: Predicted values.

    Returns:
        MSE value.
    """
    return float(np.mean((np.asarray(y_true) - np.asarray(y_pred)) ** 2))


def rmse(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Compute Root Mean Squared Error."""
    return math.sqrt(mse(y_true, y_pred))


def mae(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Compute Mean Absolute Error."""
    return float(np.mean(np.abs(np.asarray(y_true) - np.asarray(y_pred))))


def clamp_class_index(value: float, n_classes: int) -> int:
    """Turn a raw regression score into a valid class code.

    Rounds half away from zero, then clamps into ``[0, n_classes - 1]``.

    Args:
        value: Raw ensemble output for one target.
        n_classes: Number of known classes for that target.

    Returns:
        Class code usable as an index into the target's label list.
    """
    index = int(math.copysign(math.floor(abs(value) + 0.5), value))
    if index < 0:
        return 0
    if index >= n_classes:
        return n_classes - 1
    return index


def per_target_accuracy(
    Y_true: np.ndarray,
    Y_pred: np.ndarray,
    class_counts: Sequence[int],
) -> list[float]:
    """Compute classification accuracy for every target column.

    Raw predictions are decoded with :func:`clamp_class_index` before being
    compared with the true codes.

    Args:
        Y_true: True class codes of shape (n_samples, n_targets).
        Y_pred: Raw predictions of shape (n_samples, n_targets).
        class_counts: Number of classes per target.

    Returns:
        Accuracy in [0, 1] for each target, in column order. Empty inputs
        give an empty list.
    """
    Y_true = np.asarray(Y_true, dtype=np.float64)
    Y_pred = np.asarray(Y_pred, dtype=np.float64)
    if Y_true.shape[0] == 0:
        return []

    n_samples, n_targets = Y_true.shape
    accuracies = []
    for j in range(n_targets):
        correct = 0
        for i in range(n_samples):
            code = clamp_class_index(float(Y_pred[i, j]), class_counts[j])
            if code == int(Y_true[i, j]):
                correct += 1
        accuracies.append(correct / n_samples)
    return accuracies
