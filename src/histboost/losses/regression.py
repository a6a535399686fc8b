"""Squared-error loss for one target column."""

import numpy as np


class MSELoss:
    """Squared-error loss used to drive every boosting round.

    The booster calls these per target column with the running predictions,
    so ``gradient`` is the residual each new tree is fitted against.
    """

    @staticmethod
    def loss(y_true: np.ndarray, y_pred: np.ndarray) -> float:
        """Mean squared error, reported per round in ``train_score_``."""
        return float(np.mean((y_true - y_pred) ** 2))

    @staticmethod
    def gradient(y_true: np.ndarray, y_pred: np.ndarray) -> np.ndarray:
        """Per-row residual ``y_pred - y_true``."""
        return y_pred - y_true

    @staticmethod
    def hessian(y_true: np.ndarray, y_pred: np.ndarray) -> np.ndarray:
        """Per-row curvature, constant 1.0."""
        return np.ones_like(y_pred, dtype=np.float64)
