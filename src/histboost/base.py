"""Base classes for histboost estimators."""

from abc import ABC, abstractmethod
from typing import Any

import numpy as np


class BaseEstimator(ABC):
    """Shared interface of the multi-target boosters.

    An estimator is trained once on a feature matrix and a matrix with one
    column per target, for a fixed number of rounds. It then maps a single
    feature vector to one raw score per target. Hyperparameters are the
    keyword arguments of ``__init__``, stored under the same attribute
    names so :meth:`get_params` can read them back.
    """

    @abstractmethod
    def fit(self, X: np.ndarray, Y: np.ndarray, rounds: int) -> "BaseEstimator":
        """Train on ``X`` (n_samples, n_features) and ``Y`` (n_samples, n_targets).

        Returns:
            Self for method chaining.
        """

    @abstractmethod
    def predict(self, x: np.ndarray) -> np.ndarray:
        """Raw scores of shape (n_targets,) for one feature vector."""

    def get_params(self) -> dict[str, Any]:
        """Constructor arguments mapped to their current values."""
        return {
            key: getattr(self, key)
            for key in self.__init__.__code__.co_varnames[1:]
            if hasattr(self, key)
        }

    def set_params(self, **params: Any) -> "BaseEstimator":
        """Overwrite hyperparameters; they take effect on the next ``fit``.

        Returns:
            Self for method chaining.
        """
        for key, value in params.items():
            setattr(self, key, value)
        return self
