"""Data utilities for histboost."""

import mlx.core as mx
import numpy as np

DEFAULT_TRAIN_FRACTION: float = 0.8


def to_numpy_array(data: np.ndarray | mx.array | list) -> np.ndarray:
    """Convert input data to a float64 numpy array.

    Args:
        data: Input data as numpy array, MLX array, or (nested) list.

    Returns:
        Float64 numpy array.

    Raises:
        TypeError: If input type is not supported.
    """
    if isinstance(data, np.ndarray):
        return data.astype(np.float64, copy=False)
    if isinstance(data, (mx.array, list, tuple)):
        return np.array(data, dtype=np.float64)
    raise TypeError(f"Unsupported data type: {type(data)}")


def to_mlx_array(data: np.ndarray | mx.array | list) -> mx.array:
    """Convert input data to MLX array.

    Args:
        data: Input data as numpy array, MLX array, or list.

    Returns:
        MLX array.

    Raises:
        TypeError: If input type is not supported.
    """
    if isinstance(data, mx.array):
        return data
    if isinstance(data, np.ndarray):
        return mx.array(data)
    if isinstance(data, (list, tuple)):
        return mx.array(data)
    raise TypeError(f"Unsupported data type: {type(data)}")


def shuffle_split(
    n_samples: int,
    train_fraction: float,
    rng: np.random.Generator,
) -> tuple[np.ndarray, np.ndarray]:
    """Shuffle row indices and split them into train and validation sets.

    The generator is owned by the caller, so two runs seeded the same way
    produce the same split.

    Args:
        n_samples: Number of rows to split.
        train_fraction: Share of rows used for training. Values outside
            [0, 1] fall back to 0.8.
        rng: Random generator used for the shuffle.

    Returns:
        train_indices: First ``train_fraction * n_samples`` shuffled indices.
        val_indices: Remaining shuffled indices.
    """
    if train_fraction < 0.0 or train_fraction > 1.0:
        train_fraction = DEFAULT_TRAIN_FRACTION

    indices = rng.permutation(n_samples)

    n_train = int(n_samples * train_fraction)
    # Keep at least one row on each side when possible
    if n_train < 1:
        n_train = 1
    if n_train > n_samples - 1:
        n_train = n_samples - 1
    n_train = max(n_train, 0)

    return indices[:n_train], indices[n_train:]
