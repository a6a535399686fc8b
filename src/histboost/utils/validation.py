"""Boundary checks for training inputs.

The boosting engine trusts its inputs. Callers that receive data from
outside (files, requests) run these checks once before ``fit``.
"""

import numpy as np


def check_training_inputs(
    X: np.ndarray | list,
    Y: np.ndarray | list,
    n_targets: int | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Validate a feature/target pair and convert it to float64 arrays.

    Args:
        X: Feature rows, shape (n_samples, n_features).
        Y: Target rows, shape (n_samples, n_targets).
        n_targets: Expected number of target columns, if known.

    Returns:
        X and Y as 2-D float64 arrays.

    Raises:
        ValueError: If rows are ragged, empty, misaligned or have the wrong
            number of targets.
    """
    X_np = _as_matrix(X, "X")
    Y_np = _as_matrix(Y, "Y")

    if X_np.shape[0] == 0:
        raise ValueError("X must contain at least one row.")
    if X_np.shape[1] == 0:
        raise ValueError("X must contain at least one feature.")
    if X_np.shape[0] != Y_np.shape[0]:
        raise ValueError(
            f"X and Y have different row counts: {X_np.shape[0]} != {Y_np.shape[0]}"
        )
    if n_targets is not None and Y_np.shape[1] != n_targets:
        raise ValueError(f"Expected {n_targets} target columns, got {Y_np.shape[1]}")
    if not np.all(np.isfinite(X_np)):
        raise ValueError("X contains NaN or infinite values.")
    if not np.all(np.isfinite(Y_np)):
        raise ValueError("Y contains NaN or infinite values.")

    return X_np, Y_np


def _as_matrix(data: np.ndarray | list, name: str) -> np.ndarray:
    """Convert to a rectangular float64 matrix."""
    if isinstance(data, list) and data and isinstance(data[0], (list, tuple)):
        widths = {len(row) for row in data}
        if len(widths) > 1:
            raise ValueError(f"{name} rows have different lengths: {sorted(widths)}")
    try:
        matrix = np.asarray(data, dtype=np.float64)
    except ValueError as exc:
        raise ValueError(f"{name} is not a rectangular numeric matrix.") from exc
    if matrix.ndim == 1:
        matrix = matrix.reshape(-1, 1)
    if matrix.ndim != 2:
        raise ValueError(f"{name} must be 2-dimensional, got {matrix.ndim} dimensions.")
    return matrix
