"""Numba JIT-compiled histogram split search.

This module provides the hot loops of tree construction: node gradient
totals and the per-feature equal-width histogram scan. Histograms are
rebuilt from scratch for every node, so bin edges always follow the
value range of the rows that reached that node.
"""

import numpy as np
from numba import njit, prange


@njit(cache=True)
def node_totals(
    rows: np.ndarray, gradients: np.ndarray, hessians: np.ndarray
) -> tuple[float, float]:
    """Sum gradients and Hessians over the rows of a node.

    Accumulates sequentially in row order.
    """
    sum_grad = 0.0
    sum_hess = 0.0
    for k in range(rows.shape[0]):
        i = rows[k]
        sum_grad += gradients[i]
        sum_hess += hessians[i]
    return sum_grad, sum_hess


@njit(cache=True)
def _feature_range(X: np.ndarray, rows: np.ndarray, f: int) -> tuple[float, float]:
    """Minimum and maximum of feature ``f`` over the node's rows."""
    min_val = X[rows[0], f]
    max_val = min_val
    for k in range(1, rows.shape[0]):
        v = X[rows[k], f]
        if v < min_val:
            min_val = v
        if v > max_val:
            max_val = v
    return min_val, max_val


@njit(cache=True)
def _scan_feature(
    X: np.ndarray,
    rows: np.ndarray,
    gradients: np.ndarray,
    hessians: np.ndarray,
    f: int,
    min_val: float,
    width: float,
    sum_grad: float,
    sum_hess: float,
    min_samples: int,
    n_bins: int,
    reg_lambda: float,
) -> tuple[float, int]:
    """Build one feature histogram and return its best (gain, bin) pair.

    Returns ``(-inf, -1)`` when no boundary leaves ``min_samples`` rows on
    both sides.
    """
    n_rows = rows.shape[0]
    grad_hist = np.zeros(n_bins, dtype=np.float64)
    hess_hist = np.zeros(n_bins, dtype=np.float64)
    count_hist = np.zeros(n_bins, dtype=np.int64)

    for k in range(n_rows):
        i = rows[k]
        bin_idx = int((X[i, f] - min_val) / width)
        if bin_idx < 0:
            bin_idx = 0
        elif bin_idx >= n_bins:
            # Values equal to the maximum land one past the last bin
            bin_idx = n_bins - 1
        grad_hist[bin_idx] += gradients[i]
        hess_hist[bin_idx] += hessians[i]
        count_hist[bin_idx] += 1

    parent_score = (sum_grad * sum_grad) / (sum_hess + reg_lambda)

    best_gain = -np.inf
    best_bin = -1
    left_grad = 0.0
    left_hess = 0.0
    left_count = 0

    for b in range(n_bins - 1):  # Boundary after the last bin is not a split
        left_grad += grad_hist[b]
        left_hess += hess_hist[b]
        left_count += count_hist[b]

        right_grad = sum_grad - left_grad
        right_hess = sum_hess - left_hess
        right_count = n_rows - left_count

        if left_count < min_samples or right_count < min_samples:
            continue

        left_score = (left_grad * left_grad) / (left_hess + reg_lambda)
        right_score = (right_grad * right_grad) / (right_hess + reg_lambda)
        gain = 0.5 * (left_score + right_score - parent_score)

        if gain > best_gain:
            best_gain = gain
            best_bin = b

    return best_gain, best_bin


@njit(parallel=True, cache=True)
def find_best_split(
    X: np.ndarray,
    rows: np.ndarray,
    gradients: np.ndarray,
    hessians: np.ndarray,
    sum_grad: float,
    sum_hess: float,
    min_samples: int,
    n_bins: int,
    reg_lambda: float,
) -> tuple[int, int, float, float, float]:
    """Find the best (feature, bin boundary) split for one node.

    Features are scanned in parallel; the per-feature winners are then
    reduced in ascending feature order with a strict ``>`` comparison, so
    ties always resolve to the lowest feature index and, within a feature,
    the lowest boundary index.

    Args:
        X: Full feature matrix (n_samples, n_features), float64.
        rows: Row indices that reached this node, int64.
        gradients: Per-row gradients for the whole training set.
        hessians: Per-row Hessians for the whole training set.
        sum_grad: Gradient total of the node (from :func:`node_totals`).
        sum_hess: Hessian total of the node.
        min_samples: Minimum rows required on each side of a boundary.
        n_bins: Number of equal-width bins per feature.
        reg_lambda: Smoothing constant added to every Hessian sum.

    Returns:
        best_feature: Feature index, or -1 if no admissible boundary exists.
        best_bin: Boundary index ``b`` (left side = bins ``0..b``).
        best_gain: Gain of the chosen split.
        min_value: Minimum of the chosen feature over the node's rows.
        bin_width: Bin width of the chosen feature.
    """
    n_features = X.shape[1]

    feature_gains = np.full(n_features, -np.inf, dtype=np.float64)
    feature_bins = np.full(n_features, -1, dtype=np.int64)
    feature_mins = np.zeros(n_features, dtype=np.float64)
    feature_widths = np.zeros(n_features, dtype=np.float64)

    # Parallel over features - each feature's histogram is independent
    for f in prange(n_features):
        min_val, max_val = _feature_range(X, rows, f)
        width = (max_val - min_val) / n_bins
        # Constant within this node (or too narrow to bin): nothing to split on
        if max_val != min_val and width != 0.0:
            gain, b = _scan_feature(
                X,
                rows,
                gradients,
                hessians,
                f,
                min_val,
                width,
                sum_grad,
                sum_hess,
                min_samples,
                n_bins,
                reg_lambda,
            )
            feature_gains[f] = gain
            feature_bins[f] = b
            feature_mins[f] = min_val
            feature_widths[f] = width

    best_feature = -1
    best_bin = -1
    best_gain = -np.inf
    for f in range(n_features):
        if feature_bins[f] >= 0 and feature_gains[f] > best_gain:
            best_gain = feature_gains[f]
            best_feature = f
            best_bin = feature_bins[f]

    if best_feature < 0:
        return -1, -1, best_gain, 0.0, 0.0
    return (
        best_feature,
        best_bin,
        best_gain,
        feature_mins[best_feature],
        feature_widths[best_feature],
    )
