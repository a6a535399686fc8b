"""Recursive histogram-based regression tree builder.

Grows one binary tree from per-row gradient/Hessian statistics. Every
node bins the rows that reached it into ``n_bins`` equal-width bins per
feature, scores each bin boundary with the second-order gain and recurses
on the stable left/right partition of the best split.
"""

import logging

import numpy as np

from histboost.trees._histogram import find_best_split, node_totals
from histboost.trees._tree_structure import TreeArena, TreeArrays

logger = logging.getLogger(__name__)

# Default number of histogram bins
DEFAULT_N_BINS: int = 256
DEFAULT_MAX_DEPTH: int = 3
DEFAULT_MIN_SAMPLES: int = 5

# Added to every Hessian sum
SMOOTHING_LAMBDA: float = 1e-3


def leaf_value(sum_grad: float, sum_hess: float) -> float:
    """Newton step for a leaf: ``-G / (H + lambda)``."""
    return -sum_grad / (sum_hess + SMOOTHING_LAMBDA)


def build_histogram_tree(
    X: np.ndarray,
    gradients: np.ndarray,
    hessians: np.ndarray,
    depth: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
    min_samples: int = DEFAULT_MIN_SAMPLES,
    n_bins: int = DEFAULT_N_BINS,
) -> TreeArrays:
    """Build a regression tree from gradient statistics.

    The number of rows is taken from ``gradients``; ``X`` and ``hessians``
    must be index-aligned with it. No shape checks are made here.

    Args:
        X: Features of shape (n_samples, n_features).
        gradients: Gradient values of shape (n_samples,).
        hessians: Hessian values of shape (n_samples,).
        depth: Depth of the root being built (0 for a fresh tree).
        max_depth: Nodes at this depth always become leaves.
        min_samples: Nodes with at most this many rows become leaves, and
            each side of a split must keep at least this many rows.
        n_bins: Number of equal-width histogram bins per feature.

    Returns:
        TreeArrays structure containing the built tree.
    """
    g_np = np.ascontiguousarray(gradients, dtype=np.float64)
    h_np = np.ascontiguousarray(hessians, dtype=np.float64)
    n_samples = g_np.shape[0]

    arena = TreeArena()
    if n_samples == 0:
        arena.add_leaf(0.0, depth)
        return arena.freeze()

    X_np = np.ascontiguousarray(X, dtype=np.float64)
    if X_np.ndim == 1:
        X_np = X_np.reshape(-1, 1)

    rows = np.arange(n_samples, dtype=np.int64)
    _grow(arena, X_np, g_np, h_np, rows, depth, max_depth, min_samples, n_bins)
    return arena.freeze()


def _grow(
    arena: TreeArena,
    X: np.ndarray,
    gradients: np.ndarray,
    hessians: np.ndarray,
    rows: np.ndarray,
    depth: int,
    max_depth: int,
    min_samples: int,
    n_bins: int,
) -> int:
    """Grow the subtree for ``rows`` and return the index of its root."""
    n_rows = rows.shape[0]
    if n_rows == 0:
        # A bin-edge threshold can leave one side of a valid split empty
        logger.debug("Empty partition at depth %d", depth)
        return arena.add_leaf(0.0, depth)

    sum_grad, sum_hess = node_totals(rows, gradients, hessians)

    if depth >= max_depth or n_rows <= min_samples:
        return arena.add_leaf(leaf_value(sum_grad, sum_hess), depth)

    feature, split_bin, _gain, min_val, width = find_best_split(
        X,
        rows,
        gradients,
        hessians,
        sum_grad,
        sum_hess,
        min_samples,
        n_bins,
        SMOOTHING_LAMBDA,
    )

    if feature < 0:
        logger.debug("No admissible split for %d rows at depth %d", n_rows, depth)
        return arena.add_leaf(leaf_value(sum_grad, sum_hess), depth)

    feature = int(feature)
    # Upper edge of the left-most bin group
    threshold = float(min_val) + float(width) * (int(split_bin) + 1)

    goes_left = X[rows, feature] <= threshold
    node = arena.add_split(feature, threshold, depth)

    left = _grow(
        arena,
        X,
        gradients,
        hessians,
        rows[goes_left],
        depth + 1,
        max_depth,
        min_samples,
        n_bins,
    )
    right = _grow(
        arena,
        X,
        gradients,
        hessians,
        rows[~goes_left],
        depth + 1,
        max_depth,
        min_samples,
        n_bins,
    )
    arena.link(node, left, right)
    return node
