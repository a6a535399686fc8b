"""Prediction functions for fitted regression trees.

``evaluate_tree`` routes a single feature vector and is the reference
semantics. ``predict_tree`` walks all rows level by level with numpy and
gives the same float64 values. ``predict_regression`` is the MLX float32
batch path used for device inference.
"""

import mlx.core as mx
import numpy as np

from histboost.trees._tree_structure import MLXTreeArrays, TreeArrays


def evaluate_tree(tree: TreeArrays, x: np.ndarray) -> float:
    """Route one feature vector to its leaf.

    Args:
        tree: Fitted tree structure.
        x: Feature vector; must cover every feature index used by the tree.

    Returns:
        Raw additive score stored in the reached leaf.

    Raises:
        IndexError: If ``x`` is shorter than a feature index on the path.
    """
    node = 0
    while not tree.is_leaf[node]:
        if x[tree.feature_indices[node]] <= tree.thresholds[node]:
            node = tree.left_children[node]
        else:
            node = tree.right_children[node]
    return float(tree.values[node])


def predict_tree(tree: TreeArrays, X: np.ndarray) -> np.ndarray:
    """Predict leaf values for all samples.

    Args:
        tree: Fitted tree structure.
        X: Features of shape (n_samples, n_features), float64.

    Returns:
        Leaf values of shape (n_samples,).
    """
    n_samples = X.shape[0]
    sample_indices = np.arange(n_samples)

    # All samples start at root (node 0)
    current_nodes = np.zeros(n_samples, dtype=np.int64)

    # Each pass moves every sample that is not yet at a leaf one level down
    for _ in range(tree.depth):
        is_leaf = tree.is_leaf[current_nodes]
        if is_leaf.all():
            break

        # Leaves carry feature -1; clamp so the gather stays in bounds
        safe_features = np.maximum(tree.feature_indices[current_nodes], 0)
        feature_values = X[sample_indices, safe_features]

        goes_left = feature_values <= tree.thresholds[current_nodes]
        next_nodes = np.where(
            goes_left,
            tree.left_children[current_nodes],
            tree.right_children[current_nodes],
        )
        current_nodes = np.where(is_leaf, current_nodes, next_nodes)

    return tree.values[current_nodes]


def predict_regression(tree: MLXTreeArrays, X: mx.array) -> mx.array:
    """Predict regression values for all samples on the MLX device.

    This function traverses all samples through the tree simultaneously
    using vectorized operations for GPU efficiency. Thresholds are float32,
    so rows lying within float32 rounding of a threshold may be routed
    differently than by :func:`evaluate_tree`.

    Args:
        tree: Device copy of a fitted tree (see ``to_mlx_tree``).
        X: Features of shape (n_samples, n_features), float32.

    Returns:
        Predictions of shape (n_samples,).

    Raises:
        IndexError: If ``X`` has no column for a feature used by a split.
    """
    if tree.max_feature_index >= X.shape[1]:
        raise IndexError(
            f"Tree splits on feature {tree.max_feature_index}, "
            f"but X has only {X.shape[1]} columns"
        )

    n_samples = X.shape[0]
    n_nodes = tree.feature_indices.shape[0]

    # All samples start at root (node 0)
    current_nodes = mx.zeros((n_samples,), dtype=mx.int32)
    sample_indices = mx.arange(n_samples)

    # Traverse tree depth by depth
    for _ in range(tree.depth):
        features = tree.feature_indices[current_nodes]
        thresholds = tree.thresholds[current_nodes]
        left = tree.left_children[current_nodes]
        right = tree.right_children[current_nodes]
        is_leaf = tree.is_leaf[current_nodes]

        # Leaves carry feature -1; clamp so the gather stays in bounds
        safe_features = mx.clip(features, 0, X.shape[1] - 1)
        feature_values = X[sample_indices, safe_features]

        goes_left = feature_values <= thresholds
        next_nodes = mx.where(goes_left, left, right)

        # Only update non-leaf nodes (stay at leaf if already there)
        next_nodes = mx.clip(next_nodes, 0, n_nodes - 1)
        current_nodes = mx.where(is_leaf, current_nodes, next_nodes)

    return tree.values[current_nodes]
