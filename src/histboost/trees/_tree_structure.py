"""Tree data structures for compact, index-based storage and access."""

from dataclasses import dataclass
from typing import NamedTuple

import mlx.core as mx
import numpy as np


@dataclass(frozen=True, eq=False)
class TreeArrays:
    """Regression tree stored as parallel arrays.

    This Structure-of-Arrays (SoA) representation gives:
    - Index-based navigation (no pointer chasing, no shared nodes)
    - Vectorized prediction across all samples
    - Cheap exact comparison between two fitted trees

    Node 0 is the root and nodes are numbered in pre-order, so a parent
    always precedes both of its children.

    Attributes:
        feature_indices: Which feature to split on (-1 for leaf nodes).
        thresholds: Split threshold values (rows with ``x <= threshold`` go left).
        left_children: Index of left child (-1 for leaf nodes).
        right_children: Index of right child (-1 for leaf nodes).
        values: Prediction contribution for leaf nodes (0.0 for internal nodes).
        is_leaf: Boolean mask indicating leaf nodes.
        n_nodes: Number of nodes in the tree.
        depth: Length of the longest root-to-leaf path.
    """

    feature_indices: np.ndarray  # (n_nodes,) int64
    thresholds: np.ndarray  # (n_nodes,) float64
    left_children: np.ndarray  # (n_nodes,) int64
    right_children: np.ndarray  # (n_nodes,) int64
    values: np.ndarray  # (n_nodes,) float64
    is_leaf: np.ndarray  # (n_nodes,) bool
    n_nodes: int = 0
    depth: int = 0

    @property
    def n_leaves(self) -> int:
        """Number of leaf nodes."""
        return int(np.count_nonzero(self.is_leaf))

    @property
    def max_feature_index(self) -> int:
        """Largest feature index referenced by any split, -1 for a lone leaf."""
        if self.n_leaves == self.n_nodes:
            return -1
        return int(self.feature_indices.max())


class MLXTreeArrays(NamedTuple):
    """Float32 device copy of a :class:`TreeArrays` for batched prediction."""

    feature_indices: mx.array  # (n_nodes,) int32
    thresholds: mx.array  # (n_nodes,) float32
    left_children: mx.array  # (n_nodes,) int32
    right_children: mx.array  # (n_nodes,) int32
    values: mx.array  # (n_nodes,) float32
    is_leaf: mx.array  # (n_nodes,) bool
    depth: int
    max_feature_index: int


class TreeArena:
    """Growable node store used while a tree is being built.

    Nodes are appended in the order the recursive builder creates them and
    children are linked after both subtrees exist. Call :meth:`freeze` once
    the root has been returned to obtain an immutable :class:`TreeArrays`.
    """

    def __init__(self) -> None:
        self._features: list[int] = []
        self._thresholds: list[float] = []
        self._left: list[int] = []
        self._right: list[int] = []
        self._values: list[float] = []
        self._depths: list[int] = []

    def __len__(self) -> int:
        return len(self._features)

    def add_leaf(self, value: float, depth: int) -> int:
        """Append a leaf node and return its index."""
        return self._append(-1, 0.0, value, depth)

    def add_split(self, feature: int, threshold: float, depth: int) -> int:
        """Append an internal node whose children are linked later."""
        return self._append(feature, threshold, 0.0, depth)

    def link(self, node: int, left: int, right: int) -> None:
        """Attach the two subtrees of an internal node."""
        self._left[node] = left
        self._right[node] = right

    def freeze(self) -> TreeArrays:
        """Convert the arena into parallel numpy arrays."""
        features = np.array(self._features, dtype=np.int64)
        root_depth = self._depths[0] if self._depths else 0
        return TreeArrays(
            feature_indices=features,
            thresholds=np.array(self._thresholds, dtype=np.float64),
            left_children=np.array(self._left, dtype=np.int64),
            right_children=np.array(self._right, dtype=np.int64),
            values=np.array(self._values, dtype=np.float64),
            is_leaf=features < 0,
            n_nodes=len(self),
            depth=max(self._depths, default=root_depth) - root_depth,
        )

    def _append(self, feature: int, threshold: float, value: float, depth: int) -> int:
        self._features.append(feature)
        self._thresholds.append(threshold)
        self._left.append(-1)
        self._right.append(-1)
        self._values.append(value)
        self._depths.append(depth)
        return len(self._features) - 1


def tree_equal(a: TreeArrays, b: TreeArrays) -> bool:
    """Check two trees for exact structural and numerical equality.

    Args:
        a: First tree.
        b: Second tree.

    Returns:
        True when both trees have the same shape, splits and leaf values.
    """
    if a.n_nodes != b.n_nodes:
        return False
    return bool(
        np.array_equal(a.feature_indices, b.feature_indices)
        and np.array_equal(a.thresholds, b.thresholds)
        and np.array_equal(a.left_children, b.left_children)
        and np.array_equal(a.right_children, b.right_children)
        and np.array_equal(a.values, b.values)
    )


def to_mlx_tree(tree: TreeArrays) -> MLXTreeArrays:
    """Copy a fitted tree into MLX arrays.

    Args:
        tree: Fitted tree structure.

    Returns:
        Float32/int32 MLX arrays ready for :func:`predict_regression`.
    """
    return MLXTreeArrays(
        feature_indices=mx.array(tree.feature_indices.astype(np.int32)),
        thresholds=mx.array(tree.thresholds.astype(np.float32)),
        left_children=mx.array(tree.left_children.astype(np.int32)),
        right_children=mx.array(tree.right_children.astype(np.int32)),
        values=mx.array(tree.values.astype(np.float32)),
        is_leaf=mx.array(tree.is_leaf),
        depth=tree.depth,
        max_feature_index=tree.max_feature_index,
    )
