"""Tree construction and evaluation for histboost.

Histogram-based regression trees grown from gradient statistics.
"""

from histboost.trees._predictor import evaluate_tree, predict_regression, predict_tree
from histboost.trees._tree_builder import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MIN_SAMPLES,
    DEFAULT_N_BINS,
    SMOOTHING_LAMBDA,
    build_histogram_tree,
    leaf_value,
)
from histboost.trees._tree_structure import TreeArrays, to_mlx_tree, tree_equal

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_MIN_SAMPLES",
    "DEFAULT_N_BINS",
    "SMOOTHING_LAMBDA",
    "TreeArrays",
    "build_histogram_tree",
    "evaluate_tree",
    "leaf_value",
    "predict_regression",
    "predict_tree",
    "to_mlx_tree",
    "tree_equal",
]
