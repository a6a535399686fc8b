"""histboost - multi-target gradient boosting with histogram trees."""

from histboost.base import BaseEstimator
from histboost.booster import HistogramBooster
from histboost.preprocessing import CategoryEncoder, TabularPreprocessor
from histboost.trees import TreeArrays, build_histogram_tree, evaluate_tree

__version__ = "1.0.0"
__all__ = [
    "BaseEstimator",
    "CategoryEncoder",
    "HistogramBooster",
    "TabularPreprocessor",
    "TreeArrays",
    "build_histogram_tree",
    "evaluate_tree",
    "__version__",
]
