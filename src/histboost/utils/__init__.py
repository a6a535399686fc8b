"""Utility helpers for histboost."""

from histboost.utils.data import shuffle_split, to_mlx_array, to_numpy_array
from histboost.utils.metrics import (
    clamp_class_index,
    mae,
    mse,
    per_target_accuracy,
    rmse,
)
from histboost.utils.validation import check_training_inputs

__all__ = [
    "check_training_inputs",
    "clamp_class_index",
    "mae",
    "mse",
    "per_target_accuracy",
    "rmse",
    "shuffle_split",
    "to_mlx_array",
    "to_numpy_array",
]
