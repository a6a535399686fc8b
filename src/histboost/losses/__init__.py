"""Loss functions for histboost."""

from histboost.losses.regression import MSELoss

__all__ = ["MSELoss"]
