"""Weighted Slope One collaborative filtering.

Core idea:
- Fold per-user rating sets into pairwise (count, mean rating difference) statistics
- Predict a user's unseen ratings as the count-weighted mean of
  (known rating + learned offset) over the items they have rated
"""
from .model import DifferenceModel, PairwiseStat
from .predictor import PredictedRating, SlopeOnePredictor, predict

__all__ = [
    "DifferenceModel",
    "PairwiseStat",
    "PredictedRating",
    "SlopeOnePredictor",
    "predict",
]
