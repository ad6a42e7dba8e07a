from __future__ import annotations

import logging

import pandas as pd

from .config import SlopeOneConfig
from .data import load_ratings, to_rating_sets
from .model import DifferenceModel
from .predictor import SlopeOnePredictor


logger = logging.getLogger(__name__)


def train_difference_model(ratings: pd.DataFrame, cfg: SlopeOneConfig) -> DifferenceModel:
    """Train a `DifferenceModel` from a ratings frame.

    Expected ratings columns: cfg.user_col, cfg.item_col, cfg.rating_col
    """
    rating_sets = to_rating_sets(
        ratings,
        user_col=cfg.user_col,
        item_col=cfg.item_col,
        rating_col=cfg.rating_col,
    )
    logger.info("Slope One: users=%d ratings=%d", len(rating_sets), len(ratings))
    model = DifferenceModel()
    model.train(rating_sets)
    return model


def build_predictor(cfg: SlopeOneConfig) -> SlopeOnePredictor:
    """Load the configured ratings CSV, train, and wrap the model in a predictor."""
    ratings = load_ratings(
        cfg.ratings_path,
        user_col=cfg.user_col,
        item_col=cfg.item_col,
        rating_col=cfg.rating_col,
    )
    model = train_difference_model(ratings, cfg)
    return SlopeOnePredictor(model, min_support=cfg.min_support)
