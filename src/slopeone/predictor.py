from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from typing import Dict, List

from .model import DifferenceModel, ItemId, UserRatings


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredictedRating:
    item_id: ItemId
    rating: float
    support: int


class SlopeOnePredictor:
    """Weighted Slope One predictions from a trained `DifferenceModel`.

    The predictor only reads the model. Any number of predictors may share one model
    as long as nothing trains it concurrently.

    `min_support` drops item pairs observed in fewer rating sets than the threshold.
    The default of 1 keeps every observed pair, i.e. plain count weighting.
    """

    def __init__(self, model: DifferenceModel, *, min_support: int = 1) -> None:
        if isinstance(min_support, bool) or not isinstance(min_support, numbers.Integral):
            raise ValueError(f"min_support must be an integer, got {min_support!r}")
        if min_support < 1:
            raise ValueError(f"min_support must be >= 1, got {min_support}")
        self.model = model
        self.min_support = int(min_support)

    def _accumulate(self, ratings: UserRatings) -> tuple[Dict[ItemId, float], Dict[ItemId, int]]:
        pred_sum: Dict[ItemId, float] = {}
        pred_weight: Dict[ItemId, int] = {}
        for i, r in ratings.items():
            r = float(r)
            for gi in self.model.neighbors(i):
                if gi == i:
                    continue
                w = self.model.count(gi, i)
                if w == 0 or w < self.min_support:
                    continue
                pred_sum[gi] = pred_sum.get(gi, 0.0) + w * (self.model.diff(gi, i) + r)
                pred_weight[gi] = pred_weight.get(gi, 0) + w

        # Never hand back something the user already rated.
        for known in ratings:
            pred_sum.pop(known, None)
            pred_weight.pop(known, None)
        return pred_sum, pred_weight

    def predict(self, ratings: UserRatings) -> Dict[ItemId, float]:
        """Predict ratings for every item co-occurring with the user's rated items.

        Items already in `ratings` are never returned; an empty or unknown query gives
        an empty dict.
        """
        pred_sum, pred_weight = self._accumulate(ratings)
        out = {gi: s / pred_weight[gi] for gi, s in pred_sum.items()}
        logger.debug("Slope One predict: known=%d predicted=%d", len(ratings), len(out))
        return out

    def recommend(self, ratings: UserRatings, *, k: int = 10) -> List[PredictedRating]:
        """Top-k predictions, highest rating first (ties broken by support)."""
        pred_sum, pred_weight = self._accumulate(ratings)
        preds = [
            PredictedRating(item_id=gi, rating=float(s / pred_weight[gi]), support=int(pred_weight[gi]))
            for gi, s in pred_sum.items()
        ]
        preds.sort(key=lambda p: (p.rating, p.support), reverse=True)
        return preds[: max(0, int(k))]


def predict(model: DifferenceModel, ratings: UserRatings) -> Dict[ItemId, float]:
    return SlopeOnePredictor(model).predict(ratings)
