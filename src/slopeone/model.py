"""Pairwise rating-difference model for weighted Slope One.

Training only touches raw accumulators (co-occurrence counts and summed rating
differences); the mean difference is derived on read. This keeps repeated calls to
`DifferenceModel.train` exact: folding batch A then batch B gives the same model as
folding A+B in one call.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Hashable, Iterable, Iterator, Mapping, Optional, Tuple

import pandas as pd


logger = logging.getLogger(__name__)

ItemId = Hashable
UserRatings = Mapping[ItemId, float]
Pair = Tuple[ItemId, ItemId]


@dataclass(frozen=True)
class PairwiseStat:
    count: int
    diff: float


class DifferenceModel:
    """Sparse (item_i, item_j) -> (count, mean rating difference) statistics."""

    def __init__(self) -> None:
        self._counts: dict[Pair, int] = {}
        self._sums: dict[Pair, float] = {}
        # item -> items it has co-occurred with (itself included)
        self._neighbors: dict[ItemId, set[ItemId]] = {}
        self.n_rating_sets = 0

    def train(self, batch: Iterable[UserRatings]) -> None:
        """Fold a batch of per-user rating sets into the model.

        Every ordered pair (i1, r1), (i2, r2) drawn from the same rating set adds one
        co-occurrence and `r1 - r2` to the raw difference sum of (i1, i2).
        """
        n_sets = 0
        for ratings in batch:
            items = [(i, float(r)) for i, r in ratings.items()]
            for i1, r1 in items:
                neigh = self._neighbors.setdefault(i1, set())
                for i2, r2 in items:
                    key = (i1, i2)
                    self._counts[key] = self._counts.get(key, 0) + 1
                    self._sums[key] = self._sums.get(key, 0.0) + (r1 - r2)
                    neigh.add(i2)
            n_sets += 1

        self.n_rating_sets += n_sets
        logger.info(
            "Slope One trained: rating_sets=%d (total=%d) items=%d pairs=%d",
            n_sets,
            self.n_rating_sets,
            len(self._neighbors),
            len(self._counts),
        )

    def merge(self, other: "DifferenceModel") -> None:
        """Add another model's raw accumulators into this one.

        Lets callers train disjoint partitions separately and combine them; the
        result equals a single model trained on every partition.
        """
        for key, n in other._counts.items():
            self._counts[key] = self._counts.get(key, 0) + n
            self._sums[key] = self._sums.get(key, 0.0) + other._sums[key]
        for item, neigh in other._neighbors.items():
            self._neighbors.setdefault(item, set()).update(neigh)
        self.n_rating_sets += other.n_rating_sets

    def count(self, i1: ItemId, i2: ItemId) -> int:
        """Number of rating sets in which both items appear."""
        return self._counts.get((i1, i2), 0)

    def raw_diff(self, i1: ItemId, i2: ItemId) -> float:
        """Un-normalized sum of (rating(i1) - rating(i2)); 0.0 if never seen."""
        return self._sums.get((i1, i2), 0.0)

    def diff(self, i1: ItemId, i2: ItemId) -> float:
        """Mean of (rating(i1) - rating(i2)) over the rating sets containing both."""
        n = self._counts.get((i1, i2), 0)
        if n == 0:
            raise KeyError(f"Items never co-occurred: {(i1, i2)!r}")
        return self._sums[(i1, i2)] / n

    def get(self, i1: ItemId, i2: ItemId) -> Optional[PairwiseStat]:
        n = self._counts.get((i1, i2), 0)
        if n == 0:
            return None
        return PairwiseStat(count=n, diff=self._sums[(i1, i2)] / n)

    @property
    def items(self) -> set[ItemId]:
        return set(self._neighbors)

    def neighbors(self, item: ItemId) -> set[ItemId]:
        """Items that co-occurred with `item` in at least one rating set."""
        return set(self._neighbors.get(item, ()))

    def pairs(self) -> Iterator[tuple[ItemId, ItemId, PairwiseStat]]:
        for (i1, i2), n in self._counts.items():
            yield i1, i2, PairwiseStat(count=n, diff=self._sums[(i1, i2)] / n)

    def to_frame(self) -> pd.DataFrame:
        """Return every populated pair as a DataFrame (item_i, item_j, count, diff)."""
        rows = [
            {"item_i": i1, "item_j": i2, "count": int(stat.count), "diff": float(stat.diff)}
            for i1, i2, stat in self.pairs()
        ]
        return pd.DataFrame(rows, columns=["item_i", "item_j", "count", "diff"])

    def __contains__(self, item: object) -> bool:
        return item in self._neighbors

    def __len__(self) -> int:
        return len(self._counts)
