from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import numpy as np
import pandas as pd


def load_ratings(
    path: Path,
    *,
    user_col: str = "userId",
    item_col: str = "movieId",
    rating_col: str = "rating",
) -> pd.DataFrame:
    """Load a ratings CSV (one row per user/item rating).

    Notes
    -----
    Ids are read as int64 and ratings as float64 explicitly so downstream item keys
    hash the same way regardless of how pandas would infer the file. Extra columns
    (e.g. MovieLens `timestamp`) are kept but ignored.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"ratings file not found: {path}")

    header = pd.read_csv(path, nrows=0)
    missing = [c for c in (user_col, item_col, rating_col) if c not in header.columns]
    if missing:
        raise ValueError(f"{path.name} missing columns: {missing}")

    df = pd.read_csv(
        path,
        dtype={user_col: "int64", item_col: "int64", rating_col: "float64"},
    )
    validate_ratings(df, user_col=user_col, item_col=item_col, rating_col=rating_col)
    return df


def validate_ratings(
    df: pd.DataFrame,
    *,
    user_col: str = "userId",
    item_col: str = "movieId",
    rating_col: str = "rating",
) -> None:
    """Validate that required columns exist and basic constraints hold."""
    missing = [c for c in (user_col, item_col, rating_col) if c not in df.columns]
    if missing:
        raise ValueError(f"ratings missing columns: {missing}")

    ratings = df[rating_col].to_numpy(dtype=np.float64)
    bad = ~np.isfinite(ratings)
    if bad.any():
        raise ValueError(f"ratings contain {int(bad.sum())} non-finite values")

    # One rating per (user, item): a rating set is a mapping.
    if df.duplicated(subset=[user_col, item_col]).any():
        raise ValueError(f"ratings contain duplicate ({user_col}, {item_col}) rows")


def to_rating_sets(
    df: pd.DataFrame,
    *,
    user_col: str = "userId",
    item_col: str = "movieId",
    rating_col: str = "rating",
) -> List[Dict[int, float]]:
    """Group ratings by user into per-user {item: rating} sets.

    The user id itself is dropped; only the grouping matters to the model.
    """
    out: List[Dict[int, float]] = []
    for _, grp in df.groupby(user_col, sort=True):
        items = grp[item_col].astype("int64").tolist()
        values = grp[rating_col].astype(float).tolist()
        out.append({int(i): float(r) for i, r in zip(items, values)})
    return out
