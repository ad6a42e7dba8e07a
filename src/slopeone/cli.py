"""Command-line entry point: train on a ratings CSV and predict for one user."""
from __future__ import annotations

import argparse
import dataclasses
from pathlib import Path

import pandas as pd

from .config import SlopeOneConfig, default_config, load_config
from .paths import get_repo_root, resolve_path
from .train import build_predictor
from .utils import setup_logging


def parse_rating(text: str) -> tuple[int, float]:
    """Parse an `ITEM=RATING` argument."""
    item, sep, rating = str(text).partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected ITEM=RATING, got {text!r}")
    try:
        return int(item.strip()), float(rating.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected ITEM=RATING, got {text!r}") from exc


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Slope One rating prediction for a single user")
    p.add_argument("--config", type=Path, default=Path("config.yaml"), help="Path to config YAML.")
    p.add_argument("--ratings-csv", type=Path, default=None, help="Override dataset.ratings_path")
    p.add_argument(
        "--rate",
        type=parse_rating,
        action="append",
        default=[],
        metavar="ITEM=RATING",
        help="A known rating of the query user (repeatable)",
    )
    p.add_argument("--k", type=int, default=None, help="How many predictions to show")
    p.add_argument("--min-support", type=int, default=None, help="Override slope_one.min_support")
    p.add_argument("--log-level", type=str, default="INFO")
    return p


def _load_cfg(args: argparse.Namespace) -> SlopeOneConfig:
    config_path = Path(args.config)
    if not config_path.is_absolute() and not config_path.exists():
        config_path = resolve_path(get_repo_root(), config_path)
    if config_path.exists():
        cfg = load_config(config_path)
    elif args.ratings_csv is not None:
        cfg = SlopeOneConfig()
    else:
        cfg = default_config(get_repo_root())

    overrides = {}
    if args.ratings_csv is not None:
        overrides["ratings_path"] = Path(args.ratings_csv).resolve()
    if args.min_support is not None:
        overrides["min_support"] = int(args.min_support)
    if args.k is not None:
        overrides["top_k"] = int(args.k)
    return dataclasses.replace(cfg, **overrides) if overrides else cfg


def main(argv: list[str] | None = None) -> None:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)
    cfg = _load_cfg(args)

    predictor = build_predictor(cfg)
    query = dict(args.rate)
    recs = predictor.recommend(query, k=cfg.top_k)

    print("\n=== Predicted Ratings ===")
    if recs:
        df = pd.DataFrame([r.__dict__ for r in recs])
        print(df.to_string(index=False))
    else:
        print("No predictions (no rated item co-occurs with anything in the training data).")


if __name__ == "__main__":
    main()
