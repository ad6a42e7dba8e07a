from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .paths import resolve_path


@dataclass(frozen=True)
class SlopeOneConfig:
    ratings_path: Path = Path("data/raw/ratings.csv")
    user_col: str = "userId"
    item_col: str = "movieId"
    rating_col: str = "rating"
    min_support: int = 1
    top_k: int = 10


def _section(cfg_yaml: dict[str, Any], name: str) -> dict[str, Any]:
    section = cfg_yaml.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"config section {name!r} must be a mapping, got {type(section).__name__}")
    return section


def _positive_int(section: dict[str, Any], key: str, default: int, *, where: str) -> int:
    value = section.get(key, default)
    # bool is an int subclass; `true` in YAML is not a count.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{where}.{key} must be an integer, got {value!r}")
    if value < 1:
        raise ValueError(f"{where}.{key} must be >= 1, got {value}")
    return value


def default_config(repo_root: Path) -> SlopeOneConfig:
    """Defaults with `ratings_path` anchored at `repo_root` (used when no config file exists)."""
    defaults = SlopeOneConfig()
    return dataclasses.replace(defaults, ratings_path=resolve_path(repo_root, defaults.ratings_path))


def load_config(config_path: Path, *, repo_root: Path | None = None) -> SlopeOneConfig:
    """Read `config.yaml` into a `SlopeOneConfig`.

    Missing sections or keys fall back to the dataclass defaults. `ratings_path` is
    resolved against `repo_root` (default: the config file's directory).
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"config not found: {config_path}")

    cfg_yaml = yaml.safe_load(config_path.read_text())
    if cfg_yaml is None:
        cfg_yaml = {}
    if not isinstance(cfg_yaml, dict):
        raise ValueError("config.yaml must be a mapping")

    root = Path(repo_root) if repo_root is not None else config_path.resolve().parent
    defaults = SlopeOneConfig()
    dataset_cfg = _section(cfg_yaml, "dataset")
    model_cfg = _section(cfg_yaml, "slope_one")

    return SlopeOneConfig(
        ratings_path=resolve_path(root, str(dataset_cfg.get("ratings_path", defaults.ratings_path))),
        user_col=str(dataset_cfg.get("user_col", defaults.user_col)),
        item_col=str(dataset_cfg.get("item_col", defaults.item_col)),
        rating_col=str(dataset_cfg.get("rating_col", defaults.rating_col)),
        min_support=_positive_int(model_cfg, "min_support", defaults.min_support, where="slope_one"),
        top_k=_positive_int(model_cfg, "top_k", defaults.top_k, where="slope_one"),
    )
