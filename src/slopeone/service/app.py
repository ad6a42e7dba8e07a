"""FastAPI service entrypoint for Slope One rating prediction."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException

from ..config import default_config, load_config
from ..paths import get_repo_root
from ..predictor import PredictedRating, SlopeOnePredictor
from ..train import build_predictor
from ..utils import setup_logging
from .schemas import HealthResponse, PredictRequest, PredictResponse, RecommendRequest, RecommendResponse

logger = logging.getLogger(__name__)


def _get_env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or str(raw).strip() == "":
        return default
    p = Path(str(raw))
    return p if p.is_absolute() else (get_repo_root() / p).resolve()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(os.getenv("LOG_LEVEL", "INFO"))

    repo_root = get_repo_root()
    config_path = _get_env_path("CONFIG_PATH", repo_root / "config.yaml")
    cfg = load_config(config_path, repo_root=repo_root) if config_path.exists() else default_config(repo_root)

    logger.info("Starting service with config=%s ratings=%s", config_path, cfg.ratings_path)
    app.state.predictor = build_predictor(cfg)
    yield


app = FastAPI(title="Slope One Rating Prediction Service", lifespan=lifespan)


def _predictor(app_: FastAPI) -> SlopeOnePredictor:
    pred = getattr(app_.state, "predictor", None)
    if pred is None:
        raise HTTPException(status_code=503, detail="Predictor not initialized")
    return pred


def _as_items(recs: list[PredictedRating]) -> list[dict]:
    return [{"itemId": int(r.item_id), "rating": float(r.rating), "support": int(r.support)} for r in recs]


@app.get("/health", response_model=HealthResponse)
def health() -> dict:
    model = _predictor(app).model
    return {
        "status": "ok",
        "items": len(model.items),
        "pairs": len(model),
        "rating_sets": int(model.n_rating_sets),
    }


@app.post("/predict", response_model=PredictResponse)
def predict(req: PredictRequest) -> dict:
    """Predict ratings for every item co-occurring with the user's rated items."""
    pred = _predictor(app)
    recs = pred.recommend(req.ratings, k=len(pred.model.items))
    return {"n_known": len(req.ratings), "results": _as_items(recs)}


@app.post("/recommend", response_model=RecommendResponse)
def recommend(req: RecommendRequest) -> dict:
    """Top-k predicted ratings for items the user has not rated (empty when nothing overlaps)."""
    recs = _predictor(app).recommend(req.ratings, k=int(req.k))
    return {"n_known": len(req.ratings), "k": int(req.k), "results": _as_items(recs)}
