"""Pydantic schemas for the prediction API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PredictRequest(BaseModel):
    """Known ratings of the query user."""

    ratings: dict[int, float] = Field(..., description="Mapping itemId -> rating the user already gave.")


class PredictedRatingItem(BaseModel):
    itemId: int
    rating: float
    support: int


class PredictResponse(BaseModel):
    n_known: int
    results: list[PredictedRatingItem]


class RecommendRequest(PredictRequest):
    k: int = Field(10, ge=1, le=100, description="Number of predictions to return (1..100).")


class RecommendResponse(PredictResponse):
    k: int


class HealthResponse(BaseModel):
    status: str
    items: int
    pairs: int
    rating_sets: int
