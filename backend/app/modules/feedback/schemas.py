# app/modules/feedback/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime


# ── Notation ───────────────────────────────────────────────

class FeedbackIn(BaseModel):
    score: int = Field(..., ge=1, le=5)


class RatingProfileOut(BaseModel):
    """
    average_rating : valeur stockée (2 décimales)
    display_average : valeur affichée (1 décimale)
    stale=True : rescan impossible, dernier cache connu.
    """
    user_id: str
    total_ratings: int
    average_rating: float
    display_average: float
    ratings_below_threshold: int
    needs_enhancement: bool
    last_rating_at: Optional[datetime] = None
    enhancement_triggered_at: Optional[datetime] = None
    recent_ratings: List[int] = []
    stale: bool = False
    model_config = ConfigDict(from_attributes=True)


class FeedbackOut(BaseModel):
    advice_id: int
    score: int
    profile: RatingProfileOut
    improved: bool
    stale: bool = False
    error: Optional[str] = None


# ── Enhancement ────────────────────────────────────────────

class EnhancementReportOut(BaseModel):
    enhancement_triggered: bool
    enhancement_date: Optional[datetime] = None
    improvement_detected: bool
    enhanced_advice_count: int
    average_rating_before: Optional[float] = None
    average_rating_after: Optional[float] = None
    model_config = ConfigDict(from_attributes=True)


# ── Admin ──────────────────────────────────────────────────

class RefreshManyIn(BaseModel):
    # None → tous les utilisateurs ayant au moins une note
    user_ids: Optional[List[str]] = Field(None, min_length=1)


class RefreshError(BaseModel):
    user_id: str
    error: str


class RefreshManyOut(BaseModel):
    successful: int
    failed: int
    errors: List[RefreshError] = []
