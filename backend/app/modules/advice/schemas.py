# app/modules/advice/schemas.py
from pydantic import BaseModel

from app.modules.checkin.schemas import CheckinIn


class DirectiveIn(CheckinIn):
    """Même entrée qu'un check-in : aperçu du prompt, sans appel au service."""


class DirectiveOut(BaseModel):
    prompt: str
    is_enhanced: bool
    variation_number: int
    needs_enhancement: bool
    average_rating: float
    total_ratings: int
    stale: bool = False
