# app/modules/checkin/schemas.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional, List
from datetime import datetime

from app.shared.enums import EnergyLevel, Locale


# ── Check-in ───────────────────────────────────────────────

class CheckinIn(BaseModel):
    """
    energy_level accepte la casse libre et l'ancien libellé "medium" (→ Mid).
    locale absente → DEFAULT_LOCALE des settings.
    """
    mood_score:   int = Field(..., ge=1, le=5)
    energy_level: EnergyLevel
    free_text:    Optional[str] = Field(None, max_length=2000)
    locale:       Optional[Locale] = None

    @field_validator("energy_level", mode="before")
    @classmethod
    def normalize_energy(cls, v):
        if isinstance(v, str):
            key = v.strip().lower()
            if key == "medium":
                key = "mid"
            return {"low": "Low", "mid": "Mid", "high": "High"}.get(key, v)
        return v


class InterventionOut(BaseModel):
    id: int
    advice: str
    suggested_habit: Optional[str] = None
    template_type: Optional[str] = None
    enhanced_prompt_used: bool
    prompt_variation_number: int
    is_fallback: bool = False
    feedback_score: Optional[int] = None
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_orm_row(cls, row) -> "InterventionOut":
        payload = row.message_payload or {}
        return cls(
            id=row.id,
            advice=payload.get("advice", ""),
            suggested_habit=payload.get("suggested_habit"),
            template_type=row.template_type,
            enhanced_prompt_used=row.enhanced_prompt_used,
            prompt_variation_number=row.prompt_variation_number,
            is_fallback=row.is_fallback,
            feedback_score=row.feedback_score,
            created_at=row.created_at,
        )


class CheckinOut(BaseModel):
    id: int
    mood_score: int
    energy_level: str
    free_text: Optional[str] = None
    created_at: Optional[datetime] = None
    intervention: Optional[InterventionOut] = None


# ── Traits ─────────────────────────────────────────────────

class TraitsIn(BaseModel):
    traits: Dict[str, Any] = Field(..., min_length=1)


class TraitsOut(BaseModel):
    traits: Dict[str, Any] = {}
    created_at: Optional[datetime] = None
