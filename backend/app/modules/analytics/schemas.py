# app/modules/analytics/schemas.py
from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import date, datetime


class SummaryOut(BaseModel):
    average_mood: float
    total_checkins: int
    total_interventions: int
    average_rating: float
    current_streak: int
    longest_streak: int


class MoodPointOut(BaseModel):
    date: date
    created_at: datetime
    mood_score: int
    energy_level: str
    notes: Optional[str] = None


class WeekdayOut(BaseModel):
    day: int            # 0 = dimanche
    day_name: str
    average_mood: float
    average_energy: float
    count: int


class EnhancementStatsOut(BaseModel):
    total_enhanced: int
    average_rating_before: float
    average_rating_after: float
    improvement_rate: float


class AdviceQualityOut(BaseModel):
    rating_distribution: Dict[int, int]
    average_rating: float
    enhancement_stats: EnhancementStatsOut


class EnergyMoodOut(BaseModel):
    average_mood: float
    count: int


class ComparisonOut(BaseModel):
    mood_change: float
    rating_change: float


class AnalyticsOut(BaseModel):
    time_range: str
    timezone: str
    generated_at: datetime
    summary: SummaryOut
    mood_trend: List[MoodPointOut]
    weekly_pattern: List[WeekdayOut]
    energy_distribution: Dict[str, int]
    advice_quality: AdviceQualityOut
    mood_energy_correlation: Dict[str, EnergyMoodOut]
    # None pour la fenêtre "all"
    comparison: Optional[ComparisonOut] = None
