# engine/analytics/aggregation.py
"""
Agrégation analytics d'une fenêtre de check-ins. ZÉRO accès DB.

Reçoit des paires (checkin, intervention | None) déjà filtrées sur la
fenêtre, retourne un AnalyticsSnapshot (jamais persisté).

Sections :
- summary           humeur moyenne, volumes, note moyenne, streaks
- mood_trend        série chronologique (date, humeur, énergie, notes)
- weekly_pattern    jour de semaine 0..6 (0 = dimanche), humeur et énergie moyennes
- energy_distribution  low / mid / high, insensible à la casse
- advice_quality    distribution 1..5, moyenne, stats enhanced vs standard
- mood_energy_correlation  humeur moyenne par niveau d'énergie

Tous les chiffres affichés sont arrondis à 1 décimale (half-up).
Fenêtre vide → snapshot complet à zéro, pas d'erreur.
"""
from __future__ import annotations
import numpy as np
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Dict, List, Optional, Sequence, Tuple

from app.engine.analytics.streaks import compute_streaks, local_date
from app.engine.rounding import round_half_up

Pair = Tuple[Any, Optional[Any]]   # (Checkin, Intervention | None)

ENERGY_LEVELS = ("low", "mid", "high")
ENERGY_VALUES = {"low": 1, "mid": 2, "high": 3}
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

# Fenêtres glissantes en jours (None = tout l'historique)
WINDOW_DAYS: Dict[str, Optional[int]] = {
    "7d":  7,
    "30d": 30,
    "90d": 90,
    "all": None,
}


# ── Dataclasses ───────────────────────────────────────────────────────────────

@dataclass
class Summary:
    average_mood: float
    total_checkins: int
    total_interventions: int
    average_rating: float
    current_streak: int
    longest_streak: int


@dataclass
class MoodPoint:
    date: date
    created_at: datetime
    mood_score: int
    energy_level: str
    notes: Optional[str]


@dataclass
class WeekdayStats:
    day: int                # 0 = dimanche
    day_name: str
    average_mood: float
    average_energy: float
    count: int


@dataclass
class EnhancementStats:
    total_enhanced: int
    average_rating_before: float
    average_rating_after: float
    improvement_rate: float     # %


@dataclass
class AdviceQuality:
    rating_distribution: Dict[int, int]
    average_rating: float
    enhancement_stats: EnhancementStats


@dataclass
class EnergyMood:
    average_mood: float
    count: int


@dataclass
class AnalyticsSnapshot:
    summary: Summary
    mood_trend: List[MoodPoint] = field(default_factory=list)
    weekly_pattern: List[WeekdayStats] = field(default_factory=list)
    energy_distribution: Dict[str, int] = field(default_factory=dict)
    advice_quality: Optional[AdviceQuality] = None
    mood_energy_correlation: Dict[str, EnergyMood] = field(default_factory=dict)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _mean(values: Sequence[float]) -> float:
    return float(np.mean(values)) if values else 0.0


def _r1(value: float) -> float:
    return round_half_up(value, 1)


def normalize_energy(level: Optional[str]) -> Optional[str]:
    """'Low' / 'LOW' / 'low' → 'low'. Inconnu → None."""
    if not level:
        return None
    key = level.strip().lower()
    if key == "medium":
        key = "mid"
    return key if key in ENERGY_VALUES else None


def weekday_index(day: date) -> int:
    """0 = dimanche … 6 = samedi."""
    return (day.weekday() + 1) % 7


def window_start(time_range: str, now: datetime) -> Optional[datetime]:
    days = WINDOW_DAYS[time_range]
    return None if days is None else now - timedelta(days=days)


def previous_window(time_range: str, now: datetime) -> Optional[Tuple[datetime, datetime]]:
    """Fenêtre précédente de même longueur, [start, end[. None pour 'all'."""
    days = WINDOW_DAYS[time_range]
    if days is None:
        return None
    end = now - timedelta(days=days)
    return end - timedelta(days=days), end


# ── Sections ──────────────────────────────────────────────────────────────────

def _rated_scores(pairs: Sequence[Pair]) -> List[int]:
    return [
        int(advice.feedback_score) for _, advice in pairs
        if advice is not None and advice.feedback_score is not None
    ]


def build_summary(pairs: Sequence[Pair], today: date, tz: tzinfo) -> Summary:
    moods = [c.mood_score for c, _ in pairs]
    ratings = _rated_scores(pairs)
    streaks = compute_streaks((local_date(c.created_at, tz) for c, _ in pairs), today)
    return Summary(
        average_mood=_r1(_mean(moods)),
        total_checkins=len(pairs),
        total_interventions=len(ratings),
        average_rating=_r1(_mean(ratings)),
        current_streak=streaks.current_streak,
        longest_streak=streaks.longest_streak,
    )


def build_mood_trend(pairs: Sequence[Pair], tz: tzinfo) -> List[MoodPoint]:
    ordered = sorted((c for c, _ in pairs), key=lambda c: c.created_at)
    return [
        MoodPoint(
            date=local_date(c.created_at, tz),
            created_at=c.created_at,
            mood_score=c.mood_score,
            energy_level=c.energy_level,
            notes=c.free_text,
        )
        for c in ordered
    ]


def build_weekly_pattern(pairs: Sequence[Pair], tz: tzinfo) -> List[WeekdayStats]:
    moods: Dict[int, List[int]] = {d: [] for d in range(7)}
    energies: Dict[int, List[int]] = {d: [] for d in range(7)}

    for checkin, _ in pairs:
        day = weekday_index(local_date(checkin.created_at, tz))
        moods[day].append(checkin.mood_score)
        level = normalize_energy(checkin.energy_level)
        if level is not None:
            energies[day].append(ENERGY_VALUES[level])

    return [
        WeekdayStats(
            day=d,
            day_name=DAY_NAMES[d],
            average_mood=_r1(_mean(moods[d])),
            average_energy=_r1(_mean(energies[d])),
            count=len(moods[d]),
        )
        for d in range(7)
    ]


def build_energy_distribution(pairs: Sequence[Pair]) -> Dict[str, int]:
    distribution = {level: 0 for level in ENERGY_LEVELS}
    for checkin, _ in pairs:
        level = normalize_energy(checkin.energy_level)
        if level is not None:
            distribution[level] += 1
    return distribution


def build_enhancement_stats(pairs: Sequence[Pair]) -> EnhancementStats:
    advices = [a for _, a in pairs if a is not None]
    before = [int(a.feedback_score) for a in advices
              if not a.enhanced_prompt_used and a.feedback_score is not None]
    after = [int(a.feedback_score) for a in advices
             if a.enhanced_prompt_used and a.feedback_score is not None]

    avg_before = _mean(before)
    avg_after = _mean(after)
    improvement = (avg_after - avg_before) / avg_before * 100 if avg_before > 0 else 0.0

    return EnhancementStats(
        total_enhanced=sum(1 for a in advices if a.enhanced_prompt_used),
        average_rating_before=_r1(avg_before),
        average_rating_after=_r1(avg_after),
        improvement_rate=_r1(improvement),
    )


def build_advice_quality(pairs: Sequence[Pair]) -> AdviceQuality:
    ratings = _rated_scores(pairs)
    distribution = {score: 0 for score in range(1, 6)}
    for score in ratings:
        if score in distribution:
            distribution[score] += 1
    return AdviceQuality(
        rating_distribution=distribution,
        average_rating=_r1(_mean(ratings)),
        enhancement_stats=build_enhancement_stats(pairs),
    )


def build_mood_energy_correlation(pairs: Sequence[Pair]) -> Dict[str, EnergyMood]:
    moods: Dict[str, List[int]] = {level: [] for level in ENERGY_LEVELS}
    for checkin, _ in pairs:
        level = normalize_energy(checkin.energy_level)
        if level is not None:
            moods[level].append(checkin.mood_score)
    return {
        level: EnergyMood(average_mood=_r1(_mean(values)), count=len(values))
        for level, values in moods.items()
    }


# ── Point d'entrée ────────────────────────────────────────────────────────────

def build_snapshot(pairs: Sequence[Pair], today: date, tz: tzinfo) -> AnalyticsSnapshot:
    """
    Args:
        pairs: (Checkin, Intervention | None) de la fenêtre demandée
        today: date locale du jour (streak courant)
        tz:    fuseau de l'utilisateur pour les dates calendaires
    """
    return AnalyticsSnapshot(
        summary=build_summary(pairs, today, tz),
        mood_trend=build_mood_trend(pairs, tz),
        weekly_pattern=build_weekly_pattern(pairs, tz),
        energy_distribution=build_energy_distribution(pairs),
        advice_quality=build_advice_quality(pairs),
        mood_energy_correlation=build_mood_energy_correlation(pairs),
    )


def compare_periods(current: Summary, previous: Summary) -> Dict[str, float]:
    """Écart courant − précédent sur l'humeur et la note moyennes."""
    return {
        "mood_change":   _r1(current.average_mood - previous.average_mood),
        "rating_change": _r1(current.average_rating - previous.average_rating),
    }
