# engine/feedback/improvement.py
"""
Détection d'amélioration après un épisode d'enhancement.

Compare les notes reçues APRÈS le latch (enhancement_triggered_at)
au seuil de récupération :

    has_improved = ∃ notes avec created_at ≥ latch
                   ET moyenne(notes) ≥ RECOVERY_THRESHOLD (3.0)

Stateless : aucune écriture. Le latch n'est jamais remis à zéro ici,
l'amélioration est seulement rapportée.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from app.engine.rounding import round_half_up

RECOVERY_THRESHOLD = 3.0


@dataclass
class EnhancementReport:
    enhancement_triggered: bool
    enhancement_date: Optional[datetime]
    improvement_detected: bool
    enhanced_advice_count: int
    average_rating_before: Optional[float]
    average_rating_after: Optional[float]


def as_aware(dt: datetime) -> datetime:
    # Les timestamps sans tz (SQLite, fixtures) sont considérés UTC
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def _rated(records: Iterable[Any]) -> List[Any]:
    return [r for r in records if r.feedback_score is not None]


def scores_since(records: Iterable[Any], triggered_at: datetime) -> List[int]:
    """Notes des interventions créées à partir du latch (inclus)."""
    boundary = as_aware(triggered_at)
    return [
        int(r.feedback_score) for r in _rated(records)
        if as_aware(r.created_at) >= boundary
    ]


def scores_before(records: Iterable[Any], triggered_at: datetime) -> List[int]:
    boundary = as_aware(triggered_at)
    return [
        int(r.feedback_score) for r in _rated(records)
        if as_aware(r.created_at) < boundary
    ]


def has_improved(records: Iterable[Any], triggered_at: Optional[datetime]) -> bool:
    if triggered_at is None:
        return False
    after = scores_since(records, triggered_at)
    if not after:
        return False
    return sum(after) / len(after) >= RECOVERY_THRESHOLD


def _mean_or_none(scores: List[int]) -> Optional[float]:
    if not scores:
        return None
    return round_half_up(sum(scores) / len(scores), 2)


def build_enhancement_report(
    records: Iterable[Any],
    triggered_at: Optional[datetime],
) -> EnhancementReport:
    """
    Rapport complet d'un épisode.
    enhanced_advice_count : toutes les interventions générées en mode enhanced,
    notées ou non.
    """
    records = list(records)
    enhanced_count = sum(1 for r in records if getattr(r, "enhanced_prompt_used", False))

    if triggered_at is None:
        return EnhancementReport(
            enhancement_triggered=False,
            enhancement_date=None,
            improvement_detected=False,
            enhanced_advice_count=enhanced_count,
            average_rating_before=None,
            average_rating_after=None,
        )

    return EnhancementReport(
        enhancement_triggered=True,
        enhancement_date=triggered_at,
        improvement_detected=has_improved(records, triggered_at),
        enhanced_advice_count=enhanced_count,
        average_rating_before=_mean_or_none(scores_before(records, triggered_at)),
        average_rating_after=_mean_or_none(scores_since(records, triggered_at)),
    )
