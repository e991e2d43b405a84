# engine/feedback/rating_stats.py
"""
Statistiques de notation d'un utilisateur et décision d'enhancement.

Fonctions pures : reçoivent les Interventions (ou tout objet exposant
feedback_score, feedback_at, created_at) et ne lisent jamais la DB.
L'orchestration (lecture cache, rescan, upsert) vit dans
modules/feedback/service.py.

Règle d'enhancement :
    needs_enhancement = total_ratings ≥ MIN_SAMPLES (3)
                        ET average_rating < RATING_THRESHOLD (2.5)

    Le minimum de 3 notes évite qu'une seule mauvaise note déclenche
    l'adaptation : il faut un pattern soutenu.

Latch d'épisode :
    enhancement_triggered_at est posé UNE fois, la première fois que
    needs_enhancement devient vrai. Il n'est jamais effacé quand les notes
    remontent : c'est la frontière "avant / après" dont a besoin
    engine/feedback/improvement.py. Seul un reset admin l'efface.

Arrondis :
    average_rating stocké à 2 décimales, affiché à 1 décimale.
    La décision utilise la moyenne brute (mean_rating) : 2.497 déclenche
    même si la valeur stockée vaut 2.50. Un profil lu du seul cache
    (stale) n'a que la valeur stockée et décide sur celle-ci.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, List, Optional

from app.engine.rounding import round_half_up


# ── Seuils ────────────────────────────────────────────────────────────────────

RATING_THRESHOLD       = 2.5
MIN_SAMPLES            = 3
RECENT_RATINGS_WINDOW  = 5      # Nombre de notes récentes exposées


# ── Dataclasses de résultat ───────────────────────────────────────────────────

@dataclass
class RatingStats:
    """Résultat d'un scan complet des interventions notées."""
    total_ratings: int
    average_rating: float                   # 2 décimales
    ratings_below_threshold: int
    needs_enhancement: bool
    last_rating_at: Optional[datetime] = None
    recent_ratings: List[int] = field(default_factory=list)   # plus récente d'abord
    mean_rating: Optional[float] = None     # non arrondie, base de la décision

    @property
    def display_average(self) -> float:
        return round_half_up(self.average_rating, 1)


@dataclass
class RatingProfile:
    """
    Vue métier d'une ligne user_rating_stats (cache ou fraîchement calculée).
    stale=True : le rescan a échoué, valeurs = dernier cache connu.
    """
    user_id: str
    total_ratings: int = 0
    average_rating: float = 0.0
    ratings_below_threshold: int = 0
    last_rating_at: Optional[datetime] = None
    enhancement_triggered_at: Optional[datetime] = None
    recent_ratings: List[int] = field(default_factory=list)
    stale: bool = False
    mean_rating: Optional[float] = None

    @property
    def needs_enhancement(self) -> bool:
        mean = self.mean_rating if self.mean_rating is not None else self.average_rating
        return needs_enhancement(self.total_ratings, mean)

    @property
    def display_average(self) -> float:
        return round_half_up(self.average_rating, 1)


# ── Calcul ────────────────────────────────────────────────────────────────────

def needs_enhancement(total_ratings: int, average_rating: float) -> bool:
    return total_ratings >= MIN_SAMPLES and average_rating < RATING_THRESHOLD


def compute_stats(records: Iterable[Any]) -> RatingStats:
    """
    Scan des interventions → RatingStats.
    Les interventions sans feedback_score sont ignorées.
    0 note → profil à zéro, needs_enhancement=False (pas une erreur).
    """
    rated = [r for r in records if r.feedback_score is not None]
    if not rated:
        return RatingStats(
            total_ratings=0,
            average_rating=0.0,
            ratings_below_threshold=0,
            needs_enhancement=False,
        )

    scores = [int(r.feedback_score) for r in rated]
    total = len(scores)
    mean = sum(scores) / total
    below = sum(1 for s in scores if s < RATING_THRESHOLD)

    newest_first = sorted(rated, key=_rating_time, reverse=True)
    feedback_times = [r.feedback_at for r in rated if getattr(r, "feedback_at", None)]

    return RatingStats(
        total_ratings=total,
        average_rating=round_half_up(mean, 2),
        ratings_below_threshold=below,
        needs_enhancement=needs_enhancement(total, mean),
        last_rating_at=max(feedback_times) if feedback_times else None,
        recent_ratings=[int(r.feedback_score) for r in newest_first[:RECENT_RATINGS_WINDOW]],
        mean_rating=mean,
    )


def resolve_enhancement_latch(
    stats: RatingStats,
    existing_latch: Optional[datetime],
    now: datetime,
) -> Optional[datetime]:
    """
    Latch idempotent :
    - déjà posé → inchangé (même si les notes sont remontées)
    - non posé + needs_enhancement → now
    - sinon → None
    """
    if existing_latch is not None:
        return existing_latch
    if stats.needs_enhancement:
        return now
    return None


def build_profile(
    user_id: str,
    stats: RatingStats,
    enhancement_triggered_at: Optional[datetime],
) -> RatingProfile:
    return RatingProfile(
        user_id=user_id,
        total_ratings=stats.total_ratings,
        average_rating=stats.average_rating,
        ratings_below_threshold=stats.ratings_below_threshold,
        last_rating_at=stats.last_rating_at,
        enhancement_triggered_at=enhancement_triggered_at,
        recent_ratings=list(stats.recent_ratings),
        mean_rating=stats.mean_rating,
    )


def profile_from_cache(row: Any, stale: bool = False) -> RatingProfile:
    """Ligne ORM UserRatingStats (ou SimpleNamespace) → RatingProfile."""
    return RatingProfile(
        user_id=row.user_id,
        total_ratings=row.total_ratings or 0,
        average_rating=float(row.average_rating or 0.0),
        ratings_below_threshold=row.ratings_below_threshold or 0,
        last_rating_at=row.last_rating_at,
        enhancement_triggered_at=row.enhancement_triggered_at,
        stale=stale,
    )


def cache_is_consistent(cached: RatingProfile, stats: RatingStats) -> bool:
    """Le cache reflète-t-il exactement le rescan ? (invariant de recomputabilité)"""
    return (
        cached.total_ratings == stats.total_ratings
        and abs(cached.average_rating - stats.average_rating) < 1e-9
        and cached.ratings_below_threshold == stats.ratings_below_threshold
    )


def _rating_time(record: Any) -> datetime:
    return getattr(record, "feedback_at", None) or record.created_at
