# modules/feedback/service.py
"""
Orchestration du moteur d'adaptation côté notes.

RatingStatsService :
- refresh           rescan canonique des interventions → upsert du cache
- get_profile       lecture à deux niveaux (cache → rescan → réconciliation)
- has_improved      détection d'amélioration depuis le latch
- enhancement_report / reset_enhancement / refresh_many (admin)

FeedbackService :
- submit_feedback   pose la note une fois, puis rafraîchit les stats.
                    Échec de l'écriture de la note → DependencyError (503).
                    Échec du refresh après écriture → profil en cache, stale=True.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DependencyError, RatingStatsUnavailable
from app.core.logging import log_event
from app.engine.feedback.improvement import EnhancementReport, build_enhancement_report
from app.engine.feedback.improvement import has_improved as detect_improvement
from app.engine.feedback.rating_stats import (
    RATING_THRESHOLD,
    RatingProfile,
    build_profile,
    cache_is_consistent,
    compute_stats,
    profile_from_cache,
    resolve_enhancement_latch,
)
from app.modules.advice.repository import InterventionRepository
from app.modules.feedback.repository import RatingStatsRepository

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RatingStatsService:

    def __init__(
        self,
        stats_repo: RatingStatsRepository,
        intervention_repo: InterventionRepository,
    ):
        self.stats_repo = stats_repo
        self.intervention_repo = intervention_repo

    # ── Refresh ───────────────────────────────────────────

    async def refresh(self, db: AsyncSession, user_id: str) -> RatingProfile:
        """
        Rescan complet puis upsert. Lève RatingStatsUnavailable (avec le dernier
        profil en cache) si le record store ne répond pas.
        """
        cached = await self._read_cache(db, user_id)
        try:
            return await self._recompute(db, user_id, cached, force_write=True)
        except DependencyError as e:
            raise self._unavailable(e, cached) from e

    async def get_profile(self, db: AsyncSession, user_id: str) -> RatingProfile:
        """
        Lecture à deux niveaux :
        1. cache
        2. rescan canonique
        3. réconciliation : cache divergent → écrasé + warning
        Rescan impossible → profil en cache marqué stale.
        """
        cached = await self._read_cache(db, user_id)
        try:
            return await self._recompute(db, user_id, cached, force_write=False)
        except DependencyError as e:
            if cached is None:
                raise self._unavailable(e, None) from e
            logger.warning(f"Rescan impossible pour {user_id}, profil en cache servi : {e}")
            return profile_from_cache(cached, stale=True)

    async def _read_cache(self, db: AsyncSession, user_id: str):
        try:
            return await self.stats_repo.get(db, user_id)
        except DependencyError as e:
            raise self._unavailable(e, None) from e

    async def _recompute(
        self, db: AsyncSession, user_id: str, cached, force_write: bool
    ) -> RatingProfile:
        records = await self.intervention_repo.get_for_user(db, user_id)
        stats = compute_stats(records)

        existing_latch = cached.enhancement_triggered_at if cached is not None else None
        latch = resolve_enhancement_latch(stats, existing_latch, _now())

        consistent = cached is not None and cache_is_consistent(profile_from_cache(cached), stats)
        if cached is not None and not consistent:
            logger.warning(
                f"Cache user_rating_stats divergent pour {user_id} : "
                f"cache n={cached.total_ratings} avg={cached.average_rating}, "
                f"rescan n={stats.total_ratings} avg={stats.average_rating}"
            )

        if force_write or not consistent or latch != existing_latch:
            row = await self.stats_repo.upsert(db, user_id, stats, latch)
            latch = row.enhancement_triggered_at

        if latch is not None and existing_latch is None:
            log_event(
                logger, "enhancement", "Enhancement déclenché",
                user_id=user_id,
                average_rating=stats.display_average,
                total_ratings=stats.total_ratings,
            )

        return build_profile(user_id, stats, latch)

    @staticmethod
    def _unavailable(error: DependencyError, cached) -> RatingStatsUnavailable:
        log_event(
            logger, "api", "Stats de notation indisponibles",
            level=logging.ERROR, source=error.source, detail=error.detail,
        )
        return RatingStatsUnavailable(
            detail=error.detail,
            cached=profile_from_cache(cached, stale=True) if cached is not None else None,
        )

    # ── Détection d'amélioration ──────────────────────────

    async def has_improved(self, db: AsyncSession, user_id: str) -> bool:
        cached = await self.stats_repo.get(db, user_id)
        if cached is None or cached.enhancement_triggered_at is None:
            return False
        records = await self.intervention_repo.get_for_user(db, user_id)
        return detect_improvement(records, cached.enhancement_triggered_at)

    async def enhancement_report(self, db: AsyncSession, user_id: str) -> EnhancementReport:
        cached = await self.stats_repo.get(db, user_id)
        latch = cached.enhancement_triggered_at if cached is not None else None
        records = await self.intervention_repo.get_for_user(db, user_id)
        return build_enhancement_report(records, latch)

    # ── Admin ─────────────────────────────────────────────

    async def reset_enhancement(self, db: AsyncSession, user_id: str) -> None:
        if not await self.stats_repo.clear_latch(db, user_id):
            raise LookupError("RATING_PROFILE_NOT_FOUND")
        log_event(logger, "enhancement", "Latch d'enhancement réinitialisé", user_id=user_id)

    async def refresh_many(
        self, db: AsyncSession, user_ids: Optional[Iterable[str]] = None
    ) -> Dict:
        """
        Refresh de maintenance. Sans liste : tous les utilisateurs ayant au
        moins une note. Un échec n'interrompt pas le lot.
        """
        if user_ids is None:
            user_ids = await self.intervention_repo.get_rated_user_ids(db)

        successful = 0
        errors: List[Dict[str, str]] = []
        for user_id in user_ids:
            try:
                await self.refresh(db, user_id)
                successful += 1
            except RatingStatsUnavailable as e:
                errors.append({"user_id": user_id, "error": e.detail or e.error_code})

        return {"successful": successful, "failed": len(errors), "errors": errors}


class FeedbackService:

    def __init__(
        self,
        stats_service: RatingStatsService,
        intervention_repo: InterventionRepository,
    ):
        self.stats_service = stats_service
        self.intervention_repo = intervention_repo

    async def submit_feedback(
        self, db: AsyncSession, user_id: str, advice_id: int, score: int
    ) -> Dict:
        """
        Pipeline :
        1. Vérification (existence, propriétaire, pas encore notée)
        2. Écriture conditionnelle de la note
        3. Refresh des stats + détection d'amélioration
        """
        advice = await self.intervention_repo.get_by_id(db, advice_id)
        if advice is None:
            raise LookupError("ADVICE_NOT_FOUND")
        if advice.user_id != user_id:
            raise PermissionError("Accès refusé.")
        if advice.feedback_score is not None:
            raise ValueError("ALREADY_RATED")

        if not await self.intervention_repo.set_feedback(db, advice_id, score, _now()):
            raise ValueError("ALREADY_RATED")

        if score < RATING_THRESHOLD:
            log_event(
                logger, "rating", "Note faible reçue",
                user_id=user_id, advice_id=advice_id, score=score,
                enhanced=advice.enhanced_prompt_used,
            )

        try:
            profile = await self.stats_service.refresh(db, user_id)
        except RatingStatsUnavailable as e:
            return {
                "advice_id": advice_id,
                "score":     score,
                "profile":   e.cached or RatingProfile(user_id=user_id, stale=True),
                "improved":  False,
                "stale":     True,
                "error":     e.error_code,
            }

        try:
            improved = await self.stats_service.has_improved(db, user_id)
        except DependencyError as e:
            # Note écrite et stats à jour : seule la détection a échoué
            logger.warning(f"Détection d'amélioration impossible pour {user_id} : {e}")
            profile.stale = True
            return {
                "advice_id": advice_id,
                "score":     score,
                "profile":   profile,
                "improved":  False,
                "stale":     True,
                "error":     RatingStatsUnavailable.error_code,
            }

        if improved:
            log_event(
                logger, "rating", "Amélioration détectée après enhancement",
                user_id=user_id, average_rating=profile.display_average,
            )

        return {
            "advice_id": advice_id,
            "score":     score,
            "profile":   profile,
            "improved":  improved,
            "stale":     False,
            "error":     None,
        }
