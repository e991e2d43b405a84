# modules/advice/service.py
"""
Génération de conseils pour un check-in.

Pipeline :
1. Profil de notes (lecture à deux niveaux, stale accepté)
2. Contexte prompt : traits de référence + conseils mal notés si enhanced
   (optionnel : lecture en échec → section omise, variante 1)
3. PromptDirective (standard ou variante enhanced)
4. Appel du service de génération
5. Échec du service → conseil de repli déterministe (fallback=True)
6. Enregistrement de l'Intervention avec le mode et la variante utilisés
"""
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.content.fallback_advice import get_fallback_advice, template_type_for_mood
from app.core.exceptions import DependencyError, RatingStatsUnavailable
from app.core.logging import log_event
from app.engine.feedback.prompt_variation import (
    PromptContext,
    PromptDirective,
    PromptVariationSelector,
    count_enhanced_attempts,
)
from app.engine.feedback.rating_stats import RatingProfile
from app.infra.llm import AdviceGenerator, GeneratedAdvice
from app.modules.advice.repository import InterventionRepository
from app.modules.checkin.repository import CheckinRepository
from app.modules.feedback.service import RatingStatsService
from app.shared.enums import AdviceOutputMode, TemplateType
from app.shared.models import Checkin, Intervention

logger = logging.getLogger(__name__)

LOW_RATED_ADVICE_LIMIT = 3


class AdviceService:

    def __init__(
        self,
        stats_service: RatingStatsService,
        intervention_repo: InterventionRepository,
        checkin_repo: CheckinRepository,
        generator: AdviceGenerator,
        selector: Optional[PromptVariationSelector] = None,
        output_mode: AdviceOutputMode = AdviceOutputMode.TEXT,
    ):
        self.stats_service = stats_service
        self.intervention_repo = intervention_repo
        self.checkin_repo = checkin_repo
        self.generator = generator
        self.selector = selector or PromptVariationSelector()
        self.output_mode = output_mode

    # ── Directive ─────────────────────────────────────────

    async def build_directive(
        self,
        db: AsyncSession,
        user_id: str,
        mood_score: int,
        energy_level: str,
        notes: Optional[str],
        locale: str,
    ) -> Tuple[PromptDirective, RatingProfile]:
        profile = await self._profile(db, user_id)

        context = PromptContext(
            mood_score=mood_score,
            energy_level=energy_level,
            notes=notes,
            traits=await self._traits(db, user_id),
            locale=locale,
        )

        attempt_number = 0
        if profile.needs_enhancement:
            context.low_rated_advice = await self._low_rated_advice(db, user_id)
            attempt_number = await self._attempt_number(db, user_id, profile)

        directive = self.selector.select(profile, context, attempt_number)
        return directive, profile

    async def _profile(self, db: AsyncSession, user_id: str) -> RatingProfile:
        try:
            return await self.stats_service.get_profile(db, user_id)
        except RatingStatsUnavailable as e:
            if e.cached is not None:
                return e.cached
            # Jamais calculé et indisponible : mode standard
            logger.warning(f"Profil de notes indisponible pour {user_id}, mode standard")
            return RatingProfile(user_id=user_id, stale=True)

    # Contexte optionnel : un record store en échec dégrade le prompt,
    # jamais la génération.

    async def _traits(self, db: AsyncSession, user_id: str) -> Dict:
        try:
            traits_row = await self.checkin_repo.get_latest_traits(db, user_id)
        except DependencyError as e:
            logger.warning(f"Traits indisponibles pour {user_id}, section omise : {e}")
            return {}
        return (traits_row.traits_result or {}) if traits_row else {}

    async def _low_rated_advice(self, db: AsyncSession, user_id: str) -> List[str]:
        try:
            return await self.intervention_repo.get_low_rated_advice(
                db, user_id, limit=LOW_RATED_ADVICE_LIMIT
            )
        except DependencyError as e:
            logger.warning(f"Conseils mal notés indisponibles pour {user_id} : {e}")
            return []

    async def _attempt_number(self, db: AsyncSession, user_id: str, profile: RatingProfile) -> int:
        try:
            records = await self.intervention_repo.get_for_user(db, user_id)
        except DependencyError as e:
            logger.warning(f"Historique indisponible pour {user_id}, variante 1 : {e}")
            return 0
        return count_enhanced_attempts(records, profile.enhancement_triggered_at)

    # ── Génération ────────────────────────────────────────

    async def generate_for_checkin(
        self, db: AsyncSession, checkin: Checkin, locale: str
    ) -> Intervention:
        directive, profile = await self.build_directive(
            db,
            user_id=checkin.user_id,
            mood_score=checkin.mood_score,
            energy_level=checkin.energy_level,
            notes=checkin.free_text,
            locale=locale,
        )

        is_fallback = False
        try:
            generated = await self.generator.generate(directive.prompt, locale, self.output_mode)
        except DependencyError as e:
            log_event(
                logger, "api", "Service de génération en échec",
                level=logging.ERROR, user_id=checkin.user_id, detail=e.detail,
            )
            template_type, text = get_fallback_advice(checkin.mood_score, locale)
            generated = GeneratedAdvice(advice=text, template_type=template_type.value)
            is_fallback = True
            log_event(
                logger, "system", "Conseil de repli servi",
                user_id=checkin.user_id, template_type=template_type.value,
            )

        if directive.is_enhanced:
            log_event(
                logger, "enhancement", "Prompt enhanced utilisé",
                user_id=checkin.user_id,
                variation=directive.variation_number,
                average_rating=profile.display_average,
            )

        return await self.intervention_repo.create(db, {
            "user_id":                 checkin.user_id,
            "checkin_id":              checkin.id,
            "message_payload":         {
                "advice":          generated.advice,
                "suggested_habit": generated.suggested_habit,
            },
            "template_type":           _template_type(generated, checkin.mood_score),
            "enhanced_prompt_used":    directive.is_enhanced,
            "prompt_variation_number": directive.variation_number,
            "is_fallback":             is_fallback,
        })


def _template_type(generated: GeneratedAdvice, mood_score: int) -> str:
    """Type renvoyé par le service s'il est connu, sinon dérivé de l'humeur."""
    valid = {t.value for t in TemplateType}
    if generated.template_type in valid:
        return generated.template_type
    return template_type_for_mood(mood_score).value
