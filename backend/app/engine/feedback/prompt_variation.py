# engine/feedback/prompt_variation.py
"""
Sélection du mode de génération (standard / enhanced) et de la variante.

Décision :
    profile.needs_enhancement == False → prompt standard, variation_number = 0
    profile.needs_enhancement == True  → prompt enhanced,
                                         variation_number = (attempt_number % 3) + 1

    attempt_number = nombre d'interventions enhanced déjà reçues depuis le
    latch courant. Des générations enhanced successives tournent donc sur
    les variantes 1, 2, 3, 1, …

Variantes :
    1. analyse émotionnelle approfondie, actions immédiates
    2. solutions pratiques, résultats mesurables
    3. causes profondes, plan par étapes avec timeline

Composition du prompt enhanced (sections séparées par une ligne vide) :
    cadrage notes faibles (moyenne 1 déc. + nombre de notes)
    consignes de la variante
    traits de personnalité (omis si absents)
    état courant de l'utilisateur
    conseils mal notés à éviter (2 max, 100 caractères chacun)
    consigne de sortie

Les textes viennent de app/content/prompts.py, indexés (locale, clé).
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from app.content.prompts import get_text
from app.engine.feedback.improvement import as_aware
from app.engine.feedback.rating_stats import RatingProfile

PROMPT_VARIATIONS        = 3
PREVIOUS_ADVICE_LIMIT    = 2
PREVIOUS_ADVICE_EXCERPT  = 100


# ── Entrée / sortie ───────────────────────────────────────────────────────────

@dataclass
class PromptContext:
    mood_score: int
    energy_level: str
    notes: Optional[str] = None
    traits: Dict[str, Any] = field(default_factory=dict)
    locale: str = "en"
    low_rated_advice: List[str] = field(default_factory=list)


@dataclass
class PromptDirective:
    prompt: str
    is_enhanced: bool
    variation_number: int          # 0 = standard


# ── Helpers ───────────────────────────────────────────────────────────────────

def count_enhanced_attempts(records: Iterable[Any], triggered_at: Optional[datetime]) -> int:
    """
    Interventions enhanced créées depuis le latch (toutes si pas de latch).
    Sert d'attempt_number pour la rotation des variantes.
    """
    enhanced = [r for r in records if getattr(r, "enhanced_prompt_used", False)]
    if triggered_at is None:
        return len(enhanced)
    boundary = as_aware(triggered_at)
    return sum(1 for r in enhanced if as_aware(r.created_at) >= boundary)


def format_traits(traits: Dict[str, Any]) -> str:
    """Scores de traits sur 100 : {"openness": 72} → "openness: 72/100"."""
    return ", ".join(f"{key}: {value}/100" for key, value in traits.items())


def _excerpt(text: str) -> str:
    if len(text) <= PREVIOUS_ADVICE_EXCERPT:
        return text
    return text[:PREVIOUS_ADVICE_EXCERPT] + "..."


# ── Sélecteur ─────────────────────────────────────────────────────────────────

class PromptVariationSelector:

    def __init__(self, variations: int = PROMPT_VARIATIONS):
        self.variations = variations

    def variation_for_attempt(self, attempt_number: int) -> int:
        return (attempt_number % self.variations) + 1

    def select(
        self,
        profile: RatingProfile,
        context: PromptContext,
        attempt_number: int = 0,
    ) -> PromptDirective:
        if not profile.needs_enhancement:
            return PromptDirective(
                prompt=self.standard_prompt(context),
                is_enhanced=False,
                variation_number=0,
            )

        variation = self.variation_for_attempt(attempt_number)
        return PromptDirective(
            prompt=self.enhanced_prompt(profile, context, variation),
            is_enhanced=True,
            variation_number=variation,
        )

    # ── Composition ───────────────────────────────────────

    def standard_prompt(self, context: PromptContext) -> str:
        locale = context.locale
        return self._join([
            get_text(locale, "standard_instructions"),
            self._traits_section(context),
            self._user_state_section(context),
            get_text(locale, "output_instructions"),
        ])

    def enhanced_prompt(
        self,
        profile: RatingProfile,
        context: PromptContext,
        variation: int,
    ) -> str:
        locale = context.locale
        framing = get_text(locale, "enhanced_context").format(
            avg=f"{profile.display_average:.1f}",
            total=profile.total_ratings,
        )
        return self._join([
            framing,
            get_text(locale, f"variation_{variation}"),
            self._traits_section(context),
            self._user_state_section(context),
            self._previous_advice_section(context),
            get_text(locale, "output_instructions"),
        ])

    def _traits_section(self, context: PromptContext) -> str:
        if not context.traits:
            return ""
        return get_text(context.locale, "traits").format(traits=format_traits(context.traits))

    def _user_state_section(self, context: PromptContext) -> str:
        notes = context.notes.strip() if context.notes else ""
        return get_text(context.locale, "user_state").format(
            mood=context.mood_score,
            energy=context.energy_level,
            notes=notes or get_text(context.locale, "notes_none"),
            locale=context.locale,
        )

    def _previous_advice_section(self, context: PromptContext) -> str:
        excerpts = [a for a in context.low_rated_advice if a][:PREVIOUS_ADVICE_LIMIT]
        if not excerpts:
            return ""
        advice_list = "\n".join(
            f'{i}. "{_excerpt(text)}"' for i, text in enumerate(excerpts, start=1)
        )
        return get_text(context.locale, "previous_advice").format(advice_list=advice_list)

    @staticmethod
    def _join(sections: List[str]) -> str:
        return "\n\n".join(s for s in sections if s).strip()
