# tests/engine/feedback/test_prompt_variation.py
"""
Tests unitaires pour engine.feedback.prompt_variation

Couverture :
    - Profil sans enhancement → standard, variation 0
    - Profil en enhancement → variation (attempt % 3) + 1, rotation 1, 2, 3, 1
    - Composition enhanced : cadrage (moyenne 1 déc., total), variante, conseils à éviter
    - Conseils à éviter : 2 max, tronqués à 100 caractères
    - Traits absents → section omise ; notes absentes → remplissage explicite
    - Locale inconnue → anglais
    - count_enhanced_attempts : depuis le latch, ou tous sans latch
"""
import pytest
from datetime import timedelta

from app.content.prompts import get_text
from app.engine.feedback.prompt_variation import (
    PromptContext,
    PromptVariationSelector,
    count_enhanced_attempts,
    format_traits,
)
from app.engine.feedback.rating_stats import RatingProfile
from tests.conftest import T0, make_intervention

pytestmark = pytest.mark.engine

selector = PromptVariationSelector()


def _low_profile(**kwargs) -> RatingProfile:
    defaults = {"user_id": "u1", "total_ratings": 4, "average_rating": 1.75}
    defaults.update(kwargs)
    return RatingProfile(**defaults)


def _ctx(**kwargs) -> PromptContext:
    defaults = {"mood_score": 2, "energy_level": "Low", "locale": "en"}
    defaults.update(kwargs)
    return PromptContext(**defaults)


class TestSelection:

    def test_profil_sain_prompt_standard(self):
        profile = RatingProfile(user_id="u1", total_ratings=5, average_rating=4.2)
        directive = selector.select(profile, _ctx(), attempt_number=7)
        assert directive.is_enhanced is False
        assert directive.variation_number == 0
        assert get_text("en", "standard_instructions") in directive.prompt

    def test_moins_de_trois_notes_prompt_standard(self):
        profile = RatingProfile(user_id="u1", total_ratings=2, average_rating=1.0)
        assert selector.select(profile, _ctx()).is_enhanced is False

    def test_rotation_des_variantes(self):
        variations = [
            selector.select(_low_profile(), _ctx(), attempt_number=n).variation_number
            for n in range(4)
        ]
        assert variations == [1, 2, 3, 1]

    def test_variante_dans_le_prompt(self):
        directive = selector.select(_low_profile(), _ctx(), attempt_number=1)
        assert directive.is_enhanced is True
        assert get_text("en", "variation_2") in directive.prompt
        assert get_text("en", "variation_1") not in directive.prompt


class TestComposition:

    def test_cadrage_moyenne_et_total(self):
        directive = selector.select(_low_profile(), _ctx(), attempt_number=0)
        assert "1.8/5" in directive.prompt
        assert "from 4 ratings" in directive.prompt

    def test_conseils_a_eviter_tronques(self):
        long_advice = "x" * 150
        ctx = _ctx(low_rated_advice=[long_advice, "Buvez de l'eau.", "Troisième conseil"])
        prompt = selector.select(_low_profile(), ctx).prompt
        assert f'1. "{"x" * 100}..."' in prompt
        assert '2. "Buvez de l\'eau."' in prompt
        assert "Troisième conseil" not in prompt

    def test_sans_conseil_a_eviter_section_omise(self):
        prompt = selector.select(_low_profile(), _ctx()).prompt
        assert "to avoid" not in prompt

    def test_traits_presents(self):
        ctx = _ctx(traits={"openness": 72, "neuroticism": 40})
        prompt = selector.select(_low_profile(), ctx).prompt
        assert "User's personality traits: openness: 72/100, neuroticism: 40/100" in prompt

    def test_traits_absents_section_omise(self):
        prompt = selector.select(_low_profile(), _ctx(traits={})).prompt
        assert "personality traits:" not in prompt

    def test_notes_absentes_remplissage(self):
        prompt = selector.select(_low_profile(), _ctx(notes=None)).prompt
        assert "- Notes: None provided" in prompt

    def test_notes_presentes(self):
        prompt = selector.select(_low_profile(), _ctx(notes="  Journée chargée ")).prompt
        assert "- Notes: Journée chargée" in prompt

    def test_sections_separees_par_ligne_vide(self):
        prompt = selector.select(_low_profile(), _ctx()).prompt
        assert "\n\n\n" not in prompt
        assert prompt == prompt.strip()

    def test_locale_vi(self):
        prompt = selector.select(_low_profile(), _ctx(locale="vi")).prompt
        assert "QUAN TRỌNG" in prompt

    def test_locale_inconnue_anglais(self):
        prompt = selector.select(_low_profile(), _ctx(locale="de")).prompt
        assert "IMPORTANT" in prompt

    def test_format_traits(self):
        assert format_traits({"openness": 72, "conscientiousness": 55}) == "openness: 72/100, conscientiousness: 55/100"


class TestEnhancedAttempts:

    def test_sans_latch_compte_tous_les_enhanced(self):
        records = [
            make_intervention(id=1, enhanced_prompt_used=True),
            make_intervention(id=2, enhanced_prompt_used=False),
            make_intervention(id=3, enhanced_prompt_used=True),
        ]
        assert count_enhanced_attempts(records, None) == 2

    def test_depuis_le_latch(self):
        latch = T0 + timedelta(days=2)
        records = [
            make_intervention(id=1, enhanced_prompt_used=True, created_at=T0),
            make_intervention(id=2, enhanced_prompt_used=True, created_at=latch),
            make_intervention(id=3, enhanced_prompt_used=True, created_at=latch + timedelta(hours=1)),
        ]
        assert count_enhanced_attempts(records, latch) == 2
