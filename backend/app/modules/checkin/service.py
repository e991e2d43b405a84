# modules/checkin/service.py
"""
Check-ins émotionnels et traits de référence.

create_checkin : enregistre le check-in puis génère le conseil associé.
Le conseil ne peut pas échouer côté utilisateur (repli déterministe),
seul un record store indisponible fait échouer la requête.
"""
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.modules.advice.service import AdviceService
from app.modules.checkin.repository import CheckinRepository
from app.shared.models import BaselineTraits, Checkin


class CheckinService:

    def __init__(self, checkin_repo: CheckinRepository, advice_service: AdviceService):
        self.checkin_repo = checkin_repo
        self.advice_service = advice_service

    async def create_checkin(
        self,
        db: AsyncSession,
        user_id: str,
        mood_score: int,
        energy_level: str,
        free_text: Optional[str] = None,
        locale: Optional[str] = None,
    ) -> Dict:
        checkin = await self.checkin_repo.create(db, {
            "user_id":      user_id,
            "mood_score":   mood_score,
            "energy_level": energy_level,
            "free_text":    (free_text or "").strip() or None,
        })
        intervention = await self.advice_service.generate_for_checkin(
            db, checkin, locale or settings.DEFAULT_LOCALE
        )
        return {"checkin": checkin, "intervention": intervention}

    async def get_history(self, db: AsyncSession, user_id: str, limit: int = 30) -> List[Checkin]:
        return await self.checkin_repo.get_history(db, user_id, limit=limit)

    # ── Traits ────────────────────────────────────────────

    async def get_traits(self, db: AsyncSession, user_id: str) -> Optional[BaselineTraits]:
        return await self.checkin_repo.get_latest_traits(db, user_id)

    async def set_traits(self, db: AsyncSession, user_id: str, traits: Dict) -> BaselineTraits:
        """Nouvelle ligne à chaque mise à jour : la plus récente fait foi."""
        return await self.checkin_repo.add_traits(db, user_id, traits)
