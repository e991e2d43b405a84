# modules/advice/repository.py
"""
Accès DB des Interventions (AdviceRecord).

Partagé par advice (création), feedback (notation, rescan des stats)
et analytics. Toute SQLAlchemyError remonte en DependencyError.
"""
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import record_store_errors
from app.engine.feedback.rating_stats import RATING_THRESHOLD
from app.shared.models import Intervention


class InterventionRepository:

    @record_store_errors
    async def create(self, db: AsyncSession, data: Dict) -> Intervention:
        db_obj = Intervention(**data)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    @record_store_errors
    async def get_by_id(self, db: AsyncSession, intervention_id: int) -> Optional[Intervention]:
        r = await db.execute(select(Intervention).where(Intervention.id == intervention_id))
        return r.scalar_one_or_none()

    @record_store_errors
    async def get_for_user(self, db: AsyncSession, user_id: str) -> List[Intervention]:
        """Toutes les interventions de l'utilisateur, notées ou non (rescan canonique)."""
        r = await db.execute(
            select(Intervention)
            .where(Intervention.user_id == user_id)
            .order_by(Intervention.created_at)
        )
        return list(r.scalars().all())

    @record_store_errors
    async def set_feedback(
        self, db: AsyncSession, intervention_id: int, score: int, rated_at: datetime
    ) -> bool:
        """
        UPDATE conditionnel : ne pose la note que si elle est encore NULL.
        False → déjà notée (re-notation refusée).
        """
        r = await db.execute(
            update(Intervention)
            .where(
                Intervention.id == intervention_id,
                Intervention.feedback_score.is_(None),
            )
            .values(feedback_score=score, feedback_at=rated_at)
        )
        await db.commit()
        return r.rowcount == 1

    @record_store_errors
    async def get_low_rated_advice(
        self, db: AsyncSession, user_id: str, limit: int = 3
    ) -> List[str]:
        """Textes des conseils les plus récents notés sous le seuil."""
        r = await db.execute(
            select(Intervention)
            .where(
                Intervention.user_id == user_id,
                Intervention.feedback_score.is_not(None),
                Intervention.feedback_score < RATING_THRESHOLD,
            )
            .order_by(Intervention.created_at.desc())
            .limit(limit)
        )
        return [i.advice for i in r.scalars().all() if i.advice]

    @record_store_errors
    async def get_rated_user_ids(self, db: AsyncSession) -> List[str]:
        r = await db.execute(
            select(Intervention.user_id)
            .where(Intervention.feedback_score.is_not(None))
            .distinct()
        )
        return list(r.scalars().all())
