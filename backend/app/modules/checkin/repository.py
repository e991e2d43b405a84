# modules/checkin/repository.py
"""
Accès DB des check-ins et des traits de personnalité de référence.
"""
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import record_store_errors
from app.shared.models import BaselineTraits, Checkin


class CheckinRepository:

    @record_store_errors
    async def create(self, db: AsyncSession, data: Dict) -> Checkin:
        db_obj = Checkin(**data)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    @record_store_errors
    async def get_history(
        self, db: AsyncSession, user_id: str, limit: int = 30
    ) -> List[Checkin]:
        """Check-ins les plus récents d'abord, intervention chargée."""
        r = await db.execute(
            select(Checkin)
            .options(selectinload(Checkin.intervention))
            .where(Checkin.user_id == user_id)
            .order_by(Checkin.created_at.desc())
            .limit(limit)
        )
        return list(r.scalars().all())

    @record_store_errors
    async def get_in_window(
        self,
        db: AsyncSession,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Checkin]:
        """Check-ins de [start, end[ avec leur intervention (fenêtre ouverte si None)."""
        stmt = (
            select(Checkin)
            .options(selectinload(Checkin.intervention))
            .where(Checkin.user_id == user_id)
        )
        if start is not None:
            stmt = stmt.where(Checkin.created_at >= start)
        if end is not None:
            stmt = stmt.where(Checkin.created_at < end)
        r = await db.execute(stmt.order_by(Checkin.created_at))
        return list(r.scalars().all())

    # ── Traits ────────────────────────────────────────────

    @record_store_errors
    async def get_latest_traits(self, db: AsyncSession, user_id: str) -> Optional[BaselineTraits]:
        r = await db.execute(
            select(BaselineTraits)
            .where(BaselineTraits.user_id == user_id)
            .order_by(BaselineTraits.created_at.desc(), BaselineTraits.id.desc())
            .limit(1)
        )
        return r.scalar_one_or_none()

    @record_store_errors
    async def add_traits(self, db: AsyncSession, user_id: str, traits: Dict) -> BaselineTraits:
        db_obj = BaselineTraits(user_id=user_id, traits_result=traits)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj
