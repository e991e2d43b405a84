# modules/feedback/repository.py
"""
Accès DB du cache user_rating_stats.

Upsert PostgreSQL (ON CONFLICT user_id) :
- total / moyenne / compteur : écrasés (last-writer-wins, le rescan fait foi)
- enhancement_triggered_at : COALESCE(existant, nouveau), le latch posé
  n'est jamais écrasé même par deux refresh concurrents.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import record_store_errors
from app.engine.feedback.rating_stats import RatingStats
from app.shared.models import UserRatingStats


class RatingStatsRepository:

    @record_store_errors
    async def get(self, db: AsyncSession, user_id: str) -> Optional[UserRatingStats]:
        r = await db.execute(select(UserRatingStats).where(UserRatingStats.user_id == user_id))
        return r.scalar_one_or_none()

    @record_store_errors
    async def upsert(
        self,
        db: AsyncSession,
        user_id: str,
        stats: RatingStats,
        enhancement_triggered_at: Optional[datetime],
    ) -> UserRatingStats:
        values = {
            "user_id":                  user_id,
            "total_ratings":            stats.total_ratings,
            "average_rating":           stats.average_rating,
            "ratings_below_threshold":  stats.ratings_below_threshold,
            "last_rating_at":           stats.last_rating_at,
            "enhancement_triggered_at": enhancement_triggered_at,
        }
        stmt = insert(UserRatingStats).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[UserRatingStats.user_id],
            set_={
                "total_ratings":            stmt.excluded.total_ratings,
                "average_rating":           stmt.excluded.average_rating,
                "ratings_below_threshold":  stmt.excluded.ratings_below_threshold,
                "last_rating_at":           stmt.excluded.last_rating_at,
                "enhancement_triggered_at": func.coalesce(
                    UserRatingStats.enhancement_triggered_at,
                    stmt.excluded.enhancement_triggered_at,
                ),
                "updated_at":               func.now(),
            },
        ).returning(UserRatingStats)

        r = await db.execute(stmt, execution_options={"populate_existing": True})
        row = r.scalar_one()
        await db.commit()
        return row

    @record_store_errors
    async def clear_latch(self, db: AsyncSession, user_id: str) -> bool:
        r = await db.execute(
            update(UserRatingStats)
            .where(UserRatingStats.user_id == user_id)
            .values(enhancement_triggered_at=None, updated_at=func.now())
        )
        await db.commit()
        return r.rowcount == 1
