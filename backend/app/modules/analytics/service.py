# modules/analytics/service.py
"""
Analytics d'un utilisateur sur une fenêtre glissante.

get_analytics : snapshot de la fenêtre + comparaison avec la fenêtre
                précédente de même longueur (sauf "all").
export_csv    : lignes brutes de la fenêtre, une par check-in.
"""
import csv
import io
from dataclasses import asdict
from datetime import datetime, timezone, tzinfo
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.engine.analytics.aggregation import (
    build_snapshot,
    build_summary,
    compare_periods,
    previous_window,
    window_start,
)
from app.engine.analytics.streaks import local_date
from app.modules.checkin.repository import CheckinRepository
from app.shared.enums import TimeRange

CSV_COLUMNS = ["date", "mood_score", "energy_level", "notes", "advice", "feedback_score"]


class AnalyticsService:

    def __init__(self, checkin_repo: CheckinRepository):
        self.checkin_repo = checkin_repo

    async def _pairs(
        self,
        db: AsyncSession,
        user_id: str,
        start: Optional[datetime],
        end: Optional[datetime] = None,
    ) -> List:
        checkins = await self.checkin_repo.get_in_window(db, user_id, start, end)
        return [(c, c.intervention) for c in checkins]

    async def get_analytics(
        self,
        db: AsyncSession,
        user_id: str,
        time_range: TimeRange,
        tz: tzinfo,
        now: Optional[datetime] = None,
    ) -> Dict:
        now = now or datetime.now(timezone.utc)
        today = now.astimezone(tz).date()

        pairs = await self._pairs(db, user_id, window_start(time_range.value, now))
        snapshot = build_snapshot(pairs, today, tz)

        comparison = None
        bounds = previous_window(time_range.value, now)
        if bounds is not None:
            previous_pairs = await self._pairs(db, user_id, *bounds)
            comparison = compare_periods(
                snapshot.summary, build_summary(previous_pairs, today, tz)
            )

        return {
            "time_range":   time_range.value,
            "timezone":     str(tz),
            "generated_at": now,
            **asdict(snapshot),
            "comparison":   comparison,
        }

    async def export_csv(
        self,
        db: AsyncSession,
        user_id: str,
        time_range: TimeRange,
        tz: tzinfo,
        now: Optional[datetime] = None,
    ) -> str:
        now = now or datetime.now(timezone.utc)
        pairs = await self._pairs(db, user_id, window_start(time_range.value, now))

        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(CSV_COLUMNS)
        for checkin, advice in sorted(pairs, key=lambda p: p[0].created_at):
            writer.writerow([
                local_date(checkin.created_at, tz).isoformat(),
                checkin.mood_score,
                checkin.energy_level,
                checkin.free_text or "",
                advice.advice if advice is not None else "",
                advice.feedback_score if advice is not None and advice.feedback_score is not None else "",
            ])
        return buffer.getvalue()
