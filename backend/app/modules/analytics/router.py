# modules/analytics/router.py
"""
Endpoints analytics : snapshot d'une fenêtre et export CSV.

tz : fuseau IANA de l'utilisateur (streaks et jours de semaine sur dates
locales). Absent → DEFAULT_TIMEZONE.
"""
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, HTTPException, Query, Response, status

from app.core.config import settings
from app.core.exceptions import DependencyError
from app.shared.deps import AnalyticsServiceDep, DbDep, UserIdDep
from app.shared.enums import TimeRange
from app.modules.analytics.schemas import AnalyticsOut

router = APIRouter(prefix="/analytics", tags=["Analytics"])


def _zone(tz: Optional[str]) -> ZoneInfo:
    try:
        return ZoneInfo(tz or settings.DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Fuseau horaire inconnu."
        )


@router.get("/me", response_model=AnalyticsOut, summary="Analytics de la fenêtre")
async def get_my_analytics(
    db: DbDep,
    user_id: UserIdDep,
    service: AnalyticsServiceDep,
    time_range: TimeRange = Query(TimeRange.LAST_30_DAYS, alias="range"),
    tz: Optional[str] = Query(None),
):
    zone = _zone(tz)
    try:
        return await service.get_analytics(db, user_id, time_range, zone)
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.source)


@router.get("/me/export", summary="Export CSV de la fenêtre")
async def export_my_analytics(
    db: DbDep,
    user_id: UserIdDep,
    service: AnalyticsServiceDep,
    time_range: TimeRange = Query(TimeRange.LAST_30_DAYS, alias="range"),
    tz: Optional[str] = Query(None),
):
    zone = _zone(tz)
    try:
        content = await service.export_csv(db, user_id, time_range, zone)
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.source)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="moodwell-{time_range.value}.csv"'},
    )
