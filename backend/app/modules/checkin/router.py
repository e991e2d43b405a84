# modules/checkin/router.py
"""
Endpoints check-in : soumission (+ conseil généré), historique, traits.
"""
from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from app.core.exceptions import DependencyError
from app.shared.deps import CheckinServiceDep, DbDep, UserIdDep
from app.modules.checkin.schemas import (
    CheckinIn,
    CheckinOut,
    InterventionOut,
    TraitsIn,
    TraitsOut,
)

router = APIRouter(prefix="/checkins", tags=["Check-ins"])


def _checkin_out(checkin, intervention) -> CheckinOut:
    return CheckinOut(
        id=checkin.id,
        mood_score=checkin.mood_score,
        energy_level=checkin.energy_level,
        free_text=checkin.free_text,
        created_at=checkin.created_at,
        intervention=InterventionOut.from_orm_row(intervention) if intervention else None,
    )


@router.post(
    "",
    response_model=CheckinOut,
    status_code=status.HTTP_201_CREATED,
    summary="Soumettre un check-in",
    description="Enregistre le check-in et renvoie le conseil généré (ou de repli).",
)
async def create_checkin(
    payload: CheckinIn, db: DbDep, user_id: UserIdDep, service: CheckinServiceDep
):
    try:
        result = await service.create_checkin(
            db,
            user_id=user_id,
            mood_score=payload.mood_score,
            energy_level=payload.energy_level.value,
            free_text=payload.free_text,
            locale=payload.locale.value if payload.locale else None,
        )
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.source)
    return _checkin_out(result["checkin"], result["intervention"])


@router.get("/me", response_model=List[CheckinOut], summary="Historique des check-ins")
async def get_my_checkins(
    db: DbDep,
    user_id: UserIdDep,
    service: CheckinServiceDep,
    limit: int = Query(30, ge=1, le=200),
):
    try:
        checkins = await service.get_history(db, user_id, limit=limit)
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.source)
    return [_checkin_out(c, c.intervention) for c in checkins]


# ── Traits ─────────────────────────────────────────────────

@router.get("/me/traits", response_model=TraitsOut, summary="Traits de personnalité de référence")
async def get_my_traits(db: DbDep, user_id: UserIdDep, service: CheckinServiceDep):
    try:
        row = await service.get_traits(db, user_id)
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.source)
    if row is None:
        return TraitsOut()
    return TraitsOut(traits=row.traits_result or {}, created_at=row.created_at)


@router.put("/me/traits", response_model=TraitsOut, summary="Mettre à jour les traits")
async def set_my_traits(
    payload: TraitsIn, db: DbDep, user_id: UserIdDep, service: CheckinServiceDep
):
    try:
        row = await service.set_traits(db, user_id, payload.traits)
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.source)
    return TraitsOut(traits=row.traits_result or {}, created_at=row.created_at)
