# modules/feedback/router.py
"""
Endpoints de notation des conseils et du profil de notes.

Deux acteurs :
- Utilisateur : note un conseil, consulte son profil et son épisode d'enhancement
- Admin : reset du latch, refresh de maintenance
"""
from fastapi import APIRouter, HTTPException, status

from app.core.exceptions import DependencyError, RatingStatsUnavailable
from app.shared.deps import AdminDep, DbDep, FeedbackServiceDep, RatingStatsServiceDep, UserIdDep
from app.modules.feedback.schemas import (
    EnhancementReportOut,
    FeedbackIn,
    FeedbackOut,
    RatingProfileOut,
    RefreshManyIn,
    RefreshManyOut,
)

router = APIRouter(prefix="/feedback", tags=["Feedback"])


# ─────────────────────────────────────────────
# UTILISATEUR
# ─────────────────────────────────────────────

@router.post(
    "/{advice_id}",
    response_model=FeedbackOut,
    summary="Noter un conseil (1 à 5)",
    description=(
        "Pose la note une seule fois puis rafraîchit le profil de notes. "
        "Si le refresh échoue après l'écriture, le profil en cache est renvoyé "
        "avec stale=true."
    ),
)
async def submit_feedback(
    advice_id: int,
    payload: FeedbackIn,
    db: DbDep,
    user_id: UserIdDep,
    service: FeedbackServiceDep,
):
    try:
        result = await service.submit_feedback(db, user_id, advice_id, payload.score)
    except LookupError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conseil introuvable.")
    except PermissionError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Accès refusé.")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.source)
    return FeedbackOut(**{**result, "profile": RatingProfileOut.model_validate(result["profile"])})


@router.get(
    "/me/stats",
    response_model=RatingProfileOut,
    summary="Profil de notes (cache réconcilié)",
)
async def get_my_stats(db: DbDep, user_id: UserIdDep, service: RatingStatsServiceDep):
    try:
        profile = await service.get_profile(db, user_id)
    except RatingStatsUnavailable as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.error_code)
    return RatingProfileOut.model_validate(profile)


@router.get(
    "/me/enhancement",
    response_model=EnhancementReportOut,
    summary="Rapport de l'épisode d'enhancement",
)
async def get_my_enhancement(db: DbDep, user_id: UserIdDep, service: RatingStatsServiceDep):
    try:
        return await service.enhancement_report(db, user_id)
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.source)


# ─────────────────────────────────────────────
# ADMIN
# ─────────────────────────────────────────────

@router.post(
    "/admin/{user_id}/reset-enhancement",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Réinitialiser le latch d'enhancement",
)
async def reset_enhancement(
    user_id: str, db: DbDep, admin: AdminDep, service: RatingStatsServiceDep
):
    try:
        await service.reset_enhancement(db, user_id)
    except LookupError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profil de notes introuvable.")
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.source)


@router.post(
    "/admin/refresh",
    response_model=RefreshManyOut,
    summary="Refresh de maintenance des profils de notes",
)
async def refresh_many(
    payload: RefreshManyIn, db: DbDep, admin: AdminDep, service: RatingStatsServiceDep
):
    try:
        return await service.refresh_many(db, payload.user_ids)
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.source)
