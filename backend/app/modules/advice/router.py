# modules/advice/router.py
"""
Aperçu de la directive de génération (mode, variante, prompt composé).
Aucun appel au service de génération, aucun conseil enregistré. La lecture
du profil de notes peut rafraîchir le cache user_rating_stats (et poser le
latch), comme toute lecture à deux niveaux.
"""
from fastapi import APIRouter, HTTPException, status

from app.core.config import settings
from app.core.exceptions import DependencyError
from app.shared.deps import AdviceServiceDep, DbDep, UserIdDep
from app.modules.advice.schemas import DirectiveIn, DirectiveOut

router = APIRouter(prefix="/advice", tags=["Advice"])


@router.post(
    "/directive",
    response_model=DirectiveOut,
    summary="Prévisualiser la directive de génération",
)
async def preview_directive(
    payload: DirectiveIn,
    db: DbDep,
    user_id: UserIdDep,
    service: AdviceServiceDep,
):
    locale = payload.locale.value if payload.locale else settings.DEFAULT_LOCALE
    try:
        directive, profile = await service.build_directive(
            db,
            user_id=user_id,
            mood_score=payload.mood_score,
            energy_level=payload.energy_level.value,
            notes=payload.free_text,
            locale=locale,
        )
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.source)

    return DirectiveOut(
        prompt=directive.prompt,
        is_enhanced=directive.is_enhanced,
        variation_number=directive.variation_number,
        needs_enhancement=profile.needs_enhancement,
        average_rating=profile.display_average,
        total_ratings=profile.total_ratings,
        stale=profile.stale,
    )
