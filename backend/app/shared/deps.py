# app/shared/deps.py
"""
Dépendances FastAPI réutilisables dans tous les routers.
Injectées via Depends(), jamais appelées directement.

Les services sont construits ici (repositories + client de génération
passés au constructeur). Les tests remplacent ces providers via
app.dependency_overrides.
"""
from typing import Annotated, Dict
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.security import decode_token
from app.infra.llm import AdviceGenerator
from app.modules.advice.repository import InterventionRepository
from app.modules.advice.service import AdviceService
from app.modules.analytics.service import AnalyticsService
from app.modules.checkin.repository import CheckinRepository
from app.modules.checkin.service import CheckinService
from app.modules.feedback.repository import RatingStatsRepository
from app.modules.feedback.service import FeedbackService, RatingStatsService
from app.shared.enums import AdviceOutputMode

bearer = HTTPBearer()

ADMIN_ROLE = "admin"


async def _get_claims(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer)],
) -> Dict:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Token invalide ou expiré",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise credentials_exception
    if not payload.get("sub"):
        raise credentials_exception
    return payload


# ── Deps publiques ─────────────────────────────────────────

async def get_current_user_id(
    claims: Annotated[Dict, Depends(_get_claims)],
) -> str:
    """user_id opaque du fournisseur d'identité (claim sub)."""
    return str(claims["sub"])


async def get_current_admin(
    claims: Annotated[Dict, Depends(_get_claims)],
) -> str:
    """Exige le claim role=admin."""
    if claims.get("role") != ADMIN_ROLE:
        raise HTTPException(status_code=403, detail="Accès administrateur requis")
    return str(claims["sub"])


# ── Providers de services ──────────────────────────────────

def get_rating_stats_service() -> RatingStatsService:
    return RatingStatsService(RatingStatsRepository(), InterventionRepository())


def get_feedback_service(
    stats_service: Annotated[RatingStatsService, Depends(get_rating_stats_service)],
) -> FeedbackService:
    return FeedbackService(stats_service, InterventionRepository())


def get_advice_generator() -> AdviceGenerator:
    return AdviceGenerator.from_settings()


def get_advice_service(
    stats_service: Annotated[RatingStatsService, Depends(get_rating_stats_service)],
    generator: Annotated[AdviceGenerator, Depends(get_advice_generator)],
) -> AdviceService:
    return AdviceService(
        stats_service,
        InterventionRepository(),
        CheckinRepository(),
        generator,
        output_mode=AdviceOutputMode(settings.ADVICE_OUTPUT_MODE),
    )


def get_checkin_service(
    advice_service: Annotated[AdviceService, Depends(get_advice_service)],
) -> CheckinService:
    return CheckinService(CheckinRepository(), advice_service)


def get_analytics_service() -> AnalyticsService:
    return AnalyticsService(CheckinRepository())


# ── Type aliases pour les routers ─────────────────────────
DbDep                 = Annotated[AsyncSession, Depends(get_db)]
UserIdDep             = Annotated[str, Depends(get_current_user_id)]
AdminDep              = Annotated[str, Depends(get_current_admin)]
RatingStatsServiceDep = Annotated[RatingStatsService, Depends(get_rating_stats_service)]
FeedbackServiceDep    = Annotated[FeedbackService, Depends(get_feedback_service)]
AdviceServiceDep      = Annotated[AdviceService, Depends(get_advice_service)]
CheckinServiceDep     = Annotated[CheckinService, Depends(get_checkin_service)]
AnalyticsServiceDep   = Annotated[AnalyticsService, Depends(get_analytics_service)]
