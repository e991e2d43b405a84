# tests/conftest.py
"""
Fixtures et factories partagées sur l'ensemble de la suite de tests.

Trois couches :
    1. Engine  : fonctions pures, aucun mock nécessaire (factories d'interventions)
    2. Service : repos mockés (AsyncMock) passés au constructeur
    3. Router  : httpx.AsyncClient + dependency_overrides FastAPI
"""
import pytest
from types import SimpleNamespace
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

from httpx import AsyncClient, ASGITransport

from app.main import app
from app.core.database import get_db
from app.shared.deps import (
    get_advice_service,
    get_analytics_service,
    get_checkin_service,
    get_current_admin,
    get_current_user_id,
    get_feedback_service,
    get_rating_stats_service,
)

USER_ID = "user-123"
T0 = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


# ── Factories de modèles ORM (SimpleNamespace, sans ORM) ──────────────

def make_checkin(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "user_id": USER_ID,
        "mood_score": 3,
        "energy_level": "Mid",
        "free_text": None,
        "created_at": T0,
        "intervention": None,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_intervention(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "user_id": USER_ID,
        "checkin_id": 1,
        "message_payload": {"advice": "Faites une courte promenade.", "suggested_habit": None},
        "template_type": "neutral_boost",
        "enhanced_prompt_used": False,
        "prompt_variation_number": 0,
        "is_fallback": False,
        "feedback_score": None,
        "feedback_at": None,
        "created_at": T0,
    }
    defaults.update(kwargs)
    ns = SimpleNamespace(**defaults)
    ns.advice = ns.message_payload.get("advice", "")
    return ns


def make_rated(scores: List[int], start: datetime = T0, enhanced: bool = False) -> List[SimpleNamespace]:
    """Une intervention notée par score, espacées d'une heure."""
    return [
        make_intervention(
            id=i + 1,
            checkin_id=i + 1,
            feedback_score=s,
            feedback_at=start + timedelta(hours=i, minutes=5),
            created_at=start + timedelta(hours=i),
            enhanced_prompt_used=enhanced,
        )
        for i, s in enumerate(scores)
    ]


def make_rating_stats(**kwargs) -> SimpleNamespace:
    """Ligne user_rating_stats en cache."""
    defaults = {
        "user_id": USER_ID,
        "total_ratings": 0,
        "average_rating": 0.0,
        "ratings_below_threshold": 0,
        "last_rating_at": None,
        "enhancement_triggered_at": None,
        "updated_at": T0,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_traits(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "user_id": USER_ID,
        "traits_result": {"openness": 72, "neuroticism": 40},
        "created_at": T0,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_async_db() -> AsyncMock:
    """AsyncSession mockée : les repos sont mockés, la session n'est qu'un jeton."""
    db = AsyncMock()
    db.add = MagicMock()
    return db


# ── Fixtures HTTP (httpx.AsyncClient + dependency_overrides) ─────────────────

@pytest.fixture
def services():
    """Services mockés injectés à la place des providers de app.shared.deps."""
    return SimpleNamespace(
        stats=AsyncMock(),
        feedback=AsyncMock(),
        advice=AsyncMock(),
        checkin=AsyncMock(),
        analytics=AsyncMock(),
    )


def _override_services(services) -> None:
    app.dependency_overrides[get_db] = lambda: make_async_db()
    app.dependency_overrides[get_rating_stats_service] = lambda: services.stats
    app.dependency_overrides[get_feedback_service] = lambda: services.feedback
    app.dependency_overrides[get_advice_service] = lambda: services.advice
    app.dependency_overrides[get_checkin_service] = lambda: services.checkin
    app.dependency_overrides[get_analytics_service] = lambda: services.analytics


@pytest.fixture
async def client(services):
    """Client sans authentification."""
    _override_services(services)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def user_client(services):
    _override_services(services)
    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def admin_client(services):
    _override_services(services)
    app.dependency_overrides[get_current_user_id] = lambda: "admin-1"
    app.dependency_overrides[get_current_admin] = lambda: "admin-1"
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def profile_kwargs(total: int = 0, avg: float = 0.0, latch: Optional[datetime] = None) -> dict:
    return {
        "user_id": USER_ID,
        "total_ratings": total,
        "average_rating": avg,
        "enhancement_triggered_at": latch,
    }
