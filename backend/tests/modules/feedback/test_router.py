# tests/modules/feedback/test_router.py
"""
Tests HTTP pour modules.feedback.router

Couverture :
    POST /feedback/{id}                         → 200, 422 (score hors bornes), 404, 403, 409, 503
    POST /feedback/{id} refresh en échec        → 200 stale=true + code d'erreur
    POST /feedback/{id} sans auth               → 401/403
    GET  /feedback/me/stats                     → 200, 503
    GET  /feedback/me/enhancement               → 200
    POST /feedback/admin/{user}/reset-enhancement → 204 (admin), 404, 403 (non admin)
    POST /feedback/admin/refresh                → 200
"""
import pytest

from app.core.exceptions import DependencyError, RatingStatsUnavailable
from app.engine.feedback.improvement import EnhancementReport
from app.engine.feedback.rating_stats import RatingProfile
from tests.conftest import T0, USER_ID

pytestmark = pytest.mark.router


def _profile(**kwargs) -> RatingProfile:
    defaults = {"user_id": USER_ID, "total_ratings": 3, "average_rating": 1.33,
                "ratings_below_threshold": 3, "enhancement_triggered_at": T0}
    defaults.update(kwargs)
    return RatingProfile(**defaults)


def _result(**kwargs) -> dict:
    defaults = {"advice_id": 1, "score": 1, "profile": _profile(),
                "improved": False, "stale": False, "error": None}
    defaults.update(kwargs)
    return defaults


# ── POST /feedback/{advice_id} ────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_submit_feedback_200(user_client, services):
    services.feedback.submit_feedback.return_value = _result()
    resp = await user_client.post("/feedback/1", json={"score": 1})
    assert resp.status_code == 200
    body = resp.json()
    assert body["profile"]["needs_enhancement"] is True
    assert body["profile"]["display_average"] == 1.3
    assert body["improved"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize("score", [0, 6, "abc"])
async def test_submit_feedback_score_invalide_422(user_client, services, score):
    resp = await user_client.post("/feedback/1", json={"score": score})
    assert resp.status_code == 422
    services.feedback.submit_feedback.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("error,status", [
    (LookupError("ADVICE_NOT_FOUND"), 404),
    (PermissionError("Accès refusé."), 403),
    (ValueError("ALREADY_RATED"), 409),
    (DependencyError("record_store", "down"), 503),
])
async def test_submit_feedback_erreurs(user_client, services, error, status):
    services.feedback.submit_feedback.side_effect = error
    resp = await user_client.post("/feedback/1", json={"score": 4})
    assert resp.status_code == status


@pytest.mark.asyncio
async def test_submit_feedback_stale_200(user_client, services):
    services.feedback.submit_feedback.return_value = _result(
        profile=_profile(stale=True), stale=True, error="RATING_STATS_UNAVAILABLE"
    )
    resp = await user_client.post("/feedback/1", json={"score": 2})
    assert resp.status_code == 200
    assert resp.json()["stale"] is True
    assert resp.json()["error"] == "RATING_STATS_UNAVAILABLE"


@pytest.mark.asyncio
async def test_submit_feedback_sans_auth_401(client):
    resp = await client.post("/feedback/1", json={"score": 4})
    assert resp.status_code in (401, 403)


# ── GET /feedback/me/* ────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_get_stats_200(user_client, services):
    services.stats.get_profile.return_value = _profile(stale=True)
    resp = await user_client.get("/feedback/me/stats")
    assert resp.status_code == 200
    assert resp.json()["stale"] is True


@pytest.mark.asyncio
async def test_get_stats_503(user_client, services):
    services.stats.get_profile.side_effect = RatingStatsUnavailable("down")
    resp = await user_client.get("/feedback/me/stats")
    assert resp.status_code == 503
    assert resp.json()["detail"] == "RATING_STATS_UNAVAILABLE"


@pytest.mark.asyncio
async def test_get_enhancement_200(user_client, services):
    services.stats.enhancement_report.return_value = EnhancementReport(
        enhancement_triggered=True,
        enhancement_date=T0,
        improvement_detected=True,
        enhanced_advice_count=2,
        average_rating_before=1.33,
        average_rating_after=3.5,
    )
    resp = await user_client.get("/feedback/me/enhancement")
    assert resp.status_code == 200
    assert resp.json()["improvement_detected"] is True


# ── Admin ─────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_reset_enhancement_204(admin_client, services):
    resp = await admin_client.post(f"/feedback/admin/{USER_ID}/reset-enhancement")
    assert resp.status_code == 204
    services.stats.reset_enhancement.assert_awaited_once()


@pytest.mark.asyncio
async def test_reset_enhancement_404(admin_client, services):
    services.stats.reset_enhancement.side_effect = LookupError("RATING_PROFILE_NOT_FOUND")
    resp = await admin_client.post(f"/feedback/admin/{USER_ID}/reset-enhancement")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_refresh_many_200(admin_client, services):
    services.stats.refresh_many.return_value = {
        "successful": 1, "failed": 1, "errors": [{"user_id": "b", "error": "timeout"}],
    }
    resp = await admin_client.post("/feedback/admin/refresh", json={"user_ids": ["a", "b"]})
    assert resp.status_code == 200
    assert resp.json()["failed"] == 1
