# tests/modules/analytics/test_router.py
"""
Tests HTTP pour modules.analytics.router

Couverture :
    GET /analytics/me                  → 200 (snapshot réel sur fenêtre vide)
    GET /analytics/me?range=invalide   → 422
    GET /analytics/me?tz=Nowhere/City  → 422
    GET /analytics/me record store KO  → 503
    GET /analytics/me/export           → 200 text/csv
"""
import pytest
from dataclasses import asdict
from datetime import date, datetime, timezone

from app.core.exceptions import DependencyError
from app.engine.analytics.aggregation import build_snapshot

pytestmark = pytest.mark.router


def _analytics():
    return {
        "time_range": "7d",
        "timezone": "UTC",
        "generated_at": datetime(2024, 1, 10, tzinfo=timezone.utc),
        **asdict(build_snapshot([], date(2024, 1, 10), timezone.utc)),
        "comparison": {"mood_change": 0.0, "rating_change": 0.0},
    }


@pytest.mark.asyncio
async def test_get_analytics_200(user_client, services):
    services.analytics.get_analytics.return_value = _analytics()
    resp = await user_client.get("/analytics/me", params={"range": "7d", "tz": "Europe/Paris"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["summary"]["total_checkins"] == 0
    assert len(body["weekly_pattern"]) == 7
    assert str(services.analytics.get_analytics.await_args.args[3]) == "Europe/Paris"


@pytest.mark.asyncio
async def test_get_analytics_range_invalide_422(user_client):
    resp = await user_client.get("/analytics/me", params={"range": "1y"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_get_analytics_tz_inconnu_422(user_client):
    resp = await user_client.get("/analytics/me", params={"tz": "Nowhere/City"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_get_analytics_503(user_client, services):
    services.analytics.get_analytics.side_effect = DependencyError("record_store", "down")
    resp = await user_client.get("/analytics/me")
    assert resp.status_code == 503


@pytest.mark.asyncio
async def test_export_csv_200(user_client, services):
    services.analytics.export_csv.return_value = "date,mood_score\n2024-01-01,3\n"
    resp = await user_client.get("/analytics/me/export", params={"range": "30d"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "moodwell-30d.csv" in resp.headers["content-disposition"]
