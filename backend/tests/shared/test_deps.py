# tests/shared/test_deps.py
"""
Tests de l'authentification (app.shared.deps) avec de vrais JWT.

Couverture :
    - Token valide → user_id = sub
    - Token signé avec une autre clé → 401
    - Token sans sub → 401
    - Endpoint admin sans role=admin → 403
    - Endpoint admin avec role=admin → 200
"""
import pytest
from jose import jwt

from app.core.config import settings
from app.engine.feedback.rating_stats import RatingProfile

pytestmark = pytest.mark.router


def _token(claims: dict, key: str = None) -> dict:
    token = jwt.encode(claims, key or settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_token_valide(client, services):
    services.stats.get_profile.return_value = RatingProfile(user_id="abc")
    resp = await client.get("/feedback/me/stats", headers=_token({"sub": "abc"}))
    assert resp.status_code == 200
    assert services.stats.get_profile.await_args.args[1] == "abc"


@pytest.mark.asyncio
async def test_mauvaise_signature_401(client):
    resp = await client.get("/feedback/me/stats", headers=_token({"sub": "abc"}, key="other"))
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_sans_sub_401(client):
    resp = await client.get("/feedback/me/stats", headers=_token({"role": "admin"}))
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_admin_requis_403(client):
    resp = await client.post("/feedback/admin/refresh", json={}, headers=_token({"sub": "abc"}))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_admin_200(client, services):
    services.stats.refresh_many.return_value = {"successful": 0, "failed": 0, "errors": []}
    resp = await client.post(
        "/feedback/admin/refresh", json={}, headers=_token({"sub": "root", "role": "admin"})
    )
    assert resp.status_code == 200
