# tests/infra/test_llm.py
"""
Tests unitaires pour infra.llm.AdviceGenerator (httpx.MockTransport)

Couverture :
    - Mode texte : contenu de la complétion
    - Mode structuré : JSON parsé (avec ou sans bloc ```json)
    - HTTP 500 → DependencyError
    - Erreur transport → DependencyError
    - Réponse mal formée / vide → DependencyError
    - JSON structuré invalide → DependencyError
"""
import json
import pytest
import httpx

from app.core.exceptions import DependencyError
from app.infra.llm import AdviceGenerator
from app.shared.enums import AdviceOutputMode

pytestmark = pytest.mark.service


def _completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _generator(handler) -> AdviceGenerator:
    return AdviceGenerator(
        base_url="http://llm.test/v1",
        model="test-model",
        api_key="sk-test",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_mode_texte():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion("  Faites une pause.  "))

    result = await _generator(handler).generate("prompt", "en")

    assert result.advice == "Faites une pause."
    assert seen["url"] == "http://llm.test/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["messages"][1] == {"role": "user", "content": "prompt"}
    assert seen["body"]["model"] == "test-model"


@pytest.mark.asyncio
async def test_mode_structure():
    payload = {"advice": "Marchez", "suggested_habit": "10 min/jour", "template_type": "neutral_boost"}

    def handler(request):
        system = json.loads(request.content)["messages"][0]["content"]
        assert "strict JSON" in system
        return httpx.Response(200, json=_completion("```json\n" + json.dumps(payload) + "\n```"))

    result = await _generator(handler).generate("prompt", "en", AdviceOutputMode.STRUCTURED)

    assert result.advice == "Marchez"
    assert result.suggested_habit == "10 min/jour"
    assert result.template_type == "neutral_boost"


@pytest.mark.asyncio
async def test_http_500():
    gen = _generator(lambda request: httpx.Response(500, json={"error": "boom"}))
    with pytest.raises(DependencyError) as exc:
        await gen.generate("prompt", "en")
    assert exc.value.source == "advice_generator"


@pytest.mark.asyncio
async def test_erreur_transport():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(DependencyError):
        await _generator(handler).generate("prompt", "en")


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"choices": []}, {"unexpected": True}, _completion("   ")])
async def test_reponse_mal_formee(body):
    gen = _generator(lambda request: httpx.Response(200, json=body))
    with pytest.raises(DependencyError):
        await gen.generate("prompt", "en")


@pytest.mark.asyncio
async def test_json_structure_invalide():
    gen = _generator(lambda request: httpx.Response(200, json=_completion("pas du json")))
    with pytest.raises(DependencyError):
        await gen.generate("prompt", "en", AdviceOutputMode.STRUCTURED)
