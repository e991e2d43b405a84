# app/infra/llm.py
"""
Client du service de génération de conseils (API /chat/completions compatible OpenAI).

Deux modes de sortie :
- text       : conseil en texte libre
- structured : JSON strict {advice, suggested_habit, template_type}

Toute erreur transport / HTTP / parsing → DependencyError("advice_generator").
Le repli (conseil déterministe) est décidé par modules/advice/service.py.
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import Optional

import httpx

from app.content.prompts import STRUCTURED_OUTPUT_SUFFIX, get_text
from app.core.config import settings
from app.core.exceptions import DependencyError
from app.shared.enums import AdviceOutputMode

logger = logging.getLogger(__name__)

SOURCE = "advice_generator"


@dataclass
class GeneratedAdvice:
    advice: str
    suggested_habit: Optional[str] = None
    template_type: Optional[str] = None


def _strip_fences(text: str) -> str:
    m = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
    if m and m.group(1).strip():
        return m.group(1).strip()
    return text.strip()


class AdviceGenerator:

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: Optional[str] = None,
        timeout: float = 20.0,
        max_tokens: int = 200,
        temperature: float = 0.7,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.transport = transport

    @classmethod
    def from_settings(cls) -> "AdviceGenerator":
        return cls(
            base_url=settings.LLM_BASE_URL,
            model=settings.LLM_MODEL,
            api_key=settings.LLM_API_KEY,
            timeout=settings.LLM_TIMEOUT_SECONDS,
            max_tokens=settings.LLM_MAX_TOKENS,
            temperature=settings.LLM_TEMPERATURE,
        )

    async def generate(
        self,
        prompt: str,
        locale: str,
        mode: AdviceOutputMode = AdviceOutputMode.TEXT,
    ) -> GeneratedAdvice:
        system = get_text(locale, "system")
        if mode == AdviceOutputMode.STRUCTURED:
            system += STRUCTURED_OUTPUT_SUFFIX

        content = await self._chat(system, prompt)

        if mode == AdviceOutputMode.STRUCTURED:
            return self._parse_structured(content)
        return GeneratedAdvice(advice=content)

    async def _chat(self, system: str, prompt: str) -> str:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.post(f"{self.base_url}/chat/completions", json=payload, headers=headers)
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPError as e:
            raise DependencyError(SOURCE, f"request failed: {e}") from e
        except ValueError as e:
            raise DependencyError(SOURCE, f"invalid JSON body: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise DependencyError(SOURCE, "unexpected response shape") from e

        if not content or not content.strip():
            raise DependencyError(SOURCE, "empty completion")
        return content.strip()

    @staticmethod
    def _parse_structured(content: str) -> GeneratedAdvice:
        try:
            data = json.loads(_strip_fences(content))
        except ValueError as e:
            raise DependencyError(SOURCE, "structured output is not valid JSON") from e

        if not isinstance(data, dict) or not str(data.get("advice") or "").strip():
            raise DependencyError(SOURCE, "structured output without advice")

        return GeneratedAdvice(
            advice=str(data["advice"]).strip(),
            suggested_habit=data.get("suggested_habit") or None,
            template_type=data.get("template_type") or None,
        )
