from __future__ import annotations
from typing import Optional

import httpx

from task_synthesis.errors import ProviderUnavailable
from .base import DEFAULT_TIMEOUT_S, LLMProvider


class GeminiProvider(LLMProvider):
    """Google Generative Language REST API. Handles Hebrew input better than most."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash-latest",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = (api_key or "").strip()
        self.model = model.strip()
        self.base_url = base_url.strip().rstrip("/")
        self._transport = transport

        if not self.api_key:
            raise ProviderUnavailable("GEMINI_API_KEY is missing")

    def generate(
        self,
        *,
        system: str,
        user: str,
        timeout: float = DEFAULT_TIMEOUT_S,
        temperature: float = 0.2,
        max_tokens: Optional[int] = None,
    ) -> str:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        generation_config = {"temperature": temperature, "topK": 40, "topP": 0.95}
        if max_tokens:
            generation_config["maxOutputTokens"] = max_tokens
        payload = {
            "contents": [
                {"parts": [{"text": f"{system}\nInput:\n{user}"}]},
            ],
            "generationConfig": generation_config,
        }

        with httpx.Client(timeout=timeout, transport=self._transport) as client:
            r = client.post(url, params={"key": self.api_key}, json=payload)
            r.raise_for_status()
            data = r.json()

        return data["candidates"][0]["content"]["parts"][0]["text"]
