from __future__ import annotations
from typing import Optional

import httpx

from task_synthesis.errors import ProviderUnavailable
from .base import DEFAULT_TIMEOUT_S, LLMProvider


class OpenAIProvider(LLMProvider):
    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = (api_key or "").strip()
        self.model = model.strip()
        self.base_url = base_url.strip().rstrip("/")
        self._transport = transport

        if not self.api_key:
            raise ProviderUnavailable("OPENAI_API_KEY is missing")

    def generate(
        self,
        *,
        system: str,
        user: str,
        timeout: float = DEFAULT_TIMEOUT_S,
        temperature: float = 0.2,
        max_tokens: Optional[int] = None,
    ) -> str:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": temperature,
            "response_format": {"type": "json_object"},
        }
        if max_tokens:
            payload["max_tokens"] = max_tokens

        with httpx.Client(timeout=timeout, transport=self._transport) as client:
            r = client.post(url, headers=headers, json=payload)
            r.raise_for_status()
            data = r.json()

        return data["choices"][0]["message"]["content"]
