from __future__ import annotations
from typing import Optional

import httpx

from .base import DEFAULT_TIMEOUT_S, LLMProvider


class OllamaProvider(LLMProvider):
    name = "ollama"

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.model = model.strip()
        self.base_url = base_url.strip().rstrip("/")
        self._transport = transport

    def generate(
        self,
        *,
        system: str,
        user: str,
        timeout: float = DEFAULT_TIMEOUT_S,
        temperature: float = 0.2,
        max_tokens: Optional[int] = None,
    ) -> str:
        url = f"{self.base_url}/api/chat"
        options = {"temperature": temperature}
        if max_tokens:
            options["num_predict"] = max_tokens
        payload = {
            "model": self.model,
            "stream": False,
            "format": "json",
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "options": options,
        }

        with httpx.Client(timeout=timeout, transport=self._transport) as client:
            r = client.post(url, json=payload)
            r.raise_for_status()
            data = r.json()

        return data["message"]["content"]
