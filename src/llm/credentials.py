from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Sequence

import httpx

from llm.providers.base import LLMProvider
from llm.providers.gemini_provider import GeminiProvider
from llm.providers.ollama_provider import OllamaProvider
from llm.providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)

DEFAULT_ORDER = ("gemini", "openai", "ollama")


@dataclass(frozen=True)
class ProviderCredentials:
    """API keys and endpoints per provider. Owned by the caller, never global."""

    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"

    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash-latest"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Ollama needs no key; an empty base URL means "not configured".
    ollama_base_url: str = ""
    ollama_model: str = "llama3.1"

    @classmethod
    def from_env(cls) -> "ProviderCredentials":
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY", "").strip(),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini").strip(),
            openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").strip(),
            gemini_api_key=os.getenv("GEMINI_API_KEY", "").strip(),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash-latest").strip(),
            gemini_base_url=os.getenv(
                "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
            ).strip(),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", "").strip(),
            ollama_model=os.getenv("OLLAMA_MODEL", "llama3.1").strip(),
        )

    def configured(self) -> List[str]:
        names = []
        if self.gemini_api_key:
            names.append("gemini")
        if self.openai_api_key:
            names.append("openai")
        if self.ollama_base_url:
            names.append("ollama")
        return names

    def __repr__(self) -> str:
        # keys stay out of logs and tracebacks
        return f"ProviderCredentials(configured={self.configured()!r})"


def build_providers(
    credentials: ProviderCredentials,
    order: Sequence[str] = DEFAULT_ORDER,
    transport: Optional[httpx.BaseTransport] = None,
) -> List[LLMProvider]:
    """Instantiate every configured provider, in the requested order.

    Providers without credentials and unknown names are skipped; an empty
    result is reported by the gateway as ProviderUnavailable.
    """
    available = set(credentials.configured())
    providers: List[LLMProvider] = []
    for name in order:
        if name not in available:
            logger.debug(f"Skipping provider {name}: not configured")
            continue
        if name == "gemini":
            providers.append(
                GeminiProvider(
                    api_key=credentials.gemini_api_key,
                    model=credentials.gemini_model,
                    base_url=credentials.gemini_base_url,
                    transport=transport,
                )
            )
        elif name == "openai":
            providers.append(
                OpenAIProvider(
                    api_key=credentials.openai_api_key,
                    model=credentials.openai_model,
                    base_url=credentials.openai_base_url,
                    transport=transport,
                )
            )
        elif name == "ollama":
            providers.append(
                OllamaProvider(
                    base_url=credentials.ollama_base_url,
                    model=credentials.ollama_model,
                    transport=transport,
                )
            )
    return providers
