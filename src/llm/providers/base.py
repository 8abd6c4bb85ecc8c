from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional

DEFAULT_TIMEOUT_S = 30.0


class LLMProvider(ABC):
    name: str = "provider"

    @abstractmethod
    def generate(
        self,
        *,
        system: str,
        user: str,
        timeout: float = DEFAULT_TIMEOUT_S,
        temperature: float = 0.2,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Must return the model output as TEXT (JSON is located and parsed by the gateway).
        HTTP failures surface as httpx exceptions; providers never retry.
        """
        raise NotImplementedError
