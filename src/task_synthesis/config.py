from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class SynthesisSettings:
    """Runtime knobs read from the environment by the composition root."""

    provider_order: Tuple[str, ...] = ("gemini", "openai", "ollama")
    timeout_s: float = 30.0
    use_mock: bool = False
    task_store_path: str = ""

    @classmethod
    def from_env(cls) -> "SynthesisSettings":
        order = tuple(
            p.strip().lower()
            for p in os.getenv("LLM_PROVIDER_ORDER", "gemini,openai,ollama").split(",")
            if p.strip()
        )
        return cls(
            provider_order=order,
            timeout_s=float(os.getenv("LLM_TIMEOUT_S", "30")),
            use_mock=_env_flag("LLM_USE_MOCK"),
            task_store_path=os.getenv("TASK_STORE_PATH", "").strip(),
        )
