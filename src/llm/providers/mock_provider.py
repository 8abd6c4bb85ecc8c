from __future__ import annotations
import json
from typing import Optional

from .base import DEFAULT_TIMEOUT_S, LLMProvider

_OVERWHELM_WORDS = ("המום", "המומה", "לחוץ", "לחוצה", "overwhelm", "stressed", "too much")
_URGENT_WORDS = ("דחוף", "urgent", "asap")
_IMPORTANT_WORDS = ("חשוב", "important")


class MockProvider(LLMProvider):
    """Offline provider returning canned JSON, for demos and local runs without keys."""

    name = "mock"

    def generate(
        self,
        *,
        system: str,
        user: str,
        timeout: float = DEFAULT_TIMEOUT_S,
        temperature: float = 0.2,
        max_tokens: Optional[int] = None,
    ) -> str:
        lower_user = user.lower()

        # Check if it's an intent extraction request
        if "intent recognition" in system:
            priority = "simple"
            if any(w in lower_user for w in _IMPORTANT_WORDS + _URGENT_WORDS):
                priority = "important"
            urgency = "high" if any(w in lower_user for w in _URGENT_WORDS) else "low"
            return json.dumps({
                "intent": "create_task",
                "confidence": 0.9,
                "extracted_data": {
                    "title": user.strip()[:50],
                    "description": "",
                    "due_date": None,
                    "priority": priority,
                    "type": "task",
                    "tags": [],
                },
                "context_analysis": {
                    "urgency_level": urgency,
                    "complexity": "simple",
                    "requires_focus": False,
                },
            }, ensure_ascii=False)

        # Check if it's an emotional analysis request
        if "emotional state analysis" in system:
            overwhelmed = any(w in lower_user for w in _OVERWHELM_WORDS)
            return json.dumps({
                "emotional_state": {
                    "primary_emotion": "overwhelmed" if overwhelmed else "calm",
                    "intensity": 0.8 if overwhelmed else 0.3,
                    "secondary_emotions": [],
                },
                "cognitive_load": {"level": "high" if overwhelmed else "low", "indicators": []},
                "adhd_indicators": {
                    "hyperfocus_state": False,
                    "executive_dysfunction": False,
                    "emotional_dysregulation": False,
                    "overwhelm_level": 0.8 if overwhelmed else 0.1,
                },
                "recommendations": {
                    "break_down_tasks": overwhelmed,
                    "suggest_break": False,
                    "prioritize_simple_tasks": overwhelmed,
                    "provide_encouragement": overwhelmed,
                },
            })

        # Default fallback
        return "{}"
