from __future__ import annotations

from typing import List, Tuple

from task_synthesis.models import EmotionalState, OptimizedTaskSpec

OVERWHELM_MESSAGES = (
    "🧘 Take 5 deep breaths before starting",
    "🎯 Focus on just the first step",
    "⏰ Set a timer for 15 minutes maximum",
)
HYPERFOCUS_MESSAGES = (
    "🔥 Great time to tackle this - you're in the zone!",
    "💧 Don't forget to drink water",
    "🍎 Have a snack ready",
)
FOCUS_MESSAGES = (
    "🎧 Put on focus music or noise-cancelling headphones",
    "📵 Put phone in another room",
    "🚪 Find a quiet space",
)
BREAK_MESSAGES = (
    "🛋️ Take a short break first",
    "🚶 Maybe go for a quick walk",
)
ENCOURAGEMENT_MESSAGES = (
    "💪 You've got this! Start small.",
    "🌟 Every step forward counts",
    "🎉 Celebrate small wins along the way",
)
FALLBACK_MESSAGES = (
    "✅ Task saved - start whenever you're ready",
    "🌱 One small step at a time",
)


class RecommendationGenerator:

    def generate(self, emotion: EmotionalState, spec: OptimizedTaskSpec) -> List[str]:
        groups: List[Tuple[bool, Tuple[str, ...]]] = [
            (emotion.is_overwhelmed, OVERWHELM_MESSAGES),
            (emotion.hyperfocus, HYPERFOCUS_MESSAGES),
            (spec.requires_focus, FOCUS_MESSAGES),
            (emotion.suggest_break, BREAK_MESSAGES),
            (emotion.provide_encouragement, ENCOURAGEMENT_MESSAGES),
        ]
        out: List[str] = []
        for triggered, messages in groups:
            if triggered:
                out.extend(messages)
        return out or list(FALLBACK_MESSAGES)
