"""Deterministic adaptation of an extracted task to the user's emotional state.

`optimize` applies a fixed sequence of rules; later rules may override what
earlier ones decided (hyperfocus can re-raise a priority that overwhelm just
lowered). The clock is injectable so every rule can be tested in isolation.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from task_synthesis.models import (
    MAX_TITLE_LENGTH,
    EmotionalState,
    IntentResult,
    OptimizedTaskSpec,
    Priority,
)

DEFAULT_TITLE = "Untitled Task"

URGENT_WITHIN = timedelta(hours=24)
NEAR_DUE_WITHIN = timedelta(hours=48)
DUE_DATE_BUFFER = timedelta(hours=2)

TAG_TAKE_YOUR_TIME = "Take your time"
TAG_HYPERFOCUS = "Hyperfocus opportunity"
TAG_BREAK_IT_DOWN = "Break it down"
TAG_BUFFER_ADDED = "Buffer time added"

QUICK_START_CHECKLIST = (
    "Quick start ideas:\n"
    "• Open the relevant app/website\n"
    "• Gather any materials you need\n"
    "• Break this into 3 smaller steps\n"
    "• Set a 15-minute timer"
)

_PRIORITY_MAP = {"important": "important", "later": "later", "simple": "simple"}


def shorten_title(title: str) -> str:
    if len(title) > MAX_TITLE_LENGTH:
        return title[: MAX_TITLE_LENGTH - 3] + "..."
    return title


def map_priority(value: Optional[str]) -> Priority:
    return _PRIORITY_MAP.get(value or "", "simple")


def is_urgent(intent: IntentResult, now: datetime) -> bool:
    """Independently urgent: flagged high, or due in less than 24 hours (overdue counts)."""
    if intent.urgency_level == "high":
        return True
    return intent.due_date is not None and intent.due_date - now < URGENT_WITHIN


def best_time_tag(emotion: EmotionalState, requires_focus: bool, hour: int) -> Optional[str]:
    if requires_focus:
        if 9 <= hour <= 11:
            return "Perfect focus time"
        if 14 <= hour <= 16:
            return "Afternoon focus window"
        return "Schedule for morning focus"

    if emotion.primary_emotion == "tired":
        return "Consider doing this when more energetic"
    return None


def _add_tag(tags: List[str], tag: str) -> None:
    if tag not in tags:
        tags.append(tag)


class OptimizationEngine:

    def __init__(self, clock=datetime.now):
        self._clock = clock

    def optimize(self, intent: IntentResult, emotion: EmotionalState) -> OptimizedTaskSpec:
        now = self._clock()
        overwhelmed = emotion.is_overwhelmed

        # 1. base fields; the 50-char title bound holds for every spec, not only
        # for overwhelmed users
        title = shorten_title(intent.title.strip() or DEFAULT_TITLE)
        description = intent.description or None
        due_date = intent.due_date
        priority = map_priority(intent.priority)
        tags: List[str] = []
        for tag in intent.tags:
            _add_tag(tags, tag)

        # 2. overwhelm: simplify
        if overwhelmed:
            if priority == "important" and not is_urgent(intent, now):
                priority = "simple"
            _add_tag(tags, TAG_TAKE_YOUR_TIME)

        # 3. hyperfocus on a focus-heavy task: make the most of it
        if emotion.hyperfocus and intent.requires_focus:
            priority = "important"
            _add_tag(tags, TAG_HYPERFOCUS)

        # 4. executive dysfunction: scaffold the first step
        if emotion.executive_dysfunction:
            description = (
                f"{QUICK_START_CHECKLIST}\n\n{description}" if description else QUICK_START_CHECKLIST
            )
            _add_tag(tags, TAG_BREAK_IT_DOWN)

        # 5. time pressure: give overwhelmed users a buffer
        if due_date is not None and overwhelmed and due_date - now < NEAR_DUE_WITHIN:
            due_date = due_date - DUE_DATE_BUFFER
            _add_tag(tags, TAG_BUFFER_ADDED)

        # 6. time-of-day hint
        hint = best_time_tag(emotion, intent.requires_focus, now.hour)
        if hint:
            _add_tag(tags, hint)

        # 7. decomposition gate
        should_decompose = (
            intent.complexity == "complex" or overwhelmed or emotion.needs_breakdown
        )

        task_type = intent.type or ("event" if intent.intent == "schedule_event" else "task")

        return OptimizedTaskSpec(
            title=title,
            description=description,
            due_date=due_date,
            priority=priority,
            type=task_type,
            tags=tuple(tags),
            should_decompose=should_decompose,
            complexity=intent.complexity,
            requires_focus=intent.requires_focus,
        )
