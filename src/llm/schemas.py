"""Pydantic shapes of the JSON the analysis prompts ask the model to return.

Models answer loosely: keys go missing, numbers arrive as strings, enums come
back in the wrong case or outside the documented set. Every field therefore
has a ``mode="before"`` validator that coerces what it can and falls back to
the documented default otherwise, so validating a payload never raises.
"""
from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional, List, get_args

from pydantic import BaseModel, Field, field_validator

from task_synthesis.models import (
    Complexity,
    EmotionalState,
    Intent,
    IntentResult,
    Level,
    Priority,
    TaskType,
    clamp_unit,
)

_INTENTS = set(get_args(Intent))
_PRIORITIES = set(get_args(Priority))
_TASK_TYPES = set(get_args(TaskType))
_LEVELS = set(get_args(Level))
_COMPLEXITIES = set(get_args(Complexity))


def _as_str(v: Any) -> str:
    if v is None or isinstance(v, (dict, list, bool)):
        return ""
    return str(v).strip()


def _as_float(v: Any, default: float) -> float:
    if isinstance(v, bool) or v is None:
        return default
    try:
        f = float(v)
    except (TypeError, ValueError):
        return default
    return f if math.isfinite(f) else default


def _as_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return v != 0
    if isinstance(v, str):
        return v.strip().lower() in {"true", "yes", "1"}
    return False


def _as_choice(v: Any, allowed: set, default: Any) -> Any:
    if isinstance(v, str):
        v2 = v.strip().lower()
        if v2 in allowed:
            return v2
    return default


def _as_str_list(v: Any) -> List[str]:
    if isinstance(v, str):
        return [v.strip()] if v.strip() else []
    if not isinstance(v, list):
        return []
    return [s for s in (_as_str(x) for x in v) if s]


def _as_datetime(v: Any) -> Optional[datetime]:
    """ISO 8601 -> naive local datetime, or None."""
    if isinstance(v, datetime):
        dt = v
    elif isinstance(v, str) and v.strip():
        raw = v.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is not None:
        try:
            dt = dt.astimezone().replace(tzinfo=None)
        except OverflowError:
            # offset pushes the instant outside years 1..9999
            return None
    return dt


def _as_positive_int(v: Any) -> Optional[int]:
    f = _as_float(v, 0.0)
    return int(f) if f >= 1 else None


def _as_dict(v: Any) -> dict:
    return v if isinstance(v, dict) else {}


class ExtractedData(BaseModel):
    title: str = ""
    description: str = ""
    due_date: Optional[datetime] = None
    priority: Optional[Priority] = None
    type: Optional[TaskType] = None
    tags: List[str] = Field(default_factory=list)
    location: str = ""
    duration_minutes: Optional[int] = None

    @field_validator("title", "description", "location", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return _as_str(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def _due(cls, v: Any) -> Optional[datetime]:
        return _as_datetime(v)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v: Any) -> Optional[str]:
        return _as_choice(v, _PRIORITIES, None)

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v: Any) -> Optional[str]:
        return _as_choice(v, _TASK_TYPES, None)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, v: Any) -> List[str]:
        return _as_str_list(v)

    @field_validator("duration_minutes", mode="before")
    @classmethod
    def _duration(cls, v: Any) -> Optional[int]:
        return _as_positive_int(v)


class ContextAnalysis(BaseModel):
    urgency_level: Level = "low"
    complexity: Complexity = "simple"
    requires_focus: bool = False

    @field_validator("urgency_level", mode="before")
    @classmethod
    def _urgency(cls, v: Any) -> str:
        return _as_choice(v, _LEVELS, "low")

    @field_validator("complexity", mode="before")
    @classmethod
    def _complexity(cls, v: Any) -> str:
        return _as_choice(v, _COMPLEXITIES, "simple")

    @field_validator("requires_focus", mode="before")
    @classmethod
    def _focus(cls, v: Any) -> bool:
        return _as_bool(v)


class IntentPayload(BaseModel):
    intent: Intent = "general_query"
    confidence: float = 0.5
    extracted_data: ExtractedData = Field(default_factory=ExtractedData)
    context_analysis: ContextAnalysis = Field(default_factory=ContextAnalysis)

    @field_validator("intent", mode="before")
    @classmethod
    def _intent(cls, v: Any) -> str:
        return _as_choice(v, _INTENTS, "general_query")

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence(cls, v: Any) -> float:
        return clamp_unit(_as_float(v, 0.5))

    @field_validator("extracted_data", "context_analysis", mode="before")
    @classmethod
    def _block(cls, v: Any) -> dict:
        return _as_dict(v)

    def to_intent_result(self) -> IntentResult:
        data = self.extracted_data
        ctx = self.context_analysis
        return IntentResult(
            intent=self.intent,
            confidence=self.confidence,
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            priority=data.priority,
            type=data.type,
            tags=data.tags,
            location=data.location,
            duration_minutes=data.duration_minutes,
            urgency_level=ctx.urgency_level,
            complexity=ctx.complexity,
            requires_focus=ctx.requires_focus,
        )


class EmotionBlock(BaseModel):
    primary_emotion: str = "calm"
    intensity: float = 0.5
    secondary_emotions: List[str] = Field(default_factory=list)

    @field_validator("primary_emotion", mode="before")
    @classmethod
    def _primary(cls, v: Any) -> str:
        return _as_str(v).lower() or "calm"

    @field_validator("intensity", mode="before")
    @classmethod
    def _intensity(cls, v: Any) -> float:
        return clamp_unit(_as_float(v, 0.5))

    @field_validator("secondary_emotions", mode="before")
    @classmethod
    def _secondary(cls, v: Any) -> List[str]:
        return _as_str_list(v)


class CognitiveLoad(BaseModel):
    level: Level = "low"
    indicators: List[str] = Field(default_factory=list)

    @field_validator("level", mode="before")
    @classmethod
    def _level(cls, v: Any) -> str:
        return _as_choice(v, _LEVELS, "low")

    @field_validator("indicators", mode="before")
    @classmethod
    def _indicators(cls, v: Any) -> List[str]:
        return _as_str_list(v)


class ADHDIndicators(BaseModel):
    hyperfocus_state: bool = False
    executive_dysfunction: bool = False
    emotional_dysregulation: bool = False
    overwhelm_level: float = 0.0

    @field_validator(
        "hyperfocus_state", "executive_dysfunction", "emotional_dysregulation", mode="before"
    )
    @classmethod
    def _flag(cls, v: Any) -> bool:
        return _as_bool(v)

    @field_validator("overwhelm_level", mode="before")
    @classmethod
    def _overwhelm(cls, v: Any) -> float:
        return clamp_unit(_as_float(v, 0.0))


class RecommendationFlags(BaseModel):
    break_down_tasks: bool = False
    suggest_break: bool = False
    prioritize_simple_tasks: bool = False
    provide_encouragement: bool = False

    @field_validator("*", mode="before")
    @classmethod
    def _flag(cls, v: Any) -> bool:
        return _as_bool(v)


class EmotionalPayload(BaseModel):
    emotional_state: EmotionBlock = Field(default_factory=EmotionBlock)
    cognitive_load: CognitiveLoad = Field(default_factory=CognitiveLoad)
    adhd_indicators: ADHDIndicators = Field(default_factory=ADHDIndicators)
    recommendations: RecommendationFlags = Field(default_factory=RecommendationFlags)

    @field_validator("*", mode="before")
    @classmethod
    def _block(cls, v: Any) -> dict:
        return _as_dict(v)

    def to_emotional_state(self) -> EmotionalState:
        emo = self.emotional_state
        adhd = self.adhd_indicators
        recs = self.recommendations
        return EmotionalState(
            primary_emotion=emo.primary_emotion,
            intensity=emo.intensity,
            secondary_emotions=emo.secondary_emotions,
            cognitive_load_level=self.cognitive_load.level,
            hyperfocus=adhd.hyperfocus_state,
            executive_dysfunction=adhd.executive_dysfunction,
            emotional_dysregulation=adhd.emotional_dysregulation,
            overwhelm_level=adhd.overwhelm_level,
            suggest_break=recs.suggest_break,
            break_down_tasks=recs.break_down_tasks,
            prioritize_simple=recs.prioritize_simple_tasks,
            provide_encouragement=recs.provide_encouragement,
        )
