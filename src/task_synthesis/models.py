from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


Intent = Literal[
    "create_task",
    "edit_task",
    "brain_dump",
    "schedule_event",
    "search_tasks",
    "general_query",
]
Priority = Literal["important", "simple", "later"]
TaskType = Literal["task", "event"]
Level = Literal["high", "medium", "low"]
Complexity = Literal["simple", "moderate", "complex"]
InputSource = Literal["typed", "voice"]

# Hard-coded in the original app; kept as named constants, not tuned.
OVERWHELM_THRESHOLD = 0.6
MAX_TITLE_LENGTH = 50


def clamp_unit(value: float) -> float:
    return min(1.0, max(0.0, float(value)))


class RawInput(BaseModel):
    text: str
    source: InputSource = "typed"
    locale: str = "he"

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class IntentResult(BaseModel):
    intent: Intent = "general_query"
    confidence: float = 0.5

    title: str = ""
    description: str = ""
    due_date: Optional[datetime] = None
    priority: Optional[Priority] = None
    type: Optional[TaskType] = None
    tags: List[str] = Field(default_factory=list)
    location: str = ""
    duration_minutes: Optional[int] = None

    urgency_level: Level = "low"
    complexity: Complexity = "simple"
    requires_focus: bool = False

    @field_validator("confidence")
    @classmethod
    def confidence_in_range(cls, v: float) -> float:
        return clamp_unit(v)


class EmotionalState(BaseModel):
    primary_emotion: str = "calm"
    intensity: float = 0.5
    secondary_emotions: List[str] = Field(default_factory=list)

    cognitive_load_level: Level = "low"

    hyperfocus: bool = False
    executive_dysfunction: bool = False
    emotional_dysregulation: bool = False
    overwhelm_level: float = 0.0

    suggest_break: bool = False
    break_down_tasks: bool = False
    prioritize_simple: bool = False
    provide_encouragement: bool = False

    @field_validator("intensity", "overwhelm_level")
    @classmethod
    def unit_interval(cls, v: float) -> float:
        return clamp_unit(v)

    @classmethod
    def neutral(cls) -> "EmotionalState":
        """State used when emotional analysis is unavailable: no indicators set."""
        return cls()

    @property
    def is_overwhelmed(self) -> bool:
        return (
            self.overwhelm_level > OVERWHELM_THRESHOLD
            or self.primary_emotion == "overwhelmed"
        )

    @property
    def needs_breakdown(self) -> bool:
        return (
            self.break_down_tasks
            or self.cognitive_load_level == "high"
            or self.executive_dysfunction
        )


class OptimizedTaskSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Priority = "simple"
    type: TaskType = "task"
    tags: Tuple[str, ...] = ()

    should_decompose: bool = False
    complexity: Complexity = "simple"
    requires_focus: bool = False


class SubtaskSpec(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    due_date: Optional[datetime] = None
    priority: Priority = "simple"
    tags: List[str] = Field(default_factory=list)


class TaskRecord(BaseModel):
    """Persisted task shape. `id` and `created_at` are assigned by the store."""

    id: Optional[str] = None
    created_at: Optional[datetime] = None

    title: str = Field(..., min_length=1)
    description: str = ""
    due_date: Optional[datetime] = None
    priority: Priority = "simple"
    type: TaskType = "task"
    tags: List[str] = Field(default_factory=list)
    is_completed: bool = False

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title must not be blank")
        return v2


class SynthesisResult(BaseModel):
    main_task: TaskRecord
    subtasks: List[TaskRecord] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    confidence: float = 0.5
    was_optimized: bool = False

    emotional_context: EmotionalState = Field(default_factory=EmotionalState)
    # which analyses fell back to local defaults: "intent", "emotion"
    degraded: List[str] = Field(default_factory=list)

    @field_validator("confidence")
    @classmethod
    def confidence_in_range(cls, v: float) -> float:
        return clamp_unit(v)

    @property
    def total_tasks_created(self) -> int:
        return 1 + len(self.subtasks)

    @property
    def is_high_confidence(self) -> bool:
        return self.confidence > 0.7
