from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from analysis.emotional_analyzer import EmotionalAnalyzer
from decomposition.planner import DecompositionPlanner
from extraction.intent_extractor import IntentExtractor
from optimization.engine import OptimizationEngine, shorten_title
from recommendations.generator import RecommendationGenerator
from storage.task_store import TaskStore
from task_synthesis.errors import AnalysisUnavailable, PersistenceFailure, SynthesisFailed
from task_synthesis.models import (
    EmotionalState,
    IntentResult,
    OptimizedTaskSpec,
    RawInput,
    SubtaskSpec,
    SynthesisResult,
    TaskRecord,
)

logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE = 0.5

# Words that make raw text look like something to do, Hebrew and English.
TASK_KEYWORDS = (
    "צריך", "צריכה", "לקנות", "קנה", "קני", "להתקשר", "תתקשר", "לשלוח", "לסיים",
    "לתקן", "לבדוק", "להזמין", "פגישה", "משימה", "תזכיר", "תזכורת", "לא לשכוח",
    "need", "buy", "call", "send", "finish", "fix", "book", "remind",
    "todo", "to do", "task", "meeting", "should", "must", "don't forget",
)


def looks_like_task(text: str) -> bool:
    lower = text.lower()
    return any(k in lower for k in TASK_KEYWORDS)


def fallback_intent(text: str) -> IntentResult:
    """Minimal intent built from raw text when intent analysis is unavailable."""
    title = shorten_title(text)
    return IntentResult(
        intent="create_task" if looks_like_task(text) else "general_query",
        confidence=FALLBACK_CONFIDENCE,
        title=title,
        description=text if title != text else "",
    )


class TaskSynthesisOrchestrator:
    """Central orchestration component: text in, persisted tasks and advice out.

    Only this class has side effects. The two analyses run concurrently in
    worker threads and are joined before anything is optimized; persistence
    starts after the join and has no suspension points, so a cancelled call
    never leaves a task in the store. Cancellation does not abort HTTP calls
    already running in those threads; they finish within the provider timeout
    and their results are discarded.
    """

    def __init__(
        self,
        extractor: IntentExtractor,
        analyzer: EmotionalAnalyzer,
        store: TaskStore,
        engine: Optional[OptimizationEngine] = None,
        planner: Optional[DecompositionPlanner] = None,
        recommender: Optional[RecommendationGenerator] = None,
    ):
        self.extractor = extractor
        self.analyzer = analyzer
        self.store = store
        self.engine = engine or OptimizationEngine()
        self.planner = planner or DecompositionPlanner()
        self.recommender = recommender or RecommendationGenerator()

    async def synthesize(self, raw: RawInput) -> SynthesisResult:
        if not raw.text:
            raise SynthesisFailed("empty input: nothing to build a task from")

        logger.info(f"Synthesizing {raw.source} input: {raw.text[:50]}...")
        degraded: List[str] = []

        # 1. analyses (fan-out / fan-in)
        intent_out, emotion_out = await asyncio.gather(
            asyncio.to_thread(self.extractor.extract, raw.text),
            asyncio.to_thread(self.analyzer.analyze, raw.text),
            return_exceptions=True,
        )

        if isinstance(intent_out, AnalysisUnavailable):
            logger.warning(f"Intent analysis unavailable, using raw-text fallback: {intent_out}")
            intent = fallback_intent(raw.text)
            degraded.append("intent")
        elif isinstance(intent_out, BaseException):
            raise intent_out
        else:
            intent = intent_out

        if isinstance(emotion_out, AnalysisUnavailable):
            logger.warning(f"Emotional analysis unavailable, using neutral state: {emotion_out}")
            emotion = EmotionalState.neutral()
            degraded.append("emotion")
        elif isinstance(emotion_out, BaseException):
            raise emotion_out
        else:
            emotion = emotion_out

        # 2. pure transformations
        spec = self.engine.optimize(intent, emotion)
        subtask_specs = self.planner.plan(spec, emotion)
        recommendations = self.recommender.generate(emotion, spec)

        # 3. persistence: main task first, then subtasks in order
        created: List[TaskRecord] = []
        main_task = self._persist(self._main_record(spec), created)
        subtasks = [self._persist(self._subtask_record(s), created) for s in subtask_specs]

        result = SynthesisResult(
            main_task=main_task,
            subtasks=subtasks,
            recommendations=recommendations,
            confidence=intent.confidence,
            was_optimized=emotion.is_overwhelmed or emotion.needs_breakdown,
            emotional_context=emotion,
            degraded=degraded,
        )
        logger.info(
            f"Created {result.total_tasks_created} task(s) "
            f"(optimized={result.was_optimized}, degraded={degraded or 'none'})"
        )
        return result

    def synthesize_sync(self, raw: RawInput) -> SynthesisResult:
        """Blocking entry point for callers without an event loop."""
        return asyncio.run(self.synthesize(raw))

    def _persist(self, record: TaskRecord, created: List[TaskRecord]) -> TaskRecord:
        try:
            saved = self.store.create(record)
        except PersistenceFailure as e:
            if not e.created:
                e.created = list(created)
            raise
        except Exception as e:
            raise PersistenceFailure(
                f"task store rejected '{record.title}': {e}", created=created
            ) from e
        created.append(saved)
        return saved

    @staticmethod
    def _main_record(spec: OptimizedTaskSpec) -> TaskRecord:
        return TaskRecord(
            title=spec.title,
            description=spec.description or "",
            due_date=spec.due_date,
            priority=spec.priority,
            type=spec.type,
            tags=list(spec.tags),
        )

    @staticmethod
    def _subtask_record(spec: SubtaskSpec) -> TaskRecord:
        return TaskRecord(
            title=spec.title,
            description=spec.description,
            due_date=spec.due_date,
            priority=spec.priority,
            type="task",
            tags=list(spec.tags),
        )
