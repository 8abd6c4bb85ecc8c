import asyncio
import threading
from datetime import datetime, timedelta

import httpx
import pytest

from recommendations.generator import OVERWHELM_MESSAGES
from storage.task_store import InMemoryTaskStore
from synthesis.orchestrator import TaskSynthesisOrchestrator, fallback_intent
from task_synthesis.errors import PersistenceFailure, SynthesisFailed
from task_synthesis.models import EmotionalState, IntentResult, RawInput

OVERWHELMED_EMOTION = {
    "emotional_state": {"primary_emotion": "overwhelmed", "intensity": 0.9},
    "cognitive_load": {"level": "high"},
    "adhd_indicators": {"overwhelm_level": 0.8},
    "recommendations": {"break_down_tasks": True},
}
CALM_EMOTION = {
    "emotional_state": {"primary_emotion": "calm", "intensity": 0.2},
    "adhd_indicators": {"overwhelm_level": 0.1},
}


def _run(orchestrator, text):
    return asyncio.run(orchestrator.synthesize(RawInput(text=text)))


def test_overwhelmed_hebrew_input_gets_three_subtasks(scripted_provider_factory, orchestrator_factory, store):
    provider = scripted_provider_factory(
        intent={
            "intent": "brain_dump",
            "confidence": 0.85,
            "extracted_data": {"title": "לטפל ב-10 משימות", "priority": "important"},
            "context_analysis": {"urgency_level": "low", "complexity": "simple"},
        },
        emotion=OVERWHELMED_EMOTION,
    )
    result = _run(orchestrator_factory(provider), "אני מרגיש המום, יש לי 10 משימות")

    assert result.emotional_context.is_overwhelmed
    assert result.was_optimized
    assert result.main_task.priority == "simple"
    assert [s.title for s in result.subtasks] == [
        "Plan and prepare for: לטפל ב-10 משימות",
        "Start working on: לטפל ב-10 משימות",
        "Complete and review: לטפל ב-10 משימות",
    ]
    assert result.recommendations[:3] == list(OVERWHELM_MESSAGES)
    assert result.confidence == 0.85
    assert result.degraded == []


def test_doctor_appointment_tomorrow_is_left_alone(scripted_provider_factory, orchestrator_factory, fixed_now):
    due = (fixed_now + timedelta(days=1)).replace(hour=15, minute=0)
    provider = scripted_provider_factory(
        intent={
            "intent": "schedule_event",
            "confidence": 0.9,
            "extracted_data": {
                "title": "פגישה עם הרופא",
                "due_date": due.isoformat(),
                "priority": "important",
                "type": "event",
            },
            "context_analysis": {"urgency_level": "medium", "complexity": "simple"},
        },
        emotion=CALM_EMOTION,
    )
    result = _run(orchestrator_factory(provider), "פגישה עם הרופא מחר בשעה 3")

    assert result.main_task.priority == "important"
    assert result.main_task.due_date == due
    assert result.main_task.type == "event"
    assert result.subtasks == []
    assert result.was_optimized is False


def test_both_analyses_unavailable_still_creates_task(failing_provider_factory, orchestrator_factory, store):
    provider = failing_provider_factory(httpx.ConnectError("offline"))
    result = _run(orchestrator_factory(provider), "קנה חלב")

    assert result.main_task.title == "קנה חלב"
    assert result.main_task.id is not None
    assert result.confidence == 0.5
    assert result.was_optimized is False
    assert result.subtasks == []
    assert set(result.degraded) == {"intent", "emotion"}
    assert store.list() == [result.main_task]


def test_no_provider_configured_still_creates_task(orchestrator_factory):
    result = _run(orchestrator_factory(), "call the bank about the card")
    assert result.main_task.title == "call the bank about the card"
    assert set(result.degraded) == {"intent", "emotion"}


def test_emotion_unavailable_uses_neutral_state(orchestrator_factory):
    class IntentOnly:
        name = "intent-only"

        def generate(self, *, system, user, **kwargs):
            if "intent recognition" in system:
                return '{"intent":"create_task","confidence":0.9,"extracted_data":{"title":"Buy milk"}}'
            raise httpx.ReadTimeout("slow")

    result = _run(orchestrator_factory(IntentOnly()), "buy milk")

    assert result.main_task.title == "Buy milk"
    assert result.degraded == ["emotion"]
    assert result.emotional_context == EmotionalState.neutral()


def test_confidence_out_of_range_is_clamped(scripted_provider_factory, orchestrator_factory):
    provider = scripted_provider_factory(intent={"confidence": 7, "extracted_data": {"title": "x"}})
    assert _run(orchestrator_factory(provider), "x").confidence == 1.0


def test_infinite_duration_still_creates_task(scripted_provider_factory, orchestrator_factory, store):
    provider = scripted_provider_factory(
        intent={"intent": "create_task", "extracted_data": {"title": "Buy milk", "duration_minutes": float("inf")}},
        emotion=CALM_EMOTION,
    )
    result = _run(orchestrator_factory(provider), "Buy milk")

    assert result.main_task.title == "Buy milk"
    assert result.degraded == []
    assert len(store.list()) == 1


def test_main_task_persisted_before_subtasks(scripted_provider_factory, orchestrator_factory, store):
    provider = scripted_provider_factory(
        intent={"extracted_data": {"title": "Plan trip"}, "context_analysis": {"complexity": "complex"}},
        emotion=CALM_EMOTION,
    )
    result = _run(orchestrator_factory(provider), "plan the trip")

    titles = [t.title for t in store.list()]
    assert titles[0] == "Plan trip"
    assert titles[1:] == [s.title for s in result.subtasks]
    assert len(titles) == result.total_tasks_created == 4


def test_blank_input_is_rejected(orchestrator_factory):
    with pytest.raises(SynthesisFailed):
        _run(orchestrator_factory(), "   ")


class FlakyStore(InMemoryTaskStore):
    def __init__(self, fail_on_call: int):
        super().__init__()
        self.fail_on_call = fail_on_call
        self.calls = 0

    def create(self, record):
        self.calls += 1
        if self.calls == self.fail_on_call:
            raise IOError("disk full")
        return super().create(record)


def test_persistence_failure_reports_partial_progress(scripted_provider_factory, orchestrator_factory):
    provider = scripted_provider_factory(
        intent={"extracted_data": {"title": "Big job"}, "context_analysis": {"complexity": "complex"}},
    )
    flaky = FlakyStore(fail_on_call=3)

    with pytest.raises(PersistenceFailure) as exc_info:
        _run(orchestrator_factory(provider, task_store=flaky), "big job")

    err = exc_info.value
    assert [r.title for r in err.created] == ["Big job", "Plan and prepare for: Big job"]
    assert isinstance(err.__cause__, IOError)
    # already-created records are not rolled back
    assert len(flaky.list()) == 2


def test_main_task_failure_surfaces_verbatim(scripted_provider_factory, orchestrator_factory):
    class RejectingStore:
        def create(self, record):
            raise PersistenceFailure("quota exceeded")

    provider = scripted_provider_factory(intent={"extracted_data": {"title": "x"}})
    with pytest.raises(PersistenceFailure, match="quota exceeded") as exc_info:
        _run(orchestrator_factory(provider, task_store=RejectingStore()), "x")
    assert exc_info.value.created == []


def test_cancel_during_analysis_persists_nothing():
    started = threading.Event()
    release = threading.Event()
    store = InMemoryTaskStore()

    class SlowExtractor:
        def extract(self, text):
            started.set()
            release.wait(5)
            return IntentResult(title="late")

    class QuickAnalyzer:
        def analyze(self, text):
            return EmotionalState()

    orchestrator = TaskSynthesisOrchestrator(SlowExtractor(), QuickAnalyzer(), store)

    async def scenario():
        task = asyncio.create_task(orchestrator.synthesize(RawInput(text="anything")))
        await asyncio.to_thread(started.wait, 5)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        release.set()

    asyncio.run(scenario())
    assert store.list() == []


def test_analyses_run_concurrently():
    barrier = threading.Barrier(2, timeout=5)

    class Extractor:
        def extract(self, text):
            barrier.wait()
            return IntentResult(title="together")

    class Analyzer:
        def analyze(self, text):
            barrier.wait()
            return EmotionalState()

    orchestrator = TaskSynthesisOrchestrator(Extractor(), Analyzer(), InMemoryTaskStore())
    result = orchestrator.synthesize_sync(RawInput(text="x"))
    assert result.main_task.title == "together"


@pytest.mark.parametrize("text, intent", [
    ("קנה חלב", "create_task"),
    ("צריך להתקשר לאמא", "create_task"),
    ("Buy milk", "create_task"),
    ("מה השעה?", "general_query"),
])
def test_fallback_intent_keywords(text, intent):
    result = fallback_intent(text)
    assert result.intent == intent
    assert result.confidence == 0.5
    assert result.title == text


def test_fallback_intent_truncates_long_text():
    text = "צריך " + "מאוד " * 20
    result = fallback_intent(text)
    assert len(result.title) == 50
    assert result.description == text
