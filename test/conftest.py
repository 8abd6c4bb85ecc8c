import json
from datetime import datetime

import pytest

from analysis.emotional_analyzer import EmotionalAnalyzer
from extraction.intent_extractor import IntentExtractor
from llm.gateway import LanguageModelGateway
from optimization.engine import OptimizationEngine
from storage.task_store import InMemoryTaskStore
from synthesis.orchestrator import TaskSynthesisOrchestrator

FIXED_NOW = datetime(2026, 10, 18, 10, 0)


class FakeProvider:
    def __init__(self, response_text: str, name: str = "fake", calls: list | None = None):
        self._response_text = response_text
        self.name = name
        self.calls = calls if calls is not None else []

    def generate(self, *, system: str, user: str, **kwargs) -> str:
        self.calls.append(self.name)
        return self._response_text


class FailingProvider:
    def __init__(self, exc: Exception, name: str = "failing", calls: list | None = None):
        self._exc = exc
        self.name = name
        self.calls = calls if calls is not None else []

    def generate(self, *, system: str, user: str, **kwargs) -> str:
        self.calls.append(self.name)
        raise self._exc


class ScriptedProvider:
    """Answers intent and emotional prompts with separate canned payloads."""

    def __init__(self, intent: dict | None = None, emotion: dict | None = None, name: str = "scripted"):
        self.intent = intent or {}
        self.emotion = emotion or {}
        self.name = name

    def generate(self, *, system: str, user: str, **kwargs) -> str:
        if "intent recognition" in system:
            return json.dumps(self.intent, ensure_ascii=False)
        return json.dumps(self.emotion, ensure_ascii=False)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def fake_provider_factory():
    def _make(response_text: str, name: str = "fake", calls: list | None = None):
        return FakeProvider(response_text, name=name, calls=calls)
    return _make


@pytest.fixture
def failing_provider_factory():
    def _make(exc: Exception, name: str = "failing", calls: list | None = None):
        return FailingProvider(exc, name=name, calls=calls)
    return _make


@pytest.fixture
def store():
    return InMemoryTaskStore()


@pytest.fixture
def orchestrator_factory(store):
    def _make(*providers, task_store=None):
        gateway = LanguageModelGateway(list(providers))
        return TaskSynthesisOrchestrator(
            extractor=IntentExtractor(gateway),
            analyzer=EmotionalAnalyzer(gateway),
            store=task_store if task_store is not None else store,
            engine=OptimizationEngine(clock=lambda: FIXED_NOW),
        )
    return _make


@pytest.fixture
def scripted_provider_factory():
    def _make(intent: dict | None = None, emotion: dict | None = None, name: str = "scripted"):
        return ScriptedProvider(intent=intent, emotion=emotion, name=name)
    return _make
