import logging
from functools import lru_cache
from typing import List

from analysis.emotional_analyzer import EmotionalAnalyzer
from api.metrics import observe_provider_attempt
from extraction.intent_extractor import IntentExtractor
from llm.credentials import ProviderCredentials, build_providers
from llm.gateway import LanguageModelGateway
from llm.providers.base import LLMProvider
from llm.providers.mock_provider import MockProvider
from storage.task_store import InMemoryTaskStore, JsonFileTaskStore
from synthesis.orchestrator import TaskSynthesisOrchestrator
from task_synthesis.config import SynthesisSettings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> SynthesisSettings:
    return SynthesisSettings.from_env()


@lru_cache(maxsize=1)
def get_gateway() -> LanguageModelGateway:
    settings = get_settings()
    providers: List[LLMProvider]
    if settings.use_mock:
        providers = [MockProvider()]
    else:
        providers = build_providers(ProviderCredentials.from_env(), settings.provider_order)
    if not providers:
        logger.warning("No language model provider configured; every request will use fallbacks")
    else:
        logger.info(f"Language model providers: {[p.name for p in providers]}")
    return LanguageModelGateway(
        providers, timeout_s=settings.timeout_s, observer=observe_provider_attempt
    )


@lru_cache(maxsize=1)
def get_task_store():
    path = get_settings().task_store_path
    if path:
        return JsonFileTaskStore(path)
    return InMemoryTaskStore()


@lru_cache(maxsize=1)
def get_orchestrator() -> TaskSynthesisOrchestrator:
    gateway = get_gateway()
    return TaskSynthesisOrchestrator(
        extractor=IntentExtractor(gateway),
        analyzer=EmotionalAnalyzer(gateway),
        store=get_task_store(),
    )
