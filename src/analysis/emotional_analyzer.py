import logging

from llm.gateway import LanguageModelGateway
from llm.prompts import PromptBuilder
from llm.schemas import EmotionalPayload
from task_synthesis.errors import AllProvidersFailed, AnalysisUnavailable, ProviderUnavailable
from task_synthesis.models import EmotionalState

logger = logging.getLogger(__name__)


class EmotionalAnalyzer:

    def __init__(self, gateway: LanguageModelGateway, prompts: PromptBuilder | None = None):
        self.gateway = gateway
        self.prompts = prompts or PromptBuilder()

    def analyze(self, text: str) -> EmotionalState:
        prompt = self.prompts.build_emotional_prompt(text)
        try:
            response = self.gateway.invoke(prompt)
        except (AllProvidersFailed, ProviderUnavailable) as e:
            raise AnalysisUnavailable("emotion", str(e)) from e

        state = EmotionalPayload.model_validate(response.data).to_emotional_state()
        logger.info(
            f"Emotion {state.primary_emotion} (overwhelm {state.overwhelm_level:.2f}) "
            f"via {response.provider}"
        )
        return state
