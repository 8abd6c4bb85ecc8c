import logging

from llm.gateway import LanguageModelGateway
from llm.prompts import PromptBuilder
from llm.schemas import IntentPayload
from task_synthesis.errors import AllProvidersFailed, AnalysisUnavailable, ProviderUnavailable
from task_synthesis.models import IntentResult

logger = logging.getLogger(__name__)


class IntentExtractor:

    def __init__(self, gateway: LanguageModelGateway, prompts: PromptBuilder | None = None):
        self.gateway = gateway
        self.prompts = prompts or PromptBuilder()

    def extract(self, text: str) -> IntentResult:
        prompt = self.prompts.build_intent_prompt(text)
        try:
            response = self.gateway.invoke(prompt)
        except (AllProvidersFailed, ProviderUnavailable) as e:
            raise AnalysisUnavailable("intent", str(e)) from e

        result = IntentPayload.model_validate(response.data).to_intent_result()
        logger.info(
            f"Intent {result.intent} ({result.confidence:.2f}) via {response.provider}"
        )
        return result
