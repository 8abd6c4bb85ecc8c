from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx

from llm.json_extract import extract_json_object
from llm.prompts import Prompt
from llm.providers.base import DEFAULT_TIMEOUT_S, LLMProvider
from task_synthesis.errors import (
    AllProvidersFailed,
    ErrorKind,
    MalformedResponse,
    ProviderAttempt,
    ProviderUnavailable,
)

logger = logging.getLogger(__name__)

# (provider name, outcome) where outcome is "success" or an ErrorKind value
AttemptObserver = Callable[[str, str], None]


@dataclass(frozen=True)
class StructuredResponse:
    provider: str
    data: Dict[str, Any]
    # failures recovered before `provider` answered; empty on a first-try success
    attempts: List[ProviderAttempt] = field(default_factory=list)

    @property
    def recovered(self) -> bool:
        return bool(self.attempts)


class LanguageModelGateway:
    """Sends a prompt to an ordered list of providers until one returns usable JSON.

    Each provider gets exactly one attempt with its own timeout. Any exception
    from a provider, or an unparseable payload, advances to the next provider; when the list is exhausted the caller gets a single
    AllProvidersFailed carrying every attempt.

    The gateway keeps no per-call state, so one instance can serve concurrent
    pipeline invocations.
    """

    def __init__(
        self,
        providers: Sequence[LLMProvider],
        timeout_s: float = DEFAULT_TIMEOUT_S,
        observer: Optional[AttemptObserver] = None,
    ):
        self.providers = tuple(providers)
        self.timeout_s = timeout_s
        self._observer = observer

    @property
    def provider_names(self) -> List[str]:
        return [p.name for p in self.providers]

    def invoke(
        self,
        prompt: Prompt,
        provider_order: Optional[Sequence[LLMProvider]] = None,
    ) -> StructuredResponse:
        providers = list(self.providers if provider_order is None else provider_order)
        if not providers:
            raise ProviderUnavailable("no language model provider is configured")

        attempts: List[ProviderAttempt] = []
        for provider in providers:
            outcome = self._attempt(provider, prompt)
            if isinstance(outcome, StructuredResponse):
                if attempts:
                    logger.info(
                        f"{prompt.kind} prompt answered by {provider.name} "
                        f"after {len(attempts)} failed attempt(s)"
                    )
                return StructuredResponse(
                    provider=outcome.provider, data=outcome.data, attempts=attempts
                )
            attempts.append(outcome)

        logger.error(
            f"All providers failed for {prompt.kind} prompt: "
            + ", ".join(f"{a.provider}={a.kind.value}" for a in attempts)
        )
        raise AllProvidersFailed(attempts)

    def _attempt(self, provider: LLMProvider, prompt: Prompt):
        """One call against one provider: a StructuredResponse or a ProviderAttempt."""
        kind: Optional[ErrorKind] = None
        detail = ""
        unexpected: Optional[Exception] = None
        try:
            raw = provider.generate(
                system=prompt.system,
                user=prompt.user,
                timeout=self.timeout_s,
                temperature=prompt.temperature,
                max_tokens=prompt.max_tokens,
            )
            if not isinstance(raw, str):
                raise MalformedResponse("provider returned non-text output")
            data = extract_json_object(raw)
        except httpx.TimeoutException as e:
            kind, detail = ErrorKind.PROVIDER_TIMEOUT, str(e) or "timed out"
        except httpx.HTTPStatusError as e:
            kind, detail = ErrorKind.HTTP_ERROR, f"HTTP {e.response.status_code}"
        except httpx.HTTPError as e:
            kind, detail = ErrorKind.NETWORK_ERROR, str(e)
        except MalformedResponse as e:
            kind, detail = ErrorKind.MALFORMED_RESPONSE, e.message
        except (KeyError, IndexError, TypeError, ValueError) as e:
            # unexpected envelope shape or a body that is not JSON at all
            kind, detail = ErrorKind.MALFORMED_RESPONSE, f"{type(e).__name__}: {e}"
        except Exception as e:
            # anything else a provider client raises still only costs this attempt
            kind, detail, unexpected = ErrorKind.PROVIDER_ERROR, f"{type(e).__name__}: {e}", e

        if kind is None:
            self._observe(provider.name, "success")
            return StructuredResponse(provider=provider.name, data=data)

        logger.warning(
            f"Provider {provider.name} failed ({kind.value}): {detail}", exc_info=unexpected
        )
        self._observe(provider.name, kind.value)
        return ProviderAttempt(provider=provider.name, kind=kind, detail=detail)

    def _observe(self, provider: str, outcome: str) -> None:
        if self._observer is None:
            return
        try:
            self._observer(provider, outcome)
        except Exception:
            # metrics are best-effort
            logger.debug("attempt observer failed", exc_info=True)
