from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from task_synthesis.models import TaskRecord


class ErrorKind(str, Enum):
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    PROVIDER_TIMEOUT = "provider_timeout"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    PROVIDER_ERROR = "provider_error"
    MALFORMED_RESPONSE = "malformed_response"
    ALL_PROVIDERS_FAILED = "all_providers_failed"
    ANALYSIS_UNAVAILABLE = "analysis_unavailable"
    PERSISTENCE_FAILURE = "persistence_failure"
    SYNTHESIS_FAILED = "synthesis_failed"


@dataclass(frozen=True)
class ProviderAttempt:
    """One failed attempt against a single provider inside the fallback chain."""

    provider: str
    kind: ErrorKind
    detail: str = ""


class SynthesisError(Exception):
    """Base class. `kind` lets callers branch without isinstance chains."""

    kind: ErrorKind = ErrorKind.SYNTHESIS_FAILED

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind.value)
        self.message = message or self.kind.value


class ProviderUnavailable(SynthesisError):
    """No provider has usable credentials."""

    kind = ErrorKind.PROVIDER_UNAVAILABLE


class MalformedResponse(SynthesisError):
    kind = ErrorKind.MALFORMED_RESPONSE


class AllProvidersFailed(SynthesisError):
    kind = ErrorKind.ALL_PROVIDERS_FAILED

    def __init__(self, attempts: List[ProviderAttempt]):
        tried = ", ".join(f"{a.provider}={a.kind.value}" for a in attempts) or "none"
        super().__init__(f"all providers failed ({tried})")
        self.attempts = list(attempts)


class AnalysisUnavailable(SynthesisError):
    kind = ErrorKind.ANALYSIS_UNAVAILABLE

    def __init__(self, analysis: str, message: str = ""):
        super().__init__(message or f"{analysis} analysis unavailable")
        self.analysis = analysis


class PersistenceFailure(SynthesisError):
    """The task store rejected a write. `created` lists records already persisted."""

    kind = ErrorKind.PERSISTENCE_FAILURE

    def __init__(self, message: str = "", created: Optional[List["TaskRecord"]] = None):
        super().__init__(message)
        self.created = list(created or [])


class SynthesisFailed(SynthesisError):
    kind = ErrorKind.SYNTHESIS_FAILED

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
