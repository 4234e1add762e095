from __future__ import annotations


class AnalysisError(Exception):
    """Base class for every error the analysis pipeline raises."""

    kind = "analysis_error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.kind)
        self.message = message or self.kind


class InvalidURL(AnalysisError):
    kind = "invalid_url"


class FatalEngineError(AnalysisError):
    """Configuration problems. Never absorbed by the heuristic fallback."""

    kind = "fatal_engine_error"


class CredentialMissing(FatalEngineError):
    kind = "credential_missing"


class Unauthorized(FatalEngineError):
    kind = "unauthorized"


class RecoverableEngineError(AnalysisError):
    """Engine unavailable or unusable; the orchestrator falls back on these."""

    kind = "recoverable_engine_error"


class NetworkFailure(RecoverableEngineError):
    kind = "network_failure"


class RateLimited(RecoverableEngineError):
    kind = "rate_limited"


class EmptyResponse(RecoverableEngineError):
    kind = "empty_response"


class MalformedJSON(RecoverableEngineError):
    kind = "malformed_json"

    def __init__(self, message: str = "", *, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text
