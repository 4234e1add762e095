from __future__ import annotations

from .engine import EngineClient
from .errors import FatalEngineError, RecoverableEngineError
from .extractor import extract_payload
from .heuristic import HeuristicEstimator
from .log import get_logger
from .models import AnalysisRequest, NormalizedResult
from .normalizer import normalize_result
from .prompts import SYSTEM_INSTRUCTION, build_prompt
from .request_builder import build_request
from .tiers import ScoreTier, tier_for_result

logger = get_logger(__name__)


class AnalysisOrchestrator:
    """Runs build -> engine -> extract -> normalize, with one fallback hop.

    InvalidURL and the fatal credential errors reach the caller unchanged.
    Every recoverable engine failure resolves to the heuristic estimate
    instead, so the caller never sees it.
    """

    def __init__(self, engine: EngineClient, estimator: HeuristicEstimator | None = None) -> None:
        self._engine = engine
        self._estimator = estimator or HeuristicEstimator()

    async def analyze(self, url: str) -> NormalizedResult:
        request = build_request(url)

        try:
            return await self._analyze_with_engine(request)
        except FatalEngineError as e:
            logger.error(f"[Orchestrator] {e.kind} for {request.hostname}: {e.message}")
            raise
        except RecoverableEngineError as e:
            logger.warning(
                f"[Orchestrator] {e.kind} for {request.hostname}, using heuristic estimate: {e.message}"
            )
            return self._estimator.estimate(request)

    async def _analyze_with_engine(self, request: AnalysisRequest) -> NormalizedResult:
        reply = await self._engine.generate(
            request,
            system_instruction=SYSTEM_INSTRUCTION,
            prompt=build_prompt(request),
        )
        payload = extract_payload(reply.text)
        result = normalize_result(payload, request.url, citations=reply.citations)
        logger.info(
            f"[Orchestrator] {request.hostname}: score={result.trust_score} verdict={result.verdict} "
            f"sources={len(result.sources)}"
        )
        return result

    async def aclose(self) -> None:
        await self._engine.aclose()

    async def analyze_with_tier(self, url: str) -> tuple[NormalizedResult, ScoreTier]:
        result = await self.analyze(url)
        return result, tier_for_result(result)
