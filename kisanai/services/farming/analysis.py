import logging
from typing import Any, Optional

from kisanai.config import FARMING_MAX_ATTEMPTS, RETRY_BASE_DELAY
from kisanai.errors import AdvisoryError, IncompleteAnalysisError, MalformedResponseError
from kisanai.models import FarmingAnalysisRequest, ModernFarmingResult
from kisanai.services.dispatchers import CompletionDispatcher
from kisanai.services.extraction import extract_json_text, parse_json_object
from kisanai.services.farming.constants import (
    DEFAULT_FARMING_RESULT,
    FARMING_SCHEMA,
    MIN_IMPLEMENTATION_PHASES,
)
from kisanai.services.farming.gatekeeper import ensure_farming_related
from kisanai.services.farming.prompt import build_farming_prompt
from kisanai.services.normalizer import is_number, normalize
from kisanai.services.retry import SleepFn, retry_async

logger = logging.getLogger(__name__)


def _section(parent: Any, key: str) -> Any:
    if isinstance(parent, dict):
        return parent.get(key)
    return None


def check_farming_completeness(parsed: dict) -> None:
    """
    Reject analyses too thin to be worth showing.

    Runs on the parsed completion before it is merged with the defaults,
    so a missing section cannot be papered over by default values.
    """
    technique_analysis = _section(parsed, "techniqueAnalysis")
    implementation = _section(parsed, "implementation")
    metrics = _section(parsed, "metrics")
    if not technique_analysis or not implementation or not metrics:
        raise IncompleteAnalysisError("AI response missing required analysis sections")

    overview = _section(technique_analysis, "overview")
    phases = _section(implementation, "phases")
    resource_efficiency = _section(metrics, "resourceEfficiency")
    if not overview or not phases or not resource_efficiency:
        raise IncompleteAnalysisError("AI response missing critical analysis data")

    if not isinstance(phases, list) or len(phases) < MIN_IMPLEMENTATION_PHASES:
        raise IncompleteAnalysisError("Insufficient implementation phases provided")

    estimated_cost = _section(overview, "estimatedCost")
    if not is_number(estimated_cost) or estimated_cost <= 0:
        raise IncompleteAnalysisError("Invalid cost estimate provided")


def parse_farming_completion(raw: str) -> ModernFarmingResult:
    """Extract, parse, gate and normalize one raw farming completion."""
    try:
        parsed = parse_json_object(extract_json_text(raw))
        check_farming_completeness(parsed)
        normalized = normalize(FARMING_SCHEMA, parsed, DEFAULT_FARMING_RESULT)
        return ModernFarmingResult.model_validate(normalized)
    except AdvisoryError:
        raise
    except Exception as e:
        logger.error(f"Could not normalize farming analysis: {type(e).__name__}: {e}")
        raise MalformedResponseError(f"Unusable farming analysis response: {type(e).__name__}") from e


class ModernFarmingService:
    """
    Farming technique cost/benefit analysis.

    No default is ever substituted: after the attempt budget is spent the
    last attempt's error reaches the caller unchanged.
    """

    def __init__(
        self,
        dispatcher: CompletionDispatcher,
        max_attempts: int = FARMING_MAX_ATTEMPTS,
        base_delay: float = RETRY_BASE_DELAY,
        sleep: Optional[SleepFn] = None,
    ):
        self.dispatcher = dispatcher
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.sleep = sleep

    async def analyze(self, request: FarmingAnalysisRequest) -> ModernFarmingResult:
        ensure_farming_related(request.technique, request.farm_size)
        prompt = build_farming_prompt(request.technique, request.farm_size, request.budget)
        logger.info(f"Starting farming analysis: {request.technique[:50]} ({request.farm_size} acres, {request.budget})")

        async def attempt_analysis(attempt: int) -> ModernFarmingResult:
            raw = await self.dispatcher.complete(prompt)
            return parse_farming_completion(raw)

        result = await retry_async(
            attempt_analysis,
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            sleep=self.sleep,
        )
        logger.info(f"✓ Farming analysis ready: {result.technique_analysis.overview.name}")
        return result
