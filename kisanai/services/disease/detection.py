import logging

from kisanai.errors import (
    AdvisoryError,
    AuthenticationError,
    MalformedResponseError,
    MissingCredentialError,
    PermissionDeniedError,
)
from kisanai.models import DiseaseAnalysisRequest, DiseaseAnalysisResult
from kisanai.services.dispatchers import CompletionDispatcher
from kisanai.services.disease.constants import (
    DEFAULT_DISEASE_RESULT,
    DISEASE_SCHEMA,
    DISEASE_TRUNCATION_SUFFIXES,
)
from kisanai.services.disease.prompt import build_disease_prompt
from kisanai.services.extraction import extract_json_text, parse_json_object
from kisanai.services.normalizer import normalize

logger = logging.getLogger(__name__)

# Surface to the caller instead of falling back
FATAL_ERRORS = (AuthenticationError, PermissionDeniedError, MissingCredentialError)


def default_disease_result() -> DiseaseAnalysisResult:
    return DiseaseAnalysisResult.model_validate(DEFAULT_DISEASE_RESULT)


def parse_disease_completion(raw: str) -> DiseaseAnalysisResult:
    """Extract, parse and normalize one raw diagnosis completion."""
    try:
        candidate = extract_json_text(raw, DISEASE_TRUNCATION_SUFFIXES)
        parsed = parse_json_object(candidate)
        normalized = normalize(DISEASE_SCHEMA, parsed, DEFAULT_DISEASE_RESULT)
        return DiseaseAnalysisResult.model_validate(normalized)
    except AdvisoryError:
        raise
    except Exception as e:
        logger.error(f"Could not normalize diagnosis: {type(e).__name__}: {e}")
        raise MalformedResponseError(f"Unusable diagnosis response: {type(e).__name__}") from e


class DiseaseDetectionService:
    """
    Plant photo diagnosis in a single attempt.

    Authentication, permission and credential problems are raised so the
    user can fix their setup. Every other failure (rate limit, timeout,
    empty or unreadable completion) is logged and answered with the
    default diagnosis.
    """

    def __init__(self, dispatcher: CompletionDispatcher):
        self.dispatcher = dispatcher

    async def analyze(self, request: DiseaseAnalysisRequest) -> DiseaseAnalysisResult:
        logger.info(f"Starting disease diagnosis (crop={request.crop_type}, severity={request.severity_level})")
        prompt = build_disease_prompt(request.crop_type, request.severity_level)

        try:
            raw = await self.dispatcher.complete(prompt, request.image_bytes, request.mime_type)
            result = parse_disease_completion(raw)
        except FATAL_ERRORS as e:
            logger.error(f"Disease diagnosis failed: {e.message}")
            raise
        except AdvisoryError as e:
            logger.warning(f"{e.code}: {e.message}, using default diagnosis")
            return default_disease_result()

        if not result.is_plant_image:
            logger.info("Non-plant image detected")
        else:
            logger.info(f"✓ Diagnosis: {result.disease_name} on {result.crop_name} ({result.confidence_level}%)")
        return result
