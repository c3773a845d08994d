"""
Tests for the disease diagnosis pipeline
Verifies: happy path, single-attempt fallback to the default, fatal errors surface
"""
import asyncio
import json
import os
import sys

import httpx
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fakes import FakeDispatcher, disease_payload
from kisanai.config import ProviderConfig
from kisanai.errors import (
    AuthenticationError,
    EmptyCompletionError,
    MalformedResponseError,
    MissingCredentialError,
    NetworkError,
    PermissionDeniedError,
    RateLimitError,
    UpstreamServerError,
)
from kisanai.models import DiseaseAnalysisRequest
from kisanai.services.disease.constants import DEFAULT_DISEASE_RESULT
from kisanai.services.disease.detection import (
    DiseaseDetectionService,
    default_disease_result,
    parse_disease_completion,
)
from kisanai.services.disease.prompt import build_disease_prompt
from kisanai.services.dispatchers import GeminiDispatcher


def make_request(**kwargs):
    return DiseaseAnalysisRequest(image_bytes=b"leaf-bytes", mime_type="image/png", **kwargs)


def run_analysis(*outcomes, **request_kwargs):
    dispatcher = FakeDispatcher(*outcomes)
    service = DiseaseDetectionService(dispatcher)
    result = asyncio.run(service.analyze(make_request(**request_kwargs)))
    return result, dispatcher


# =============================================================================
# Prompt
# =============================================================================
class TestDiseasePrompt:
    def test_hints_are_appended(self):
        prompt = build_disease_prompt("Tomato", "severe")
        assert prompt.endswith("Crop Type: Tomato Severity Level: severe")

    def test_no_hints(self):
        prompt = build_disease_prompt()
        assert "Crop Type:" not in prompt
        assert "Severity Level:" not in prompt

    def test_prompt_documents_schema_and_invalid_variant(self):
        prompt = build_disease_prompt()
        assert '"cropName": "Invalid Input"' in prompt
        assert '"confidenceLevel": 0' in prompt
        assert '"realTimeMetrics"' in prompt
        assert "NO **trailing commas**" in prompt
        assert "\n" not in prompt
        assert "  " not in prompt

    def test_prompt_is_deterministic(self):
        assert build_disease_prompt("Rice") == build_disease_prompt("Rice")


# =============================================================================
# Successful diagnosis
# =============================================================================
class TestDiagnosis:
    def test_valid_completion(self, disease_completion):
        result, dispatcher = run_analysis(disease_completion, crop_type="Tomato", severity_level="severe")

        assert result.crop_name == "Tomato"
        assert result.disease_name == "Early Blight"
        assert result.severity_level == "severe"
        assert result.real_time_metrics.spread_risk.value == 72
        assert result.environmental_factors[0].status == "critical"
        assert result.confidence_level == 92
        assert result.is_plant_image

        assert dispatcher.calls == 1
        assert dispatcher.images == [b"leaf-bytes"]
        assert dispatcher.mime_types == ["image/png"]
        assert "Crop Type: Tomato" in dispatcher.prompts[0]

    def test_partial_completion_is_filled_from_default(self):
        raw = json.dumps({"cropName": "Maize", "diseaseName": "Rust", "organicTreatments": ["One", "Two"]})
        result, _ = run_analysis(raw)
        assert result.crop_name == "Maize"
        assert result.disease_name == "Rust"
        assert result.organic_treatments == DEFAULT_DISEASE_RESULT["organicTreatments"]
        assert result.confidence_level == 75

    def test_invalid_image_variant(self):
        raw = json.dumps({
            "diseaseName": "Not Applicable",
            "cropName": "Invalid Input",
            "confidenceLevel": 0,
            "diagnosisSummary": "Non-plant image detected",
            "timeToTreat": "N/A",
            "estimatedRecovery": "N/A",
            "yieldImpact": "N/A",
            "severityLevel": "N/A",
        })
        result, _ = run_analysis(raw)
        assert result.is_plant_image is False
        assert result.time_to_treat == "N/A"
        assert result.severity_level == "medium"
        assert result.diagnosis_summary == "Non-plant image detected"

    def test_truncated_completion_is_completed(self):
        raw = '```json\n{"cropName": "Chili", "realTimeMetrics": {"spreadRisk": "high"'
        result = parse_disease_completion(raw)
        assert result.crop_name == "Chili"
        assert result.real_time_metrics.spread_risk.value == 45
        assert result.prevention_plan == DEFAULT_DISEASE_RESULT["preventionPlan"]


# =============================================================================
# Fallback and fatal errors
# =============================================================================
class TestFallback:
    @pytest.mark.parametrize("outcome", [
        RateLimitError("Gemini rate limit exceeded", 429),
        UpstreamServerError("Gemini server error 500", 500),
        NetworkError("Gemini request timed out after 30s"),
        EmptyCompletionError("Empty response from Gemini API"),
        MalformedResponseError("bad json"),
        "I'm sorry, I cannot identify this plant.",
        "{not json at all: [",
    ])
    def test_recoverable_failures_return_default(self, outcome):
        result, dispatcher = run_analysis(outcome)
        assert result == default_disease_result()
        assert result.model_dump(by_alias=True) == DEFAULT_DISEASE_RESULT
        assert dispatcher.calls == 1

    @pytest.mark.parametrize("error", [
        AuthenticationError("Invalid Gemini API key. Please check your credentials.", 401),
        PermissionDeniedError("Gemini API access forbidden. Please check your API key permissions.", 403),
        MissingCredentialError("Gemini API key is not configured."),
    ])
    def test_fatal_errors_are_raised(self, error):
        dispatcher = FakeDispatcher(error)
        service = DiseaseDetectionService(dispatcher)
        with pytest.raises(type(error)) as exc_info:
            asyncio.run(service.analyze(make_request()))
        assert exc_info.value is error

    def test_gemini_429_returns_exact_default(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(
            lambda request: httpx.Response(429, json={"error": {"message": "quota"}})
        ))
        dispatcher = GeminiDispatcher(ProviderConfig.gemini(api_key="test-key"), http_client=client)
        result = asyncio.run(DiseaseDetectionService(dispatcher).analyze(make_request()))
        assert result.model_dump(by_alias=True) == DEFAULT_DISEASE_RESULT

    def test_gemini_401_is_raised(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(
            lambda request: httpx.Response(401, json={"error": {"message": "API key not valid"}})
        ))
        dispatcher = GeminiDispatcher(ProviderConfig.gemini(api_key="bad-key"), http_client=client)
        with pytest.raises(AuthenticationError) as exc_info:
            asyncio.run(DiseaseDetectionService(dispatcher).analyze(make_request()))
        assert "Invalid Gemini API key" in exc_info.value.message

    def test_oversized_number_falls_back_per_field(self):
        raw = '{"cropName": "Tomato", "confidenceLevel": 1' + "0" * 400 + "}"
        result, dispatcher = run_analysis(raw)
        assert result.crop_name == "Tomato"
        assert result.confidence_level == 75
        assert dispatcher.calls == 1

    def test_unexpected_normalization_failure_returns_default(self, monkeypatch):
        def broken_normalize(*args):
            raise ValueError("unexpected shape")

        monkeypatch.setattr("kisanai.services.disease.detection.normalize", broken_normalize)
        with pytest.raises(MalformedResponseError) as exc_info:
            parse_disease_completion(json.dumps(disease_payload()))
        assert isinstance(exc_info.value.__cause__, ValueError)

        result, _ = run_analysis(json.dumps(disease_payload()))
        assert result.model_dump(by_alias=True) == DEFAULT_DISEASE_RESULT

    def test_default_payload_overrides(self):
        payload = disease_payload(severityLevel="mild")
        result = parse_disease_completion(json.dumps(payload))
        assert result.severity_level == "mild"
