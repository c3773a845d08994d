"""
Tests for field-level normalization against the default records
"""
import copy
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fakes import disease_payload, farming_payload
from kisanai.models import DiseaseAnalysisResult, ModernFarmingResult
from kisanai.services.disease.constants import DEFAULT_DISEASE_RESULT, DISEASE_SCHEMA
from kisanai.services.farming.constants import DEFAULT_FARMING_RESULT, FARMING_SCHEMA
from kisanai.services.normalizer import (
    Choice,
    Number,
    RiskPercent,
    StringList,
    is_number,
    normalize,
    round_half_up,
)


def normalize_disease(parsed):
    return normalize(DISEASE_SCHEMA, parsed, DEFAULT_DISEASE_RESULT)


def normalize_farming(parsed):
    return normalize(FARMING_SCHEMA, parsed, DEFAULT_FARMING_RESULT)


# =============================================================================
# Default records are fixed points
# =============================================================================
class TestDefaultsAreStable:
    def test_disease_default_normalizes_to_itself(self):
        assert normalize_disease(copy.deepcopy(DEFAULT_DISEASE_RESULT)) == DEFAULT_DISEASE_RESULT

    def test_farming_default_normalizes_to_itself(self):
        assert normalize_farming(copy.deepcopy(DEFAULT_FARMING_RESULT)) == DEFAULT_FARMING_RESULT

    def test_disease_default_is_a_valid_result(self):
        result = DiseaseAnalysisResult.model_validate(DEFAULT_DISEASE_RESULT)
        assert result.model_dump(by_alias=True) == DEFAULT_DISEASE_RESULT
        assert result.is_plant_image

    def test_farming_default_is_a_valid_result(self):
        result = ModernFarmingResult.model_validate(DEFAULT_FARMING_RESULT)
        assert result.model_dump(by_alias=True) == DEFAULT_FARMING_RESULT
        assert result.technique_analysis.overview.estimated_cost > 0
        assert len(result.implementation.phases) == 3

    @pytest.mark.parametrize("parsed", [{}, None, "text", [1, 2]])
    def test_empty_or_non_object_gives_default(self, parsed):
        assert normalize_disease(parsed) == DEFAULT_DISEASE_RESULT

    def test_disease_result_normalizes_to_itself(self):
        once = normalize_disease(disease_payload())
        assert once["realTimeMetrics"]["spreadRisk"]["value"] == 72
        assert once["organicTreatments"] != DEFAULT_DISEASE_RESULT["organicTreatments"]
        assert normalize_disease(copy.deepcopy(once)) == once

    def test_farming_result_normalizes_to_itself(self):
        payload = farming_payload()
        payload["riskAssessment"]["marketRisk"] = 55
        payload["technologyRecommendations"]["essential"] = ["NFT channels", "EC meter", "LED grow lights"]
        once = normalize_farming(payload)
        assert once["riskAssessment"]["weatherRisk"] == 25
        assert once["riskAssessment"]["marketRisk"] == 55
        assert once != DEFAULT_FARMING_RESULT
        assert normalize_farming(copy.deepcopy(once)) == once

    def test_result_does_not_share_state_with_default(self):
        result = normalize_disease({})
        result["organicTreatments"].append("extra")
        result["realTimeMetrics"]["spreadRisk"]["value"] = 99
        assert len(DEFAULT_DISEASE_RESULT["organicTreatments"]) == 3
        assert DEFAULT_DISEASE_RESULT["realTimeMetrics"]["spreadRisk"]["value"] == 45


# =============================================================================
# Risk percentages
# =============================================================================
class TestRiskPercent:
    @pytest.mark.parametrize("value, expected", [
        (0.45, 45),
        (0.5, 50),
        (0.999, 100),
        (0.125, 13),
        (0, 0),
        (1, 1),
        (12.5, 13),
        (73.4, 73),
        (150, 100),
        (-5, 0),
    ])
    def test_scaling_rounding_and_clamping(self, value, expected):
        score = RiskPercent().coerce(value, 45)
        assert score == expected
        assert isinstance(score, int)

    @pytest.mark.parametrize("value", ["high", None, True, [0.4], float("nan")])
    def test_non_numbers_take_default(self, value):
        assert RiskPercent().coerce(value, 45) == 45

    def test_spread_risk_decimal_is_rescaled(self):
        result = normalize_disease({"realTimeMetrics": {"spreadRisk": {"level": "High", "value": 0.72, "trend": "increasing"}}})
        assert result["realTimeMetrics"]["spreadRisk"] == {"level": "High", "value": 72, "trend": "increasing"}

    def test_farming_risks_are_integers_in_range(self):
        result = normalize_farming({"riskAssessment": {
            "weatherRisk": 0.3,
            "marketRisk": 250,
            "technicalRisk": "low",
            "financialRisk": 44.5,
            "mitigationStrategies": ["Insure crops"],
        }})
        risks = result["riskAssessment"]
        assert risks["weatherRisk"] == 30
        assert risks["marketRisk"] == 100
        assert risks["technicalRisk"] == DEFAULT_FARMING_RESULT["riskAssessment"]["technicalRisk"]
        assert risks["financialRisk"] == 45
        assert risks["mitigationStrategies"] == ["Insure crops"]


# =============================================================================
# Closed enums
# =============================================================================
class TestEnumFallback:
    @pytest.mark.parametrize("value", ["critical", "N/A", "Severe", 3, None])
    def test_unknown_severity_becomes_medium(self, value):
        assert normalize_disease({"severityLevel": value})["severityLevel"] == "medium"

    @pytest.mark.parametrize("value", ["mild", "medium", "severe"])
    def test_known_severity_is_kept(self, value):
        assert normalize_disease({"severityLevel": value})["severityLevel"] == value

    def test_factor_status_and_trend(self):
        result = normalize_disease({
            "environmentalFactors": [{"factor": "Rain", "currentValue": "heavy", "optimalRange": "light", "status": "bad"}],
            "realTimeMetrics": {"spreadRisk": {"level": "Low", "value": 10, "trend": "up"}},
        })
        assert result["environmentalFactors"][0]["status"] == "optimal"
        assert result["realTimeMetrics"]["spreadRisk"]["trend"] == "stable"

    def test_farming_enums_are_case_sensitive(self):
        result = normalize_farming({"techniqueAnalysis": {
            "overview": {"riskLevel": "low"},
            "marketAnalysis": {"demandTrend": "Growing", "competitionLevel": "Extreme"},
        }})
        assert result["techniqueAnalysis"]["overview"]["riskLevel"] == "Medium"
        assert result["techniqueAnalysis"]["marketAnalysis"]["demandTrend"] == "Growing"
        assert result["techniqueAnalysis"]["marketAnalysis"]["competitionLevel"] == "Medium"

    def test_choice_accepts_only_members(self):
        rule = Choice(["A", "B", "C"])
        assert rule.coerce("B", "A") == "B"
        assert rule.coerce("D", "A") == "A"


# =============================================================================
# Lists
# =============================================================================
class TestListRules:
    def test_long_list_truncated_to_three(self):
        result = normalize_disease({"organicTreatments": ["a", "b", "c", "d", "e"]})
        assert result["organicTreatments"] == ["a", "b", "c"]

    @pytest.mark.parametrize("value", [["only one", "two"], [], "neem oil", None, [1, 2, 3]])
    def test_short_or_invalid_list_replaced_wholesale(self, value):
        result = normalize_disease({"ipmStrategies": value})
        assert result["ipmStrategies"] == DEFAULT_DISEASE_RESULT["ipmStrategies"]

    def test_non_strings_dropped_before_counting(self):
        assert StringList(exact=3).coerce(["a", 1, "b", None, "c"], ["x", "y", "z"]) == ["a", "b", "c"]
        assert StringList(exact=3).coerce(["a", 1, "b"], ["x", "y", "z"]) == ["x", "y", "z"]

    def test_unbounded_list_keeps_strings(self):
        result = normalize_farming({"techniqueAnalysis": {"overview": {"recommendedCrops": ["Kale", 7, "Basil"]}}})
        assert result["techniqueAnalysis"]["overview"]["recommendedCrops"] == ["Kale", "Basil"]

    def test_record_list_drops_non_objects_and_fills_fields(self):
        result = normalize_disease({"environmentalFactors": ["Humidity high", {"factor": "Humidity", "currentValue": 85}]})
        assert result["environmentalFactors"] == [{
            "factor": "Humidity",
            "currentValue": "N/A",
            "optimalRange": "N/A",
            "status": "optimal",
        }]

    def test_record_list_non_list_gives_default(self):
        result = normalize_farming({"implementation": {"phases": "three phases"}})
        assert result["implementation"]["phases"] == DEFAULT_FARMING_RESULT["implementation"]["phases"]


# =============================================================================
# Nested records and numbers
# =============================================================================
class TestNestedFallback:
    def test_non_object_subrecord_replaced_wholesale(self):
        result = normalize_disease({"cropName": "Rice", "realTimeMetrics": "unavailable"})
        assert result["cropName"] == "Rice"
        assert result["realTimeMetrics"] == DEFAULT_DISEASE_RESULT["realTimeMetrics"]

    def test_missing_leaf_inherits_default(self):
        result = normalize_disease({"realTimeMetrics": {"diseaseProgression": {"stage": "Late"}}})
        assert result["realTimeMetrics"]["diseaseProgression"] == {"stage": "Late", "rate": 5}
        assert result["realTimeMetrics"]["spreadRisk"] == DEFAULT_DISEASE_RESULT["realTimeMetrics"]["spreadRisk"]

    @pytest.mark.parametrize("field, value", [
        ("humidity", 140),
        ("humidity", -1),
        ("soilMoisture", "wet"),
        ("temperature", True),
    ])
    def test_out_of_range_conditions_take_default(self, field, value):
        result = normalize_disease({"realTimeMetrics": {"environmentalConditions": {field: value}}})
        conditions = result["realTimeMetrics"]["environmentalConditions"]
        assert conditions[field] == DEFAULT_DISEASE_RESULT["realTimeMetrics"]["environmentalConditions"][field]

    @pytest.mark.parametrize("value, expected", [(92, 92), (0, 0), (100.0, 100.0), (101, 75), (-3, 75), ("90", 75)])
    def test_confidence_level(self, value, expected):
        assert normalize_disease({"confidenceLevel": value})["confidenceLevel"] == expected

    def test_text_fields_must_be_strings(self):
        result = normalize_disease({"diseaseName": 42, "diagnosisSummary": ["a"]})
        assert result["diseaseName"] == "Unknown Disease"
        assert result["diagnosisSummary"] == DEFAULT_DISEASE_RESULT["diagnosisSummary"]

    def test_negative_profit_is_allowed_negative_cost_is_not(self):
        result = normalize_farming({"financialProjections": {"year1": {"revenue": -10, "profit": -5000}}})
        year1 = result["financialProjections"]["year1"]
        assert year1["profit"] == -5000
        assert year1["revenue"] == DEFAULT_FARMING_RESULT["financialProjections"]["year1"]["revenue"]


class TestHelpers:
    @pytest.mark.parametrize("value, expected", [(1, True), (1.5, True), (True, False), ("1", False), (float("inf"), False), (10 ** 400, False)])
    def test_is_number(self, value, expected):
        assert is_number(value) is expected

    @pytest.mark.parametrize("value, expected", [(2.5, 3), (3.5, 4), (2.4, 2), (-0.5, 0)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_number_bounds(self):
        rule = Number(0, 100)
        assert rule.coerce(50, 1) == 50
        assert rule.coerce(100.5, 1) == 1

    def test_oversized_integers_take_default(self):
        huge = 10 ** 400
        assert Number().coerce(huge, 5) == 5
        assert RiskPercent().coerce(huge, 40) == 40
        assert normalize_disease({"confidenceLevel": huge})["confidenceLevel"] == 75
        assert normalize_farming({"riskAssessment": {"weatherRisk": huge}})["riskAssessment"]["weatherRisk"] == 40
