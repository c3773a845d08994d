"""
Canonical default record and field rules for plant disease diagnosis.

``DEFAULT_DISEASE_RESULT`` is both the merge base for every parsed
completion and the record returned when the diagnosis falls back.
Used by: detection.py, tests/test_normalizer.py
"""
import datetime

from kisanai.models import FactorStatus, SeverityLevel, Trend
from kisanai.services.normalizer import (
    Choice,
    Number,
    Record,
    RecordList,
    RiskPercent,
    StringList,
    Text,
)

# Stamped once when the module loads
DEFAULT_LAST_UPDATED = datetime.date.today().isoformat()

ENVIRONMENTAL_FACTOR_DEFAULT = {
    "factor": "Unknown Factor",
    "currentValue": "N/A",
    "optimalRange": "N/A",
    "status": "optimal",
}

DEFAULT_DISEASE_RESULT = {
    "cropName": "Unknown Crop",
    "diseaseName": "Unknown Disease",
    "timeToTreat": "Immediate",
    "estimatedRecovery": "2-4 weeks",
    "yieldImpact": "Moderate",
    "severityLevel": "medium",
    "symptomDescription": "Symptoms detected but analysis incomplete",
    "environmentalFactors": [
        {"factor": "Temperature", "currentValue": "25°C", "optimalRange": "20-30°C", "status": "optimal"},
        {"factor": "Humidity", "currentValue": "60%", "optimalRange": "50-70%", "status": "optimal"},
        {"factor": "Soil Moisture", "currentValue": "40%", "optimalRange": "30-50%", "status": "optimal"},
        {"factor": "Light Exposure", "currentValue": "Partial Sun", "optimalRange": "Full to Partial Sun", "status": "optimal"},
    ],
    "realTimeMetrics": {
        "spreadRisk": {"level": "Medium", "value": 45, "trend": "stable"},
        "diseaseProgression": {"stage": "Early", "rate": 5},
        "environmentalConditions": {
            "temperature": 25,
            "humidity": 60,
            "soilMoisture": 40,
            "lastUpdated": DEFAULT_LAST_UPDATED,
        },
    },
    "organicTreatments": [
        "Apply neem oil spray weekly",
        "Use copper-based fungicide",
        "Improve air circulation",
    ],
    "ipmStrategies": [
        "Monitor plant health daily",
        "Use biological control agents",
        "Implement crop rotation",
    ],
    "preventionPlan": [
        "Ensure proper drainage",
        "Maintain optimal humidity levels",
        "Regular plant inspection",
    ],
    "confidenceLevel": 75,
    "diagnosisSummary": "Disease analysis completed with moderate confidence. Follow recommended treatment protocols.",
}

ENVIRONMENTAL_FACTOR_SCHEMA = Record({
    "factor": Text(),
    "currentValue": Text(),
    "optimalRange": Text(),
    "status": Choice(s.value for s in FactorStatus),
})

DISEASE_SCHEMA = Record({
    "cropName": Text(),
    "diseaseName": Text(),
    "timeToTreat": Text(),
    "estimatedRecovery": Text(),
    "yieldImpact": Text(),
    "severityLevel": Choice(s.value for s in SeverityLevel),
    "symptomDescription": Text(),
    "environmentalFactors": RecordList(ENVIRONMENTAL_FACTOR_SCHEMA, ENVIRONMENTAL_FACTOR_DEFAULT),
    "realTimeMetrics": Record({
        "spreadRisk": Record({
            "level": Text(),
            "value": RiskPercent(),
            "trend": Choice(t.value for t in Trend),
        }),
        "diseaseProgression": Record({
            "stage": Text(),
            "rate": Number(),
        }),
        "environmentalConditions": Record({
            "temperature": Number(),
            "humidity": Number(0, 100),
            "soilMoisture": Number(0, 100),
            "lastUpdated": Text(),
        }),
    }),
    "organicTreatments": StringList(exact=3),
    "ipmStrategies": StringList(exact=3),
    "preventionPlan": StringList(exact=3),
    "confidenceLevel": Number(0, 100),
    "diagnosisSummary": Text(),
})

# A completion cut off inside realTimeMetrics is closed with empty lists,
# which the list rules then replace with the defaults.
DISEASE_TRUNCATION_SUFFIXES = {
    '"realTimeMetrics"': (
        '}, "organicTreatments": [], "ipmStrategies": [], "preventionPlan": [], '
        '"confidenceLevel": 75, "diagnosisSummary": "Analysis completed"}'
    ),
}

# Markers of the invalid-image variant the prompt documents
INVALID_IMAGE_CROP_NAME = "Invalid Input"
INVALID_IMAGE_DISEASE_NAME = "Not Applicable"
