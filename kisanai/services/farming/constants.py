"""
Keyword lists, system message, default record and field rules for the
modern farming technique analysis.
"""
from kisanai.models import DemandTrend, Priority, QualityGrade, RiskLevel
from kisanai.services.normalizer import (
    Choice,
    Number,
    Record,
    RecordList,
    RiskPercent,
    StringList,
    Text,
)

FARMING_SYSTEM_PROMPT = (
    "You are a world-class agricultural technology consultant with 25+ years of experience. "
    "Generate comprehensive farming analysis reports in JSON format only. "
    "Always return valid, parseable JSON."
)

# ============================================================================
# Gatekeeper keywords (case-insensitive substring match)
# ============================================================================

FARMING_KEYWORDS = [
    'organic', 'farming', 'agriculture', 'crop', 'soil', 'irrigation', 'harvest',
    'rainwater', 'fish', 'aquaculture', 'hydroponic', 'vertical', 'greenhouse',
    'sustainable', 'permaculture', 'biodynamic', 'precision', 'smart', 'modern',
    'traditional', 'conventional', 'natural', 'ecological', 'regenerative',
    'livestock', 'dairy', 'poultry', 'aquaponics', 'aeroponics', 'container',
    'rooftop', 'urban', 'rural', 'farm', 'field', 'plantation', 'orchard',
    'vineyard', 'garden', 'cultivation', 'planting', 'seeding', 'fertilizer',
    'compost', 'pesticide', 'herbicide', 'weed', 'pest', 'disease', 'yield',
    'production', 'harvesting', 'storage', 'processing', 'marketing', 'distribution',
]

# 'disease' is on both lists, so any technique mentioning it is rejected
NON_FARMING_KEYWORDS = [
    'porn', 'sex', 'adult', 'gambling', 'casino', 'drug', 'illegal', 'hack',
    'crack', 'virus', 'malware', 'spam', 'scam', 'fraud', 'theft', 'robbery',
    'murder', 'kill', 'violence', 'weapon', 'bomb', 'terrorist', 'extremist',
    'political', 'election', 'vote', 'government', 'policy', 'law', 'legal',
    'medical', 'health', 'disease', 'cancer', 'treatment', 'therapy', 'surgery',
    'finance', 'investment', 'stock', 'trading', 'crypto', 'bitcoin', 'money',
    'entertainment', 'movie', 'music', 'game', 'sport', 'football', 'basketball',
    'technology', 'programming', 'coding', 'software', 'app', 'website', 'internet',
    'social', 'facebook', 'twitter', 'instagram', 'tiktok', 'youtube', 'video',
]

MIN_FARM_SIZE = 0
MAX_FARM_SIZE = 10000
GIBBERISH_MIN_LENGTH = 10
MIN_IMPLEMENTATION_PHASES = 3

# ============================================================================
# Default record
# ============================================================================

PHASE_DEFAULT = {
    "name": "Implementation Phase",
    "duration": "1-2 months",
    "description": "Phase details unavailable",
    "keyMilestones": [],
    "estimatedCost": 0,
    "priority": "Medium",
    "dependencies": [],
    "successMetrics": [],
}

DEFAULT_FARMING_RESULT = {
    "techniqueAnalysis": {
        "overview": {
            "name": "Modern Farming Technique",
            "estimatedCost": 50000,
            "roi": 25,
            "successRate": 70,
            "timeToRoi": "18-24 months",
            "sustainabilityScore": 70,
            "marketDemand": 65,
            "profitabilityIndex": 60,
            "riskLevel": "Medium",
            "recommendedCrops": ["Tomatoes", "Leafy Greens", "Peppers"],
        },
        "costBreakdown": {
            "infrastructure": 20000,
            "equipment": 12000,
            "seeds": 3000,
            "labor": 8000,
            "maintenance": 4000,
            "miscellaneous": 3000,
        },
        "marketAnalysis": {
            "demandTrend": "Stable",
            "priceStability": 60,
            "competitionLevel": "Medium",
            "exportPotential": 40,
            "localMarketShare": 15,
        },
    },
    "implementation": {
        "phases": [
            {
                "name": "Planning and Site Assessment",
                "duration": "1 month",
                "description": "Assess soil, water access and local market before committing capital",
                "keyMilestones": ["Soil test completed", "Water source secured", "Budget approved"],
                "estimatedCost": 5000,
                "priority": "High",
                "dependencies": [],
                "successMetrics": ["Site plan finalized", "Suppliers shortlisted"],
            },
            {
                "name": "Infrastructure Setup",
                "duration": "2-3 months",
                "description": "Install irrigation, structures and core equipment",
                "keyMilestones": ["Irrigation installed", "Structures built", "Equipment commissioned"],
                "estimatedCost": 32000,
                "priority": "High",
                "dependencies": ["Planning and Site Assessment"],
                "successMetrics": ["Systems tested", "Within budget"],
            },
            {
                "name": "First Planting and Operation",
                "duration": "3-6 months",
                "description": "Plant the first crop cycle and stabilise daily operations",
                "keyMilestones": ["First planting", "First harvest", "First sale"],
                "estimatedCost": 13000,
                "priority": "Medium",
                "dependencies": ["Infrastructure Setup"],
                "successMetrics": ["Target yield reached", "Positive cash flow"],
            },
        ],
        "timeline": {
            "totalDuration": "6-10 months",
            "criticalPath": ["Site assessment", "Infrastructure setup", "First harvest"],
            "milestoneDates": {
                "planningComplete": "Month 1",
                "infrastructureReady": "Month 4",
                "firstHarvest": "Month 7",
                "fullOperation": "Month 10",
            },
        },
    },
    "metrics": {
        "resourceEfficiency": {
            "water": 70,
            "labor": 60,
            "energy": 55,
            "yield": 70,
            "sustainability": 70,
            "fertilizer": 60,
            "pesticide": 60,
        },
        "environmentalImpact": {
            "carbonFootprint": 40,
            "waterConservation": 65,
            "soilHealth": 70,
            "biodiversity": 60,
            "pollutionReduction": 60,
        },
        "performance": {
            "yieldPerAcre": 8,
            "qualityGrade": "B",
            "harvestFrequency": "2-3 cycles per year",
            "storageRequirement": "Cool, dry storage",
            "transportation": "Local market delivery",
        },
    },
    "financialProjections": {
        "year1": {"revenue": 40000, "expenses": 55000, "profit": -15000, "breakEven": "Month 20"},
        "year2": {"revenue": 70000, "expenses": 45000, "profit": 25000, "growth": 75},
        "year3": {"revenue": 85000, "expenses": 48000, "profit": 37000, "cumulativeROI": 94},
    },
    "riskAssessment": {
        "weatherRisk": 40,
        "marketRisk": 35,
        "technicalRisk": 30,
        "financialRisk": 35,
        "mitigationStrategies": [
            "Diversify crop selection",
            "Secure crop insurance",
            "Build local buyer relationships",
        ],
    },
    "technologyRecommendations": {
        "essential": ["Drip irrigation system", "Soil moisture sensors"],
        "optional": ["Weather station", "Farm management software"],
        "future": ["Automated climate control", "Drone crop monitoring"],
    },
    "marketInsights": {
        "priceTrends": {"current": 2.5, "projected6Months": 2.6, "projected1Year": 2.8, "volatility": 20},
        "demandForecast": {
            "shortTerm": "Stable demand in local markets",
            "mediumTerm": "Moderate growth as buyers favour local produce",
            "longTerm": "Sustained growth for sustainably grown produce",
        },
    },
}

# ============================================================================
# Field rules
# ============================================================================

_PERCENT = Number(0, 100)
_NON_NEGATIVE = Number(lo=0)
_RISK_LEVELS = [r.value for r in RiskLevel]

PHASE_SCHEMA = Record({
    "name": Text(),
    "duration": Text(),
    "description": Text(),
    "keyMilestones": StringList(),
    "estimatedCost": _NON_NEGATIVE,
    "priority": Choice(p.value for p in Priority),
    "dependencies": StringList(),
    "successMetrics": StringList(),
})

FARMING_SCHEMA = Record({
    "techniqueAnalysis": Record({
        "overview": Record({
            "name": Text(),
            "estimatedCost": _NON_NEGATIVE,
            "roi": Number(),
            "successRate": _PERCENT,
            "timeToRoi": Text(),
            "sustainabilityScore": _PERCENT,
            "marketDemand": _PERCENT,
            "profitabilityIndex": _NON_NEGATIVE,
            "riskLevel": Choice(_RISK_LEVELS),
            "recommendedCrops": StringList(),
        }),
        "costBreakdown": Record({
            "infrastructure": _NON_NEGATIVE,
            "equipment": _NON_NEGATIVE,
            "seeds": _NON_NEGATIVE,
            "labor": _NON_NEGATIVE,
            "maintenance": _NON_NEGATIVE,
            "miscellaneous": _NON_NEGATIVE,
        }),
        "marketAnalysis": Record({
            "demandTrend": Choice(d.value for d in DemandTrend),
            "priceStability": _PERCENT,
            "competitionLevel": Choice(_RISK_LEVELS),
            "exportPotential": _PERCENT,
            "localMarketShare": _PERCENT,
        }),
    }),
    "implementation": Record({
        "phases": RecordList(PHASE_SCHEMA, PHASE_DEFAULT),
        "timeline": Record({
            "totalDuration": Text(),
            "criticalPath": StringList(),
            "milestoneDates": Record({
                "planningComplete": Text(),
                "infrastructureReady": Text(),
                "firstHarvest": Text(),
                "fullOperation": Text(),
            }),
        }),
    }),
    "metrics": Record({
        "resourceEfficiency": Record({
            "water": _PERCENT,
            "labor": _PERCENT,
            "energy": _PERCENT,
            "yield": _PERCENT,
            "sustainability": _PERCENT,
            "fertilizer": _PERCENT,
            "pesticide": _PERCENT,
        }),
        "environmentalImpact": Record({
            "carbonFootprint": Number(),
            "waterConservation": _PERCENT,
            "soilHealth": _PERCENT,
            "biodiversity": _PERCENT,
            "pollutionReduction": _PERCENT,
        }),
        "performance": Record({
            "yieldPerAcre": _NON_NEGATIVE,
            "qualityGrade": Choice(q.value for q in QualityGrade),
            "harvestFrequency": Text(),
            "storageRequirement": Text(),
            "transportation": Text(),
        }),
    }),
    "financialProjections": Record({
        "year1": Record({
            "revenue": _NON_NEGATIVE,
            "expenses": _NON_NEGATIVE,
            "profit": Number(),
            "breakEven": Text(),
        }),
        "year2": Record({
            "revenue": _NON_NEGATIVE,
            "expenses": _NON_NEGATIVE,
            "profit": Number(),
            "growth": Number(),
        }),
        "year3": Record({
            "revenue": _NON_NEGATIVE,
            "expenses": _NON_NEGATIVE,
            "profit": Number(),
            "cumulativeROI": Number(),
        }),
    }),
    "riskAssessment": Record({
        "weatherRisk": RiskPercent(),
        "marketRisk": RiskPercent(),
        "technicalRisk": RiskPercent(),
        "financialRisk": RiskPercent(),
        "mitigationStrategies": StringList(),
    }),
    "technologyRecommendations": Record({
        "essential": StringList(),
        "optional": StringList(),
        "future": StringList(),
    }),
    "marketInsights": Record({
        "priceTrends": Record({
            "current": _NON_NEGATIVE,
            "projected6Months": _NON_NEGATIVE,
            "projected1Year": _NON_NEGATIVE,
            "volatility": _PERCENT,
        }),
        "demandForecast": Record({
            "shortTerm": Text(),
            "mediumTerm": Text(),
            "longTerm": Text(),
        }),
    }),
})
