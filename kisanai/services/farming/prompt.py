import re

_WHITESPACE_RE = re.compile(r"\s+")

FARMING_JSON_STRUCTURE = """
{
  "techniqueAnalysis": {
    "overview": {
      "name": "string",
      "estimatedCost": number,
      "roi": number,
      "successRate": number,
      "timeToRoi": "string",
      "sustainabilityScore": number,
      "marketDemand": number,
      "profitabilityIndex": number,
      "riskLevel": "Low/Medium/High",
      "recommendedCrops": ["string", "string", "string"]
    },
    "costBreakdown": {
      "infrastructure": number,
      "equipment": number,
      "seeds": number,
      "labor": number,
      "maintenance": number,
      "miscellaneous": number
    },
    "marketAnalysis": {
      "demandTrend": "Growing/Stable/Declining",
      "priceStability": number,
      "competitionLevel": "Low/Medium/High",
      "exportPotential": number,
      "localMarketShare": number
    }
  },
  "implementation": {
    "phases": [
      {
        "name": "string",
        "duration": "string",
        "description": "string",
        "keyMilestones": ["string", "string", "string"],
        "estimatedCost": number,
        "priority": "High/Medium/Low",
        "dependencies": ["string"],
        "successMetrics": ["string", "string"]
      }
    ],
    "timeline": {
      "totalDuration": "string",
      "criticalPath": ["string", "string"],
      "milestoneDates": {
        "planningComplete": "string",
        "infrastructureReady": "string",
        "firstHarvest": "string",
        "fullOperation": "string"
      }
    }
  },
  "metrics": {
    "resourceEfficiency": {
      "water": number,
      "labor": number,
      "energy": number,
      "yield": number,
      "sustainability": number,
      "fertilizer": number,
      "pesticide": number
    },
    "environmentalImpact": {
      "carbonFootprint": number,
      "waterConservation": number,
      "soilHealth": number,
      "biodiversity": number,
      "pollutionReduction": number
    },
    "performance": {
      "yieldPerAcre": number,
      "qualityGrade": "A/B/C",
      "harvestFrequency": "string",
      "storageRequirement": "string",
      "transportation": "string"
    }
  },
  "financialProjections": {
    "year1": {"revenue": number, "expenses": number, "profit": number, "breakEven": "string"},
    "year2": {"revenue": number, "expenses": number, "profit": number, "growth": number},
    "year3": {"revenue": number, "expenses": number, "profit": number, "cumulativeROI": number}
  },
  "riskAssessment": {
    "weatherRisk": number,
    "marketRisk": number,
    "technicalRisk": number,
    "financialRisk": number,
    "mitigationStrategies": ["string", "string", "string"]
  },
  "technologyRecommendations": {
    "essential": ["string", "string"],
    "optional": ["string", "string"],
    "future": ["string", "string"]
  },
  "marketInsights": {
    "priceTrends": {
      "current": number,
      "projected6Months": number,
      "projected1Year": number,
      "volatility": number
    },
    "demandForecast": {
      "shortTerm": "string",
      "mediumTerm": "string",
      "longTerm": "string"
    }
  }
}
"""

PROFESSIONAL_GUIDELINES = [
    "Provide specific, realistic numbers for all financial projections",
    "Include detailed cost breakdowns with actual equipment costs",
    "Add market analysis with current price trends and demand forecasts",
    "Include risk assessment with specific mitigation strategies",
    "Provide technology recommendations with specific equipment names",
    "Include seasonal variations and regional considerations",
    "Add performance metrics with industry benchmarks",
    "Include financial projections for 3 years with growth rates",
    "Provide at least 3 implementation phases with realistic costs",
    "Express riskAssessment values as percentages between 0 and 100",
]


def build_farming_prompt(technique: str, farm_size: str, budget: str) -> str:
    """Render the farming analysis instruction for one technique/size/budget."""
    budget = getattr(budget, "value", budget)
    guidelines = "\n".join(f"{i}. {line}" for i, line in enumerate(PROFESSIONAL_GUIDELINES, 1))

    prompt = f"""You are a world-class agricultural technology consultant with 25+ years of experience. Generate a comprehensive, data-rich farming analysis report in JSON format.

CRITICAL REQUIREMENTS:
- Return ONLY valid JSON - no markdown, no explanations, no additional text
- Use double quotes for all keys and strings, no trailing commas, no ``` fences
- Provide rich, detailed data with specific numbers, percentages, and metrics
- All data must be realistic and based on current agricultural practices

FARMING ANALYSIS REQUEST:
Technique: {technique}
Farm Size: {farm_size} acres
Budget Range: {budget}

JSON STRUCTURE:
{FARMING_JSON_STRUCTURE}

PROFESSIONAL GUIDELINES:
{guidelines}

RESPONSE FORMAT: Return ONLY the JSON object, no other text."""
    return _WHITESPACE_RE.sub(" ", prompt).strip()
