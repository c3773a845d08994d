from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Immutable model serialised with the camelCase keys the LLM schema uses."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        use_enum_values=True,
    )


# =============================================================================
# Enums
# =============================================================================

class SeverityLevel(str, Enum):
    MILD = "mild"
    MEDIUM = "medium"
    SEVERE = "severe"


class FactorStatus(str, Enum):
    OPTIMAL = "optimal"
    WARNING = "warning"
    CRITICAL = "critical"


class Trend(str, Enum):
    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


class BudgetTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class DemandTrend(str, Enum):
    GROWING = "Growing"
    STABLE = "Stable"
    DECLINING = "Declining"


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class QualityGrade(str, Enum):
    A = "A"
    B = "B"
    C = "C"


# =============================================================================
# Requests
# =============================================================================

class DiseaseAnalysisRequest(CamelModel):
    image_bytes: bytes = Field(..., description="Encoded image, passed through unmodified")
    mime_type: str = "image/jpeg"
    crop_type: Optional[str] = None
    severity_level: Optional[SeverityLevel] = None


class FarmingAnalysisRequest(CamelModel):
    technique: str = Field(..., min_length=1, description="Farming technique to analyse")
    farm_size: str = Field(..., description="Farm size in acres, as entered by the user")
    budget: BudgetTier = BudgetTier.MEDIUM

    @field_validator("farm_size", mode="before")
    @classmethod
    def _farm_size_as_text(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


# =============================================================================
# Disease diagnosis result
# =============================================================================

class EnvironmentalFactor(CamelModel):
    factor: str
    current_value: str
    optimal_range: str
    status: FactorStatus


class SpreadRisk(CamelModel):
    level: str
    value: int = Field(..., ge=0, le=100)
    trend: Trend


class DiseaseProgression(CamelModel):
    stage: str
    rate: float


class EnvironmentalConditions(CamelModel):
    temperature: float
    humidity: float
    soil_moisture: float
    last_updated: str


class RealTimeMetrics(CamelModel):
    spread_risk: SpreadRisk
    disease_progression: DiseaseProgression
    environmental_conditions: EnvironmentalConditions


class DiseaseAnalysisResult(CamelModel):
    crop_name: str
    disease_name: str
    time_to_treat: str
    estimated_recovery: str
    yield_impact: str
    severity_level: SeverityLevel
    symptom_description: str
    environmental_factors: List[EnvironmentalFactor]
    real_time_metrics: RealTimeMetrics
    organic_treatments: List[str] = Field(..., min_length=3, max_length=3)
    ipm_strategies: List[str] = Field(..., min_length=3, max_length=3)
    prevention_plan: List[str] = Field(..., min_length=3, max_length=3)
    confidence_level: float = Field(..., ge=0, le=100)
    diagnosis_summary: str

    @property
    def is_plant_image(self) -> bool:
        """False for the variant the model returns when the photo is not a plant."""
        return not (self.crop_name == "Invalid Input" and self.confidence_level == 0)


# =============================================================================
# Modern farming analysis result
# =============================================================================

class TechniqueOverview(CamelModel):
    name: str
    estimated_cost: float
    roi: float
    success_rate: float
    time_to_roi: str
    sustainability_score: float
    market_demand: float
    profitability_index: float
    risk_level: RiskLevel
    recommended_crops: List[str]


class CostBreakdown(CamelModel):
    infrastructure: float
    equipment: float
    seeds: float
    labor: float
    maintenance: float
    miscellaneous: float


class MarketAnalysis(CamelModel):
    demand_trend: DemandTrend
    price_stability: float
    competition_level: RiskLevel
    export_potential: float
    local_market_share: float


class TechniqueAnalysis(CamelModel):
    overview: TechniqueOverview
    cost_breakdown: CostBreakdown
    market_analysis: MarketAnalysis


class ImplementationPhase(CamelModel):
    name: str
    duration: str
    description: str
    key_milestones: List[str]
    estimated_cost: float
    priority: Priority
    dependencies: List[str]
    success_metrics: List[str]


class MilestoneDates(CamelModel):
    planning_complete: str
    infrastructure_ready: str
    first_harvest: str
    full_operation: str


class Timeline(CamelModel):
    total_duration: str
    critical_path: List[str]
    milestone_dates: MilestoneDates


class Implementation(CamelModel):
    phases: List[ImplementationPhase]
    timeline: Timeline


class ResourceEfficiency(CamelModel):
    water: float
    labor: float
    energy: float
    yield_: float = Field(..., alias="yield")
    sustainability: float
    fertilizer: float
    pesticide: float


class EnvironmentalImpact(CamelModel):
    carbon_footprint: float
    water_conservation: float
    soil_health: float
    biodiversity: float
    pollution_reduction: float


class Performance(CamelModel):
    yield_per_acre: float
    quality_grade: QualityGrade
    harvest_frequency: str
    storage_requirement: str
    transportation: str


class FarmingMetrics(CamelModel):
    resource_efficiency: ResourceEfficiency
    environmental_impact: EnvironmentalImpact
    performance: Performance


class YearOneProjection(CamelModel):
    revenue: float
    expenses: float
    profit: float
    break_even: str


class YearTwoProjection(CamelModel):
    revenue: float
    expenses: float
    profit: float
    growth: float


class YearThreeProjection(CamelModel):
    revenue: float
    expenses: float
    profit: float
    cumulative_roi: float = Field(..., alias="cumulativeROI")


class FinancialProjections(CamelModel):
    year1: YearOneProjection
    year2: YearTwoProjection
    year3: YearThreeProjection


class RiskAssessment(CamelModel):
    weather_risk: int = Field(..., ge=0, le=100)
    market_risk: int = Field(..., ge=0, le=100)
    technical_risk: int = Field(..., ge=0, le=100)
    financial_risk: int = Field(..., ge=0, le=100)
    mitigation_strategies: List[str]


class TechnologyRecommendations(CamelModel):
    essential: List[str]
    optional: List[str]
    future: List[str]


class PriceTrends(CamelModel):
    current: float
    projected_6_months: float = Field(..., alias="projected6Months")
    projected_1_year: float = Field(..., alias="projected1Year")
    volatility: float


class DemandForecast(CamelModel):
    short_term: str
    medium_term: str
    long_term: str


class MarketInsights(CamelModel):
    price_trends: PriceTrends
    demand_forecast: DemandForecast


class ModernFarmingResult(CamelModel):
    technique_analysis: TechniqueAnalysis
    implementation: Implementation
    metrics: FarmingMetrics
    financial_projections: FinancialProjections
    risk_assessment: RiskAssessment
    technology_recommendations: TechnologyRecommendations
    market_insights: MarketInsights


class CachedResult(BaseModel):
    """Last request/result pair stored for a domain."""
    domain: str
    request: dict
    result: dict
    saved_at: float
