"""
Forecast output models.

``ForecastResult`` is built fresh on every ``ForecastAssembler.forecast()``
call and consumed by display components and the report exporter. Nothing here
is cached or persisted.

All models are frozen. Confidence fields are validated to ``[0, 1]`` and
the efficiency score to ``[0, 100]``; the estimators clamp before
construction, so a validation error here means an engine bug, not bad input.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flock_forecaster.taxonomy.lot_taxonomy import LotCategory, RecommendationSeverity


class FinalWeightForecast(BaseModel):
    """Projected average weight at the target harvest age.

    Attributes:
        value: Predicted average weight in kg (never negative).
        confidence: R² of the weight trend, clamped to [0, 1].
        days_to_reach: Days from today until the target age (0 if past).
    """

    model_config = ConfigDict(frozen=True)

    value: float = Field(ge=0)
    confidence: float = Field(ge=0, le=1)
    days_to_reach: int = Field(ge=0)


class MortalityForecast(BaseModel):
    """Expected additional deaths between today and harvest."""

    model_config = ConfigDict(frozen=True)

    value: float = Field(ge=0)
    confidence: float = Field(ge=0, le=1)
    risk_factors: list[str] = []


class ProfitabilityForecast(BaseModel):
    """Projected revenue and return at harvest.

    ``confidence`` is a fixed market-price uncertainty constant rather than a
    data-derived figure.
    """

    model_config = ConfigDict(frozen=True)

    estimated_revenue: float
    net_profit: float
    roi_percent: float
    confidence: float = Field(ge=0, le=1)


class Recommendation(BaseModel):
    """A qualitative action derived from the forecast."""

    model_config = ConfigDict(frozen=True)

    severity: RecommendationSeverity
    message: str
    action: str

    @field_validator("message", "action")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Recommendation text must not be empty.")
        return v.strip()


class ForecastResult(BaseModel):
    """Complete performance forecast for one lot.

    Attributes:
        lot_id: Lot the forecast was produced for.
        category: Lot category at forecast time.
        generated_at: UTC timestamp of the forecast.
        current_age_days: Lot age on the forecast date.
        target_age_days: Category target harvest age used.
        final_weight: Weight projection at ``target_age_days``.
        expected_mortality: Additional deaths until harvest.
        profitability: Revenue / profit / ROI projection.
        recommendations: Ordered recommendations (never empty).
        optimal_harvest_date: ``birth_date + target_age_days``.
        projected_efficiency: Blended 0–100 score.
        peer_comparison_available: Whether peer averages informed the rules.
    """

    model_config = ConfigDict(frozen=True)

    lot_id: str
    category: LotCategory
    generated_at: datetime
    current_age_days: int
    target_age_days: int
    final_weight: FinalWeightForecast
    expected_mortality: MortalityForecast
    profitability: ProfitabilityForecast
    recommendations: list[Recommendation]
    optimal_harvest_date: date
    projected_efficiency: float = Field(ge=0, le=100)
    peer_comparison_available: bool = False
