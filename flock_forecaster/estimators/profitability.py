"""
Profitability estimator: unit economics at harvest.

    revenue     = final_weight * final_count * price_per_unit
    net_profit  = revenue - total_expense
    roi_percent = net_profit / total_expense * 100        (0 if no expense)

``price_per_unit`` comes from ``ForecastConfig.sale_prices``. LAYER prices are
quoted per head, but the revenue formula still multiplies by final weight;
this matches how the farm's existing reports compute layer revenue.

``cost_per_kg_observed`` (expense so far / kg weighed so far) is computed and
exposed on the model but does not feed the projection. Whether it should is
an open business question.

Confidence is the fixed ``ForecastConfig.profitability_confidence`` (0.7):
it stands for sale-price uncertainty and is not derived from the data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from flock_forecaster.config import ForecastConfig
from flock_forecaster.taxonomy.lot_taxonomy import LotCategory
from flock_forecaster.utils.numeric import safe_divide

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfitabilityModel:
    category:             LotCategory
    price_per_unit:       float
    cost_per_kg_observed: float
    confidence:           float


@dataclass(frozen=True)
class ProfitabilityPrediction:
    revenue:     float
    net_profit:  float
    roi_percent: float
    confidence:  float


class ProfitabilityEstimator:
    """Projects revenue and ROI from the configured sale price table."""

    name = "profitability"

    def __init__(self, config: ForecastConfig | None = None) -> None:
        self._config = config or ForecastConfig()

    def fit(
        self,
        category: LotCategory,
        cumulative_expense: float,
        total_weight_observed: float,
    ) -> ProfitabilityModel:
        price = self._config.sale_prices[category]
        cost_per_kg = safe_divide(cumulative_expense, total_weight_observed)
        logger.debug(
            "Profitability fitted: category=%s price=%.2f cost_per_kg=%.2f",
            category, price, cost_per_kg,
        )
        return ProfitabilityModel(
            category=category,
            price_per_unit=price,
            cost_per_kg_observed=cost_per_kg,
            confidence=self._config.profitability_confidence,
        )

    def predict(
        self,
        model: ProfitabilityModel,
        projected_final_weight: float,
        projected_final_count: float,
        projected_total_expense: float,
    ) -> ProfitabilityPrediction:
        revenue = projected_final_weight * projected_final_count * model.price_per_unit
        net_profit = revenue - projected_total_expense
        roi = safe_divide(net_profit, projected_total_expense) * 100.0
        return ProfitabilityPrediction(
            revenue=revenue,
            net_profit=net_profit,
            roi_percent=roi,
            confidence=model.confidence,
        )
