"""
Forecast assembler: runs the three estimators for a lot and builds the
complete ``ForecastResult``.

Pipeline
--------
 1. Validate inputs.
 2. current_age    = calendar days from birth_date to the forecast date.
 3. target_age     = ForecastConfig.target_age_days[category]
                     (GROWER 42, BROILER 45, LAYER 140).
 4. days_remaining = max(0, target_age - current_age).
 5. Weight trend predicted at target_age; mortality over days_remaining.
 6. final_count    = current_count - expected mortality, where expected
                     mortality is capped at current_count.
 7. total_expense  = cumulative_expense * expense_growth_multiplier (1.5).
 8. Profitability from final weight, final count and total expense.
 9. Recommendations (rules + optional peer comparison).
10. optimal_harvest_date = birth_date + target_age days.
11. projected_efficiency (see ``recommendations.efficiency``).

Every call refits from scratch and shares no state with other calls. The
only I/O is the peer lookup, which is wrapped so that a failure or timeout
just removes the peer-based recommendations.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Iterable, Optional

from flock_forecaster.config import AppConfig
from flock_forecaster.estimators.mortality_trend import MortalityTrendEstimator
from flock_forecaster.estimators.profitability import ProfitabilityEstimator
from flock_forecaster.estimators.weight_trend import WeightTrendEstimator
from flock_forecaster.forecasting.validation import validate_forecast_inputs
from flock_forecaster.models.forecast import (
    FinalWeightForecast,
    ForecastResult,
    MortalityForecast,
    ProfitabilityForecast,
)
from flock_forecaster.models.lot import LotSnapshot, MortalityEvent, WeightSample
from flock_forecaster.peers.provider import PeerAverageProvider, fetch_peer_averages_safely
from flock_forecaster.recommendations.efficiency import compute_projected_efficiency
from flock_forecaster.recommendations.rules import RecommendationContext, build_recommendations
from flock_forecaster.utils.numeric import clamp_unit, safe_divide
from flock_forecaster.utils.time_utils import add_days, days_between, to_date, today, utcnow

logger = logging.getLogger(__name__)


class ForecastAssembler:
    """Builds lot performance forecasts.

    Args:
        config:        Application config; defaults to ``AppConfig()``.
        peer_provider: Optional source of peer averages. ``None`` disables
                       peer comparison.
        clock:         Returns "today"; injectable for deterministic tests.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        peer_provider: Optional[PeerAverageProvider] = None,
        clock: Callable[[], date] = today,
    ) -> None:
        self.config = config or AppConfig()
        self.peer_provider = peer_provider
        self._clock = clock
        self._weight = WeightTrendEstimator()
        self._mortality = MortalityTrendEstimator(self.config.mortality)
        self._profitability = ProfitabilityEstimator(self.config.forecast)

    def forecast(
        self,
        lot: LotSnapshot,
        weight_samples: Iterable[WeightSample] = (),
        mortality_events: Iterable[MortalityEvent] = (),
        cumulative_expense: Optional[float] = None,
        as_of: Optional[date] = None,
    ) -> ForecastResult:
        """Produce a complete forecast for ``lot``.

        Args:
            lot:                Lot metadata.
            weight_samples:     Weighing history, any order. May be empty.
            mortality_events:   Logged deaths. May be empty.
            cumulative_expense: Expense total; defaults to
                                ``lot.cumulative_expense``.
            as_of:              Forecast date; defaults to today.

        Returns:
            A new ``ForecastResult``.

        Raises:
            InvalidLotDataError: On malformed or inconsistent input.
        """
        samples = list(weight_samples)
        events = list(mortality_events)
        forecast_date = to_date(as_of or self._clock())

        validate_forecast_inputs(lot, samples, events, cumulative_expense, forecast_date)
        expense = float(
            lot.cumulative_expense if cumulative_expense is None else cumulative_expense
        )

        fc_cfg = self.config.forecast
        current_age = days_between(lot.birth_date, forecast_date)
        target_age = fc_cfg.target_age_days[lot.category]
        days_remaining = max(0, target_age - current_age)

        # ── Weight ────────────────────────────────────────────────────────────
        weight_model = self._weight.fit(samples)
        weight_pred = self._weight.predict(weight_model, target_age)
        if not weight_model.is_trained:
            logger.warning(
                "Lot %s: %d usable weight sample(s); final weight forecast degraded to 0.",
                lot.lot_id, len(samples),
            )

        # ── Mortality ─────────────────────────────────────────────────────────
        mortality_model = self._mortality.fit(
            initial_count=lot.initial_count,
            current_count=lot.current_count,
            age_days=current_age,
            mortality_events=events,
            category=lot.category,
            lot_id=lot.lot_id,
        )
        mortality_pred = self._mortality.predict(mortality_model, days_remaining)
        expected_mortality = min(mortality_pred.mortality, float(lot.current_count))
        if expected_mortality < mortality_pred.mortality:
            logger.info(
                "Lot %s: projected mortality %.1f capped at current count %d.",
                lot.lot_id, mortality_pred.mortality, lot.current_count,
            )

        # ── Profitability ─────────────────────────────────────────────────────
        final_count = lot.current_count - expected_mortality
        total_expense = expense * fc_cfg.expense_growth_multiplier
        observed_weight = sum(s.observed_weight_kg for s in samples)
        profit_model = self._profitability.fit(lot.category, expense, observed_weight)
        profit_pred = self._profitability.predict(
            profit_model,
            projected_final_weight=weight_pred.weight_kg,
            projected_final_count=final_count,
            projected_total_expense=total_expense,
        )

        # ── Recommendations ───────────────────────────────────────────────────
        peer_averages = fetch_peer_averages_safely(self.peer_provider, lot.category)
        latest = max(samples, key=lambda s: s.age_days) if samples else None
        context = RecommendationContext(
            growth_rate=weight_model.growth_rate,
            weight_model_trained=weight_model.is_trained,
            risk_factors=list(mortality_model.risk_factors),
            roi_percent=profit_pred.roi_percent,
            days_remaining=days_remaining,
            current_weight_kg=latest.average_weight_kg if latest else 0.0,
            target_weight_kg=weight_pred.weight_kg,
            mortality_rate_pct=mortality_model.cumulative_rate_pct,
            peer_averages=peer_averages,
        )
        recommendations = build_recommendations(context, self.config.recommendations)

        efficiency = compute_projected_efficiency(
            final_weight_kg=weight_pred.weight_kg,
            target_age_days=target_age,
            mortality_rate_pct=safe_divide(expected_mortality * 100.0, lot.initial_count),
            roi_pct=profit_pred.roi_percent,
            config=self.config.efficiency,
        )

        result = ForecastResult(
            lot_id=lot.lot_id,
            category=lot.category,
            generated_at=utcnow(),
            current_age_days=current_age,
            target_age_days=target_age,
            final_weight=FinalWeightForecast(
                value=weight_pred.weight_kg,
                confidence=clamp_unit(weight_pred.confidence),
                days_to_reach=days_remaining,
            ),
            expected_mortality=MortalityForecast(
                value=expected_mortality,
                confidence=clamp_unit(mortality_pred.confidence),
                risk_factors=list(mortality_model.risk_factors),
            ),
            profitability=ProfitabilityForecast(
                estimated_revenue=profit_pred.revenue,
                net_profit=profit_pred.net_profit,
                roi_percent=profit_pred.roi_percent,
                confidence=clamp_unit(profit_pred.confidence),
            ),
            recommendations=recommendations,
            optimal_harvest_date=add_days(lot.birth_date, target_age),
            projected_efficiency=efficiency,
            peer_comparison_available=peer_averages is not None,
        )
        logger.info(
            "Forecast lot=%s category=%s age=%d target=%d weight=%.3fkg "
            "mortality=%.1f roi=%.1f%% efficiency=%.1f recs=%d",
            lot.lot_id, lot.category, current_age, target_age,
            weight_pred.weight_kg, expected_mortality, profit_pred.roi_percent,
            efficiency, len(recommendations),
        )
        return result


def generate_forecast(
    lot: LotSnapshot,
    weight_samples: Iterable[WeightSample] = (),
    mortality_events: Iterable[MortalityEvent] = (),
    cumulative_expense: Optional[float] = None,
    *,
    config: AppConfig | None = None,
    peer_provider: Optional[PeerAverageProvider] = None,
    as_of: Optional[date] = None,
) -> ForecastResult:
    """One-shot convenience wrapper around ``ForecastAssembler.forecast()``."""
    assembler = ForecastAssembler(config=config, peer_provider=peer_provider)
    return assembler.forecast(
        lot,
        weight_samples,
        mortality_events,
        cumulative_expense=cumulative_expense,
        as_of=as_of,
    )
