"""
Mortality trend estimator: average daily death rate plus risk flags.

The rate is the lot's cumulative deaths spread evenly over its age::

    daily_rate = (initial_count - current_count) / age_days    (0 at age 0)

and future deaths are projected linearly from it. Individual mortality events
only contribute their sum (``recorded_deaths``), which is reported but does
not drive the rate; the headcount difference is authoritative because not
every loss is logged as an event.

Risk factors (each independent, strict ``>``):

    cumulative rate  > high_cumulative_rate_pct      "high historical mortality"
    daily rate       > rising_daily_rate             "rising mortality trend"
    GROWER  and age  > grower_critical_age_days      "critical age for grower stage"
    BROILER and age  > broiler_advanced_age_days     "advanced age for broiler stage"

Confidence is categorical: 0.8 with no risk factor, 0.6 with one or two,
0.4 with three or more.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from flock_forecaster.config import MortalityConfig
from flock_forecaster.models.lot import MortalityEvent
from flock_forecaster.taxonomy.lot_taxonomy import LotCategory
from flock_forecaster.utils.numeric import safe_divide

logger = logging.getLogger(__name__)

RISK_HIGH_HISTORICAL = "high historical mortality"
RISK_RISING_TREND = "rising mortality trend"
RISK_GROWER_CRITICAL_AGE = "critical age for grower stage"
RISK_BROILER_ADVANCED_AGE = "advanced age for broiler stage"

_CONFIDENCE_NO_RISK = 0.8
_CONFIDENCE_SOME_RISK = 0.6
_CONFIDENCE_HIGH_RISK = 0.4


@dataclass(frozen=True)
class MortalityTrendModel:
    """Fitted mortality trend.

    Attributes:
        daily_rate:           Average deaths per day of age.
        cumulative_rate_pct:  Deaths so far as a percentage of initial count.
        recorded_deaths:      Sum of logged mortality event counts.
        risk_factors:         Human-readable flags, in rule order.
    """

    daily_rate:          float = 0.0
    cumulative_rate_pct: float = 0.0
    recorded_deaths:     int = 0
    risk_factors:        tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MortalityPrediction:
    mortality:  float
    confidence: float


class MortalityTrendEstimator:
    """Projects additional deaths from the lot's average daily loss."""

    name = "mortality_trend"

    def __init__(self, config: MortalityConfig | None = None) -> None:
        self._config = config or MortalityConfig()

    def fit(
        self,
        initial_count: int,
        current_count: int,
        age_days: int,
        mortality_events: Iterable[MortalityEvent],
        category: LotCategory,
        lot_id: str | None = None,
    ) -> MortalityTrendModel:
        """Compute the daily rate and detect risk factors.

        Args:
            initial_count:    Birds placed.
            current_count:    Birds alive now.
            age_days:         Current lot age.
            mortality_events: Logged deaths; events for other lots are skipped
                              when ``lot_id`` is given.
            category:         Lot category for the age-based rules.
            lot_id:           Optional lot filter for ``mortality_events``.
        """
        cfg = self._config
        total_deaths = initial_count - current_count
        daily_rate = safe_divide(total_deaths, age_days)
        cumulative_rate_pct = safe_divide(total_deaths * 100.0, initial_count)

        recorded = 0
        for event in mortality_events:
            if lot_id is not None and event.lot_id != lot_id:
                logger.warning(
                    "Ignoring mortality event for lot %s while fitting lot %s.",
                    event.lot_id, lot_id,
                )
                continue
            recorded += event.count

        risk_factors: list[str] = []
        if cumulative_rate_pct > cfg.high_cumulative_rate_pct:
            risk_factors.append(RISK_HIGH_HISTORICAL)
        if daily_rate > cfg.rising_daily_rate:
            risk_factors.append(RISK_RISING_TREND)
        if category == LotCategory.GROWER and age_days > cfg.grower_critical_age_days:
            risk_factors.append(RISK_GROWER_CRITICAL_AGE)
        if category == LotCategory.BROILER and age_days > cfg.broiler_advanced_age_days:
            risk_factors.append(RISK_BROILER_ADVANCED_AGE)

        logger.debug(
            "Mortality trend fitted: daily_rate=%.4f cumulative=%.2f%% risks=%s",
            daily_rate, cumulative_rate_pct, risk_factors,
        )
        return MortalityTrendModel(
            daily_rate=daily_rate,
            cumulative_rate_pct=cumulative_rate_pct,
            recorded_deaths=recorded,
            risk_factors=tuple(risk_factors),
        )

    def predict(self, model: MortalityTrendModel, future_days: int) -> MortalityPrediction:
        """Project deaths over the next ``future_days`` days."""
        mortality = max(0.0, model.daily_rate * future_days)
        n_risks = len(model.risk_factors)
        if n_risks == 0:
            confidence = _CONFIDENCE_NO_RISK
        elif n_risks <= 2:
            confidence = _CONFIDENCE_SOME_RISK
        else:
            confidence = _CONFIDENCE_HIGH_RISK
        return MortalityPrediction(mortality=mortality, confidence=confidence)
