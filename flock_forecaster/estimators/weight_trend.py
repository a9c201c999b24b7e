"""
Weight trend estimator: ordinary least squares of average weight on age.

Model
-----
    weight = slope * age_days + intercept

fitted in closed form from the sums of x, y, xy and xx over the samples,
which are sorted by age first so the result never depends on the order the
records arrived in.

Confidence is the fit's R², clamped to [0, 1]. A flat series that the line
reproduces exactly (SS_tot = 0, SS_res = 0) counts as a perfect fit.

Degenerate input
----------------
Fewer than two samples, or samples that all share one age, cannot define a
line. ``fit()`` then returns an untrained model and every prediction is
``weight = 0, confidence = 0``. Callers always call ``predict()``; nothing
here raises for lack of data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from flock_forecaster.models.lot import WeightSample
from flock_forecaster.utils.numeric import clamp_unit, safe_divide

logger = logging.getLogger(__name__)

MIN_SAMPLES = 2


@dataclass(frozen=True)
class WeightTrendModel:
    """Fitted weight trend.

    Attributes:
        slope:       Weight gained per day of age (kg/day).
        intercept:   Extrapolated weight at age 0 (kg).
        r_squared:   Raw coefficient of determination (may be negative).
        n_samples:   Samples used in the fit.
        is_trained:  False when the input could not define a line.
    """

    slope:      float = 0.0
    intercept:  float = 0.0
    r_squared:  float = 0.0
    n_samples:  int = 0
    is_trained: bool = False

    @property
    def growth_rate(self) -> float:
        """Daily weight gain in kg/day (the fitted slope)."""
        return self.slope


@dataclass(frozen=True)
class WeightPrediction:
    weight_kg:  float
    confidence: float


class WeightTrendEstimator:
    """Linear growth-curve fit over a lot's weighing history."""

    name = "weight_trend"

    def fit(self, samples: Iterable[WeightSample]) -> WeightTrendModel:
        """Fit the trend line. Never raises for short or degenerate input."""
        points = sorted(samples, key=lambda s: s.age_days)
        n = len(points)
        if n < MIN_SAMPLES:
            logger.debug("Weight trend untrained: %d sample(s) < %d.", n, MIN_SAMPLES)
            return WeightTrendModel(n_samples=n)

        xs = [float(p.age_days) for p in points]
        ys = [float(p.average_weight_kg) for p in points]

        sum_x  = sum(xs)
        sum_y  = sum(ys)
        sum_xy = sum(x * y for x, y in zip(xs, ys))
        sum_xx = sum(x * x for x in xs)

        denominator = n * sum_xx - sum_x * sum_x
        if denominator == 0:
            logger.debug("Weight trend untrained: all %d samples share one age.", n)
            return WeightTrendModel(n_samples=n)

        slope = (n * sum_xy - sum_x * sum_y) / denominator
        intercept = (sum_y - slope * sum_x) / n

        y_mean = sum_y / n
        ss_res = sum((y - (slope * x + intercept)) ** 2 for x, y in zip(xs, ys))
        ss_tot = sum((y - y_mean) ** 2 for y in ys)
        if ss_tot == 0:
            r_squared = 1.0 if ss_res == 0 else 0.0
        else:
            r_squared = 1.0 - safe_divide(ss_res, ss_tot)

        logger.debug(
            "Weight trend fitted: n=%d slope=%.5f intercept=%.5f r2=%.4f",
            n, slope, intercept, r_squared,
        )
        return WeightTrendModel(
            slope=slope,
            intercept=intercept,
            r_squared=r_squared,
            n_samples=n,
            is_trained=True,
        )

    def predict(self, model: WeightTrendModel, age_days: float) -> WeightPrediction:
        """Predict average weight at ``age_days``, floored at 0 kg."""
        if not model.is_trained:
            return WeightPrediction(weight_kg=0.0, confidence=0.0)
        weight = max(0.0, model.slope * age_days + model.intercept)
        return WeightPrediction(weight_kg=weight, confidence=clamp_unit(model.r_squared))
