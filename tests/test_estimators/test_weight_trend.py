"""
Tests for flock_forecaster/estimators/weight_trend.py.

What we test
------------
fit():
  - Exact two-point fit: slope, intercept and R² = 1.
  - Identical results for any permutation of the samples.
  - Deterministic across repeated calls.
  - 0 or 1 samples → untrained model.
  - All samples at one age → untrained model.
  - Flat exact series counts as a perfect fit.

predict():
  - Linear extrapolation (30 days from the 10/20-day samples → 1.5 kg).
  - Never negative, even far below the line's zero crossing.
  - Untrained model → weight 0, confidence 0.
  - Confidence clamped to [0, 1] for poor fits.
"""

from __future__ import annotations

import itertools

import pytest

from flock_forecaster.estimators.weight_trend import WeightTrendEstimator, WeightTrendModel
from flock_forecaster.models.lot import WeightSample


def _samples(points: list[tuple[int, float]]) -> list[WeightSample]:
    return [WeightSample(age_days=a, average_weight_kg=w) for a, w in points]


@pytest.fixture
def estimator() -> WeightTrendEstimator:
    return WeightTrendEstimator()


class TestFit:
    def test_two_point_fit_is_exact(self, estimator, linear_samples):
        model = estimator.fit(linear_samples)
        assert model.is_trained
        assert model.slope == pytest.approx(0.05)
        assert model.intercept == pytest.approx(0.0, abs=1e-12)
        assert model.r_squared == pytest.approx(1.0)

    def test_growth_rate_is_slope(self, estimator, linear_samples):
        model = estimator.fit(linear_samples)
        assert model.growth_rate == model.slope

    def test_order_independent(self, estimator):
        points = [(7, 0.21), (14, 0.48), (21, 0.86), (28, 1.31), (35, 1.74)]
        reference = estimator.fit(_samples(points))
        for perm in itertools.permutations(points):
            assert estimator.fit(_samples(list(perm))) == reference

    def test_deterministic(self, estimator, healthy_samples):
        assert estimator.fit(healthy_samples) == estimator.fit(healthy_samples)

    def test_empty_is_untrained(self, estimator):
        model = estimator.fit([])
        assert model == WeightTrendModel()
        assert not model.is_trained

    def test_single_sample_is_untrained(self, estimator):
        model = estimator.fit(_samples([(10, 0.5)]))
        assert not model.is_trained
        assert model.n_samples == 1

    def test_same_age_samples_are_untrained(self, estimator):
        model = estimator.fit(_samples([(10, 0.5), (10, 0.6), (10, 0.55)]))
        assert not model.is_trained

    def test_flat_series_is_perfect_fit(self, estimator):
        model = estimator.fit(_samples([(10, 1.0), (20, 1.0), (30, 1.0)]))
        assert model.slope == pytest.approx(0.0)
        assert model.r_squared == pytest.approx(1.0)

    def test_accepts_generator(self, estimator, linear_samples):
        model = estimator.fit(s for s in linear_samples)
        assert model.is_trained


class TestPredict:
    def test_linear_extrapolation(self, estimator, linear_samples):
        pred = estimator.predict(estimator.fit(linear_samples), 30)
        assert pred.weight_kg == pytest.approx(1.5)
        assert pred.confidence == pytest.approx(1.0)

    def test_never_negative(self, estimator):
        # Line crosses zero at age 10: weight = 0.05 * age - 0.5
        model = estimator.fit(_samples([(20, 0.5), (30, 1.0)]))
        for age in (0, 5, 9):
            assert estimator.predict(model, age).weight_kg == 0.0

    def test_decreasing_series_floors_at_zero(self, estimator):
        model = estimator.fit(_samples([(10, 2.0), (20, 1.0)]))
        assert estimator.predict(model, 100).weight_kg == 0.0

    @pytest.mark.parametrize("points", [[], [(10, 0.5)]])
    def test_degenerate_predicts_zero(self, estimator, points):
        pred = estimator.predict(estimator.fit(_samples(points)), 42)
        assert pred.weight_kg == 0.0
        assert pred.confidence == 0.0

    def test_confidence_within_unit_interval(self, estimator):
        noisy = _samples([(1, 1.0), (2, 3.0), (3, 0.5), (4, 2.8), (5, 0.7)])
        model = estimator.fit(noisy)
        pred = estimator.predict(model, 10)
        assert 0.0 <= pred.confidence <= 1.0

    def test_negative_r_squared_clamped_to_zero(self, estimator):
        model = WeightTrendModel(slope=0.05, intercept=0.0, r_squared=-0.4, n_samples=3, is_trained=True)
        assert estimator.predict(model, 10).confidence == 0.0

    def test_r_squared_above_one_clamped(self, estimator):
        model = WeightTrendModel(slope=0.05, intercept=0.0, r_squared=1.2, n_samples=3, is_trained=True)
        assert estimator.predict(model, 10).confidence == 1.0
