"""
Shared pytest fixtures for the Flock Forecaster test suite.

Provides:
  - ``as_of``: fixed forecast date so lot ages are deterministic.
  - Lot snapshot factories for each category.
  - Weighing histories (clean linear growth, noisy growth).
  - ``assembler``: a ``ForecastAssembler`` pinned to ``as_of``.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from flock_forecaster.config import AppConfig
from flock_forecaster.forecasting.assembler import ForecastAssembler
from flock_forecaster.models.lot import LotSnapshot, MortalityEvent, WeightSample
from flock_forecaster.taxonomy.lot_taxonomy import LotCategory

AS_OF = date(2026, 3, 1)


def make_lot(
    category: LotCategory = LotCategory.BROILER,
    age_days: int = 20,
    initial_count: int = 1000,
    current_count: int = 995,
    cumulative_expense: float = 100_000.0,
    lot_id: str = "L-001",
) -> LotSnapshot:
    """Build a lot that is ``age_days`` old on ``AS_OF``."""
    return LotSnapshot(
        lot_id=lot_id,
        category=category,
        birth_date=AS_OF - timedelta(days=age_days),
        initial_count=initial_count,
        current_count=current_count,
        cumulative_expense=cumulative_expense,
    )


def make_samples(points: list[tuple[int, float]]) -> list[WeightSample]:
    return [WeightSample(age_days=a, average_weight_kg=w) for a, w in points]


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def lot_factory():
    """Return ``make_lot`` so tests can build lots with custom fields."""
    return make_lot


@pytest.fixture
def samples_factory():
    """Return ``make_samples`` for ``(age_days, weight_kg)`` tuples."""
    return make_samples


@pytest.fixture
def broiler_lot() -> LotSnapshot:
    """A healthy 20-day-old broiler lot (0.5% mortality)."""
    return make_lot()


@pytest.fixture
def grower_lot() -> LotSnapshot:
    """A 30-day-old grower lot with exactly 10% cumulative mortality."""
    return make_lot(
        category=LotCategory.GROWER,
        age_days=30,
        initial_count=100,
        current_count=90,
        cumulative_expense=5_000.0,
        lot_id="G-001",
    )


@pytest.fixture
def healthy_samples() -> list[WeightSample]:
    """Broiler weighing history growing ~46 g/day."""
    return make_samples([(7, 0.2), (14, 0.5), (20, 0.8)])


@pytest.fixture
def linear_samples() -> list[WeightSample]:
    """Perfectly linear history: 0.05 kg/day through the origin."""
    return make_samples([(10, 0.5), (20, 1.0)])


@pytest.fixture
def mortality_events() -> list[MortalityEvent]:
    return [
        MortalityEvent(
            lot_id="L-001",
            count=3,
            occurred_at=datetime(2026, 2, 15, 7, 0, tzinfo=timezone.utc),
        ),
        MortalityEvent(
            lot_id="L-001",
            count=2,
            occurred_at=datetime(2026, 2, 22, 7, 0, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def assembler(app_config: AppConfig) -> ForecastAssembler:
    """Assembler with no peer provider and a clock pinned to ``AS_OF``."""
    return ForecastAssembler(config=app_config, clock=lambda: AS_OF)
