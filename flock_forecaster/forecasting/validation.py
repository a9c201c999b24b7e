"""
Precondition checks at the ``forecast()`` entry point.

The pydantic models already reject most malformed records at construction,
but callers can bypass validation (``model_construct``, duck-typed objects)
and some rules span several inputs (birth date vs. forecast date). Anything
that would otherwise surface as a division by zero, a ``nan`` or a negative
headcount deep inside an estimator is rejected here with a descriptive
``InvalidLotDataError``.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Optional, Sequence

from flock_forecaster.models.lot import LotSnapshot, MortalityEvent, WeightSample
from flock_forecaster.taxonomy.lot_taxonomy import LotCategory


class InvalidLotDataError(ValueError):
    """Raised when forecast inputs are malformed or inconsistent."""


def validate_forecast_inputs(
    lot: LotSnapshot,
    weight_samples: Sequence[WeightSample],
    mortality_events: Sequence[MortalityEvent],
    cumulative_expense: Optional[float],
    as_of: date,
) -> None:
    """Raise ``InvalidLotDataError`` on the first violated precondition.

    ``cumulative_expense=None`` checks ``lot.cumulative_expense`` instead.
    """
    if not isinstance(lot, LotSnapshot):
        raise InvalidLotDataError(f"lot must be a LotSnapshot, got {type(lot).__name__}.")

    try:
        LotCategory(lot.category)
    except ValueError:
        raise InvalidLotDataError(
            f"Unknown lot category '{lot.category}'. "
            f"Must be one of {[c.value for c in LotCategory]}."
        ) from None

    if lot.initial_count <= 0:
        raise InvalidLotDataError(
            f"initial_count must be > 0 for lot {lot.lot_id}, got {lot.initial_count}."
        )
    if lot.current_count < 0:
        raise InvalidLotDataError(
            f"current_count must be >= 0 for lot {lot.lot_id}, got {lot.current_count}."
        )
    if lot.current_count > lot.initial_count:
        raise InvalidLotDataError(
            f"current_count ({lot.current_count}) exceeds initial_count "
            f"({lot.initial_count}) for lot {lot.lot_id}."
        )
    if cumulative_expense is None:
        cumulative_expense = lot.cumulative_expense
    if not math.isfinite(cumulative_expense) or cumulative_expense < 0:
        raise InvalidLotDataError(
            f"cumulative_expense must be a finite value >= 0, got {cumulative_expense}."
        )
    if lot.birth_date > as_of:
        raise InvalidLotDataError(
            f"birth_date {lot.birth_date} is after the forecast date {as_of}."
        )

    for i, sample in enumerate(weight_samples):
        if sample.age_days < 0:
            raise InvalidLotDataError(f"Weight sample {i} has negative age {sample.age_days}.")
        if not math.isfinite(sample.average_weight_kg) or sample.average_weight_kg <= 0:
            raise InvalidLotDataError(
                f"Weight sample {i} has invalid average weight {sample.average_weight_kg}."
            )

    for i, event in enumerate(mortality_events):
        if event.count <= 0:
            raise InvalidLotDataError(f"Mortality event {i} has non-positive count {event.count}.")
