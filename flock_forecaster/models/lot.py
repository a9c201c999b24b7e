"""
Lot input models: the records the forecasting engine reads.

``WeightSample`` is one weighing session (average bird weight at a given age).
``MortalityEvent`` is one recorded batch of deaths. ``LotSnapshot`` is the
lot's current metadata. All three are produced by the farm's record-keeping
workflow and are read-only here; every model is frozen.

``LotForecastInput`` bundles the three for file-based and CLI use.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from flock_forecaster.taxonomy.lot_taxonomy import LotCategory


class WeightSample(BaseModel):
    """Average bird weight observed at a given lot age.

    Attributes:
        age_days: Lot age in days when the birds were weighed.
        average_weight_kg: Mean weight of the weighed birds, in kg.
        total_weight_kg: Sum of individual weights, if recorded.
        birds_weighed: Number of birds on the scale, if recorded.
    """

    model_config = ConfigDict(frozen=True)

    age_days: int = Field(ge=0)
    average_weight_kg: float = Field(gt=0)
    total_weight_kg: Optional[float] = Field(default=None, ge=0)
    birds_weighed: Optional[int] = Field(default=None, ge=0)

    @property
    def observed_weight_kg(self) -> float:
        """Total kilograms this sample accounts for.

        Falls back to ``average * birds_weighed`` and then to the average alone
        when the session did not record a total.
        """
        if self.total_weight_kg is not None:
            return self.total_weight_kg
        if self.birds_weighed is not None:
            return self.average_weight_kg * self.birds_weighed
        return self.average_weight_kg


class MortalityEvent(BaseModel):
    """A batch of deaths recorded against a lot."""

    model_config = ConfigDict(frozen=True)

    lot_id: str
    count: int = Field(gt=0)
    occurred_at: datetime


class LotSnapshot(BaseModel):
    """Current metadata of a lot.

    Attributes:
        lot_id: Stable lot identifier.
        category: Production type; drives target age and pricing.
        birth_date: Hatch (or placement) date; age zero.
        initial_count: Birds placed.
        current_count: Birds alive now.
        cumulative_expense: Total spent on the lot so far (currency units).
    """

    model_config = ConfigDict(frozen=True)

    lot_id: str
    category: LotCategory
    birth_date: date
    initial_count: int = Field(gt=0)
    current_count: int = Field(ge=0)
    cumulative_expense: float = Field(default=0.0, ge=0)

    @field_validator("lot_id")
    @classmethod
    def validate_lot_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("lot_id must not be empty.")
        return v.strip()

    @model_validator(mode="after")
    def validate_counts(self) -> "LotSnapshot":
        if self.current_count > self.initial_count:
            raise ValueError(
                f"current_count ({self.current_count}) must be <= "
                f"initial_count ({self.initial_count})."
            )
        return self

    @property
    def cumulative_deaths(self) -> int:
        return self.initial_count - self.current_count


class LotForecastInput(BaseModel):
    """Everything the assembler needs for one lot, as loaded from a file."""

    model_config = ConfigDict(frozen=True)

    lot: LotSnapshot
    weight_samples: list[WeightSample] = []
    mortality_events: list[MortalityEvent] = []
    cumulative_expense: Optional[float] = Field(default=None, ge=0)

    @property
    def expense(self) -> float:
        """Explicit expense total, else the one carried on the snapshot."""
        if self.cumulative_expense is not None:
            return self.cumulative_expense
        return self.lot.cumulative_expense
