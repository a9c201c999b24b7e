"""
Peer-lot comparison models.

``PeerLotSummary`` is one comparable lot (same category, same farm) reduced
to the handful of metrics the comparison needs. ``PeerAverages`` is the
aggregate across those lots; it only ever contextualises recommendations and
never changes a numeric forecast.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from flock_forecaster.taxonomy.lot_taxonomy import LotCategory


class PeerLotSummary(BaseModel):
    """Metrics of one peer lot.

    Attributes:
        lot_id: Peer lot identifier.
        category: Peer lot category.
        age_days: Current (or final) age.
        latest_weight_kg: Most recent average weight, 0 if never weighed.
        mortality_rate_pct: Cumulative deaths / initial count * 100.
        daily_gain_kg: Average weight gained per day of age.
        margin_pct: Profit margin, 0 when sales are not yet recorded.
    """

    model_config = ConfigDict(frozen=True)

    lot_id: str
    category: LotCategory
    age_days: int = Field(ge=0)
    latest_weight_kg: float = Field(default=0.0, ge=0)
    mortality_rate_pct: float = Field(default=0.0, ge=0)
    daily_gain_kg: float = 0.0
    margin_pct: float = 0.0


class PeerAverages(BaseModel):
    """Mean metrics across peer lots of one category."""

    model_config = ConfigDict(frozen=True)

    avg_age_days: float = 0.0
    avg_weight_kg: float = 0.0
    avg_mortality_rate_pct: float = 0.0
    avg_growth_rate_kg_per_day: float = 0.0
    avg_margin_pct: float = 0.0
    lot_count: int = Field(default=0, ge=0)
