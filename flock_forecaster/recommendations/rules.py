"""
Threshold rules that turn forecast metrics into recommendations.

Every rule is evaluated independently; all that match are returned, ordered
CRITICAL → IMPORTANT → SUGGESTION (rule order within a severity).

Rules (thresholds from ``RecommendationConfig``)
------------------------------------------------
    growth rate < min_growth_rate_kg_per_day              IMPORTANT
    any mortality risk factor                             CRITICAL
    projected ROI < min_roi_pct                           IMPORTANT
    days_remaining < harvest_window_days
        and current weight >= near_target_weight_ratio * target weight
                                                          SUGGESTION
    growth rate < peer_growth_ratio * peer average        SUGGESTION  (peers only)
    mortality rate > peer_mortality_ratio * peer average  IMPORTANT   (peers only)

Growth and weight rules need a trained weight trend; with no usable weighing
history they stay silent rather than firing on a zero slope. Peer rules need
peer averages; without them they are skipped.

When nothing fires, a single positive SUGGESTION is returned so the list is
never empty.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from flock_forecaster.config import RecommendationConfig
from flock_forecaster.models.forecast import Recommendation
from flock_forecaster.models.peer import PeerAverages
from flock_forecaster.taxonomy.lot_taxonomy import SEVERITY_RANK, RecommendationSeverity

LOW_GROWTH = Recommendation(
    severity=RecommendationSeverity.IMPORTANT,
    message="Growth rate below average",
    action="Review feed quality and the feed program",
)
MORTALITY_RISK = Recommendation(
    severity=RecommendationSeverity.CRITICAL,
    message="Mortality risk factors detected",
    action="Apply preventive sanitary measures immediately",
)
LOW_ROI = Recommendation(
    severity=RecommendationSeverity.IMPORTANT,
    message="Projected ROI below target",
    action="Optimize feed costs and reduce waste",
)
NEAR_TARGET_WEIGHT = Recommendation(
    severity=RecommendationSeverity.SUGGESTION,
    message="Lot is near target weight",
    action="Consider advancing the sale to optimize profitability",
)
BELOW_PEER_GROWTH = Recommendation(
    severity=RecommendationSeverity.SUGGESTION,
    message="Growth below comparable lots",
    action="Compare feed, density and ventilation with your better-performing lots",
)
ABOVE_PEER_MORTALITY = Recommendation(
    severity=RecommendationSeverity.IMPORTANT,
    message="Mortality above comparable lots",
    action="Review vaccination schedule and biosecurity against your other lots",
)
GOOD_PERFORMANCE = Recommendation(
    severity=RecommendationSeverity.SUGGESTION,
    message="Good overall performance",
    action="Keep the current management program",
)


@dataclass
class RecommendationContext:
    """Metrics the rules read.

    Attributes:
        growth_rate:          Fitted slope in kg/day.
        weight_model_trained: False when the weight trend could not be fitted.
        risk_factors:         Mortality risk flags.
        roi_percent:          Projected ROI.
        days_remaining:       Days until target age (never negative).
        current_weight_kg:    Latest observed average weight (0 if none).
        target_weight_kg:     Predicted weight at target age.
        mortality_rate_pct:   Cumulative deaths / initial count * 100.
        peer_averages:        Peer metrics, or None when unavailable.
    """

    growth_rate:          float
    weight_model_trained: bool
    risk_factors:         list[str] = field(default_factory=list)
    roi_percent:          float = 0.0
    days_remaining:       int = 0
    current_weight_kg:    float = 0.0
    target_weight_kg:     float = 0.0
    mortality_rate_pct:   float = 0.0
    peer_averages:        Optional[PeerAverages] = None


def build_recommendations(
    context: RecommendationContext,
    config: RecommendationConfig | None = None,
) -> list[Recommendation]:
    """Evaluate every rule against ``context``.

    Returns:
        Matching recommendations sorted by severity, or ``[GOOD_PERFORMANCE]``.
    """
    cfg = config or RecommendationConfig()
    recs: list[Recommendation] = []

    if context.weight_model_trained and context.growth_rate < cfg.min_growth_rate_kg_per_day:
        recs.append(LOW_GROWTH)

    if context.risk_factors:
        recs.append(MORTALITY_RISK)

    if context.roi_percent < cfg.min_roi_pct:
        recs.append(LOW_ROI)

    if (
        context.weight_model_trained
        and context.days_remaining < cfg.harvest_window_days
        and context.current_weight_kg >= context.target_weight_kg * cfg.near_target_weight_ratio
    ):
        recs.append(NEAR_TARGET_WEIGHT)

    recs.extend(_peer_recommendations(context, cfg))

    if not recs:
        return [GOOD_PERFORMANCE]

    return sorted(recs, key=lambda r: SEVERITY_RANK[r.severity])


def _peer_recommendations(
    context: RecommendationContext,
    cfg: RecommendationConfig,
) -> list[Recommendation]:
    peers = context.peer_averages
    if peers is None or peers.lot_count == 0:
        return []

    recs: list[Recommendation] = []
    if (
        context.weight_model_trained
        and peers.avg_growth_rate_kg_per_day > 0
        and context.growth_rate < peers.avg_growth_rate_kg_per_day * cfg.peer_growth_ratio
    ):
        recs.append(BELOW_PEER_GROWTH)

    if (
        peers.avg_mortality_rate_pct > 0
        and context.mortality_rate_pct > peers.avg_mortality_rate_pct * cfg.peer_mortality_ratio
    ):
        recs.append(ABOVE_PEER_MORTALITY)
    return recs
