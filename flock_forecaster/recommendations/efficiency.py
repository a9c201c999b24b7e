"""
Projected efficiency score (0–100).

Formula (weights and caps from ``EfficiencyConfig``)
----------------------------------------------------
    weight_factor   = min(1, final_weight_kg / reference_weight_kg)     # 2.5 kg
    cycle_factor    = min(1, reference_cycle_days / target_age_days)     # 50 days
    survival_factor = max(0, 1 - mortality_rate_pct / 100)
    roi_factor      = min(1, max(0, roi_pct / 100))

    score = 100 * (0.3 * weight_factor + 0.2 * cycle_factor
                   + 0.3 * survival_factor + 0.2 * roi_factor)

Each factor is held inside [0, 1] and the weights sum to 1, so the score
stays in [0, 100] for any finite input.
"""

from __future__ import annotations

from dataclasses import dataclass

from flock_forecaster.config import EfficiencyConfig
from flock_forecaster.utils.numeric import clamp, safe_divide


@dataclass
class EfficiencyComponents:
    """Individual factors of the efficiency score, each in [0, 1]."""

    weight_factor:   float
    cycle_factor:    float
    survival_factor: float
    roi_factor:      float

    def total(self, config: EfficiencyConfig) -> float:
        """Weighted score in [0, 100]."""
        blended = (
            self.weight_factor     * config.weight_weight
            + self.cycle_factor    * config.cycle_weight
            + self.survival_factor * config.survival_weight
            + self.roi_factor      * config.roi_weight
        )
        return clamp(blended * 100.0, 0.0, 100.0)


def compute_efficiency_components(
    final_weight_kg:    float,
    target_age_days:    int,
    mortality_rate_pct: float,
    roi_pct:            float,
    config:             EfficiencyConfig,
) -> EfficiencyComponents:
    weight_factor = clamp(safe_divide(final_weight_kg, config.reference_weight_kg), 0.0, 1.0)
    # A zero-day cycle is as short as it gets.
    cycle_factor = clamp(
        safe_divide(config.reference_cycle_days, target_age_days, default=1.0), 0.0, 1.0
    )
    survival_factor = clamp(1.0 - mortality_rate_pct / 100.0, 0.0, 1.0)
    roi_factor = clamp(roi_pct / 100.0, 0.0, 1.0)
    return EfficiencyComponents(
        weight_factor=weight_factor,
        cycle_factor=cycle_factor,
        survival_factor=survival_factor,
        roi_factor=roi_factor,
    )


def compute_projected_efficiency(
    final_weight_kg:    float,
    target_age_days:    int,
    mortality_rate_pct: float,
    roi_pct:            float,
    config:             EfficiencyConfig | None = None,
) -> float:
    """Return the 0–100 projected efficiency score."""
    config = config or EfficiencyConfig()
    components = compute_efficiency_components(
        final_weight_kg=final_weight_kg,
        target_age_days=target_age_days,
        mortality_rate_pct=mortality_rate_pct,
        roi_pct=roi_pct,
        config=config,
    )
    return components.total(config)
