"""
Lot taxonomy for poultry forecasting.

``LotCategory`` is the production type of a lot. It drives the target
harvest age, the sale price table and the age-based mortality risk rules.

``RecommendationSeverity`` ranks the recommendations emitted alongside a
forecast, most urgent first.

This module has NO imports from any other ``flock_forecaster`` package.
"""

from enum import StrEnum


class LotCategory(StrEnum):
    """Production type of a lot."""

    GROWER = "grower"
    """Pullets raised to point-of-lay or sold live at ~6 weeks."""

    BROILER = "broiler"
    """Meat birds; sold by weight."""

    LAYER = "layer"
    """Laying hens; valued per head rather than per kilogram."""


class RecommendationSeverity(StrEnum):
    """Urgency of a recommendation."""

    CRITICAL = "critical"
    """Act immediately; flock health or survival at stake."""

    IMPORTANT = "important"
    """Affects profitability; address in the current cycle."""

    SUGGESTION = "suggestion"
    """Optional optimisation or positive feedback."""


SEVERITY_RANK: dict[RecommendationSeverity, int] = {
    RecommendationSeverity.CRITICAL: 0,
    RecommendationSeverity.IMPORTANT: 1,
    RecommendationSeverity.SUGGESTION: 2,
}
