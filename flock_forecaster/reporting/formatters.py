"""
ASCII terminal formatter for the ``forecast`` CLI command.

Returns plain multi-line strings suitable for ``typer.echo()``. No
third-party dependencies (no ``rich``, no ``colorama``).

Layout::

  Lot L-001 (broiler)  age 30d / target 45d  harvest 2026-03-16
  -----------------------------------------------------------------
  Final weight      2.214 kg   conf 0.98   in 15d
  Expected deaths      6.3     conf 0.80
  Revenue       434,530.40     ROI +189.7%   conf 0.70
  Net profit    284,530.40
  Efficiency          86.9 / 100
  Peer comparison   unavailable

  Recommendations
    [CRITICAL]   Mortality risk factors detected
                 -> Apply preventive sanitary measures immediately
"""

from __future__ import annotations

from flock_forecaster.models.forecast import ForecastResult

_RULE_WIDTH = 65


def format_forecast_summary(result: ForecastResult) -> str:
    """Format one forecast as an ASCII block."""
    fw = result.final_weight
    mort = result.expected_mortality
    prof = result.profitability

    lines = [
        (
            f"  Lot {result.lot_id} ({result.category.value})  "
            f"age {result.current_age_days}d / target {result.target_age_days}d  "
            f"harvest {result.optimal_harvest_date.isoformat()}"
        ),
        "  " + "-" * _RULE_WIDTH,
        f"  Final weight    {fw.value:>8.3f} kg   conf {fw.confidence:.2f}   in {fw.days_to_reach}d",
        f"  Expected deaths {mort.value:>8.1f}      conf {mort.confidence:.2f}",
    ]
    if mort.risk_factors:
        lines.append(f"    risk factors: {', '.join(mort.risk_factors)}")
    lines += [
        (
            f"  Revenue     {prof.estimated_revenue:>14,.2f}   "
            f"ROI {prof.roi_percent:+.1f}%   conf {prof.confidence:.2f}"
        ),
        f"  Net profit  {prof.net_profit:>14,.2f}",
        f"  Efficiency      {result.projected_efficiency:>8.1f} / 100",
        f"  Peer comparison   {'available' if result.peer_comparison_available else 'unavailable'}",
        "",
        "  Recommendations",
    ]
    for rec in result.recommendations:
        tag = f"[{rec.severity.value.upper()}]"
        lines.append(f"    {tag:<12} {rec.message}")
        lines.append(f"    {'':<12} -> {rec.action}")
    return "\n".join(lines)
