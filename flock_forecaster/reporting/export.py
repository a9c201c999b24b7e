"""
Export helpers for the report layer (PDF renderer, spreadsheets).

All writer functions create parent directories, write to disk and return
the written ``Path``.

``forecast_to_dict()`` is the JSON shape handed to display components.
``flatten_forecast_for_export()`` turns one forecast into a single flat row
(no nested dicts) so it loads directly in Excel or pandas; recommendations
are joined into one ``"; "``-separated column.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path

from flock_forecaster.models.forecast import ForecastResult

FLAT_FIELDNAMES: list[str] = [
    "lot_id",
    "category",
    "generated_at",
    "current_age_days",
    "target_age_days",
    "optimal_harvest_date",
    "final_weight_kg",
    "final_weight_confidence",
    "days_to_reach",
    "expected_mortality",
    "mortality_confidence",
    "risk_factors",
    "estimated_revenue",
    "net_profit",
    "roi_percent",
    "profitability_confidence",
    "projected_efficiency",
    "recommendation_count",
    "recommendations",
    "peer_comparison_available",
]


def forecast_to_dict(result: ForecastResult) -> dict:
    """Return a JSON-ready dict (dates as ISO strings, enums as values)."""
    return result.model_dump(mode="json")


def flatten_forecast_for_export(result: ForecastResult) -> dict:
    """Flatten one forecast into a row keyed by ``FLAT_FIELDNAMES``."""
    recs = "; ".join(
        f"[{r.severity.value.upper()}] {r.message}: {r.action}"
        for r in result.recommendations
    )
    return {
        "lot_id":                    result.lot_id,
        "category":                  result.category.value,
        "generated_at":              result.generated_at.isoformat(),
        "current_age_days":          result.current_age_days,
        "target_age_days":           result.target_age_days,
        "optimal_harvest_date":      result.optimal_harvest_date.isoformat(),
        "final_weight_kg":           round(result.final_weight.value, 3),
        "final_weight_confidence":   round(result.final_weight.confidence, 3),
        "days_to_reach":             result.final_weight.days_to_reach,
        "expected_mortality":        round(result.expected_mortality.value, 1),
        "mortality_confidence":      round(result.expected_mortality.confidence, 3),
        "risk_factors":              "; ".join(result.expected_mortality.risk_factors),
        "estimated_revenue":         round(result.profitability.estimated_revenue, 2),
        "net_profit":                round(result.profitability.net_profit, 2),
        "roi_percent":               round(result.profitability.roi_percent, 2),
        "profitability_confidence":  round(result.profitability.confidence, 3),
        "projected_efficiency":      round(result.projected_efficiency, 1),
        "recommendation_count":      len(result.recommendations),
        "recommendations":           recs,
        "peer_comparison_available": result.peer_comparison_available,
    }


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(
    data: dict | list,
    path: Path,
) -> Path:
    """Write ``data`` to a pretty-printed JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def export_forecasts(results: list[ForecastResult], path: Path) -> Path:
    """Write forecasts to ``path``; format chosen by suffix (``.csv`` / ``.json``).

    Raises:
        ValueError: For any other suffix.
    """
    suffix = path.suffix.lower()
    if suffix == ".csv":
        rows = [flatten_forecast_for_export(r) for r in results]
        return export_to_csv(rows, path, fieldnames=FLAT_FIELDNAMES)
    if suffix == ".json":
        payload: dict | list
        if len(results) == 1:
            payload = forecast_to_dict(results[0])
        else:
            payload = [forecast_to_dict(r) for r in results]
        return export_to_json(payload, path)
    raise ValueError(f"Unsupported export format '{path.suffix}'. Use .csv or .json.")
