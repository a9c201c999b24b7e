"""
JSON loaders for lot forecast inputs and peer-lot summaries.

Lot file format::

    {
      "lot": {
        "lot_id": "L-001",
        "category": "broiler",
        "birth_date": "2026-02-01",
        "initial_count": 1000,
        "current_count": 985,
        "cumulative_expense": 95000.0
      },
      "weight_samples": [
        {"age_days": 7,  "average_weight_kg": 0.18, "birds_weighed": 50},
        {"age_days": 14, "average_weight_kg": 0.45, "total_weight_kg": 22.5}
      ],
      "mortality_events": [
        {"lot_id": "L-001", "count": 15, "occurred_at": "2026-02-09T07:30:00Z"}
      ],
      "cumulative_expense": 95000.0        # optional; overrides lot value
    }

Peer file format: a JSON list of ``PeerLotSummary`` objects, or an object
with a ``"lots"`` key holding that list.

Validation rules
----------------
- The top-level document must be a JSON object with a ``"lot"`` key.
- Every record is validated by its pydantic model; the first violation is
  raised as ``pydantic.ValidationError`` (a ``ValueError`` subclass).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from flock_forecaster.models.lot import LotForecastInput
from flock_forecaster.models.peer import PeerLotSummary

log = logging.getLogger(__name__)


def _read_json(path: Path) -> Any:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def parse_lot_document(data: Any) -> LotForecastInput:
    """Validate an already-parsed lot document.

    Raises:
        ValueError: If the document is not an object with a ``"lot"`` key.
        pydantic.ValidationError: If any record is invalid.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Lot document must be a JSON object, got {type(data).__name__}.")
    if "lot" not in data:
        raise ValueError("Lot document is missing the 'lot' field.")
    return LotForecastInput.model_validate(data)


def load_lot_file(path: Path) -> LotForecastInput:
    """Load and validate a lot forecast input file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On malformed JSON or invalid records.
    """
    data = _read_json(path)
    lot_input = parse_lot_document(data)
    log.info(
        "Loaded lot %s from %s: %d weight sample(s), %d mortality event(s).",
        lot_input.lot.lot_id, path,
        len(lot_input.weight_samples), len(lot_input.mortality_events),
    )
    return lot_input


def load_peer_lots_file(path: Path) -> list[PeerLotSummary]:
    """Load peer lot summaries for ``LotHistoryPeerAverageProvider``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On malformed JSON or invalid records.
    """
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("lots")
    if not isinstance(data, list):
        raise ValueError("Peer file must be a JSON list or an object with a 'lots' list.")
    lots = [PeerLotSummary.model_validate(rec) for rec in data]
    log.info("Loaded %d peer lot(s) from %s.", len(lots), path)
    return lots
