"""
Peer-average providers and the failure boundary around them.

The assembler depends only on the ``PeerAverageProvider`` protocol::

    get_peer_averages(category) -> PeerAverages | None

``None`` means "no comparison available". Providers may also raise; the
assembler never calls a provider directly but goes through
``fetch_peer_averages_safely()``, which logs the failure and returns ``None``
so a broken lookup can never abort a forecast.

Implementations
---------------
StaticPeerAverageProvider      : fixed mapping; tests and offline use.
LotHistoryPeerAverageProvider  : aggregates a list of ``PeerLotSummary``
                                 records (means per category).
HttpPeerAverageProvider        : see ``flock_forecaster.peers.http_provider``.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional, Protocol, runtime_checkable

from flock_forecaster.models.peer import PeerAverages, PeerLotSummary
from flock_forecaster.taxonomy.lot_taxonomy import LotCategory

logger = logging.getLogger(__name__)


@runtime_checkable
class PeerAverageProvider(Protocol):
    """Read-only source of peer-lot averages for a category."""

    def get_peer_averages(self, category: LotCategory) -> Optional[PeerAverages]:
        ...


class StaticPeerAverageProvider:
    """Serves pre-computed averages from a mapping."""

    def __init__(self, averages: Mapping[LotCategory, PeerAverages] | None = None) -> None:
        self._averages = dict(averages or {})

    def get_peer_averages(self, category: LotCategory) -> Optional[PeerAverages]:
        return self._averages.get(category)


class LotHistoryPeerAverageProvider:
    """Computes category averages from peer lot summaries.

    Each metric is the plain mean across all peer lots of the category. A
    category with no peer lots yields ``None``.
    """

    def __init__(self, lots: Iterable[PeerLotSummary]) -> None:
        self._lots = list(lots)

    def get_peer_averages(self, category: LotCategory) -> Optional[PeerAverages]:
        return compute_peer_averages(self._lots, category)


def compute_peer_averages(
    lots: Iterable[PeerLotSummary],
    category: LotCategory,
) -> Optional[PeerAverages]:
    """Average the metrics of every lot in ``category``; ``None`` if there are none."""
    peers = [lot for lot in lots if lot.category == category]
    if not peers:
        return None
    n = len(peers)
    return PeerAverages(
        avg_age_days=sum(p.age_days for p in peers) / n,
        avg_weight_kg=sum(p.latest_weight_kg for p in peers) / n,
        avg_mortality_rate_pct=sum(p.mortality_rate_pct for p in peers) / n,
        avg_growth_rate_kg_per_day=sum(p.daily_gain_kg for p in peers) / n,
        avg_margin_pct=sum(p.margin_pct for p in peers) / n,
        lot_count=n,
    )


def fetch_peer_averages_safely(
    provider: Optional[PeerAverageProvider],
    category: LotCategory,
) -> Optional[PeerAverages]:
    """Call ``provider`` and convert any failure into ``None``.

    Args:
        provider: Peer source, or ``None`` when comparison is disabled.
        category: Lot category to look up.

    Returns:
        ``PeerAverages`` or ``None`` (disabled, empty, or failed lookup).
    """
    if provider is None:
        return None
    try:
        averages = provider.get_peer_averages(category)
    except Exception as exc:
        logger.warning(
            "Peer average lookup failed for category=%s; continuing without "
            "peer comparison: %s",
            category, exc,
        )
        return None
    if averages is None:
        logger.info("No peer averages available for category=%s.", category)
    return averages
