"""
HTTP peer-average provider backed by the farm analytics service.

Endpoint::

    GET {base_url}/peers/{category}

    200 → {"avg_age_days": 38.5, "avg_weight_kg": 2.1,
           "avg_mortality_rate_pct": 4.2, "avg_growth_rate_kg_per_day": 0.052,
           "avg_margin_pct": 18.0, "lot_count": 7}
    404 → no peer lots for the category (returns ``None``)

Transport errors and 5xx responses are retried at most ``max_retries``
times (0 or 1); anything still failing is raised for
``fetch_peer_averages_safely()`` to absorb. A 200 whose body is not a
JSON object matching ``PeerAverages`` raises ``ValueError``.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from flock_forecaster.config import PeersConfig
from flock_forecaster.models.peer import PeerAverages
from flock_forecaster.taxonomy.lot_taxonomy import LotCategory

logger = logging.getLogger(__name__)


class HttpPeerAverageProvider:
    """Fetches peer averages over HTTP with a timeout and one bounded retry.

    Attributes:
        base_url: Analytics service root, e.g. ``"https://farm.example/api"``.
        timeout_seconds: Per-request timeout.
        max_retries: Extra attempts after a retryable failure (0 or 1).
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        max_retries: int = 1,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not base_url:
            raise ValueError("base_url must not be empty.")
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.max_retries = max(0, min(1, max_retries))
        self._client = client

    @classmethod
    def from_config(cls, config: PeersConfig) -> "HttpPeerAverageProvider":
        return cls(
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
            max_retries=config.max_retries,
        )

    def get_peer_averages(self, category: LotCategory) -> Optional[PeerAverages]:
        """Fetch averages for ``category``.

        Raises:
            httpx.HTTPError: When every attempt fails or a 4xx other than 404
                is returned.
            ValueError: When the body is not a JSON object or fails
                ``PeerAverages`` validation (``pydantic.ValidationError``).
        """
        url = f"{self.base_url}/peers/{category.value}"
        attempts = 1 + self.max_retries
        attempt = 0
        while True:
            attempt += 1
            try:
                resp = self._get(url)
                if resp.status_code == 404:
                    return None
                resp.raise_for_status()
            except (httpx.TransportError, httpx.HTTPStatusError) as exc:
                if attempt < attempts and _is_retryable(exc):
                    logger.info(
                        "Peer lookup attempt %d/%d failed (%s); retrying.",
                        attempt, attempts, exc,
                    )
                    continue
                raise
            return _parse_averages(resp, url)

    def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return self._client.get(url, timeout=self.timeout_seconds)
        return httpx.get(url, timeout=self.timeout_seconds)


def _parse_averages(resp: httpx.Response, url: str) -> PeerAverages:
    try:
        payload = resp.json()
    except ValueError as exc:
        raise ValueError(f"Peer service at {url} returned a non-JSON body.") from exc
    if not isinstance(payload, dict):
        raise ValueError(
            f"Peer service at {url} returned {type(payload).__name__}, expected an object."
        )
    return PeerAverages.model_validate(payload)


def _is_retryable(exc: httpx.HTTPError) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return True
