"""
Tests for flock_forecaster/peers/http_provider.py.

Requests go through ``httpx.MockTransport``; no network access.

What we test
------------
  - 200 payload parsed into PeerAverages; URL built from category value.
  - 404 → None.
  - 5xx and transport errors retried once, then raised.
  - 4xx (other than 404) raised without retry.
  - Non-JSON or non-object 200 bodies raise ValueError.
  - max_retries=0 disables the retry.
  - Empty base_url rejected; from_config() copies settings.
"""

from __future__ import annotations

import httpx
import pytest

from flock_forecaster.config import PeersConfig
from flock_forecaster.peers.http_provider import HttpPeerAverageProvider
from flock_forecaster.peers.provider import fetch_peer_averages_safely
from flock_forecaster.taxonomy.lot_taxonomy import LotCategory

PAYLOAD = {
    "avg_age_days": 38.5,
    "avg_weight_kg": 2.1,
    "avg_mortality_rate_pct": 4.2,
    "avg_growth_rate_kg_per_day": 0.052,
    "avg_margin_pct": 18.0,
    "lot_count": 7,
}


def _provider(responses, max_retries: int = 1, seen: list | None = None) -> HttpPeerAverageProvider:
    """Provider whose transport replays ``responses`` in order.

    Each entry is a status code (returned with ``PAYLOAD``) or an exception
    instance (raised), or a ready ``httpx.Response``.
    """
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(str(request.url))
        item = queue.pop(0)
        if isinstance(item, httpx.Response):
            return item
        if isinstance(item, Exception):
            raise item
        return httpx.Response(item, json=PAYLOAD if item == 200 else {"detail": "x"})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpPeerAverageProvider(
        "https://farm.example/api/", max_retries=max_retries, client=client
    )


class TestSuccess:
    def test_payload_parsed(self):
        seen: list[str] = []
        avg = _provider([200], seen=seen).get_peer_averages(LotCategory.BROILER)
        assert avg.lot_count == 7
        assert avg.avg_growth_rate_kg_per_day == pytest.approx(0.052)
        assert seen == ["https://farm.example/api/peers/broiler"]

    def test_not_found_is_none(self):
        assert _provider([404]).get_peer_averages(LotCategory.LAYER) is None


class TestRetry:
    def test_server_error_retried_once(self):
        seen: list[str] = []
        avg = _provider([503, 200], seen=seen).get_peer_averages(LotCategory.GROWER)
        assert avg.lot_count == 7
        assert len(seen) == 2

    def test_transport_error_retried_once(self):
        request = httpx.Request("GET", "https://farm.example/api/peers/grower")
        avg = _provider(
            [httpx.ConnectTimeout("timed out", request=request), 200]
        ).get_peer_averages(LotCategory.GROWER)
        assert avg is not None

    def test_gives_up_after_one_retry(self):
        seen: list[str] = []
        provider = _provider([500, 502], seen=seen)
        with pytest.raises(httpx.HTTPStatusError):
            provider.get_peer_averages(LotCategory.BROILER)
        assert len(seen) == 2

    def test_client_error_not_retried(self):
        seen: list[str] = []
        provider = _provider([400, 200], seen=seen)
        with pytest.raises(httpx.HTTPStatusError):
            provider.get_peer_averages(LotCategory.BROILER)
        assert len(seen) == 1

    def test_no_retry_when_disabled(self):
        seen: list[str] = []
        provider = _provider([503, 200], max_retries=0, seen=seen)
        with pytest.raises(httpx.HTTPStatusError):
            provider.get_peer_averages(LotCategory.BROILER)
        assert len(seen) == 1

    def test_safe_wrapper_absorbs_failure(self):
        provider = _provider([500, 500])
        assert fetch_peer_averages_safely(provider, LotCategory.BROILER) is None


class TestMalformedBody:
    def test_non_json_body(self):
        provider = _provider([httpx.Response(200, text="<html>maintenance</html>")])
        with pytest.raises(ValueError, match="non-JSON"):
            provider.get_peer_averages(LotCategory.BROILER)

    def test_list_body(self):
        provider = _provider([httpx.Response(200, json=[PAYLOAD])])
        with pytest.raises(ValueError, match="expected an object"):
            provider.get_peer_averages(LotCategory.BROILER)

    def test_invalid_fields(self):
        provider = _provider([httpx.Response(200, json={"lot_count": -3})])
        with pytest.raises(ValueError):
            provider.get_peer_averages(LotCategory.BROILER)

    def test_safe_wrapper_absorbs_bad_body(self):
        provider = _provider([httpx.Response(200, text="not json")])
        assert fetch_peer_averages_safely(provider, LotCategory.LAYER) is None


class TestConstruction:
    def test_empty_base_url(self):
        with pytest.raises(ValueError, match="base_url"):
            HttpPeerAverageProvider("")

    def test_from_config(self):
        cfg = PeersConfig(base_url="http://localhost:8080/", timeout_seconds=2.5, max_retries=0)
        provider = HttpPeerAverageProvider.from_config(cfg)
        assert provider.base_url == "http://localhost:8080"
        assert provider.timeout_seconds == 2.5
        assert provider.max_retries == 0
