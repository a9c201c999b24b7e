"""
Tests for flock_forecaster/config.py.

What we test
------------
  - AppConfig() defaults match the committed default.toml.
  - Explicit TOML files override defaults; local.toml layers on top.
  - FLOCK_FORECASTER_* env vars override files.
  - Invalid values raise pydantic ValidationError.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from flock_forecaster.config import (
    AppConfig,
    ForecastConfig,
    LoggingConfig,
    PeersConfig,
    load_config,
)
from flock_forecaster.taxonomy.lot_taxonomy import LotCategory


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("FLOCK_FORECASTER_PEERS_URL", "FLOCK_FORECASTER_LOG_LEVEL", "FLOCK_FORECASTER_DEBUG"):
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_builtin_defaults(self):
        cfg = AppConfig()
        assert cfg.forecast.target_age_days[LotCategory.BROILER] == 45
        assert cfg.forecast.sale_prices[LotCategory.LAYER] == 250.0
        assert cfg.forecast.expense_growth_multiplier == 1.5
        assert cfg.peers.base_url == ""

    def test_default_toml_matches_builtin(self):
        assert load_config().model_dump() == AppConfig().model_dump()


class TestFileLoading:
    def test_explicit_file(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text(
            "[forecast.sale_prices]\ngrower = 1.0\nbroiler = 2.0\nlayer = 3.0\n"
            "[recommendations]\nmin_roi_pct = 25.0\n",
            encoding="utf-8",
        )
        cfg = load_config(path)
        assert cfg.forecast.sale_prices[LotCategory.BROILER] == 2.0
        assert cfg.recommendations.min_roi_pct == 25.0
        assert cfg.forecast.target_age_days[LotCategory.GROWER] == 42

    def test_local_override(self, tmp_path):
        (tmp_path / "base.toml").write_text("[mortality]\nrising_daily_rate = 0.7\n", encoding="utf-8")
        (tmp_path / "local.toml").write_text("[mortality]\nrising_daily_rate = 0.9\n", encoding="utf-8")
        assert load_config(tmp_path / "base.toml").mortality.rising_daily_rate == 0.9

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[forecast]\nexpense_growth_multiplier = 0.5\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(path)


class TestEnvOverrides:
    def test_peers_url(self, monkeypatch):
        monkeypatch.setenv("FLOCK_FORECASTER_PEERS_URL", "http://analytics.local")
        assert load_config().peers.base_url == "http://analytics.local"

    def test_log_level(self, monkeypatch):
        monkeypatch.setenv("FLOCK_FORECASTER_LOG_LEVEL", "debug")
        assert load_config().logging.level == "DEBUG"

    def test_debug(self, monkeypatch):
        monkeypatch.setenv("FLOCK_FORECASTER_DEBUG", "true")
        assert load_config().debug is True


class TestValidators:
    def test_missing_category_in_prices(self):
        with pytest.raises(ValidationError, match="missing categories"):
            ForecastConfig(sale_prices={LotCategory.BROILER: 1.0})

    def test_non_positive_target_age(self):
        ages = {LotCategory.GROWER: 42, LotCategory.BROILER: 0, LotCategory.LAYER: 140}
        with pytest.raises(ValidationError, match="must be > 0"):
            ForecastConfig(target_age_days=ages)

    def test_confidence_range(self):
        with pytest.raises(ValidationError):
            ForecastConfig(profitability_confidence=1.5)

    @pytest.mark.parametrize("retries", [-1, 2])
    def test_retry_bounds(self, retries):
        with pytest.raises(ValidationError, match="max_retries"):
            PeersConfig(max_retries=retries)

    def test_log_level(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")
