"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``FLOCK_FORECASTER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Every business constant the forecasting engine relies on (target harvest
ages, sale prices, the expense-growth multiplier, recommendation thresholds,
efficiency weights) lives here so market or husbandry changes never require
code edits. ``AppConfig()`` with no arguments reproduces the defaults.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from flock_forecaster.taxonomy.lot_taxonomy import LotCategory

# ── Sub-config models ─────────────────────────────────────────────────────────


class ForecastConfig(BaseModel):
    """Per-category business tables and projection heuristics.

    ``sale_prices`` are currency units per kg for GROWER and BROILER and per
    head for LAYER. ``profitability_confidence`` is a fixed market-price
    uncertainty figure, not derived from data.
    """

    model_config = ConfigDict(frozen=True)

    target_age_days: dict[LotCategory, int] = {
        LotCategory.GROWER: 42,
        LotCategory.BROILER: 45,
        LotCategory.LAYER: 140,   # 20 weeks
    }
    sale_prices: dict[LotCategory, float] = {
        LotCategory.GROWER: 180.0,
        LotCategory.BROILER: 200.0,
        LotCategory.LAYER: 250.0,
    }
    expense_growth_multiplier: float = 1.5
    profitability_confidence: float = 0.7

    @field_validator("target_age_days")
    @classmethod
    def validate_target_ages(cls, v: dict[LotCategory, int]) -> dict[LotCategory, int]:
        missing = set(LotCategory) - set(v)
        if missing:
            raise ValueError(f"target_age_days missing categories: {sorted(missing)}.")
        for category, days in v.items():
            if days <= 0:
                raise ValueError(f"target_age_days[{category}] must be > 0, got {days}.")
        return v

    @field_validator("sale_prices")
    @classmethod
    def validate_sale_prices(cls, v: dict[LotCategory, float]) -> dict[LotCategory, float]:
        missing = set(LotCategory) - set(v)
        if missing:
            raise ValueError(f"sale_prices missing categories: {sorted(missing)}.")
        for category, price in v.items():
            if price < 0:
                raise ValueError(f"sale_prices[{category}] must be >= 0, got {price}.")
        return v

    @field_validator("expense_growth_multiplier")
    @classmethod
    def validate_multiplier(cls, v: float) -> float:
        if v < 1.0:
            raise ValueError(f"expense_growth_multiplier must be >= 1.0, got {v}.")
        return v

    @field_validator("profitability_confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"profitability_confidence must be in [0.0, 1.0], got {v}.")
        return v


class MortalityConfig(BaseModel):
    """Risk-factor thresholds for the mortality trend estimator.

    All comparisons are strict ``>``: a lot sitting exactly on a threshold
    does not raise the flag.
    """

    model_config = ConfigDict(frozen=True)

    high_cumulative_rate_pct: float = 10.0
    rising_daily_rate: float = 0.5
    grower_critical_age_days: int = 35
    broiler_advanced_age_days: int = 42


class RecommendationConfig(BaseModel):
    """Thresholds for the recommendation rules."""

    model_config = ConfigDict(frozen=True)

    min_growth_rate_kg_per_day: float = 0.04
    min_roi_pct: float = 15.0
    harvest_window_days: int = 7
    near_target_weight_ratio: float = 0.9
    peer_growth_ratio: float = 0.8       # below 80% of peer daily gain
    peer_mortality_ratio: float = 1.2    # above 120% of peer mortality rate


class EfficiencyConfig(BaseModel):
    """Weights and reference caps for the 0–100 efficiency score.

    score = 100 * (weight_w * min(1, final_weight / reference_weight_kg)
                   + cycle_w * min(1, reference_cycle_days / target_age)
                   + survival_w * max(0, 1 - mortality_rate_pct / 100)
                   + roi_w * min(1, max(0, roi_pct / 100)))
    """

    model_config = ConfigDict(frozen=True)

    weight_weight: float = 0.3
    cycle_weight: float = 0.2
    survival_weight: float = 0.3
    roi_weight: float = 0.2
    reference_weight_kg: float = 2.5
    reference_cycle_days: float = 50.0

    @model_validator(mode="after")
    def validate_weights(self) -> "EfficiencyConfig":
        weights = (self.weight_weight, self.cycle_weight, self.survival_weight, self.roi_weight)
        if any(w < 0 for w in weights):
            raise ValueError("Efficiency weights must be non-negative.")
        if abs(sum(weights) - 1.0) > 1e-6:
            raise ValueError(f"Efficiency weights must sum to 1.0, got {sum(weights)}.")
        if self.reference_weight_kg <= 0 or self.reference_cycle_days <= 0:
            raise ValueError("Efficiency reference values must be > 0.")
        return self


class PeersConfig(BaseModel):
    """Comparative (peer-lot) lookup settings.

    ``base_url = ""`` disables the HTTP provider; forecasts then carry no
    peer comparison.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = ""
    timeout_seconds: float = 5.0
    max_retries: int = 1

    @field_validator("max_retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:
        if not 0 <= v <= 1:
            raise ValueError(f"max_retries must be 0 or 1, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration."""

    model_config = ConfigDict(frozen=True)

    forecast: ForecastConfig = ForecastConfig()
    mortality: MortalityConfig = MortalityConfig()
    recommendations: RecommendationConfig = RecommendationConfig()
    efficiency: EfficiencyConfig = EfficiencyConfig()
    peers: PeersConfig = PeersConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; when that default file is
            absent the built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    raw: dict[str, Any] = {}
    if config_path is None:
        default_path = root / "config" / "default.toml"
        if default_path.exists():
            config_path = default_path
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path is not None:
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)

        local_config_path = config_path.parent / "local.toml"
        if local_config_path.exists():
            with open(local_config_path, "rb") as f:
                local_raw: dict[str, Any] = tomllib.load(f)
            raw = _deep_merge(raw, local_raw)

    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply FLOCK_FORECASTER_* env vars to the raw config dict.

    Supported overrides:
      FLOCK_FORECASTER_PEERS_URL  → raw["peers"]["base_url"]
      FLOCK_FORECASTER_LOG_LEVEL  → raw["logging"]["level"]
      FLOCK_FORECASTER_DEBUG      → raw["debug"]
    """
    if peers_url := os.environ.get("FLOCK_FORECASTER_PEERS_URL"):
        raw.setdefault("peers", {})["base_url"] = peers_url

    if log_level := os.environ.get("FLOCK_FORECASTER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("FLOCK_FORECASTER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        forecast=ForecastConfig(**raw.get("forecast", {})),
        mortality=MortalityConfig(**raw.get("mortality", {})),
        recommendations=RecommendationConfig(**raw.get("recommendations", {})),
        efficiency=EfficiencyConfig(**raw.get("efficiency", {})),
        peers=PeersConfig(**raw.get("peers", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
