"""
Flock Forecaster — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Run the forecast (or config check).
  5. Report result to stdout.

Install and run::

    pip install -e .
    flock-forecaster --help
    flock-forecaster validate-config
    flock-forecaster forecast data/lots/L-001.json
    flock-forecaster forecast data/lots/L-001.json --as-of 2026-03-01 --json
    flock-forecaster forecast data/lots/L-001.json --peers-file data/peers.json
    flock-forecaster forecast data/lots/L-001.json --output reports/L-001.csv
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="flock-forecaster",
    help="Poultry lot performance forecaster — weight, mortality, profitability.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from flock_forecaster.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from flock_forecaster.utils.logging import configure_logging
    configure_logging(config.logging)


def _build_peer_provider(config, peers_url: Optional[str], peers_file: Optional[str]):
    """Pick the peer source: explicit file, then URL, then config URL, else none."""
    from flock_forecaster.ingestion.lot_file import load_peer_lots_file
    from flock_forecaster.peers.http_provider import HttpPeerAverageProvider
    from flock_forecaster.peers.provider import LotHistoryPeerAverageProvider

    if peers_file:
        try:
            return LotHistoryPeerAverageProvider(load_peer_lots_file(Path(peers_file)))
        except (FileNotFoundError, ValueError) as exc:
            typer.echo(f"[ERROR] Peer file could not be loaded: {exc}", err=True)
            raise typer.Exit(code=1)

    url = peers_url or config.peers.base_url
    if url:
        return HttpPeerAverageProvider(
            base_url=url,
            timeout_seconds=config.peers.timeout_seconds,
            max_retries=config.peers.max_retries,
        )
    return None


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("forecast")
def forecast(
    lot_file: str = typer.Argument(..., help="Path to the lot JSON document."),
    as_of: Optional[str] = typer.Option(
        None,
        "--as-of",
        help="Forecast date (YYYY-MM-DD). Defaults to today.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the forecast as JSON instead of the text summary.",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write the forecast to a .json or .csv file.",
    ),
    peers_url: Optional[str] = typer.Option(
        None,
        "--peers-url",
        help="Analytics service URL for peer averages (overrides config).",
    ),
    peers_file: Optional[str] = typer.Option(
        None,
        "--peers-file",
        help="JSON file of peer lot summaries (takes precedence over --peers-url).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Forecast final weight, mortality, profitability and harvest date for one lot."""
    from flock_forecaster.forecasting.assembler import ForecastAssembler
    from flock_forecaster.forecasting.validation import InvalidLotDataError
    from flock_forecaster.ingestion.lot_file import load_lot_file
    from flock_forecaster.reporting.export import export_forecasts, forecast_to_dict
    from flock_forecaster.reporting.formatters import format_forecast_summary

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    forecast_date: Optional[date] = None
    if as_of:
        try:
            forecast_date = date.fromisoformat(as_of)
        except ValueError:
            typer.echo(f"[ERROR] --as-of must be YYYY-MM-DD, got '{as_of}'.", err=True)
            raise typer.Exit(code=1)

    try:
        lot_input = load_lot_file(Path(lot_file))
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"[ERROR] Invalid lot file {lot_file}:\n{exc}", err=True)
        raise typer.Exit(code=1)

    assembler = ForecastAssembler(
        config=config,
        peer_provider=_build_peer_provider(config, peers_url, peers_file),
    )
    try:
        result = assembler.forecast(
            lot_input.lot,
            lot_input.weight_samples,
            lot_input.mortality_events,
            cumulative_expense=lot_input.expense,
            as_of=forecast_date,
        )
    except InvalidLotDataError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(forecast_to_dict(result), indent=2))
    else:
        typer.echo(format_forecast_summary(result))

    if output:
        try:
            written = export_forecasts([result], Path(output))
        except ValueError as exc:
            typer.echo(f"[ERROR] {exc}", err=True)
            raise typer.Exit(code=1)
        except OSError as exc:
            typer.echo(f"[ERROR] Could not write {output}: {exc}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"[OK] Forecast written to {written}", err=True)


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)
    fc = config.forecast

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(
        "  Target ages:      "
        + ", ".join(f"{c.value}={d}d" for c, d in fc.target_age_days.items())
    )
    typer.echo(
        "  Sale prices:      "
        + ", ".join(f"{c.value}={p:g}" for c, p in fc.sale_prices.items())
    )
    typer.echo(f"  Expense growth:   x{fc.expense_growth_multiplier:g}")
    typer.echo(f"  Peer lookup:      {config.peers.base_url or 'disabled'}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(mode="json"), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
