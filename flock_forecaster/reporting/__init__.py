"""
Reporting layer: forecast serialisation for display components, exporters
and the CLI.

Modules
-------
export     : forecast_to_dict(), flatten_forecast_for_export(),
             export_to_csv(), export_to_json(), export_forecasts().
formatters : format_forecast_summary() — ASCII block for terminal output.
"""
