"""
Forecast assembly: the public entry point of the engine.

Modules
-------
assembler  : ForecastAssembler.forecast() and generate_forecast().
validation : InvalidLotDataError + validate_forecast_inputs().
"""
