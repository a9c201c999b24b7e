"""
Trend estimators — small closed-form models refit on every forecast.

Modules
-------
weight_trend    : WeightTrendEstimator — OLS of average weight on age;
                  exposes the growth rate (kg/day).
mortality_trend : MortalityTrendEstimator — average daily deaths plus
                  categorical risk-factor detection.
profitability   : ProfitabilityEstimator — revenue / net profit / ROI from
                  the configured sale price table.

Every estimator follows the same contract: ``fit(...)`` returns a frozen
model dataclass, ``predict(model, ...)`` returns a frozen prediction. No
estimator keeps state between calls and none raises for thin data.
"""
