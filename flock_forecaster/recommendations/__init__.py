"""
Recommendation engine: turns forecast metrics into prioritised actions and a
single efficiency score.

Modules
-------
rules      : RecommendationContext + build_recommendations() — independent
             threshold rules with a positive fallback. Pure functions.
efficiency : compute_projected_efficiency() — weighted 0–100 blend of weight
             attainment, cycle time, survival and ROI.
"""
