"""
Configuration file for the A/B Test Decision Engine
Modify these parameters to customize planning and analysis defaults
"""


TEST_CONFIG = {
    'baseline_rate': 12.5,              # Control conversion rate (%)
    'minimum_detectable_effect': 2.5,   # Relative lift to detect (%)
    'alpha': 0.05,                      # Significance level
    'power': 0.80,                      # Statistical power
    'traffic_split': 50,                # % of traffic sent to treatment
    'test_duration': 14,                # Days
    'daily_traffic': 2500,              # Visitors per day
    'cost_per_visitor': 0.15,
    'revenue_per_conversion': 25.0,
    'industry': 'ecommerce',
    'test_type': 'conversion',
}

OBSERVED_DATA = {
    'control_conversions': 1247,
    'control_total': 12500,
    'treatment_conversions': 1398,
    'treatment_total': 12500,
}

BAYES_CONFIG = {
    'prior_alpha': 1.0,                 # Uniform Beta(1, 1) prior
    'prior_beta': 1.0,
    'n_simulations': 100_000,           # Draws for P(B > A) and expected lift
    'credible_samples': 10_000,         # Draws for the credible interval
    'chunk_size': 100_000,              # Max draws held in memory at once
    'decision_threshold': 0.95,
}

ROI_CONFIG = {
    'opportunity_cost_rate': 0.0,       # Share of daily_traffic * duration * cost charged as opportunity cost
    'days_per_year': 365,
}

DATA_QUALITY_CONFIG = {
    'srm_alpha': 0.001,                 # Sample ratio mismatch threshold
    'min_test_duration_days': 7,
}

EXPERIMENT_CONFIG = {
    'experiment_name': 'checkout_optimization_v1',
    'start_date': '2024-11-01',
    'true_lift': 12.0,                  # Relative lift (%) used for synthetic data
    'seed': 42,
}
