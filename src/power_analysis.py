"""
Sample Size Planning and Power Analysis
"""

import math

from statsmodels.stats.power import zt_ind_solve_power

from .data_validation import validate_configuration
from .errors import InvalidParameterError, InvalidSampleError
from .numeric import inverse_normal


def planned_rates(config):
    """Control and treatment proportions implied by a configuration.

    The minimum detectable effect is relative: p2 = p1 * (1 + mde / 100).
    """
    p1 = config.baseline_rate / 100
    p2 = p1 * (1 + config.minimum_detectable_effect / 100)
    return p1, p2


def cohens_h(p1, p2):
    return 2 * (math.asin(math.sqrt(p2)) - math.asin(math.sqrt(p1)))


def plan_sample_size(config):
    """
    Required sample size per arm for a two-sided two-proportion z-test

    Args:
        config: TestConfiguration with baseline rate, MDE, alpha and power

    Returns:
        Visitors needed in each arm, rounded up
    """
    validate_configuration(config)

    p1, p2 = planned_rates(config)
    if p2 == p1:
        raise InvalidParameterError("Treatment rate equals baseline rate; effect is zero")
    if p2 >= 1:
        raise InvalidParameterError(
            f"Baseline {config.baseline_rate}% with a {config.minimum_detectable_effect}% "
            f"relative effect implies a treatment rate of {p2:.2%}"
        )

    z_alpha = inverse_normal(1 - config.alpha / 2)
    z_beta = inverse_normal(config.power)
    pooled_p = (p1 + p2) / 2

    numerator = (
        z_alpha * math.sqrt(2 * pooled_p * (1 - pooled_p))
        + z_beta * math.sqrt(p1 * (1 - p1) + p2 * (1 - p2))
    ) ** 2
    denominator = (p2 - p1) ** 2

    return int(math.ceil(numerator / denominator))


def achieved_power(config, n_per_variant):
    """Power to detect the configured effect with `n_per_variant` users per arm."""
    if n_per_variant <= 0:
        raise InvalidSampleError("n_per_variant must be > 0")

    p1, p2 = planned_rates(config)
    power = zt_ind_solve_power(
        effect_size=abs(cohens_h(p1, p2)),
        nobs1=n_per_variant,
        alpha=config.alpha,
        ratio=1.0,
        alternative='two-sided'
    )
    return float(power)


def estimate_duration_days(config, n_per_variant):
    """Days of traffic needed before the smaller arm reaches `n_per_variant`."""
    share = min(config.traffic_split, 100 - config.traffic_split) / 100
    daily_per_arm = config.daily_traffic * share
    return int(math.ceil(n_per_variant / daily_per_arm))


def power_analysis(config, actual_n=None):
    """
    Calculate required sample size and, optionally, achieved power

    Args:
        config: TestConfiguration
        actual_n: Observed users per arm (smaller arm); skips achieved power if None

    Returns:
        Dictionary with power analysis results
    """
    n_per_variant = plan_sample_size(config)
    p1, p2 = planned_rates(config)

    results = {
        'baseline_rate': p1,
        'target_rate': p2,
        'mde': config.minimum_detectable_effect,
        'alpha': config.alpha,
        'target_power': config.power,
        'effect_size': cohens_h(p1, p2),
        'required_n_per_variant': n_per_variant,
        'total_required_n': n_per_variant * 2,
        'estimated_duration_days': estimate_duration_days(config, n_per_variant),
        'planned_duration_days': config.test_duration,
    }

    if actual_n is not None:
        power = achieved_power(config, actual_n)
        results.update({
            'actual_n_per_variant': actual_n,
            'achieved_power': power,
            'is_adequately_powered': power >= config.power,
        })

    return results
