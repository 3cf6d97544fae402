"""
Bayesian A/B Analysis
Beta-Binomial conjugate model compared by Monte Carlo simulation
"""

import math
import os
import sys

import numpy as np

from .data_validation import validate_test_data
from .errors import InvalidParameterError, warn_degenerate
from .models import BayesianResults, BetaPosterior
from .numeric import beta_random, default_uniform

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from config import BAYES_CONFIG


def posteriors(data, prior_alpha=1.0, prior_beta=1.0):
    """Beta posteriors of the control and treatment conversion rates."""
    if not (prior_alpha > 0 and prior_beta > 0):
        raise InvalidParameterError(
            f"Prior shapes must be > 0, got alpha={prior_alpha}, beta={prior_beta}"
        )

    posterior_a = BetaPosterior(
        prior_alpha + data.control_conversions,
        prior_beta + data.control_total - data.control_conversions
    )
    posterior_b = BetaPosterior(
        prior_alpha + data.treatment_conversions,
        prior_beta + data.treatment_total - data.treatment_conversions
    )
    return posterior_a, posterior_b


def _lift_samples(control_samples, treatment_samples):
    # A draw of exactly 0 for control has no defined lift; count it as 0
    with np.errstate(divide='ignore', invalid='ignore'):
        lift = (treatment_samples - control_samples) / control_samples * 100
    return np.where(control_samples > 0, lift, 0.0)


def analyze_bayesian(data, prior=None, simulations=None, credible_samples=None,
                     uniform=None, chunk_size=None, decision_threshold=None):
    """
    Bayesian A/B test using Beta-Binomial conjugate prior

    Args:
        data: TestData with both totals > 0
        prior: (alpha, beta) prior shapes, uniform Beta(1, 1) by default
        simulations: Monte Carlo draws for P(B > A), expected lift and risk
        credible_samples: Separate draws for the 95% credible interval
        uniform: Uniform(0, 1) source, see numeric.default_uniform
        chunk_size: Max draws held in memory at once
        decision_threshold: Posterior probability required to recommend an arm

    Returns:
        BayesianResults. `probability_std_error` is the Monte Carlo standard
        error sqrt(p * (1 - p) / simulations) of `probability_b_wins`.
    """
    validate_test_data(data)

    prior_alpha, prior_beta = prior or (BAYES_CONFIG['prior_alpha'], BAYES_CONFIG['prior_beta'])
    if simulations is None:
        simulations = BAYES_CONFIG['n_simulations']
    if credible_samples is None:
        credible_samples = BAYES_CONFIG['credible_samples']
    if chunk_size is None:
        chunk_size = BAYES_CONFIG['chunk_size']
    if decision_threshold is None:
        decision_threshold = BAYES_CONFIG['decision_threshold']
    uniform = uniform or default_uniform()

    if simulations < 1 or credible_samples < 1 or chunk_size < 1:
        raise InvalidParameterError("simulations, credible_samples and chunk_size must be >= 1")
    if not 0.5 <= decision_threshold < 1:
        raise InvalidParameterError(
            f"decision_threshold must be in [0.5, 1), got {decision_threshold}"
        )

    posterior_a, posterior_b = posteriors(data, prior_alpha, prior_beta)

    # Draws are independent, so chunk results are simply summed
    b_wins = 0
    lift_sum = 0.0
    loss_treatment = 0.0
    loss_control = 0.0
    zero_control_draws = 0

    for start in range(0, simulations, chunk_size):
        n = min(chunk_size, simulations - start)
        control_samples = beta_random(posterior_a.alpha, posterior_a.beta, n, uniform)
        treatment_samples = beta_random(posterior_b.alpha, posterior_b.beta, n, uniform)

        b_wins += int(np.count_nonzero(treatment_samples > control_samples))
        lift_sum += float(_lift_samples(control_samples, treatment_samples).sum())
        loss_treatment += float(np.maximum(control_samples - treatment_samples, 0).sum())
        loss_control += float(np.maximum(treatment_samples - control_samples, 0).sum())
        zero_control_draws += int(np.count_nonzero(control_samples == 0))

    prob_treatment_better = b_wins / simulations
    expected_lift = lift_sum / simulations

    # Credible interval from its own batch
    control_samples = beta_random(posterior_a.alpha, posterior_a.beta, credible_samples, uniform)
    treatment_samples = beta_random(posterior_b.alpha, posterior_b.beta, credible_samples, uniform)
    lifts = np.sort(_lift_samples(control_samples, treatment_samples))
    lower = float(lifts[int(math.floor(0.025 * credible_samples))])
    upper = float(lifts[min(int(math.floor(0.975 * credible_samples)), credible_samples - 1)])

    degenerate = ()
    if zero_control_draws:
        degenerate = (warn_degenerate(
            'zero_control_draw',
            f"{zero_control_draws} control draws were 0; their lift was counted as 0"
        ),)

    # Recommendation
    if prob_treatment_better > decision_threshold:
        recommendation = 'treatment'
    elif prob_treatment_better < 1 - decision_threshold:
        recommendation = 'control'
    else:
        recommendation = 'inconclusive'

    return BayesianResults(
        probability_b_wins=prob_treatment_better,
        expected_lift=expected_lift,
        credible_interval=(lower, upper),
        posterior_a=posterior_a,
        posterior_b=posterior_b,
        n_simulations=simulations,
        probability_std_error=math.sqrt(
            prob_treatment_better * (1 - prob_treatment_better) / simulations
        ),
        risk_choosing_treatment=loss_treatment / simulations,
        risk_choosing_control=loss_control / simulations,
        recommended_variant=recommendation,
        degenerate=degenerate,
    )
