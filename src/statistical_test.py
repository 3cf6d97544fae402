"""
Statistical Analysis Module for A/B Testing
Frequentist z-test plus the ABTestAnalyzer facade over planning, Bayesian and ROI analysis

Run with: python -m src.statistical_test
"""

import math
import os
import sys

from .bayesian import analyze_bayesian
from .data_validation import validate_test_data
from .errors import InvalidParameterError, warn_degenerate
from .models import StatisticalResults, TestConfiguration, TestData
from .numeric import default_uniform, inverse_normal, normal_cdf
from .power_analysis import plan_sample_size, power_analysis
from .roi import evaluate_roi

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from config import TEST_CONFIG


def analyze_frequentist(data, alpha=None, config=None):
    """
    Two-proportion z-test (pooled SE) with a CI for the difference (unpooled SE)

    Args:
        data: TestData with both totals > 0
        alpha: Significance level, TEST_CONFIG['alpha'] by default
        config: Optional TestConfiguration used to fill `required_sample_size`

    Returns:
        StatisticalResults. Rates are proportions; lift and the confidence
        interval are relative to the control rate, in percent. When the control
        rate is 0 the lift and interval are 0 and 'lift_undefined' is flagged.
    """
    validate_test_data(data)
    if alpha is None:
        alpha = config.alpha if config is not None else TEST_CONFIG['alpha']
    if not 0 < alpha < 1:
        raise InvalidParameterError(f"alpha must be in (0, 1), got {alpha}")
    z_crit = inverse_normal(1 - alpha / 2)

    n1, n2 = data.control_total, data.treatment_total
    p1 = data.control_conversions / n1
    p2 = data.treatment_conversions / n2

    pooled_p = (data.control_conversions + data.treatment_conversions) / (n1 + n2)
    se = math.sqrt(pooled_p * (1 - pooled_p) * (1 / n1 + 1 / n2))

    degenerate = []

    if se > 0:
        z_score = (p2 - p1) / se
    else:
        z_score = 0.0
        degenerate.append(warn_degenerate(
            'zero_variance', "pooled rate is 0 or 1; z-score reported as 0"
        ))
    p_value = 2 * (1 - normal_cdf(abs(z_score)))

    diff = p2 - p1
    margin_of_error = z_crit * math.sqrt(p1 * (1 - p1) / n1 + p2 * (1 - p2) / n2)

    if p1 > 0:
        lift = diff / p1 * 100
        ci = ((diff - margin_of_error) / p1 * 100, (diff + margin_of_error) / p1 * 100)
    else:
        lift = 0.0
        ci = (0.0, 0.0)
        degenerate.append(warn_degenerate(
            'lift_undefined', "control rate is 0; lift and interval reported as 0"
        ))

    effect_size = 2 * (math.asin(math.sqrt(p2)) - math.asin(math.sqrt(p1)))

    return StatisticalResults(
        control_rate=p1,
        treatment_rate=p2,
        lift=lift,
        p_value=p_value,
        z_score=z_score,
        standard_error=se,
        confidence_interval=ci,
        is_significant=p_value < alpha,
        effect_size=effect_size,
        alpha=alpha,
        required_sample_size=plan_sample_size(config) if config is not None else None,
        degenerate=tuple(degenerate),
    )


def generate_recommendation(stats, roi=None):
    """Plain-language ship decision from significance, lift sign and ROI"""
    if not stats.is_significant:
        return (
            "Do not ship the treatment. The test did not reach statistical significance "
            f"(p = {stats.p_value:.4f}); the observed difference could be due to chance."
        )

    if stats.lift < 0:
        return (
            f"Do not ship the treatment. It is significantly worse (p = {stats.p_value:.4f}), "
            f"with a {abs(stats.lift):.2f}% decrease in conversion rate."
        )

    if roi is not None and roi.roi <= 0:
        return (
            f"Proceed with caution. The {stats.lift:.2f}% lift is significant "
            f"(p = {stats.p_value:.4f}) but the ROI of {roi.roi:.1f}% does not cover the test cost."
        )

    if roi is not None and roi.roi <= 20:
        return (
            f"Ship with monitoring. The {stats.lift:.2f}% lift is significant "
            f"(p = {stats.p_value:.4f}) with a modest ROI of {roi.roi:.1f}%."
        )

    return (
        f"Ship the treatment. The {stats.lift:.2f}% lift is significant "
        f"(p = {stats.p_value:.4f})"
        + (f" and the ROI of {roi.roi:.1f}% justifies rollout." if roi is not None else ".")
    )


class ABTestAnalyzer:
    """
    A/B test analysis over user-level experiment data

    Methods:
    - Power analysis (required and achieved sample size)
    - Frequentist (p-values, confidence intervals)
    - Bayesian (posterior probabilities)
    - Business impact (ROI)
    """

    def __init__(self, df, control_variant='control', treatment_variant='treatment',
                 config=None):
        self.control_variant = control_variant
        self.treatment_variant = treatment_variant
        self.config = config or TestConfiguration.from_config()

        self.test_data = TestData.from_frame(df, control_variant, treatment_variant)
        validate_test_data(self.test_data)

    @classmethod
    def from_counts(cls, data, config=None):
        """Build an analyzer directly from aggregate counts"""
        validate_test_data(data)
        analyzer = cls.__new__(cls)
        analyzer.control_variant = 'control'
        analyzer.treatment_variant = 'treatment'
        analyzer.config = config or TestConfiguration.from_config()
        analyzer.test_data = data
        return analyzer

    # ========================================================================
    # POWER ANALYSIS
    # ========================================================================

    def power_analysis(self, config=None):
        config = config or self.config
        actual_n = min(self.test_data.control_total, self.test_data.treatment_total)
        return power_analysis(config, actual_n=actual_n)

    # ========================================================================
    # FREQUENTIST ANALYSIS
    # ========================================================================

    def frequentist_test(self, alpha=None):
        alpha = alpha if alpha is not None else self.config.alpha
        return analyze_frequentist(self.test_data, alpha=alpha, config=self.config)

    # ========================================================================
    # BAYESIAN ANALYSIS
    # ========================================================================

    def bayesian_test(self, n_simulations=None, prior_alpha=1, prior_beta=1, seed=None):
        return analyze_bayesian(
            self.test_data,
            prior=(prior_alpha, prior_beta),
            simulations=n_simulations,
            uniform=default_uniform(seed),
        )

    # ========================================================================
    # BUSINESS IMPACT
    # ========================================================================

    def calculate_business_impact(self, alpha=None):
        stats = self.frequentist_test(alpha)
        return evaluate_roi(self.test_data, self.config, stats)


def run_complete_analysis(df=None, config=None, seed=42):
    """Run complete statistical analysis suite"""
    if df is None:
        analyzer = ABTestAnalyzer.from_counts(TestData.from_config(), config=config)
    else:
        analyzer = ABTestAnalyzer(df, config=config)

    print("\n" + "="*70)
    print("A/B TEST STATISTICAL ANALYSIS")
    print("="*70)
    print(f"\nControl: {analyzer.test_data.control_conversions:,} / {analyzer.test_data.control_total:,}")
    print(f"Treatment: {analyzer.test_data.treatment_conversions:,} / {analyzer.test_data.treatment_total:,}")

    # Power Analysis
    print("\n" + "="*70)
    print("POWER ANALYSIS")
    print("="*70)
    power = analyzer.power_analysis()
    print(f"Required sample size per variant: {power['required_n_per_variant']:,}")
    print(f"Estimated duration: {power['estimated_duration_days']} days")
    print(f"Achieved power: {power['achieved_power']:.2%}")
    print(f"Adequately powered: {'YES' if power['is_adequately_powered'] else 'NO'}")

    # Frequentist Test
    print("\n" + "="*70)
    print("FREQUENTIST ANALYSIS")
    print("="*70)
    freq = analyzer.frequentist_test()
    print(f"Control conversion: {freq.control_rate:.4f}")
    print(f"Treatment conversion: {freq.treatment_rate:.4f}")
    print(f"Relative lift: {freq.lift:.2f}%")
    print(f"Z-score: {freq.z_score:.4f}")
    print(f"P-value: {freq.p_value:.6f}")
    print(f"{1 - freq.alpha:.0%} CI (lift): [{freq.confidence_interval[0]:.2f}%, {freq.confidence_interval[1]:.2f}%]")
    print(f"Effect size (Cohen's h): {freq.effect_size:.4f}")
    print(f"Significant: {'YES ✅' if freq.is_significant else 'NO ❌'}")

    # Bayesian Test
    print("\n" + "="*70)
    print("BAYESIAN ANALYSIS")
    print("="*70)
    bayes = analyzer.bayesian_test(seed=seed)
    print(f"Prob(Treatment > Control): {bayes.probability_b_wins:.2%} "
          f"(± {bayes.probability_std_error:.4f})")
    print(f"Expected lift: {bayes.expected_lift:.2f}%")
    print(f"95% Credible Interval: [{bayes.credible_interval[0]:.2f}%, {bayes.credible_interval[1]:.2f}%]")
    print(f"Recommendation: {bayes.recommended_variant.upper()}")

    # Business Impact
    print("\n" + "="*70)
    print("BUSINESS IMPACT")
    print("="*70)
    roi = evaluate_roi(analyzer.test_data, analyzer.config, freq)
    print(f"Total cost: ${roi.total_cost:,.2f}")
    print(f"Additional revenue: ${roi.additional_revenue:,.2f}")
    print(f"ROI: {roi.roi:.1f}%")
    if roi.is_payback_unbounded:
        print("Payback period: never (no additional revenue)")
    else:
        print(f"Payback period: {roi.payback_period:.1f} days")
    print(f"Annualized revenue: ${roi.annualized_revenue:,.0f}")

    print("\n" + generate_recommendation(freq, roi))
    print("\n" + "="*70 + "\n")

    return {'power': power, 'frequentist': freq, 'bayesian': bayes, 'roi': roi}


if __name__ == "__main__":
    run_complete_analysis()
