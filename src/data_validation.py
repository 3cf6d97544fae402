"""
Input Validation and Data Quality Checks for A/B Tests
Validates configurations and observed counts before any statistic is computed

Run with: python -m src.data_validation
"""

import numbers
import os
import sys
from scipy.stats import chisquare

from .errors import InvalidParameterError, InvalidSampleError

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from config import DATA_QUALITY_CONFIG


def validate_configuration(config):
    """Raise InvalidParameterError for any out-of-domain design parameter"""
    problems = []

    if not 0 < config.baseline_rate < 100:
        problems.append(f"baseline_rate must be in (0, 100), got {config.baseline_rate}")
    if not config.minimum_detectable_effect > 0:
        problems.append(f"minimum_detectable_effect must be > 0, got {config.minimum_detectable_effect}")
    if not 0 < config.alpha < 1:
        problems.append(f"alpha must be in (0, 1), got {config.alpha}")
    if not 0 < config.power < 1:
        problems.append(f"power must be in (0, 1), got {config.power}")
    if not 0 < config.traffic_split < 100:
        problems.append(f"traffic_split must be in (0, 100), got {config.traffic_split}")
    if not config.test_duration > 0:
        problems.append(f"test_duration must be > 0, got {config.test_duration}")
    if not config.daily_traffic > 0:
        problems.append(f"daily_traffic must be > 0, got {config.daily_traffic}")
    if config.cost_per_visitor < 0:
        problems.append(f"cost_per_visitor must be >= 0, got {config.cost_per_visitor}")
    if config.revenue_per_conversion < 0:
        problems.append(f"revenue_per_conversion must be >= 0, got {config.revenue_per_conversion}")

    if problems:
        raise InvalidParameterError("; ".join(problems))


def validate_test_data(data):
    """Raise InvalidSampleError unless both arms hold analyzable counts"""
    arms = [
        ('control', data.control_conversions, data.control_total),
        ('treatment', data.treatment_conversions, data.treatment_total),
    ]
    for arm, conversions, total in arms:
        for name, value in [(f"{arm}_conversions", conversions), (f"{arm}_total", total)]:
            if not isinstance(value, numbers.Integral):
                raise InvalidSampleError(f"{name} must be a whole number, got {value!r}")
        if total <= 0:
            raise InvalidSampleError(f"{arm}_total must be > 0, got {total}")
        if conversions < 0:
            raise InvalidSampleError(f"{arm}_conversions must be >= 0, got {conversions}")
        if conversions > total:
            raise InvalidSampleError(
                f"{arm}_conversions ({conversions}) exceeds {arm}_total ({total})"
            )


def check_sample_ratio_mismatch(data, traffic_split=50, alpha=None):
    """
    Critical: Detect Sample Ratio Mismatch (SRM)
    SRM indicates bugs in randomization implementation
    """
    alpha = alpha or DATA_QUALITY_CONFIG['srm_alpha']

    print("\n" + "="*70)
    print("SAMPLE RATIO MISMATCH CHECK")
    print("="*70)

    total = data.control_total + data.treatment_total
    treatment_share = traffic_split / 100
    observed = [data.control_total, data.treatment_total]
    expected = [total * (1 - treatment_share), total * treatment_share]

    chi2, p_value = chisquare(observed, expected)

    print(f"Expected allocation: {1 - treatment_share:.1%} / {treatment_share:.1%}")
    print(f"Observed allocation: {data.control_total / total:.2%} / {data.treatment_total / total:.2%}")
    print(f"Chi-square: {chi2:.4f}")
    print(f"P-value: {p_value:.6f}")

    if p_value < alpha:
        print("\n⚠️  WARNING: SAMPLE RATIO MISMATCH DETECTED!")
        print("Check randomization implementation for bugs")
        return False
    else:
        print("\n✓ No SRM detected - randomization is valid")
        return True


def check_duplicates(df):
    """Check for duplicate user IDs"""
    print("\n" + "="*70)
    print("DUPLICATE USER CHECK")
    print("="*70)

    duplicates = df['user_id'].duplicated().sum()

    if duplicates > 0:
        print(f"⚠️  WARNING: Found {duplicates} duplicate user IDs!")
        return False
    else:
        print("✓ No duplicate users found")
        return True


def check_test_duration(config, min_days=None):
    """Verify test is planned to run for the minimum duration"""
    min_days = min_days or DATA_QUALITY_CONFIG['min_test_duration_days']

    print("\n" + "="*70)
    print("TEST DURATION CHECK")
    print("="*70)

    print(f"Test duration: {config.test_duration} days")
    print(f"Minimum required: {min_days} days")

    if config.test_duration < min_days:
        print("\n⚠️  WARNING: Test duration too short!")
        return False
    else:
        print("\n✓ Test duration is sufficient")
        return True


def run_all_validations(data, config, df=None):
    """Run complete validation suite"""
    print("\n" + "="*70)
    print("STARTING DATA QUALITY VALIDATION")
    print("="*70)

    issues = []

    try:
        validate_configuration(config)
    except InvalidParameterError as e:
        issues.append(f"Invalid configuration: {e}")

    try:
        validate_test_data(data)
    except InvalidSampleError as e:
        issues.append(f"Invalid test data: {e}")
    else:
        if not check_sample_ratio_mismatch(data, config.traffic_split):
            issues.append("Sample Ratio Mismatch detected")

    if not check_test_duration(config):
        issues.append("Test duration too short")

    if df is not None and not check_duplicates(df):
        issues.append("Duplicate users found")

    # Summary
    print("\n" + "="*70)
    print("VALIDATION SUMMARY")
    print("="*70)

    if len(issues) == 0:
        print("\n✓ ALL CRITICAL CHECKS PASSED!")
        print("Data quality is good - proceed with analysis")
        return True
    else:
        print(f"\n⚠️  Found {len(issues)} critical issues:")
        for i, issue in enumerate(issues, 1):
            print(f"{i}. {issue}")
        print("\nReview these issues before proceeding")
        return False


if __name__ == "__main__":
    from .models import TestConfiguration, TestData

    passed = run_all_validations(TestData.from_config(), TestConfiguration.from_config())
    sys.exit(0 if passed else 1)
