"""
Synthetic A/B Test Data Generation
Generates experiment traffic for a TestConfiguration, either as aggregate
counts or as user-level rows

Run with: python -m src.data_generation
"""

import os
import sys
import numpy as np
import pandas as pd
from faker import Faker
from datetime import datetime, timedelta

from .data_validation import validate_configuration
from .errors import InvalidParameterError
from .models import TestConfiguration, TestData

# Import configuration
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from config import EXPERIMENT_CONFIG


def _arm_rates(config, true_lift):
    control_rate = config.baseline_rate / 100
    treatment_rate = control_rate * (1 + true_lift / 100)
    if not 0 <= treatment_rate <= 1:
        raise InvalidParameterError(
            f"true_lift of {true_lift}% gives a treatment rate of {treatment_rate:.2%}"
        )
    return control_rate, treatment_rate


def _planned_visitors(config):
    visitors = int(config.daily_traffic * config.test_duration)
    treatment_total = int(round(visitors * config.traffic_split / 100))
    return visitors - treatment_total, treatment_total


def simulate_test_data(config, true_lift=None, seed=None):
    """Draw binomial conversion counts for the traffic a configuration plans"""
    validate_configuration(config)
    true_lift = EXPERIMENT_CONFIG['true_lift'] if true_lift is None else true_lift
    control_rate, treatment_rate = _arm_rates(config, true_lift)
    control_total, treatment_total = _planned_visitors(config)

    rng = np.random.default_rng(seed)
    return TestData(
        control_conversions=int(rng.binomial(control_total, control_rate)),
        control_total=control_total,
        treatment_conversions=int(rng.binomial(treatment_total, treatment_rate)),
        treatment_total=treatment_total,
    )


def generate_ab_test_data(config=None, true_lift=None, seed=None,
                          output_path=None, verbose=True):
    """Generate a user-level dataset (one row per visitor)"""
    config = config or TestConfiguration.from_config()
    validate_configuration(config)
    true_lift = EXPERIMENT_CONFIG['true_lift'] if true_lift is None else true_lift
    seed = EXPERIMENT_CONFIG['seed'] if seed is None else seed
    control_rate, treatment_rate = _arm_rates(config, true_lift)

    n_users = int(config.daily_traffic * config.test_duration)

    if verbose:
        print("="*70)
        print("GENERATING A/B TEST DATA")
        print("="*70)
        print(f"\nExperiment: {EXPERIMENT_CONFIG['experiment_name']}")
        print(f"Users: {n_users:,}")
        print(f"Duration: {config.test_duration} days")
        print(f"Control conversion: {control_rate:.2%}")
        print(f"Treatment conversion: {treatment_rate:.2%}")
        print(f"Expected lift: {true_lift:.2f}%")
        print()

    rng = np.random.default_rng(seed)
    fake = Faker()
    Faker.seed(seed)

    # User assignment
    variant = np.where(
        rng.random(n_users) < config.traffic_split / 100, 'treatment', 'control'
    )

    # Entry timestamp
    start_date = datetime.strptime(EXPERIMENT_CONFIG['start_date'], '%Y-%m-%d')
    minutes_offset = rng.integers(0, int(config.test_duration * 24 * 60), n_users)
    entry_timestamp = [start_date + timedelta(minutes=int(m)) for m in minutes_offset]

    # Determine if converted
    rates = np.where(variant == 'treatment', treatment_rate, control_rate)
    converted = (rng.random(n_users) < rates).astype(int)

    df = pd.DataFrame({
        'user_id': [fake.uuid4() for _ in range(n_users)],
        'variant': variant,
        'entry_timestamp': entry_timestamp,
        'converted': converted,
    })
    df = df.sort_values('entry_timestamp').reset_index(drop=True)

    if verbose:
        # Summary statistics
        print("\n" + "="*70)
        print("GENERATION SUMMARY")
        print("="*70)
        print(f"\nTotal users: {len(df):,}")
        print("\nVariant distribution:")
        print(df['variant'].value_counts())

        control_conv = df[df['variant'] == 'control']['converted'].mean()
        treatment_conv = df[df['variant'] == 'treatment']['converted'].mean()
        observed_lift = (treatment_conv / control_conv - 1) if control_conv > 0 else 0

        print(f"\nControl conversion: {control_conv:.4f}")
        print(f"Treatment conversion: {treatment_conv:.4f}")
        print(f"Observed lift: {observed_lift:.2%}")

    if output_path:
        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
        df.to_csv(output_path, index=False)
        if verbose:
            print(f"\n✓ Data saved to {output_path}")
            print(f"File size: {os.path.getsize(output_path) / 1024:.2f} KB")

    if verbose:
        print("="*70 + "\n")

    return df


if __name__ == "__main__":
    df = generate_ab_test_data(output_path='data/ab_test_data.csv')
    print("First 10 rows:")
    print(df.head(10))
    print("\nData types:")
    print(df.dtypes)
