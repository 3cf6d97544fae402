"""
Data Model for A/B Tests
Design-time configuration, observed counts and derived result structures
"""

from __future__ import annotations

import os
import sys
from dataclasses import asdict, dataclass
from typing import Optional, Tuple

import pandas as pd

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from config import OBSERVED_DATA, TEST_CONFIG


# Decimal places kept when results are handed to export collaborators
P_VALUE_DECIMALS = 6
RATE_DECIMALS = 4
DEFAULT_DECIMALS = 6


@dataclass(frozen=True)
class TestConfiguration:
    """Design-time parameters of an experiment. Rates and effects are in %."""

    __test__ = False  # not a pytest test class

    baseline_rate: float
    minimum_detectable_effect: float
    alpha: float = 0.05
    power: float = 0.8
    traffic_split: float = 50.0
    test_duration: float = 14
    daily_traffic: float = 2500
    cost_per_visitor: float = 0.0
    revenue_per_conversion: float = 0.0
    industry: str = 'other'
    test_type: str = 'conversion'

    @classmethod
    def from_config(cls, **overrides) -> "TestConfiguration":
        params = {**TEST_CONFIG, **overrides}
        return cls(**params)


@dataclass
class TestData:
    """Observed conversion counts for both arms."""

    __test__ = False

    control_conversions: int
    control_total: int
    treatment_conversions: int
    treatment_total: int

    @classmethod
    def from_config(cls, **overrides) -> "TestData":
        return cls(**{**OBSERVED_DATA, **overrides})

    @classmethod
    def from_frame(cls, df: pd.DataFrame, control_variant: str = 'control',
                   treatment_variant: str = 'treatment',
                   metric: str = 'converted') -> "TestData":
        """Aggregate user-level rows (one per user, `variant` + binary metric)."""
        control = df[df['variant'] == control_variant]
        treatment = df[df['variant'] == treatment_variant]
        return cls(
            control_conversions=int(control[metric].sum()),
            control_total=int(len(control)),
            treatment_conversions=int(treatment[metric].sum()),
            treatment_total=int(len(treatment)),
        )

    def record(self, arm: str, visitors: int, conversions: int) -> None:
        """Add newly observed visitors and conversions to one arm."""
        if arm == 'control':
            self.control_total += visitors
            self.control_conversions += conversions
        elif arm == 'treatment':
            self.treatment_total += visitors
            self.treatment_conversions += conversions
        else:
            raise ValueError(f"Unknown arm: {arm!r}")

    def swapped(self) -> "TestData":
        return TestData(
            control_conversions=self.treatment_conversions,
            control_total=self.treatment_total,
            treatment_conversions=self.control_conversions,
            treatment_total=self.control_total,
        )


@dataclass(frozen=True)
class BetaPosterior:
    alpha: float
    beta: float

    @property
    def mean(self) -> float:
        return self.alpha / (self.alpha + self.beta)


@dataclass(frozen=True)
class StatisticalResults:
    """Frequentist two-proportion z-test output.

    Rates are proportions (0-1). `lift` and `confidence_interval` are on the
    relative-lift scale, in percent of the control rate.
    """

    control_rate: float
    treatment_rate: float
    lift: float
    p_value: float
    z_score: float
    standard_error: float
    confidence_interval: Tuple[float, float]
    is_significant: bool
    effect_size: float
    alpha: float
    required_sample_size: Optional[int] = None
    degenerate: Tuple[str, ...] = ()

    @property
    def absolute_lift(self) -> float:
        return self.treatment_rate - self.control_rate

    def to_dict(self) -> dict:
        return {
            'control_rate': round(self.control_rate, RATE_DECIMALS),
            'treatment_rate': round(self.treatment_rate, RATE_DECIMALS),
            'lift': round(self.lift, DEFAULT_DECIMALS),
            'p_value': round(self.p_value, P_VALUE_DECIMALS),
            'z_score': round(self.z_score, DEFAULT_DECIMALS),
            'standard_error': round(self.standard_error, DEFAULT_DECIMALS),
            'confidence_interval': [round(v, DEFAULT_DECIMALS) for v in self.confidence_interval],
            'is_significant': self.is_significant,
            'effect_size': round(self.effect_size, DEFAULT_DECIMALS),
            'alpha': self.alpha,
            'required_sample_size': self.required_sample_size,
            'degenerate': list(self.degenerate),
        }


@dataclass(frozen=True)
class BayesianResults:
    """Beta-Binomial posterior comparison estimated by Monte Carlo."""

    probability_b_wins: float
    expected_lift: float
    credible_interval: Tuple[float, float]
    posterior_a: BetaPosterior
    posterior_b: BetaPosterior
    n_simulations: int
    probability_std_error: float
    risk_choosing_treatment: float
    risk_choosing_control: float
    recommended_variant: str
    degenerate: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            'probability_b_wins': round(self.probability_b_wins, DEFAULT_DECIMALS),
            'expected_lift': round(self.expected_lift, DEFAULT_DECIMALS),
            'credible_interval': [round(v, DEFAULT_DECIMALS) for v in self.credible_interval],
            'posterior_a': asdict(self.posterior_a),
            'posterior_b': asdict(self.posterior_b),
            'n_simulations': self.n_simulations,
            'probability_std_error': round(self.probability_std_error, DEFAULT_DECIMALS),
            'risk_choosing_treatment': round(self.risk_choosing_treatment, DEFAULT_DECIMALS),
            'risk_choosing_control': round(self.risk_choosing_control, DEFAULT_DECIMALS),
            'recommended_variant': self.recommended_variant,
            'degenerate': list(self.degenerate),
        }


@dataclass(frozen=True)
class ROIAnalysis:
    """Financial translation of a test result.

    `payback_period` is None when the test generated no additional revenue,
    i.e. the investment is never paid back.
    """

    total_cost: float
    additional_revenue: float
    net_present_value: float
    roi: float
    payback_period: Optional[float]
    annualized_revenue: float
    opportunity_cost: float = 0.0
    degenerate: Tuple[str, ...] = ()

    @property
    def is_payback_unbounded(self) -> bool:
        return self.payback_period is None

    def to_dict(self) -> dict:
        return {
            'total_cost': round(self.total_cost, DEFAULT_DECIMALS),
            'additional_revenue': round(self.additional_revenue, DEFAULT_DECIMALS),
            'net_present_value': round(self.net_present_value, DEFAULT_DECIMALS),
            'roi': round(self.roi, DEFAULT_DECIMALS),
            'payback_period': (None if self.payback_period is None
                               else round(self.payback_period, DEFAULT_DECIMALS)),
            'annualized_revenue': round(self.annualized_revenue, DEFAULT_DECIMALS),
            'opportunity_cost': round(self.opportunity_cost, DEFAULT_DECIMALS),
            'degenerate': list(self.degenerate),
        }
