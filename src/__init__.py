"""A/B test planning, inference and ROI decision engine."""

from .errors import DegenerateResultWarning, InvalidParameterError, InvalidSampleError
from .models import (
    BayesianResults,
    BetaPosterior,
    ROIAnalysis,
    StatisticalResults,
    TestConfiguration,
    TestData,
)
from .power_analysis import plan_sample_size, power_analysis
from .statistical_test import ABTestAnalyzer, analyze_frequentist, generate_recommendation
from .bayesian import analyze_bayesian
from .roi import evaluate_roi
