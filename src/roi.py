"""
Business Impact: ROI of running and shipping a tested variant

Formula in use:
  visitors            = control_total + treatment_total
  total_cost          = visitors * cost_per_visitor + opportunity_cost
  opportunity_cost    = daily_traffic * test_duration * cost_per_visitor * opportunity_cost_rate
  additional_revenue  = lift / 100 * control_conversions * revenue_per_conversion
  payback_period      = total_cost / (additional_revenue / test_duration)
  annualized_revenue  = additional_revenue * days_per_year / test_duration
"""

import os
import sys

from .data_validation import validate_test_data
from .errors import InvalidParameterError, warn_degenerate
from .models import ROIAnalysis

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from config import ROI_CONFIG


def _validate_financials(config, opportunity_cost_rate):
    problems = []
    if config.cost_per_visitor < 0:
        problems.append(f"cost_per_visitor must be >= 0, got {config.cost_per_visitor}")
    if config.revenue_per_conversion < 0:
        problems.append(f"revenue_per_conversion must be >= 0, got {config.revenue_per_conversion}")
    if not config.test_duration > 0:
        problems.append(f"test_duration must be > 0, got {config.test_duration}")
    if config.daily_traffic < 0:
        problems.append(f"daily_traffic must be >= 0, got {config.daily_traffic}")
    if opportunity_cost_rate < 0:
        problems.append(f"opportunity_cost_rate must be >= 0, got {opportunity_cost_rate}")
    if problems:
        raise InvalidParameterError("; ".join(problems))


def evaluate_roi(data, config, stats, opportunity_cost_rate=None):
    """
    Translate a frequentist result into cost, revenue and payback

    Args:
        data: Observed TestData
        config: TestConfiguration carrying cost, revenue and duration
        stats: StatisticalResults for the same data
        opportunity_cost_rate: Override for ROI_CONFIG['opportunity_cost_rate']

    Returns:
        ROIAnalysis; `payback_period` is None when additional revenue <= 0
    """
    if opportunity_cost_rate is None:
        opportunity_cost_rate = ROI_CONFIG['opportunity_cost_rate']
    _validate_financials(config, opportunity_cost_rate)
    validate_test_data(data)

    visitors = data.control_total + data.treatment_total
    opportunity_cost = (config.daily_traffic * config.test_duration
                        * config.cost_per_visitor * opportunity_cost_rate)
    total_cost = visitors * config.cost_per_visitor + opportunity_cost

    additional_revenue = (stats.lift / 100) * data.control_conversions * config.revenue_per_conversion
    net_present_value = additional_revenue - total_cost

    degenerate = []

    if total_cost > 0:
        roi = net_present_value / total_cost * 100
    else:
        roi = 0.0
        degenerate.append(warn_degenerate('zero_cost', "total cost is 0; ROI reported as 0"))

    if additional_revenue > 0:
        payback_period = total_cost / (additional_revenue / config.test_duration)
    else:
        payback_period = None
        degenerate.append(warn_degenerate(
            'payback_unbounded', "no additional revenue; the test cost is never paid back"
        ))

    annualized_revenue = additional_revenue * ROI_CONFIG['days_per_year'] / config.test_duration

    return ROIAnalysis(
        total_cost=total_cost,
        additional_revenue=additional_revenue,
        net_present_value=net_present_value,
        roi=roi,
        payback_period=payback_period,
        annualized_revenue=annualized_revenue,
        opportunity_cost=opportunity_cost,
        degenerate=tuple(degenerate),
    )
