"""Simulation modules for study-abroad cost estimation."""

from studycost.sim.cost_estimator import (
    EstimateInput,
    DistributionSummary,
    sample_normal,
    category_stds,
    simulate_trial_totals,
    extract_percentiles,
    estimate_cost_distribution,
)
from studycost.sim.breakdown import (
    ExpectedBreakdown,
    coerce_amount,
    coerce_months,
    expected_breakdown,
    input_from_payload,
)

__all__ = [
    "EstimateInput",
    "DistributionSummary",
    "sample_normal",
    "category_stds",
    "simulate_trial_totals",
    "extract_percentiles",
    "estimate_cost_distribution",
    "ExpectedBreakdown",
    "coerce_amount",
    "coerce_months",
    "expected_breakdown",
    "input_from_payload",
]
