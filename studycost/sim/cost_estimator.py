"""Monte Carlo estimator for the total cost of a study-abroad program.

Turns point estimates of uncertain monthly expenses into a distribution of
total program cost and reduces it to nearest-rank P10 / median / P90.

Each call owns its trial buffer and draws from one explicitly passed
``numpy.random.Generator``; no random state is shared between calls.
"""

import math
import numbers
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

# Fixed monthly costs
MONTHLY_UTILITIES = 70.0
MONTHLY_MISC = 100.0

# One-time costs
VISA_FEE = 200.0
FLIGHT_COST = 500.0
SETUP_COST = 800.0
ONE_TIME_COSTS = VISA_FEE + FLIGHT_COST + SETUP_COST  # 1500

DEFAULT_MONTHS = 12

# Upper bounds keeping every total finite
MAX_AMOUNT = 1e12
MAX_MONTHS = 1200

N_TRIALS = 500

# (coefficient of variation, std floor) per uncertain monthly category
RENT_VARIABILITY = (0.10, 50.0)
FOOD_VARIABILITY = (0.15, 20.0)
TRANSPORT_VARIABILITY = (0.20, 10.0)

P10 = 0.10
P50 = 0.50
P90 = 0.90


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward +inf."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class EstimateInput:
    """Validated point estimates for one program.

    All amounts are in a single implied currency unit. Use
    ``studycost.sim.breakdown.input_from_payload`` to build one from
    untrusted input.
    """

    tuition: float = 0.0
    months: int = DEFAULT_MONTHS
    monthly_rent: float = 0.0
    monthly_food: float = 0.0
    monthly_transport: float = 0.0
    scholarship: float = 0.0

    def __post_init__(self):
        """Validate that every field is finite, non-negative and within bounds."""
        for name in ("tuition", "monthly_rent", "monthly_food", "monthly_transport", "scholarship"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ValueError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be finite and non-negative, got {value!r}")
            if value > MAX_AMOUNT:
                raise ValueError(f"{name} must not exceed {MAX_AMOUNT:g}, got {value!r}")
        if isinstance(self.months, bool) or not isinstance(self.months, numbers.Integral):
            raise ValueError(f"months must be an integer, got {self.months!r}")
        if not 1 <= self.months <= MAX_MONTHS:
            raise ValueError(f"months must be between 1 and {MAX_MONTHS}, got {self.months!r}")


@dataclass(frozen=True)
class DistributionSummary:
    """Nearest-rank percentiles of simulated total program cost."""

    p10: int
    median: int
    p90: int

    def to_dict(self) -> Dict[str, int]:
        """Convert summary to dictionary for JSON serialization."""
        return {"p10": self.p10, "median": self.median, "p90": self.p90}


def sample_normal(mean: float, std: float, rng: np.random.Generator) -> float:
    """
    Draw one normal variate with the Box-Muller transform.

    Parameters
    ----------
    mean : float
        Target mean
    std : float
        Target standard deviation (0 collapses the draw to ``mean``)
    rng : np.random.Generator
        Source of uniform [0, 1) draws

    Returns
    -------
    float
        ``sqrt(-2 ln u) * cos(2 pi v) * std + mean``
    """
    u = 0.0
    v = 0.0
    # log(0) is undefined; redraw until both uniforms are strictly positive
    while u == 0.0:
        u = rng.random()
    while v == 0.0:
        v = rng.random()
    return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v) * std + mean


def category_stds(inputs: EstimateInput) -> Dict[str, float]:
    """Standard deviation per uncertain monthly category."""
    rent_cv, rent_floor = RENT_VARIABILITY
    food_cv, food_floor = FOOD_VARIABILITY
    transport_cv, transport_floor = TRANSPORT_VARIABILITY
    return {
        "rent": max(rent_cv * inputs.monthly_rent, rent_floor),
        "food": max(food_cv * inputs.monthly_food, food_floor),
        "transport": max(transport_cv * inputs.monthly_transport, transport_floor),
    }


def simulate_trial_totals(
    inputs: EstimateInput,
    rng: np.random.Generator,
    n_trials: int = N_TRIALS,
) -> np.ndarray:
    """
    Simulate total program cost for independent trials.

    Each trial draws rent, food and transport (in that order), clamps each
    draw at zero, adds utilities and misc, scales by ``months``, then adds
    one-time costs and tuition and subtracts the scholarship. Tuition and
    scholarship are not resampled.

    Parameters
    ----------
    inputs : EstimateInput
        Validated point estimates
    rng : np.random.Generator
        Random source owned by this call
    n_trials : int, default N_TRIALS
        Number of trials

    Returns
    -------
    np.ndarray
        Trial totals sorted ascending
    """
    stds = category_stds(inputs)
    totals = np.zeros(n_trials)

    for i in range(n_trials):
        rent = max(0.0, sample_normal(inputs.monthly_rent, stds["rent"], rng))
        food = max(0.0, sample_normal(inputs.monthly_food, stds["food"], rng))
        transport = max(0.0, sample_normal(inputs.monthly_transport, stds["transport"], rng))

        monthly_total = rent + food + transport + MONTHLY_UTILITIES + MONTHLY_MISC
        living_total = monthly_total * inputs.months
        totals[i] = inputs.tuition + living_total + ONE_TIME_COSTS - inputs.scholarship

    totals.sort()
    return totals


def extract_percentiles(totals: np.ndarray) -> DistributionSummary:
    """
    Nearest-rank P10 / median / P90 of a sample.

    The element at ``floor(p * N)`` of the ascending sample is taken
    without interpolation, then rounded half-up to an integer.
    """
    if len(totals) == 0:
        raise ValueError("totals must not be empty")

    ordered = np.sort(np.asarray(totals, dtype=float))
    n = len(ordered)

    def at(fraction: float) -> int:
        return round_half_up(float(ordered[int(math.floor(fraction * n))]))

    return DistributionSummary(p10=at(P10), median=at(P50), p90=at(P90))


def estimate_cost_distribution(
    inputs: EstimateInput,
    rng: Optional[np.random.Generator] = None,
) -> DistributionSummary:
    """Run the trials for ``inputs`` and summarize them.

    Args:
        inputs: Validated point estimates
        rng: Generator to draw from. If None, a fresh unseeded generator
            is created for this call.

    Returns:
        DistributionSummary with p10 <= median <= p90
    """
    if rng is None:
        rng = np.random.default_rng()
    return extract_percentiles(simulate_trial_totals(inputs, rng))
