"""Input coercion and the deterministic expected-cost breakdown.

Request payloads are untrusted: every numeric field is coerced to a finite,
non-negative number before an ``EstimateInput`` is built, so the simulation
never sees NaN, infinities or negative amounts.
"""

import math
import numbers
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from studycost.sim.cost_estimator import (
    DEFAULT_MONTHS,
    MAX_AMOUNT,
    MAX_MONTHS,
    MONTHLY_MISC,
    MONTHLY_UTILITIES,
    ONE_TIME_COSTS,
    EstimateInput,
    round_half_up,
)


def _to_number(value: Any) -> float:
    """Numeric value of ``value`` or NaN when it has none."""
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, numbers.Real):
        try:
            return float(value)
        except OverflowError:
            return math.inf
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if "_" in text:
            return math.nan
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def coerce_amount(value: Any) -> float:
    """Coerce a monetary field; anything non-numeric, non-finite, negative or above MAX_AMOUNT is 0."""
    number = _to_number(value)
    if not math.isfinite(number) or number < 0 or number > MAX_AMOUNT:
        return 0.0
    return number


def coerce_months(value: Any) -> int:
    """Coerce program length; anything unusable or below one month becomes 12.

    Lengths above MAX_MONTHS are capped.
    """
    number = _to_number(value)
    if not math.isfinite(number):
        return DEFAULT_MONTHS
    months = int(number)
    if months < 1:
        return DEFAULT_MONTHS
    return min(months, MAX_MONTHS)


def input_from_payload(payload: Any) -> EstimateInput:
    """
    Build an ``EstimateInput`` from a request body.

    Expected shape::

        {"tuition": ..., "months": ..., "scholarship": ...,
         "monthly": {"rent": ..., "food": ..., "transport": ...}}

    Missing or malformed parts are treated as absent.
    """
    body: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}
    monthly = body.get("monthly")
    if not isinstance(monthly, Mapping):
        monthly = {}

    return EstimateInput(
        tuition=coerce_amount(body.get("tuition")),
        months=coerce_months(body.get("months")),
        monthly_rent=coerce_amount(monthly.get("rent")),
        monthly_food=coerce_amount(monthly.get("food")),
        monthly_transport=coerce_amount(monthly.get("transport")),
        scholarship=coerce_amount(body.get("scholarship")),
    )


@dataclass(frozen=True)
class ExpectedBreakdown:
    """Deterministic cost components computed from the point estimates."""

    tuition: int
    living_median: int
    one_time: int
    scholarships: int
    months: int

    def to_items(self) -> List[Dict[str, Any]]:
        """Labelled components in display order."""
        return [
            {"label": "Tuition", "amount": self.tuition},
            {"label": "Living (median)", "amount": self.living_median},
            {"label": "One-time", "amount": self.one_time},
            {"label": "Scholarships", "amount": self.scholarships},
        ]


def expected_breakdown(inputs: EstimateInput) -> ExpectedBreakdown:
    """Expected cost components with no sampling."""
    monthly = (
        inputs.monthly_rent
        + inputs.monthly_food
        + inputs.monthly_transport
        + MONTHLY_UTILITIES
        + MONTHLY_MISC
    )
    return ExpectedBreakdown(
        tuition=round_half_up(inputs.tuition),
        living_median=round_half_up(monthly * inputs.months),
        one_time=int(ONE_TIME_COSTS),
        scholarships=-round_half_up(inputs.scholarship),
        months=inputs.months,
    )
