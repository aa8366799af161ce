"""Tests for input coercion and the deterministic breakdown."""

import math

import numpy as np
import pytest

from studycost.sim.breakdown import (
    coerce_amount,
    coerce_months,
    expected_breakdown,
    input_from_payload,
)
from studycost.sim.cost_estimator import EstimateInput


@pytest.mark.parametrize(
    "raw, expected",
    [
        (1200, 1200.0),
        (99.5, 99.5),
        ("850", 850.0),
        ("  12.5 ", 12.5),
        ("", 0.0),
        ("abc", 0.0),
        ("1_000", 0.0),
        (None, 0.0),
        (True, 0.0),
        ([100], 0.0),
        ({"value": 1}, 0.0),
        (-300, 0.0),
        ("-5", 0.0),
        (math.nan, 0.0),
        (math.inf, 0.0),
        ("Infinity", 0.0),
        (np.int64(7), 7.0),
        (10**400, 0.0),
        (1e308, 0.0),
        ("1e400", 0.0),
        (2e12, 0.0),
        (1e12, 1e12),
    ],
)
def test_coerce_amount(raw, expected):
    """Test monetary fields coerce to finite non-negative floats."""
    value = coerce_amount(raw)

    assert value == expected
    assert isinstance(value, float)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (24, 24),
        ("36", 36),
        (6.7, 6),
        (None, 12),
        ("", 12),
        (0, 12),
        (-3, 12),
        ("0.5", 12),
        ("soon", 12),
        (math.nan, 12),
        (math.inf, 12),
        (10**400, 12),
        (1e307, 1200),
        (5000, 1200),
        ("1200", 1200),
    ],
)
def test_coerce_months(raw, expected):
    """Test program length coerces to a positive integer, default 12."""
    assert coerce_months(raw) == expected


def test_input_from_payload_nested_monthly():
    """Test the request shape maps onto EstimateInput."""
    payload = {
        "tuition": 20000,
        "months": 12,
        "scholarship": "5000",
        "monthly": {"rent": 800, "food": "400", "transport": 100},
    }

    inputs = input_from_payload(payload)

    assert inputs == EstimateInput(
        tuition=20000.0,
        months=12,
        monthly_rent=800.0,
        monthly_food=400.0,
        monthly_transport=100.0,
        scholarship=5000.0,
    )


def test_input_from_payload_malformed():
    """Test malformed payloads fall back to defaults."""
    assert input_from_payload(None) == EstimateInput()
    assert input_from_payload([1, 2, 3]) == EstimateInput()
    assert input_from_payload({"monthly": "lots"}) == EstimateInput()

    inputs = input_from_payload({"tuition": "free", "months": -1, "monthly": {"rent": -50}})
    assert inputs.tuition == 0.0
    assert inputs.months == 12
    assert inputs.monthly_rent == 0.0


def test_expected_breakdown_reference():
    """Test deterministic components for the reference program."""
    inputs = EstimateInput(
        tuition=20000.0,
        months=12,
        monthly_rent=800.0,
        monthly_food=400.0,
        monthly_transport=100.0,
        scholarship=5000.0,
    )

    expected = expected_breakdown(inputs)

    assert expected.tuition == 20000
    assert expected.living_median == 17640
    assert expected.one_time == 1500
    assert expected.scholarships == -5000
    assert expected.months == 12


def test_expected_breakdown_rounding_and_items():
    """Test half-up rounding and labelled item order."""
    inputs = EstimateInput(tuition=100.5, months=1, scholarship=10.5)

    expected = expected_breakdown(inputs)

    assert expected.tuition == 101
    assert expected.scholarships == -11
    assert expected.living_median == 170
    assert [item["label"] for item in expected.to_items()] == [
        "Tuition",
        "Living (median)",
        "One-time",
        "Scholarships",
    ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
