"""
HTTP API for study-abroad cost estimates.

POST /api/estimate takes the raw cost figures, coerces them, and returns the
deterministic breakdown, the simulated P10/median/P90 totals and a list of
money-saving tips.
"""

from typing import Any, Callable, List, Optional

import numpy as np
from fastapi import Body, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from studycost import __version__
from studycost.advice.tips import TipsGenerator, build_tips_generator, get_recommendations
from studycost.config import Settings, cfg, get_logger
from studycost.sim.breakdown import expected_breakdown, input_from_payload
from studycost.sim.cost_estimator import EstimateInput, estimate_cost_distribution

logger = get_logger(__name__)

RngFactory = Callable[[], np.random.Generator]


class EstimateFigures(BaseModel):
    tuition: int
    living_median: int = Field(..., description="Deterministic living cost for the whole program.")
    one_time: int
    scholarships: int = Field(..., description="Scholarship as a negative amount.")
    total_median: int = Field(..., description="Simulated median total cost.")
    total_p10: int
    total_p90: int
    months: int


class BreakdownItem(BaseModel):
    label: str
    amount: int


class EstimateResponse(BaseModel):
    currency: str
    estimate: EstimateFigures
    breakdown: List[BreakdownItem]
    recommendations: List[str]


def build_estimate_response(
    inputs: EstimateInput,
    rng: np.random.Generator,
    tips_generator: Optional[TipsGenerator] = None,
    currency: str = "USD",
) -> EstimateResponse:
    """Combine breakdown, simulated totals and tips for one input."""
    expected = expected_breakdown(inputs)
    totals = estimate_cost_distribution(inputs, rng)
    recommendations = get_recommendations(inputs, tips_generator)

    return EstimateResponse(
        currency=currency,
        estimate=EstimateFigures(
            tuition=expected.tuition,
            living_median=expected.living_median,
            one_time=expected.one_time,
            scholarships=expected.scholarships,
            total_median=totals.median,
            total_p10=totals.p10,
            total_p90=totals.p90,
            months=inputs.months,
        ),
        breakdown=[BreakdownItem(**item) for item in expected.to_items()],
        recommendations=recommendations,
    )


def create_app(
    settings: Optional[Settings] = None,
    tips_generator: Optional[TipsGenerator] = None,
    rng_factory: Optional[RngFactory] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings object. If None, uses global cfg
        tips_generator: Tips collaborator. If None, one is built from settings
            (None again when no API key is configured)
        rng_factory: Returns a fresh generator per request. Defaults to
            ``np.random.default_rng(settings.RANDOM_STATE)``

    Returns:
        Configured FastAPI app
    """
    settings = settings or cfg
    if tips_generator is None:
        tips_generator = build_tips_generator(settings)
    if rng_factory is None:
        rng_factory = lambda: np.random.default_rng(settings.RANDOM_STATE)  # noqa: E731

    app = FastAPI(
        title="Study Abroad Cost Estimator",
        description="Monte Carlo estimate of total study-abroad cost with P10/median/P90 range.",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/api/estimate", response_model=EstimateResponse)
    def estimate(payload: Any = Body(default=None)):
        """Estimate total program cost from raw cost figures."""
        try:
            inputs = input_from_payload(payload)
            return build_estimate_response(
                inputs,
                rng_factory(),
                tips_generator=tips_generator,
                currency=settings.CURRENCY,
            )
        except Exception:
            logger.exception("Internal server error while estimating")
            return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/", response_class=PlainTextResponse)
    def index():
        return "Study abroad cost estimator backend is running."

    return app
