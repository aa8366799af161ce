"""HTTP interface."""

from studycost.api.server import EstimateResponse, build_estimate_response, create_app

__all__ = ["EstimateResponse", "build_estimate_response", "create_app"]
