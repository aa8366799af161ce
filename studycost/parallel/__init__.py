"""Parallel execution modules for batch estimates."""

from .executor import run_batch_estimates, estimate_frame

__all__ = ["run_batch_estimates", "estimate_frame"]
