"""
Study-abroad cost estimation package.

This package provides tools for:
- Coercing user-supplied cost figures into a validated estimate input
- Running a Monte Carlo simulation of total program cost (P10/median/P90)
- Computing the deterministic expected breakdown shown beside it
- Generating money-saving tips with a static fallback
- Serving estimates over HTTP and from the command line
"""

__version__ = "0.1.0"

from studycost.config import Settings, cfg, get_logger, logger

__all__ = ["Settings", "cfg", "get_logger", "logger"]
