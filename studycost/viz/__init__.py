"""Visualization modules."""

from studycost.viz.plots import plot_cost_distribution

__all__ = ["plot_cost_distribution"]
