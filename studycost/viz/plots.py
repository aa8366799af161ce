"""
Visualization of simulated program cost.
"""

from pathlib import Path
from typing import Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from studycost.config import get_logger
from studycost.sim.cost_estimator import DistributionSummary

logger = get_logger(__name__)


def plot_cost_distribution(
    totals: np.ndarray,
    summary: DistributionSummary,
    outpath: Union[str, Path],
    currency: str = "USD",
) -> Path:
    """
    Plot histogram of simulated total costs with P10/median/P90 markers.

    Args:
        totals: Trial totals from simulate_trial_totals
        summary: Percentiles of the same trials
        outpath: Path to save plot
        currency: Label for the cost axis

    Returns:
        Path the plot was written to
    """
    logger.info("Plotting cost distribution...")

    fig, ax = plt.subplots(figsize=(10, 5))

    ax.hist(totals, bins=40, alpha=0.7, edgecolor="black")
    ax.axvline(summary.p10, color="orange", linestyle="--", label=f"P10: {summary.p10:,}")
    ax.axvline(summary.median, color="g", linestyle="--", label=f"Median: {summary.median:,}")
    ax.axvline(summary.p90, color="r", linestyle="--", label=f"P90: {summary.p90:,}")
    ax.set_xlabel(f"Total Program Cost ({currency})")
    ax.set_ylabel("Frequency")
    ax.set_title(f"Distribution of Total Cost ({len(totals)} trials)")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    outpath = Path(outpath)
    outpath.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(outpath, dpi=150, bbox_inches="tight")
    plt.close(fig)

    logger.info(f"  ✓ Saved plot to {outpath}")
    return outpath
