"""Parallel execution for batches of cost estimates."""

from typing import Any, Dict, List, Optional, Sequence

import multiprocessing as mp

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from tqdm import tqdm

from studycost.config import get_logger
from studycost.sim.breakdown import expected_breakdown, input_from_payload
from studycost.sim.cost_estimator import (
    DistributionSummary,
    EstimateInput,
    estimate_cost_distribution,
)

logger = get_logger(__name__)

FRAME_COLUMNS = ["tuition", "months", "rent", "food", "transport", "scholarship"]


def _estimate_one(inputs: EstimateInput, seed_seq: np.random.SeedSequence) -> DistributionSummary:
    return estimate_cost_distribution(inputs, np.random.default_rng(seed_seq))


def run_batch_estimates(
    inputs: Sequence[EstimateInput],
    n_workers: Optional[int] = None,
    seed: Optional[int] = None,
    progress_bar: bool = False,
) -> List[DistributionSummary]:
    """
    Estimate many programs in parallel.

    Parameters
    ----------
    inputs : Sequence[EstimateInput]
        Validated inputs, one per program
    n_workers : int, optional
        Number of parallel workers. If None, uses all available CPUs - 1.
    seed : int, optional
        Root seed. Every input gets its own child generator spawned from
        ``SeedSequence(seed)``, so results depend on the seed and the input
        position, not on the worker count.
    progress_bar : bool, default False
        Whether to show progress bar

    Returns
    -------
    List[DistributionSummary]
        One summary per input, in input order

    Examples
    --------
    >>> summaries = run_batch_estimates([EstimateInput(tuition=20000)], seed=42)
    """
    if n_workers is None:
        n_workers = max(1, mp.cpu_count() - 1)

    children = np.random.SeedSequence(seed).spawn(len(inputs))
    jobs = zip(inputs, children)
    if progress_bar:
        jobs = tqdm(list(jobs), desc="Estimating programs")

    logger.info(f"Running {len(inputs)} estimates on {n_workers} workers")
    return Parallel(n_jobs=n_workers)(
        delayed(_estimate_one)(item, child) for item, child in jobs
    )


def _row_payload(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "tuition": row.get("tuition"),
        "months": row.get("months"),
        "scholarship": row.get("scholarship"),
        "monthly": {
            "rent": row.get("rent"),
            "food": row.get("food"),
            "transport": row.get("transport"),
        },
    }


def estimate_frame(
    df: pd.DataFrame,
    n_workers: Optional[int] = None,
    seed: Optional[int] = None,
    progress_bar: bool = False,
) -> pd.DataFrame:
    """
    Estimate every row of a DataFrame.

    Reads the columns in FRAME_COLUMNS (missing columns and blank cells are
    coerced like request fields) and appends ``living_median``,
    ``total_p10``, ``total_median`` and ``total_p90``.
    """
    rows = df.to_dict(orient="records")
    inputs = [input_from_payload(_row_payload(row)) for row in rows]
    summaries = run_batch_estimates(inputs, n_workers=n_workers, seed=seed, progress_bar=progress_bar)

    out = df.copy()
    out["months"] = [item.months for item in inputs]
    out["living_median"] = [expected_breakdown(item).living_median for item in inputs]
    out["total_p10"] = [s.p10 for s in summaries]
    out["total_median"] = [s.median for s in summaries]
    out["total_p90"] = [s.p90 for s in summaries]
    return out
