from __future__ import annotations

import math
from typing import List, Optional, Sequence

import numpy as np

from revcast_core.domain.models import HistogramBucket, SimulationParameters, SimulationResult

HISTOGRAM_BUCKETS = 50


def percentile_at(sorted_outcomes: np.ndarray, p: float) -> float:
    """Value at index floor(n * p) of an ascending array."""
    n = len(sorted_outcomes)
    idx = min(int(math.floor(n * p)), n - 1)
    return float(sorted_outcomes[idx])


def probability_of_target(outcomes: Sequence[float] | np.ndarray, target: float) -> float:
    values = np.asarray(outcomes, dtype=float)
    if values.size == 0:
        return 0.0
    return float(np.count_nonzero(values >= target) / values.size * 100)


def build_histogram(sorted_outcomes: np.ndarray, buckets: int = HISTOGRAM_BUCKETS) -> List[HistogramBucket]:
    """
    Equal-width buckets over [min, max]; the max lands in the last bucket.
    A zero-width range puts every outcome in the first bucket.
    """
    n = len(sorted_outcomes)
    low = float(sorted_outcomes[0])
    high = float(sorted_outcomes[-1])
    width = (high - low) / buckets

    if width > 0:
        idx = np.floor((sorted_outcomes - low) / width).astype(np.int64)
        idx = np.clip(idx, 0, buckets - 1)
    else:
        idx = np.zeros(n, dtype=np.int64)
    counts = np.bincount(idx, minlength=buckets)

    histogram: List[HistogramBucket] = []
    for b in range(buckets):
        count = int(counts[b])
        histogram.append(
            HistogramBucket(
                range_start=low + b * width,
                range_end=low + (b + 1) * width,
                count=count,
                probability=count / n * 100,
            )
        )
    return histogram


def summarize_outcomes(outcomes: Sequence[float] | np.ndarray, params: SimulationParameters) -> SimulationResult:
    """
    Reduces final MRR outcomes to the summary record. Risk factors are left
    empty; the simulator attaches them.
    """
    ordered = np.sort(np.asarray(outcomes, dtype=float))
    n = len(ordered)
    if n == 0:
        raise ValueError("No outcomes to summarize")

    target_prob: Optional[float] = None
    if params.target_value is not None:
        target_prob = probability_of_target(ordered, params.target_value)

    return SimulationResult(
        parameters=params,
        p10=percentile_at(ordered, 0.10),
        p25=percentile_at(ordered, 0.25),
        p50=percentile_at(ordered, 0.50),
        p75=percentile_at(ordered, 0.75),
        p90=percentile_at(ordered, 0.90),
        mean=float(np.mean(ordered)),
        std_dev=float(np.std(ordered)),  # population, ddof=0
        worst_case=float(ordered[0]),
        best_case=float(ordered[-1]),
        ci95_low=percentile_at(ordered, 0.025),
        ci95_high=percentile_at(ordered, 0.975),
        histogram=build_histogram(ordered),
        outcomes_above_base=int(np.count_nonzero(ordered > params.base_mrr)),
        probability_of_target=target_prob,
    )
