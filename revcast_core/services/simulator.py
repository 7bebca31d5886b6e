from __future__ import annotations

import logging
import math
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import numpy as np

from revcast_core.domain.errors import InvalidParameters, SimulationCancelled
from revcast_core.domain.models import SimulationParameters, SimulationResult
from revcast_core.services.insights import risk_factors
from revcast_core.services.random_source import RandomSource, SeededRandomSource, spawn_sources, standard_normal
from revcast_core.services.statistics import summarize_outcomes

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 1000


def _seasonality(params: SimulationParameters) -> List[float]:
    return [1 + params.seasonality_factor * math.sin(2 * math.pi * m / 12) for m in range(params.horizon_months)]


def simulate_trajectory(
    params: SimulationParameters,
    rng: RandomSource,
    seasonality: Optional[List[float]] = None,
) -> float:
    """
    One trajectory: monthly new business, expansion and churn applied to MRR,
    clamped at zero every month. Returns the final MRR.
    """
    if seasonality is None:
        seasonality = _seasonality(params)

    mrr = params.base_mrr
    for m in range(params.horizon_months):
        z_growth = standard_normal(rng)
        z_churn = standard_normal(rng)
        z_expansion = standard_normal(rng)

        growth = params.avg_growth_rate + z_growth * params.growth_volatility
        churn = max(0.0, params.avg_churn_rate + z_churn * params.churn_volatility)
        expansion = max(0.0, params.avg_expansion_rate + z_expansion * params.expansion_volatility)

        new_business = mrr * growth * seasonality[m]
        expansion_amount = mrr * expansion
        churn_amount = mrr * churn
        mrr = max(0.0, mrr + new_business + expansion_amount - churn_amount)
    return mrr


def _stop_reason(cancel_event: Optional[threading.Event], deadline: Optional[float]) -> Optional[str]:
    if cancel_event is not None and cancel_event.is_set():
        return "cancelled"
    if deadline is not None and time.monotonic() >= deadline:
        return "timed out"
    return None


def _run_block(
    params: SimulationParameters,
    rng: RandomSource,
    outcomes: np.ndarray,
    start: int,
    stop: int,
    seasonality: List[float],
    abort: threading.Event,
    cancel_event: Optional[threading.Event],
    deadline: Optional[float],
    progress_every: int = 0,
) -> int:
    """Fills outcomes[start:stop]; returns how many slots were written."""
    for i in range(start, stop):
        # Checked between iterations only, so no trajectory is half-applied.
        if abort.is_set() or _stop_reason(cancel_event, deadline):
            abort.set()
            return i - start
        outcomes[i] = simulate_trajectory(params, rng, seasonality)
        if progress_every and (i + 1) % progress_every == 0:
            logger.debug("Simulated %d/%d trajectories", i + 1, params.iterations)
    return stop - start


def _finish(
    params: SimulationParameters,
    outcomes: np.ndarray,
    completed: int,
    started: float,
    cancel_event: Optional[threading.Event],
    deadline: Optional[float],
) -> SimulationResult:
    if completed < params.iterations:
        reason = _stop_reason(cancel_event, deadline) or "cancelled"
        logger.info("Simulation %s at iteration %d/%d", reason, completed, params.iterations)
        raise SimulationCancelled(completed, params.iterations, reason)

    result = summarize_outcomes(outcomes, params)
    result.risk_factors = risk_factors(params)
    logger.info(
        "Simulation completed in %.2fs (p50=%.2f, mean=%.2f)",
        time.monotonic() - started,
        result.p50,
        result.mean,
    )
    return result


def run_monte_carlo(
    params: SimulationParameters,
    rng: Optional[RandomSource] = None,
    *,
    cancel_event: Optional[threading.Event] = None,
    deadline: Optional[float] = None,
) -> SimulationResult:
    """
    Sequential Monte Carlo over `params.iterations` trajectories.

    `deadline` is a `time.monotonic()` timestamp. Cancellation and deadline
    are checked between iterations; either one raises SimulationCancelled and
    no partial summary is produced.
    """
    params.validate()
    if rng is None:
        rng = SeededRandomSource()

    logger.info(
        "Starting Monte Carlo: %d iterations over %d months (base MRR %.2f)",
        params.iterations,
        params.horizon_months,
        params.base_mrr,
    )
    started = time.monotonic()
    outcomes = np.empty(params.iterations, dtype=float)
    completed = _run_block(
        params,
        rng,
        outcomes,
        0,
        params.iterations,
        _seasonality(params),
        threading.Event(),
        cancel_event,
        deadline,
        progress_every=max(params.iterations // 10, 1),
    )
    return _finish(params, outcomes, completed, started, cancel_event, deadline)


def run_monte_carlo_parallel(
    params: SimulationParameters,
    seed: Optional[int] = None,
    *,
    workers: Optional[int] = None,
    block_size: int = DEFAULT_BLOCK_SIZE,
    cancel_event: Optional[threading.Event] = None,
    deadline: Optional[float] = None,
) -> SimulationResult:
    """
    Block-parallel Monte Carlo on a thread pool.

    Block k always covers iterations [k*block_size, (k+1)*block_size) and
    draws from child source k of the seed, so the outcome set does not depend
    on the worker count. Each block writes into its own slice of a
    pre-allocated array; the reduction runs once after every block is done.
    """
    params.validate()
    if block_size <= 0:
        raise InvalidParameters(f"block_size must be positive, got {block_size}")
    if workers is not None and workers <= 0:
        raise InvalidParameters(f"workers must be positive, got {workers}")

    n_blocks = math.ceil(params.iterations / block_size)
    sources = spawn_sources(seed, n_blocks)
    seasonality = _seasonality(params)
    outcomes = np.empty(params.iterations, dtype=float)
    abort = threading.Event()

    logger.info(
        "Starting parallel Monte Carlo: %d iterations in %d blocks (workers=%s)",
        params.iterations,
        n_blocks,
        workers or "auto",
    )
    started = time.monotonic()
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            pool.submit(
                _run_block,
                params,
                sources[k],
                outcomes,
                k * block_size,
                min((k + 1) * block_size, params.iterations),
                seasonality,
                abort,
                cancel_event,
                deadline,
            )
            for k in range(n_blocks)
        ]
        completed = sum(f.result() for f in futures)
    return _finish(params, outcomes, completed, started, cancel_event, deadline)
