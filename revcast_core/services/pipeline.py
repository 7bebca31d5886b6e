from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import numpy as np

from revcast_core.domain.errors import InvalidParameters
from revcast_core.domain.models import (
    BaselineComparison,
    ScenarioAdjustment,
    ScenarioComparison,
    SimulationParameters,
    SimulationResult,
)
from revcast_core.services import scenario as scenario_service
from revcast_core.services import simulator
from revcast_core.services.random_source import SeededRandomSource

COMPARED_STATS = ("p10", "p25", "p50", "p75", "p90", "mean", "std_dev")


def compare_scenario(
    params: SimulationParameters,
    adjustment: ScenarioAdjustment,
    seed: Optional[int] = None,
) -> ScenarioComparison:
    # Both runs get identically seeded sources so the delta reflects the adjustment.
    if seed is None:
        seed = np.random.SeedSequence().entropy
    baseline_result = simulator.run_monte_carlo(params, SeededRandomSource(seed))
    scenario_params = scenario_service.apply_scenario(params, adjustment)
    scenario_result = simulator.run_monte_carlo(scenario_params, SeededRandomSource(seed))

    delta: Dict[str, float] = {}
    for key in COMPARED_STATS:
        delta[key] = getattr(scenario_result, key) - getattr(baseline_result, key)
    if baseline_result.probability_of_target is not None and scenario_result.probability_of_target is not None:
        delta["probability_of_target"] = scenario_result.probability_of_target - baseline_result.probability_of_target

    return ScenarioComparison(
        baseline=baseline_result,
        scenario=scenario_result,
        delta=delta,
    )


def _snapshot_value(previous: Mapping[str, Any], *keys: str) -> float:
    for key in keys:
        if key in previous and previous[key] is not None:
            try:
                return float(previous[key])
            except (TypeError, ValueError) as exc:
                raise InvalidParameters(f"Previous snapshot '{key}' must be numeric, got {previous[key]!r}") from exc
    raise InvalidParameters(f"Previous snapshot is missing '{keys[0]}'")


def compare_to_baseline(result: SimulationResult, previous: Mapping[str, Any]) -> BaselineComparison:
    """
    Compares a fresh result with a previously stored snapshot. Accepts the
    flat snapshot shape or a full response payload (``results`` section).
    """
    if not isinstance(previous, Mapping):
        raise InvalidParameters("Previous snapshot must be an object")
    if "results" in previous and isinstance(previous["results"], Mapping):
        previous = previous["results"]
    if "percentiles" in previous and isinstance(previous["percentiles"], Mapping):
        previous = {**previous, **previous["percentiles"]}

    prev_p50 = _snapshot_value(previous, "p50", "median")
    prev_mean = _snapshot_value(previous, "mean")
    return BaselineComparison(
        previous_p50=prev_p50,
        previous_mean=prev_mean,
        p50_change=result.p50 - prev_p50,
        mean_change=result.mean - prev_mean,
        p50_change_pct=(result.p50 - prev_p50) / prev_p50 * 100 if prev_p50 != 0 else None,
    )
