from __future__ import annotations

import time
from typing import Any, Dict, Mapping

from django.conf import settings

from revcast_core.io import config as config_io
from revcast_core.io import payload as payload_io
from revcast_core.services import insights as insights_service
from revcast_core.services import pipeline
from revcast_core.services import scenario as scenario_service
from revcast_core.services import simulator
from revcast_core.services.random_source import SeededRandomSource


def _deadline() -> float:
    return time.monotonic() + settings.REVCAST_SIMULATION_TIMEOUT


def execute_simulation(body: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Runs one request body end to end and returns the response payload.
    Raises InvalidParameters or SimulationCancelled.
    """
    request = config_io.parse_simulation_request(body)
    result = simulator.run_monte_carlo(
        request.parameters,
        SeededRandomSource(body.get("seed")),
        deadline=_deadline(),
    )
    payload = payload_io.response_payload(request, result, insights_service.build_insights(result))

    previous = body.get("previousSnapshot")
    if previous:
        comparison = pipeline.compare_to_baseline(result, previous)
        payload["baselineComparison"] = payload_io.baseline_comparison_to_json(comparison)
    return payload


def execute_scenario(body: Mapping[str, Any]) -> Dict[str, Any]:
    request = config_io.parse_simulation_request(body)
    if body.get("preset"):
        adjustment = scenario_service.preset_adjustment(body["preset"])
    else:
        adjustment = config_io.parse_scenario_adjustment(body.get("delta") or {})
    comparison = pipeline.compare_scenario(request.parameters, adjustment, seed=body.get("seed"))
    payload = payload_io.comparison_to_json(comparison)
    payload["simulationName"] = request.simulation_name
    return payload
