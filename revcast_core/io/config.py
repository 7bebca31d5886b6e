from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from revcast_core.domain.errors import InvalidParameters
from revcast_core.domain.models import ScenarioAdjustment, SimulationParameters, SimulationRequest


def _number(data: Mapping[str, Any], key: str, default: Optional[float], cast=float):
    raw = data.get(key, default)
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise InvalidParameters(f"'{key}' must be numeric, got {raw!r}")
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidParameters(f"'{key}' must be numeric, got {raw!r}") from exc


def parse_simulation_request(data: Mapping[str, Any]) -> SimulationRequest:
    """
    Builds a validated request from the camelCase JSON body.
    """
    if data.get("baseMRR") is None:
        raise InvalidParameters("'baseMRR' is required")
    rates = data.get("parameters") or {}
    if not isinstance(rates, Mapping):
        raise InvalidParameters("'parameters' must be an object")

    params = SimulationParameters(
        base_mrr=_number(data, "baseMRR", None),
        iterations=_number(data, "numIterations", 10000, int),
        horizon_months=_number(data, "timeHorizonMonths", 12, int),
        avg_growth_rate=_number(rates, "avgGrowthRate", 0.0),
        growth_volatility=_number(rates, "growthVolatility", 0.0),
        avg_churn_rate=_number(rates, "avgChurnRate", 0.0),
        churn_volatility=_number(rates, "churnVolatility", 0.0),
        avg_expansion_rate=_number(rates, "avgExpansionRate", 0.0),
        expansion_volatility=_number(rates, "expansionVolatility", 0.0),
        seasonality_factor=_number(rates, "seasonalityFactor", 0.0),
        target_value=_number(data, "targetValue", None),
    ).validate()

    return SimulationRequest(
        parameters=params,
        simulation_name=str(data.get("simulationName") or ""),
        simulation_type=str(data.get("simulationType") or "monte_carlo"),
        base_arr=_number(data, "baseARR", None),
    )


def parse_scenario_adjustment(data: Mapping[str, Any]) -> ScenarioAdjustment:
    return ScenarioAdjustment(
        growth_delta=_number(data, "growthDelta", 0.0),
        growth_volatility_delta=_number(data, "growthVolatilityDelta", 0.0),
        churn_delta=_number(data, "churnDelta", 0.0),
        churn_volatility_delta=_number(data, "churnVolatilityDelta", 0.0),
        expansion_delta=_number(data, "expansionDelta", 0.0),
        expansion_volatility_delta=_number(data, "expansionVolatilityDelta", 0.0),
        seasonality_delta=_number(data, "seasonalityDelta", 0.0),
        churn_floor=_number(data, "churnFloor", None),
        expansion_floor=_number(data, "expansionFloor", None),
    )


def load_simulation_request(path: str | Path) -> SimulationRequest:
    return parse_simulation_request(read_json(path))


def load_scenario_adjustment(path: str | Path) -> ScenarioAdjustment:
    return parse_scenario_adjustment(read_json(path))


def read_json(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
