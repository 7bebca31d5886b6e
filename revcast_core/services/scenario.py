from __future__ import annotations

import dataclasses
from typing import Dict

from revcast_core.domain.errors import InvalidParameters
from revcast_core.domain.models import ScenarioAdjustment, SimulationParameters

# Presets are expressed in annual percentage points; rates are monthly fractions.
ANNUAL_POINT = 1 / 100 / 12

PRESETS: Dict[str, ScenarioAdjustment] = {
    "optimistic": ScenarioAdjustment(
        churn_delta=-2 * ANNUAL_POINT,
        expansion_delta=10 * ANNUAL_POINT,
        churn_floor=1 * ANNUAL_POINT,
    ),
    "conservative": ScenarioAdjustment(
        churn_delta=2 * ANNUAL_POINT,
        expansion_delta=-5 * ANNUAL_POINT,
        expansion_floor=0.0,
    ),
}


def preset_adjustment(name: str) -> ScenarioAdjustment:
    try:
        return PRESETS[name.strip().lower()]
    except KeyError as exc:
        raise InvalidParameters(f"Unknown scenario preset '{name}' (expected one of {sorted(PRESETS)})") from exc


def apply_scenario(params: SimulationParameters, adjustment: ScenarioAdjustment) -> SimulationParameters:
    """
    Applies additive rate/volatility deltas, then the optional churn and
    expansion floors.
    """
    churn = params.avg_churn_rate + adjustment.churn_delta
    if adjustment.churn_floor is not None:
        churn = max(churn, adjustment.churn_floor)

    expansion = params.avg_expansion_rate + adjustment.expansion_delta
    if adjustment.expansion_floor is not None:
        expansion = max(expansion, adjustment.expansion_floor)

    return dataclasses.replace(
        params,
        avg_growth_rate=params.avg_growth_rate + adjustment.growth_delta,
        growth_volatility=max(0.0, params.growth_volatility + adjustment.growth_volatility_delta),
        avg_churn_rate=churn,
        churn_volatility=max(0.0, params.churn_volatility + adjustment.churn_volatility_delta),
        avg_expansion_rate=expansion,
        expansion_volatility=max(0.0, params.expansion_volatility + adjustment.expansion_volatility_delta),
        seasonality_factor=params.seasonality_factor + adjustment.seasonality_delta,
    )


def net_revenue_retention(params: SimulationParameters) -> float:
    """Annualised NRR in percent from the mean monthly expansion and churn."""
    return 100 + 1200 * (params.avg_expansion_rate - params.avg_churn_rate)
