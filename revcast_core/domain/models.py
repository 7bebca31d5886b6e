from __future__ import annotations

import dataclasses
import math
from typing import Dict, List, Optional

from revcast_core.domain.errors import InvalidParameters


@dataclasses.dataclass(frozen=True)
class SimulationParameters:
    base_mrr: float
    iterations: int = 10000
    horizon_months: int = 12
    avg_growth_rate: float = 0.0
    growth_volatility: float = 0.0
    avg_churn_rate: float = 0.0
    churn_volatility: float = 0.0
    avg_expansion_rate: float = 0.0
    expansion_volatility: float = 0.0
    seasonality_factor: float = 0.0
    target_value: Optional[float] = None

    def validate(self) -> "SimulationParameters":
        if self.iterations <= 0:
            raise InvalidParameters(f"iterations must be positive, got {self.iterations}")
        if self.horizon_months <= 0:
            raise InvalidParameters(f"horizon_months must be positive, got {self.horizon_months}")
        for name in ("base_mrr", "avg_growth_rate", "growth_volatility", "avg_churn_rate", "churn_volatility",
                     "avg_expansion_rate", "expansion_volatility", "seasonality_factor"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidParameters(f"{name} must be finite, got {getattr(self, name)}")
        if self.target_value is not None and math.isnan(self.target_value):
            raise InvalidParameters("target_value cannot be NaN")
        if self.base_mrr < 0:
            raise InvalidParameters(f"base_mrr cannot be negative, got {self.base_mrr}")
        return self


@dataclasses.dataclass(frozen=True)
class SimulationRequest:
    parameters: SimulationParameters
    simulation_name: str = ""
    simulation_type: str = "monte_carlo"
    base_arr: Optional[float] = None

    @property
    def effective_base_arr(self) -> float:
        if self.base_arr is not None:
            return self.base_arr
        return self.parameters.base_mrr * 12


@dataclasses.dataclass(frozen=True)
class HistogramBucket:
    range_start: float
    range_end: float
    count: int
    probability: float  # percent of all outcomes


@dataclasses.dataclass(frozen=True)
class RiskFactor:
    factor: str
    impact: float
    probability: float  # illustrative, percent


@dataclasses.dataclass
class SimulationResult:
    parameters: SimulationParameters
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float
    mean: float
    std_dev: float
    worst_case: float
    best_case: float
    ci95_low: float
    ci95_high: float
    histogram: List[HistogramBucket]
    outcomes_above_base: int
    probability_of_target: Optional[float] = None
    risk_factors: List[RiskFactor] = dataclasses.field(default_factory=list)

    def percentiles(self) -> Dict[str, float]:
        return {
            "p10": self.p10,
            "p25": self.p25,
            "p50": self.p50,
            "p75": self.p75,
            "p90": self.p90,
        }


@dataclasses.dataclass(frozen=True)
class Insights:
    expected_outcome: str
    confidence_range: str
    risk_level: str  # "low" | "medium" | "high"
    growth_probability: str


@dataclasses.dataclass(frozen=True)
class ScenarioAdjustment:
    growth_delta: float = 0.0
    growth_volatility_delta: float = 0.0
    churn_delta: float = 0.0
    churn_volatility_delta: float = 0.0
    expansion_delta: float = 0.0
    expansion_volatility_delta: float = 0.0
    seasonality_delta: float = 0.0
    churn_floor: Optional[float] = None
    expansion_floor: Optional[float] = None


@dataclasses.dataclass
class ScenarioComparison:
    baseline: SimulationResult
    scenario: SimulationResult
    delta: Dict[str, float]


@dataclasses.dataclass(frozen=True)
class BaselineComparison:
    previous_p50: float
    previous_mean: float
    p50_change: float
    mean_change: float
    p50_change_pct: Optional[float] = None
