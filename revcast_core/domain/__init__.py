from revcast_core.domain.errors import (  # noqa: F401
    ForecastError,
    InvalidParameters,
    SimulationCancelled,
)
from revcast_core.domain.models import (  # noqa: F401
    BaselineComparison,
    HistogramBucket,
    Insights,
    RiskFactor,
    ScenarioAdjustment,
    ScenarioComparison,
    SimulationParameters,
    SimulationRequest,
    SimulationResult,
)

__all__ = [
    "BaselineComparison",
    "ForecastError",
    "HistogramBucket",
    "Insights",
    "InvalidParameters",
    "RiskFactor",
    "ScenarioAdjustment",
    "ScenarioComparison",
    "SimulationCancelled",
    "SimulationParameters",
    "SimulationRequest",
    "SimulationResult",
]
