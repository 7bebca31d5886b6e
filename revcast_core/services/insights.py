from __future__ import annotations

from typing import List

from revcast_core.domain.models import Insights, RiskFactor, SimulationParameters, SimulationResult

HIGH_RISK_CV = 0.3
MEDIUM_RISK_CV = 0.15


def risk_factors(params: SimulationParameters) -> List[RiskFactor]:
    """
    Presentation heuristics: fixed multipliers against the volatility inputs
    and base MRR, with fixed illustrative probabilities. These are not derived
    from the simulated distribution.
    """
    base = params.base_mrr
    return [
        RiskFactor("Churn rate increase", -(params.churn_volatility * base * 3), 25.0),
        RiskFactor("Growth slowdown", -(params.growth_volatility * base * 2), 30.0),
        RiskFactor("Expansion shortfall", -(params.expansion_volatility * base * 1.5), 20.0),
        RiskFactor("Seasonal demand swing", -(abs(params.seasonality_factor) * base * 0.5), 15.0),
    ]


def risk_level(mean: float, std_dev: float) -> str:
    if mean == 0:
        return "high" if std_dev > 0 else "low"
    cv = std_dev / mean
    if cv > HIGH_RISK_CV:
        return "high"
    if cv > MEDIUM_RISK_CV:
        return "medium"
    return "low"


def growth_probability(result: SimulationResult) -> str:
    pct = result.outcomes_above_base / result.parameters.iterations * 100
    return f"{pct:.1f}%"


def build_insights(result: SimulationResult) -> Insights:
    months = result.parameters.horizon_months
    return Insights(
        expected_outcome=f"Expected MRR after {months} months: {result.mean:,.2f} (mean of all trajectories)",
        confidence_range=f"95% confidence range: {result.ci95_low:,.2f} - {result.ci95_high:,.2f}",
        risk_level=risk_level(result.mean, result.std_dev),
        growth_probability=growth_probability(result),
    )
