from __future__ import annotations

from typing import Any, Dict

from revcast_core.domain.models import (
    BaselineComparison,
    Insights,
    ScenarioComparison,
    SimulationParameters,
    SimulationRequest,
    SimulationResult,
)


def parameters_to_json(params: SimulationParameters) -> Dict[str, Any]:
    return {
        "baseMRR": params.base_mrr,
        "numIterations": params.iterations,
        "timeHorizonMonths": params.horizon_months,
        "targetValue": params.target_value,
        "parameters": {
            "avgGrowthRate": params.avg_growth_rate,
            "growthVolatility": params.growth_volatility,
            "avgChurnRate": params.avg_churn_rate,
            "churnVolatility": params.churn_volatility,
            "avgExpansionRate": params.avg_expansion_rate,
            "expansionVolatility": params.expansion_volatility,
            "seasonalityFactor": params.seasonality_factor,
        },
    }


def result_to_json(result: SimulationResult) -> Dict[str, Any]:
    return {
        "percentiles": result.percentiles(),
        "mean": result.mean,
        "stdDev": result.std_dev,
        "worstCase": result.worst_case,
        "bestCase": result.best_case,
        "confidenceInterval95": {"low": result.ci95_low, "high": result.ci95_high},
        "probabilityOfTarget": result.probability_of_target,
        "histogram": [
            {
                "rangeStart": b.range_start,
                "rangeEnd": b.range_end,
                "count": b.count,
                "probability": b.probability,
            }
            for b in result.histogram
        ],
        "riskFactors": [
            {"factor": r.factor, "impact": r.impact, "probability": r.probability}
            for r in result.risk_factors
        ],
    }


def insights_to_json(insights: Insights) -> Dict[str, str]:
    return {
        "expectedOutcome": insights.expected_outcome,
        "confidenceRange": insights.confidence_range,
        "riskLevel": insights.risk_level,
        "growthProbability": insights.growth_probability,
    }


def response_payload(request: SimulationRequest, result: SimulationResult, insights: Insights) -> Dict[str, Any]:
    params = request.parameters
    return {
        "simulationName": request.simulation_name,
        "simulationType": request.simulation_type,
        "baseMRR": params.base_mrr,
        "baseARR": request.effective_base_arr,
        "numIterations": params.iterations,
        "timeHorizonMonths": params.horizon_months,
        "targetValue": params.target_value,
        "results": result_to_json(result),
        "insights": insights_to_json(insights),
    }


_DELTA_KEYS = {"std_dev": "stdDev", "probability_of_target": "probabilityOfTarget"}


def comparison_to_json(comparison: ScenarioComparison) -> Dict[str, Any]:
    return {
        "baseline": {
            "parameters": parameters_to_json(comparison.baseline.parameters),
            "results": result_to_json(comparison.baseline),
        },
        "scenario": {
            "parameters": parameters_to_json(comparison.scenario.parameters),
            "results": result_to_json(comparison.scenario),
        },
        "delta": {_DELTA_KEYS.get(k, k): v for k, v in comparison.delta.items()},
    }


def baseline_comparison_to_json(comparison: BaselineComparison) -> Dict[str, Any]:
    return {
        "previousP50": comparison.previous_p50,
        "previousMean": comparison.previous_mean,
        "p50Change": comparison.p50_change,
        "meanChange": comparison.mean_change,
        "p50ChangePct": comparison.p50_change_pct,
    }
