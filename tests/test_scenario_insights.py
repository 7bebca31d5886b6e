import pytest

from revcast_core.domain.errors import InvalidParameters
from revcast_core.domain.models import ScenarioAdjustment, SimulationParameters
from revcast_core.services.insights import build_insights, risk_factors, risk_level
from revcast_core.services.pipeline import compare_scenario, compare_to_baseline
from revcast_core.services.random_source import SeededRandomSource
from revcast_core.services.scenario import (
    ANNUAL_POINT,
    apply_scenario,
    net_revenue_retention,
    preset_adjustment,
)
from revcast_core.services.simulator import run_monte_carlo


def _params(**overrides) -> SimulationParameters:
    values = dict(
        base_mrr=20000.0,
        iterations=400,
        horizon_months=6,
        avg_growth_rate=0.03,
        growth_volatility=0.02,
        avg_churn_rate=0.02,
        churn_volatility=0.01,
        avg_expansion_rate=0.01,
        expansion_volatility=0.005,
        seasonality_factor=0.1,
    )
    values.update(overrides)
    return SimulationParameters(**values)


@pytest.mark.parametrize(
    "mean,std,expected",
    [(100.0, 31.0, "high"), (100.0, 30.0, "medium"), (100.0, 16.0, "medium"), (100.0, 15.0, "low"), (0.0, 0.0, "low"), (0.0, 1.0, "high")],
)
def test_risk_level_thresholds(mean, std, expected):
    assert risk_level(mean, std) == expected


def test_risk_factor_formulas():
    factors = {r.factor: r for r in risk_factors(_params(base_mrr=1000.0, churn_volatility=0.1, growth_volatility=0.2))}
    assert factors["Churn rate increase"].impact == pytest.approx(-300.0)
    assert factors["Churn rate increase"].probability == 25.0
    assert factors["Growth slowdown"].impact == pytest.approx(-400.0)
    assert factors["Growth slowdown"].probability == 30.0


def test_insights_for_deterministic_growth():
    params = _params(growth_volatility=0.0, churn_volatility=0.0, expansion_volatility=0.0, seasonality_factor=0.0)
    result = run_monte_carlo(params, SeededRandomSource(1))
    insights = build_insights(result)
    assert insights.risk_level == "low"
    assert insights.growth_probability == "100.0%"
    assert "6 months" in insights.expected_outcome
    assert insights.confidence_range.startswith("95% confidence range")


def test_growth_probability_when_revenue_shrinks():
    params = _params(avg_growth_rate=0.0, growth_volatility=0.0, churn_volatility=0.0, expansion_volatility=0.0, avg_churn_rate=0.05)
    insights = build_insights(run_monte_carlo(params, SeededRandomSource(1)))
    assert insights.growth_probability == "0.0%"


def test_presets_shift_churn_and_expansion():
    params = _params(avg_churn_rate=0.5 * ANNUAL_POINT, avg_expansion_rate=2 * ANNUAL_POINT)
    optimistic = apply_scenario(params, preset_adjustment("optimistic"))
    conservative = apply_scenario(params, preset_adjustment("Conservative"))

    assert optimistic.avg_churn_rate == pytest.approx(ANNUAL_POINT)  # floored
    assert optimistic.avg_expansion_rate == pytest.approx(12 * ANNUAL_POINT)
    assert conservative.avg_churn_rate == pytest.approx(2.5 * ANNUAL_POINT)
    assert conservative.avg_expansion_rate == 0.0  # floored
    assert params.avg_churn_rate == pytest.approx(0.5 * ANNUAL_POINT)


def test_unknown_preset_is_rejected():
    with pytest.raises(InvalidParameters):
        preset_adjustment("moonshot")


def test_net_revenue_retention():
    assert net_revenue_retention(_params(avg_expansion_rate=0.01, avg_churn_rate=0.005)) == pytest.approx(106.0)


def test_compare_scenario_with_common_seed():
    comparison = compare_scenario(_params(), ScenarioAdjustment(churn_delta=0.02), seed=17)
    assert comparison.delta["p50"] < 0
    assert comparison.delta["mean"] < 0
    assert comparison.scenario.parameters.avg_churn_rate == pytest.approx(0.04)

    unchanged = compare_scenario(_params(), ScenarioAdjustment(), seed=17)
    assert unchanged.delta["p50"] == 0.0


def test_compare_to_baseline_accepts_response_payload():
    result = run_monte_carlo(_params(), SeededRandomSource(4))
    previous = {"results": {"percentiles": {"p50": result.p50 / 2}, "mean": result.mean}}
    comparison = compare_to_baseline(result, previous)
    assert comparison.p50_change == pytest.approx(result.p50 / 2)
    assert comparison.p50_change_pct == pytest.approx(100.0)
    assert comparison.mean_change == 0.0


def test_compare_to_baseline_requires_fields():
    result = run_monte_carlo(_params(iterations=50), SeededRandomSource(4))
    with pytest.raises(InvalidParameters):
        compare_to_baseline(result, {"p50": 10.0})
    assert compare_to_baseline(result, {"p50": 0, "mean": 0}).p50_change_pct is None


def test_compare_scenario_without_seed_shares_draws():
    params = SimulationParameters(base_mrr=1000.0, iterations=300, horizon_months=6, avg_growth_rate=0.02, growth_volatility=0.05)
    comparison = compare_scenario(params, ScenarioAdjustment(), seed=None)
    assert comparison.delta["p50"] == 0.0
    assert comparison.delta["std_dev"] == 0.0


@pytest.mark.parametrize(
    "previous",
    [5, ["p50", "mean"], {"p50": "abc", "mean": 1}, {"p50": 10.0, "mean": {"value": 1}}],
)
def test_compare_to_baseline_rejects_malformed_snapshot(previous):
    result = run_monte_carlo(_params(iterations=50), SeededRandomSource(4))
    with pytest.raises(InvalidParameters):
        compare_to_baseline(result, previous)
