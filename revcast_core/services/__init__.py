from revcast_core.services.insights import build_insights, risk_factors  # noqa: F401
from revcast_core.services.pipeline import compare_scenario, compare_to_baseline  # noqa: F401
from revcast_core.services.random_source import RandomSource, SeededRandomSource, standard_normal  # noqa: F401
from revcast_core.services.scenario import apply_scenario, preset_adjustment  # noqa: F401
from revcast_core.services.simulator import run_monte_carlo, run_monte_carlo_parallel  # noqa: F401
from revcast_core.services.statistics import summarize_outcomes  # noqa: F401

__all__ = [
    "RandomSource",
    "SeededRandomSource",
    "apply_scenario",
    "build_insights",
    "compare_scenario",
    "compare_to_baseline",
    "preset_adjustment",
    "risk_factors",
    "run_monte_carlo",
    "run_monte_carlo_parallel",
    "standard_normal",
    "summarize_outcomes",
]
