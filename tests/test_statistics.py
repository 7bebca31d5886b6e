import math

import numpy as np
import pytest

from revcast_core.domain.models import SimulationParameters
from revcast_core.services.random_source import SeededRandomSource, spawn_sources, standard_normal
from revcast_core.services.statistics import (
    build_histogram,
    percentile_at,
    probability_of_target,
    summarize_outcomes,
)


class SequenceSource:
    def __init__(self, values):
        self._values = list(values)

    def next_uniform(self) -> float:
        return self._values.pop(0)


def test_box_muller_uses_both_draws():
    z = standard_normal(SequenceSource([math.exp(-2), 0.5]))
    assert z == pytest.approx(-2.0)


def test_box_muller_redraws_zero_pair():
    z = standard_normal(SequenceSource([0.0, 0.3, math.exp(-2), 0.5]))
    assert z == pytest.approx(-2.0)


def test_seeded_source_stays_in_open_interval():
    rng = SeededRandomSource(5)
    draws = [rng.next_uniform() for _ in range(2000)]
    assert all(0.0 < u < 1.0 for u in draws)


def test_spawned_sources_are_independent_and_reproducible():
    first = [s.next_uniform() for s in spawn_sources(9, 3)]
    again = [s.next_uniform() for s in spawn_sources(9, 3)]
    assert first == again
    assert len(set(first)) == 3


def test_percentile_uses_floor_index():
    ordered = np.arange(10, dtype=float)  # 0..9
    assert percentile_at(ordered, 0.10) == 1.0
    assert percentile_at(ordered, 0.25) == 2.0  # floor(2.5)
    assert percentile_at(ordered, 0.50) == 5.0
    assert percentile_at(ordered, 0.975) == 9.0
    assert percentile_at(ordered, 0.025) == 0.0


def test_summary_uses_population_std_dev():
    params = SimulationParameters(base_mrr=2.0, iterations=4, horizon_months=1)
    result = summarize_outcomes([1.0, 2.0, 3.0, 4.0], params)
    assert result.mean == 2.5
    assert result.std_dev == pytest.approx(math.sqrt(1.25))
    assert result.worst_case == 1.0
    assert result.best_case == 4.0
    assert result.outcomes_above_base == 2


def test_probability_of_target_is_non_increasing():
    outcomes = np.random.default_rng(1).normal(100, 20, size=500)
    targets = np.linspace(20, 180, 40)
    probs = [probability_of_target(outcomes, t) for t in targets]
    assert all(a >= b for a, b in zip(probs, probs[1:]))
    assert probability_of_target(outcomes, outcomes.max() + 1) == 0
    assert probability_of_target(outcomes, outcomes.min()) == 100


def test_histogram_puts_max_in_last_bucket():
    ordered = np.array([0.0, 25.0, 50.0, 99.0, 100.0])
    histogram = build_histogram(ordered)
    assert len(histogram) == 50
    assert histogram[0].count == 1
    assert histogram[-1].count == 2  # 99 and 100
    assert histogram[-1].range_end == pytest.approx(100.0)
    assert sum(b.count for b in histogram) == 5


def test_histogram_with_identical_outcomes():
    histogram = build_histogram(np.full(7, 42.0))
    assert histogram[0].count == 7
    assert histogram[0].probability == pytest.approx(100.0)
    assert sum(b.count for b in histogram) == 7
