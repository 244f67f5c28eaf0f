"""
Tests for the weighted edge sampler and the tick schedulers.
"""

import pytest

from edge_profiling.managers.edge_sampler import WeightedEdgeSampler
from edge_profiling.managers.tick_scheduler import BlockingTickScheduler, ManualTickScheduler
from edge_profiling.models.graph import GraphEdge


def _edges(*weights):
    return [GraphEdge(f"e{i}", "A", f"T{i}", weight=w) for i, w in enumerate(weights)]


class TestWeightedEdgeSampler:

    def test_seed_reproducibility(self):
        edges = _edges(1, 2, 3)
        s1 = WeightedEdgeSampler(seed=42)
        s2 = WeightedEdgeSampler(seed=42)
        assert [s1.pick(edges).id for _ in range(200)] == [s2.pick(edges).id for _ in range(200)]

    def test_reset_restarts_stream(self):
        edges = _edges(1, 1)
        sampler = WeightedEdgeSampler(seed=7)
        first = [sampler.pick(edges).id for _ in range(50)]
        sampler.reset()
        assert [sampler.pick(edges).id for _ in range(50)] == first
        assert sampler.draw_count == 50

    def test_reset_with_new_seed(self):
        sampler = WeightedEdgeSampler(seed=1)
        sampler.reset(seed=99)
        assert sampler.seed == 99

    def test_zero_weight_edge_never_picked(self):
        edges = _edges(0, 5)
        sampler = WeightedEdgeSampler(seed=3)
        assert all(sampler.pick(edges).id == "e1" for _ in range(500))

    def test_all_zero_weights_uniform(self):
        edges = [GraphEdge("a", "X", "Y"), GraphEdge("b", "X", "Z", weight=0)]
        sampler = WeightedEdgeSampler(seed=5)
        picks = [sampler.pick(edges).id for _ in range(2000)]
        assert 800 < picks.count("a") < 1200

    def test_frequencies_follow_weights(self):
        edges = _edges(1, 3)
        sampler = WeightedEdgeSampler(seed=11)
        n = 10000
        heavy = sum(sampler.pick(edges).id == "e1" for _ in range(n))
        # expected 0.75, allow 3 standard errors
        assert abs(heavy / n - 0.75) < 3 * (0.75 * 0.25 / n) ** 0.5

    def test_single_candidate(self):
        edges = _edges(2)
        assert WeightedEdgeSampler(seed=0).pick(edges).id == "e0"

    def test_empty_candidates_rejected(self):
        with pytest.raises(ValueError):
            WeightedEdgeSampler(seed=0).pick([])


class TestManualTickScheduler:

    def test_fires_in_due_order(self):
        sched = ManualTickScheduler()
        fired = []
        sched.call_later(2.0, lambda: fired.append("late"))
        sched.call_later(1.0, lambda: fired.append("early"))
        assert sched.advance(0.5) == 0
        assert sched.advance(2.0) == 2
        assert fired == ["early", "late"]
        assert sched.now == pytest.approx(2.5)

    def test_cancelled_callback_never_fires(self):
        sched = ManualTickScheduler()
        fired = []
        handle = sched.call_later(1.0, lambda: fired.append(1))
        handle.cancel()
        assert sched.pending_count == 0
        assert sched.run_until_idle() == 0
        assert fired == []

    def test_chained_callbacks_inside_window(self):
        sched = ManualTickScheduler()
        fired = []

        def chain():
            fired.append(sched.now)
            if len(fired) < 5:
                sched.call_later(1.0, chain)

        sched.call_later(1.0, chain)
        assert sched.advance(3.0) == 3
        assert fired == [1.0, 2.0, 3.0]
        assert sched.run_until_idle() == 2

    def test_run_until_idle_limit(self):
        sched = ManualTickScheduler()
        for i in range(4):
            sched.call_later(i, lambda: None)
        assert sched.run_until_idle(max_callbacks=3) == 3
        assert sched.pending_count == 1


class TestBlockingTickScheduler:

    def test_runs_with_injected_clock(self):
        clock = {"t": 0.0}
        sched = BlockingTickScheduler(
            timefunc=lambda: clock["t"],
            delayfunc=lambda d: clock.__setitem__("t", clock["t"] + d),
        )
        fired = []
        sched.call_later(0.5, lambda: fired.append("a"))
        cancelled = sched.call_later(0.7, lambda: fired.append("never"))
        sched.call_later(1.0, lambda: fired.append("b"))
        cancelled.cancel()
        sched.run()
        assert fired == ["a", "b"]
        assert sched.pending_count == 0

    def test_cancel_after_run_is_harmless(self):
        sched = BlockingTickScheduler(timefunc=lambda: 0.0, delayfunc=lambda d: None)
        handle = sched.call_later(0.0, lambda: None)
        sched.run()
        handle.cancel()
