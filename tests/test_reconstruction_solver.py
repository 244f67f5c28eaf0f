"""
Tests for the reconstruction solver.

Covers:
- the if/else worked example, step by step
- stalls when measured counters are missing
- step browsing and reset
- full recovery of simulated counts on every catalog graph
"""

import pytest

from edge_profiling.config import SimulationConfig
from edge_profiling.managers.reconstruction_solver import ReconstructionSolver
from edge_profiling.managers.spanning_selector import compute_spanning_set
from edge_profiling.managers.tick_scheduler import ManualTickScheduler
from edge_profiling.managers.traversal_simulator import TraversalSimulator
from edge_profiling.models.graph import ENTRY_SENTINEL_ID, EXIT_SENTINEL_ID


def _solver(graph, counters):
    return ReconstructionSolver(graph, compute_spanning_set(graph), counters_source=lambda: dict(counters))


@pytest.fixture
def worked_solver(if_else_graph):
    return _solver(if_else_graph, {ENTRY_SENTINEL_ID: 100, "e5": 41})


class TestWorkedExample:

    def test_solution_order_and_values(self, worked_solver):
        # nodes are scanned in graph order (ENTRY, S, D, T, F, M, EXIT), so e0 comes first
        steps = worked_solver.solve_all()
        assert [(s.solved_edge_id, s.value) for s in steps] == [
            ("e0", 100), ("e1", 100), ("e3", 41), ("e2", 59), ("e4", 59), ("e6", 100),
        ]
        assert [s.node_id for s in steps] == ["ENTRY", "S", "F", "D", "T", "M"]

    def test_complete_after_solving(self, worked_solver):
        worked_solver.solve_all()
        assert worked_solver.is_complete()
        assert worked_solver.pending_tree_edge_ids() == []
        assert worked_solver.compute_next() is None

    def test_merged_counters(self, worked_solver):
        worked_solver.solve_all()
        assert worked_solver.merged_counters() == {
            ENTRY_SENTINEL_ID: 100, "e0": 100, "e1": 100, "e2": 59,
            "e3": 41, "e4": 59, "e5": 41, "e6": 100,
        }

    def test_exit_sentinel_never_merged(self, worked_solver):
        worked_solver.solve_all()
        assert EXIT_SENTINEL_ID not in worked_solver.merged_counters()

    def test_first_step_uses_entry_sentinel(self, worked_solver):
        step = worked_solver.compute_next()
        assert step.solved_edge_id == "e0"
        assert step.parent_id == "S"
        assert not step.unknown_is_incoming
        assert [(t.edge_id, t.sign, t.value) for t in step.equation] == [(ENTRY_SENTINEL_ID, 1, 100)]

    def test_equation_terms_and_direction(self, worked_solver):
        steps = worked_solver.solve_all()
        at_f = steps[2]
        assert at_f.unknown_is_incoming
        assert at_f.parent_id == "D"
        assert [(t.edge_id, t.sign, t.value) for t in at_f.equation] == [("e5", -1, 41)]

        at_d = steps[3]
        assert not at_d.unknown_is_incoming
        assert sorted((t.edge_id, t.sign, t.value) for t in at_d.equation) == [
            ("e1", 1, 100), ("e3", -1, 41),
        ]

    def test_balance_text(self, worked_solver):
        steps = worked_solver.solve_all()
        text = steps[3].text
        assert text.startswith("Balance at node D: sum(in) = sum(out)")
        assert "  e1=100 = false (e3)=41 + x(e2)" in text
        assert text.endswith("x(e2) = 59.")

    def test_exit_balance_uses_virtual_exit_count(self, if_else_graph):
        # without e5 the only way to e6 is the exit balance
        solver = _solver(if_else_graph, {ENTRY_SENTINEL_ID: 100})
        steps = solver.solve_all()
        assert [(s.solved_edge_id, s.value, s.node_id) for s in steps] == [
            ("e0", 100, "ENTRY"), ("e1", 100, "S"), ("e6", 100, "EXIT"),
        ]


class TestStalls:

    def test_missing_instrumented_count_stalls(self, if_else_graph):
        solver = _solver(if_else_graph, {ENTRY_SENTINEL_ID: 100})
        solver.solve_all()
        assert not solver.is_complete()
        assert solver.pending_tree_edge_ids() == ["e2", "e3", "e4"]
        assert solver.compute_next() is None

    def test_no_measurement_still_solves_from_sentinels(self, if_else_graph):
        solver = _solver(if_else_graph, {})
        first = solver.compute_next()
        assert (first.solved_edge_id, first.value) == ("e0", 0)

    def test_snapshot(self, if_else_graph):
        solver = _solver(if_else_graph, {ENTRY_SENTINEL_ID: 100})
        solver.solve_all()
        snap = solver.snapshot()
        assert not snap.is_complete
        assert snap.pending_tree_edge_ids == ["e2", "e3", "e4"]
        assert snap.cursor == 2
        assert len(snap.steps) == 3

    def test_counters_read_on_every_query(self, if_else_graph):
        counters = {ENTRY_SENTINEL_ID: 100}
        solver = ReconstructionSolver(if_else_graph, compute_spanning_set(if_else_graph),
                                      counters_source=lambda: counters)
        solver.solve_all()
        assert not solver.is_complete()
        counters["e5"] = 41
        solver.solve_all()
        assert solver.is_complete()
        assert solver.merged_counters()["e2"] == 59


class TestBrowsing:

    def test_cursor_follows_new_steps(self, worked_solver):
        assert worked_solver.cursor == -1
        assert worked_solver.current_step is None
        worked_solver.compute_next()
        worked_solver.compute_next()
        assert worked_solver.cursor == 1
        assert worked_solver.current_step.solved_edge_id == "e1"

    def test_prev_and_next(self, worked_solver):
        worked_solver.solve_all()
        assert worked_solver.cursor == 5
        assert worked_solver.next() is None
        assert worked_solver.prev().solved_edge_id == "e4"
        assert worked_solver.prev().solved_edge_id == "e2"
        assert worked_solver.next().solved_edge_id == "e4"
        for _ in range(10):
            worked_solver.prev()
        assert worked_solver.cursor == 0
        assert worked_solver.prev() is None

    def test_browsing_does_not_change_results(self, worked_solver):
        worked_solver.solve_all()
        before = worked_solver.merged_counters()
        worked_solver.prev()
        worked_solver.prev()
        assert worked_solver.merged_counters() == before

    def test_reset(self, worked_solver):
        worked_solver.solve_all()
        worked_solver.reset()
        assert worked_solver.steps == []
        assert worked_solver.cursor == -1
        assert worked_solver.reconstructed_counters == {}
        assert len(worked_solver.pending_tree_edge_ids()) == 6


class TestRecovery:
    """Hide the tree edges of a full measurement and solve them back."""

    @pytest.mark.parametrize("example_id", [
        "linear-flow", "if-else", "while-loop", "nested-loop", "switch-three", "loop-if",
    ])
    def test_recovers_simulated_counts(self, catalog, example_id):
        graph = catalog.get(example_id).graph
        spanning = compute_spanning_set(graph)
        everything = [e.id for e in graph.edges]

        sim = TraversalSimulator(
            graph, everything,
            config=SimulationConfig(runs=300, max_steps_per_run=100_000, seed=2024),
            scheduler=ManualTickScheduler(),
        )
        truth = sim.run_batch()
        measured = {k: v for k, v in truth.items() if k not in spanning}

        solver = ReconstructionSolver(graph, spanning, counters_source=lambda: measured)
        solver.solve_all()

        assert solver.is_complete()
        assert solver.merged_counters() == truth
        assert len(solver.steps) == len(spanning)
