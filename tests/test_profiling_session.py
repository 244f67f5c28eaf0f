"""
Tests for ProfilingSession: example switching, the walkthrough and overlays.
"""

import pytest

from edge_profiling.config import SimulationConfig
from edge_profiling.managers.profiling_session import ProfilingSession, WalkthroughStep
from edge_profiling.managers.tick_scheduler import ManualTickScheduler
from edge_profiling.managers.traversal_simulator import SimulationStatus
from edge_profiling.models.exceptions import ExampleNotFoundError
from edge_profiling.models.graph import ENTRY_SENTINEL_ID


@pytest.fixture
def scheduler():
    return ManualTickScheduler()


@pytest.fixture
def session(scheduler):
    return ProfilingSession(config=SimulationConfig(runs=5, seed=3), scheduler=scheduler)


class TestExampleSelection:

    def test_default_is_first_example(self, session):
        assert session.example.id == "linear-flow"
        assert session.step is WalkthroughStep.START

    def test_selection_computes_sets(self, session):
        session.select_example("if-else")
        assert set(session.spanning_edge_ids) == {"e0", "e1", "e2", "e3", "e4", "e6"}
        assert set(session.instrumented_edge_ids) == {"e5", ENTRY_SENTINEL_ID}
        assert session.graph is session.catalog.get("if-else").graph

    def test_switch_cancels_pending_tick(self, session, scheduler):
        session.select_example("if-else")
        session.start_simulation()
        scheduler.run_until_idle(max_callbacks=2)
        old = session.simulator
        assert scheduler.pending_count == 1

        session.select_example("while-loop")
        assert scheduler.pending_count == 0
        assert old.status is SimulationStatus.IDLE
        assert session.simulator is not old
        assert session.simulator.counters == {}
        assert session.solver.steps == []

    def test_switch_keeps_simulation_settings(self, session):
        session.simulator.set_speed(2.0)
        session.simulator.set_runs(42)
        session.select_example("loop-if")
        assert session.simulator.config.speed == 2.0
        assert session.simulator.config.runs == 42

    def test_switch_resets_walkthrough(self, session):
        session.start()
        session.next_step()
        session.select_example("if-else")
        assert session.step is WalkthroughStep.START

    def test_unknown_example(self, session):
        with pytest.raises(ExampleNotFoundError):
            session.select_example("does-not-exist")
        assert session.example.id == "linear-flow"


class TestSimulationAndReconstruction:

    def test_solver_reads_live_counters(self, session):
        session.select_example("if-else")
        session.simulator.set_fast_mode(True)
        session.simulator.set_runs(200)
        session.start_simulation()
        session.solver.solve_all()
        merged = session.solver.merged_counters()
        assert merged["e0"] == 200
        assert merged["e6"] == 200
        assert merged["e2"] + merged["e3"] == 200

    def test_restart_discards_reconstruction(self, session):
        session.simulator.set_fast_mode(True)
        session.start_simulation()
        session.solver.solve_all()
        assert session.solver.steps
        session.start_simulation()
        assert session.solver.steps == []

    def test_reset_simulation(self, session, scheduler):
        session.start_simulation()
        session.reset_simulation()
        assert scheduler.pending_count == 0
        assert session.simulator.status is SimulationStatus.IDLE


class TestWalkthrough:

    def test_step_navigation(self, session):
        assert session.start() is WalkthroughStep.WEIGHTS
        for _ in range(10):
            session.next_step()
        assert session.step is WalkthroughStep.RECONSTRUCTION
        assert session.prev_step() is WalkthroughStep.MEASUREMENT
        assert session.reset_step() is WalkthroughStep.START
        assert session.prev_step() is WalkthroughStep.START

    def test_overlay_per_step(self, session):
        session.select_example("if-else")
        session.simulator.set_fast_mode(True)
        session.start_simulation()

        overlay = session.overlay()
        assert not overlay.show_weights
        assert overlay.spanning_edge_ids == []
        assert overlay.counters == {}

        session.start()
        assert session.overlay().show_weights

        session.next_step()
        overlay = session.overlay()
        assert not overlay.show_weights
        assert overlay.spanning_edge_ids == session.spanning_edge_ids
        assert overlay.instrumented_edge_ids == []

        session.next_step()
        assert session.overlay().instrumented_edge_ids == session.instrumented_edge_ids

        session.next_step()
        overlay = session.overlay()
        assert overlay.counters == session.simulator.counters
        assert not overlay.show_edge_ids

        session.solver.solve_all()
        session.next_step()
        overlay = session.overlay()
        assert overlay.show_edge_ids
        assert overlay.counters == session.solver.merged_counters()
        assert "e4" in overlay.counters

    def test_overlay_tracks_position_while_measuring(self, session):
        session.start_simulation()
        for _ in range(4):
            session.next_step()
        overlay = session.overlay()
        assert overlay.current_node_id == "ENTRY"
        assert overlay.current_edge_id == ENTRY_SENTINEL_ID
