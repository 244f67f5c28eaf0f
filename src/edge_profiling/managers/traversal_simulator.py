"""
Traversal simulator.

Produces per-edge execution counters by walking a flow graph from its entry
node to its exit node `runs` times, choosing each outgoing edge with
probability proportional to its weight. Only instrumented edges are counted.

Per-run walk:
    1. Start at the entry node; count the entry sentinel if instrumented.
    2. At the exit node the run ends (the exit sentinel is never counted).
    3. A node without outgoing edges ends the run early (dead end).
    4. After max_steps_per_run traversals the run ends (cycle guard).
    5. Otherwise pick an edge, count it if instrumented, move to its target.

Two schedules share the walk code:

- Batch: run_batch() runs every walk synchronously.
- Stepwise: start() with fast_mode off arms a timer on the injected
  scheduler. Each tick applies exactly one edge traversal or one run
  turnaround, then schedules the next tick at base_interval / speed.

Status transitions (stepwise):

    IDLE --start--> RUNNING --pause--> PAUSED --resume--> RUNNING
    RUNNING --last run finished--> STOPPED (counters kept)
    any --stop/reset--> STOPPED/IDLE (timer cancelled, counters cleared)

Determinism: the sampler is reseeded on start(), and both schedules draw
random numbers in the same order, so for a fixed seed batch and stepwise
runs (paused or not) end with identical counters.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from ..config.simulation_config import SimulationConfig, clamp_speed, normalize_runs
from ..models.graph import FlowGraph, GraphEdge, ENTRY_SENTINEL_ID
from ..utils.logger import Logger
from .edge_sampler import WeightedEdgeSampler
from .tick_scheduler import BlockingTickScheduler


class SimulationStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


@dataclass(frozen=True)
class SimulationSnapshot:
    """Read-only view of the simulator state (counters are a copy)."""
    status: SimulationStatus
    counters: Dict[str, int] = field(default_factory=dict)
    current_run: int = 0
    total_runs: int = 0
    current_node_id: Optional[str] = None
    current_edge_id: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self.status in (SimulationStatus.RUNNING, SimulationStatus.PAUSED)

    @property
    def is_paused(self) -> bool:
        return self.status == SimulationStatus.PAUSED


class TraversalSimulator:
    """
    Owns the counters, the walk position and the tick timer for one graph.

    Args:
        graph: Sentinel-augmented flow graph (read only).
        instrumented_ids: Edges whose traversals are counted.
        config: Simulation settings; a default SimulationConfig when None.
        scheduler: Anything with call_later(delay_s, callback) -> handle.cancel().
        sampler: Edge picker; built from config.seed when None.
        on_tick: Called with a snapshot after every applied tick.
    """

    def __init__(
        self,
        graph: FlowGraph,
        instrumented_ids: Iterable[str],
        config: Optional[SimulationConfig] = None,
        scheduler=None,
        sampler: Optional[WeightedEdgeSampler] = None,
        on_tick: Optional[Callable[[SimulationSnapshot], None]] = None,
    ):
        self.graph = graph
        self.instrumented = frozenset(instrumented_ids)
        self.config = replace(config) if config is not None else SimulationConfig()
        self.scheduler = scheduler if scheduler is not None else BlockingTickScheduler()
        self.sampler = sampler if sampler is not None else WeightedEdgeSampler(self.config.seed)
        self.on_tick = on_tick

        entry = graph.entry_node()
        exit_ = graph.exit_node()
        self.entry_node_id: Optional[str] = entry.id if entry else None
        self.exit_node_id: Optional[str] = exit_.id if exit_ else None

        # GRAPH IS READ ONLY, SO ADJACENCY IS COMPUTED ONCE
        self._outgoing: Dict[str, List[GraphEdge]] = {n.id: [] for n in graph.nodes}
        for edge in graph.edges:
            self._outgoing[edge.source].append(edge)

        self._status = SimulationStatus.IDLE
        self._timer = None
        self._counters: Dict[str, int] = {}
        self._current_run = 0
        self._steps_in_run = 0
        self._current_node_id: Optional[str] = None
        self._current_edge_id: Optional[str] = None

    # --- configuration --------------------------------------------------------

    def set_runs(self, runs: float) -> None:
        self.config.runs = normalize_runs(runs)

    def set_max_steps(self, max_steps: float) -> None:
        self.config.max_steps_per_run = normalize_runs(max_steps)

    def set_speed(self, multiplier: float) -> None:
        """Takes effect from the next scheduled tick."""
        self.config.speed = clamp_speed(multiplier)

    def set_fast_mode(self, on: bool) -> None:
        self.config.fast_mode = bool(on)

    def set_seed(self, seed: Optional[int]) -> None:
        self.config.seed = seed

    @property
    def tick_interval_s(self) -> float:
        return self.config.tick_interval_s

    # --- state queries --------------------------------------------------------

    @property
    def status(self) -> SimulationStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status in (SimulationStatus.RUNNING, SimulationStatus.PAUSED)

    @property
    def is_paused(self) -> bool:
        return self._status == SimulationStatus.PAUSED

    @property
    def counters(self) -> Dict[str, int]:
        """Copy of the current counters."""
        return dict(self._counters)

    @property
    def has_pending_tick(self) -> bool:
        return self._timer is not None

    def snapshot(self) -> SimulationSnapshot:
        return SimulationSnapshot(
            status=self._status,
            counters=dict(self._counters),
            current_run=self._current_run,
            total_runs=self.config.runs,
            current_node_id=self._current_node_id,
            current_edge_id=self._current_edge_id,
        )

    # --- controls -------------------------------------------------------------

    def start(self) -> bool:
        """
        Clear previous results and begin simulating.

        With fast_mode the whole batch runs before start() returns. Returns
        False when the graph has no entry node.
        """
        self.reset()
        if self.entry_node_id is None:
            Logger.log("TraversalSimulator.start: graph has no entry node, nothing to simulate",
                       Logger.LogPriority.WARNING)
            return False

        self.sampler.reset(self.config.seed)
        Logger.log(f"TraversalSimulator.start: runs={self.config.runs} "
                   f"max_steps={self.config.max_steps_per_run} fast_mode={self.config.fast_mode}",
                   Logger.LogPriority.INFO)

        if self.config.fast_mode:
            self._run_all()
            return True

        self._status = SimulationStatus.RUNNING
        self._begin_run()
        self._schedule_next_tick()
        return True

    def run_batch(self) -> Dict[str, int]:
        """Run all walks synchronously regardless of fast_mode; return the counters."""
        self.reset()
        if self.entry_node_id is None:
            Logger.log("TraversalSimulator.run_batch: graph has no entry node", Logger.LogPriority.WARNING)
            return {}
        self.sampler.reset(self.config.seed)
        self._run_all()
        return self.counters

    def pause(self) -> bool:
        if self._status is not SimulationStatus.RUNNING:
            return False
        self._cancel_timer()
        self._status = SimulationStatus.PAUSED
        Logger.log(f"TraversalSimulator.pause at run {self._current_run}, node {self._current_node_id}")
        return True

    def resume(self) -> bool:
        if self._status is not SimulationStatus.PAUSED:
            return False
        self._status = SimulationStatus.RUNNING
        Logger.log(f"TraversalSimulator.resume at run {self._current_run}, node {self._current_node_id}")
        self._schedule_next_tick()
        return True

    def stop(self) -> None:
        """Cancel any pending tick and clear run, position and counters."""
        self._cancel_timer()
        self._clear_progress()
        self._status = SimulationStatus.STOPPED
        Logger.log("TraversalSimulator.stop")

    def reset(self) -> None:
        """Cancel any pending tick and return to the idle state with empty counters."""
        self._cancel_timer()
        self._clear_progress()
        self._status = SimulationStatus.IDLE

    def tick(self) -> bool:
        """
        Apply one stepwise step. Normally invoked by the timer.

        Returns False (and changes nothing) unless the simulator is running.
        """
        self._cancel_timer()
        if self._status is not SimulationStatus.RUNNING:
            return False

        if self._run_is_over():
            self._turnaround()
        else:
            self._traverse_one()

        if self._status is SimulationStatus.RUNNING:
            self._schedule_next_tick()
        if self.on_tick is not None:
            self.on_tick(self.snapshot())
        return True

    # --- walk -----------------------------------------------------------------

    def _run_all(self) -> None:
        runs = self.config.runs
        self._status = SimulationStatus.RUNNING
        for _ in range(runs):
            self._begin_run()
            while not self._run_is_over():
                self._traverse_one()
            self._current_run += 1
        self._finish()

    def _begin_run(self) -> None:
        self._current_node_id = self.entry_node_id
        self._steps_in_run = 0
        if self.graph.has_edge(ENTRY_SENTINEL_ID) and ENTRY_SENTINEL_ID in self.instrumented:
            self._current_edge_id = ENTRY_SENTINEL_ID
            self._increment(ENTRY_SENTINEL_ID)
        else:
            self._current_edge_id = None

    def _run_is_over(self) -> bool:
        node_id = self._current_node_id
        if node_id == self.exit_node_id:
            return True
        if not self._outgoing.get(node_id):
            return True
        return self._steps_in_run >= self.config.max_steps_per_run

    def _traverse_one(self) -> None:
        edge = self.sampler.pick(self._outgoing[self._current_node_id])
        self._current_edge_id = edge.id
        if edge.id in self.instrumented:
            self._increment(edge.id)
        self._current_node_id = edge.target
        self._steps_in_run += 1

    def _turnaround(self) -> None:
        self._current_run += 1
        if self._current_run >= self.config.runs:
            self._finish()
            return
        self._begin_run()

    def _finish(self) -> None:
        self._cancel_timer()
        self._status = SimulationStatus.STOPPED
        self._current_node_id = None
        self._current_edge_id = None
        Logger.log(f"TraversalSimulator finished {self._current_run} runs, counters={self._counters}",
                   Logger.LogPriority.INFO)

    def _increment(self, edge_id: str) -> None:
        self._counters[edge_id] = self._counters.get(edge_id, 0) + 1

    # --- timer ----------------------------------------------------------------

    def _schedule_next_tick(self) -> None:
        self._cancel_timer()
        self._timer = self.scheduler.call_later(self.tick_interval_s, self.tick)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _clear_progress(self) -> None:
        self._counters = {}
        self._current_run = 0
        self._steps_in_run = 0
        self._current_node_id = None
        self._current_edge_id = None
