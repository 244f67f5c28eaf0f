"""
Profiling session: one active example graph and everything derived from it.

The session is what a front end drives. It

- selects the active example and caches its spanning and instrumentation sets,
- owns one TraversalSimulator and one ReconstructionSolver for that graph and
  replaces both (cancelling any pending tick) whenever the example changes,
- tracks the walkthrough step and describes what to highlight at that step.

Walkthrough steps:
    0 START, 1 WEIGHTS, 2 SPANNING_TREE, 3 INSTRUMENTATION,
    4 MEASUREMENT, 5 RECONSTRUCTION
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Dict, List, Optional

from ..catalog.examples_catalog import ExampleItem, ExamplesCatalog
from ..config.simulation_config import SimulationConfig
from ..models.graph import FlowGraph
from ..utils.logger import Logger
from .instrumentation import compute_instrumentation_set
from .reconstruction_solver import ReconstructionSolver
from .spanning_selector import compute_spanning_set
from .traversal_simulator import TraversalSimulator


class WalkthroughStep(IntEnum):
    START = 0
    WEIGHTS = 1
    SPANNING_TREE = 2
    INSTRUMENTATION = 3
    MEASUREMENT = 4
    RECONSTRUCTION = 5


@dataclass(frozen=True)
class GraphOverlay:
    """What a renderer should emphasise for the current walkthrough step."""
    show_weights: bool = False
    spanning_edge_ids: List[str] = field(default_factory=list)
    instrumented_edge_ids: List[str] = field(default_factory=list)
    counters: Dict[str, int] = field(default_factory=dict)
    current_node_id: Optional[str] = None
    current_edge_id: Optional[str] = None
    show_edge_ids: bool = False


class ProfilingSession:
    """
    Args:
        catalog: Example source; the built-in catalog when None.
        config: Simulation settings copied into every new simulator.
        scheduler: Tick scheduler handed to every new simulator.
    """

    def __init__(self, catalog: Optional[ExamplesCatalog] = None,
                 config: Optional[SimulationConfig] = None, scheduler=None):
        self.catalog = catalog if catalog is not None else ExamplesCatalog()
        self.config = config if config is not None else SimulationConfig()
        self.scheduler = scheduler
        self.step = WalkthroughStep.START

        self._example: Optional[ExampleItem] = None
        self._spanning_ids: List[str] = []
        self._instrumented_ids: List[str] = []
        self.simulator: Optional[TraversalSimulator] = None
        self.solver: Optional[ReconstructionSolver] = None

        self.select_example(self.catalog.get_default().id)

    # --- active graph ---------------------------------------------------------

    @property
    def example(self) -> ExampleItem:
        return self._example

    @property
    def graph(self) -> FlowGraph:
        return self._example.graph

    @property
    def spanning_edge_ids(self) -> List[str]:
        return list(self._spanning_ids)

    @property
    def instrumented_edge_ids(self) -> List[str]:
        return list(self._instrumented_ids)

    def select_example(self, example_id: str) -> ExampleItem:
        """
        Make example_id active.

        The old simulator is reset before the new one is built, so no tick of
        the previous graph can fire afterwards.
        """
        example = self.catalog.get(example_id)
        Logger.log(f"ProfilingSession.select_example({example_id})", Logger.LogPriority.INFO)

        if self.simulator is not None:
            # keep the user's speed/run settings across graph switches
            self.config = replace(self.simulator.config)
            self.simulator.reset()
        if self.solver is not None:
            self.solver.reset()

        self._example = example
        self._spanning_ids = compute_spanning_set(example.graph)
        self._instrumented_ids = compute_instrumentation_set(example.graph, self._spanning_ids)

        self.simulator = TraversalSimulator(
            example.graph, self._instrumented_ids, config=self.config, scheduler=self.scheduler
        )
        simulator = self.simulator
        self.solver = ReconstructionSolver(
            example.graph, self._spanning_ids, counters_source=lambda: simulator.counters
        )
        self.step = WalkthroughStep.START
        return example

    # --- simulation / reconstruction shortcuts --------------------------------

    def start_simulation(self) -> bool:
        """Restart measurement; previous reconstruction results are discarded."""
        self.solver.reset()
        return self.simulator.start()

    def reset_simulation(self) -> None:
        self.simulator.reset()
        self.solver.reset()

    # --- walkthrough ----------------------------------------------------------

    def start(self) -> WalkthroughStep:
        self.step = WalkthroughStep.WEIGHTS
        return self.step

    def next_step(self) -> WalkthroughStep:
        self.step = WalkthroughStep(min(WalkthroughStep.RECONSTRUCTION, self.step + 1))
        return self.step

    def prev_step(self) -> WalkthroughStep:
        self.step = WalkthroughStep(max(WalkthroughStep.START, self.step - 1))
        return self.step

    def reset_step(self) -> WalkthroughStep:
        self.step = WalkthroughStep.START
        return self.step

    def overlay(self) -> GraphOverlay:
        step = self.step
        sim = self.simulator.snapshot()
        if step >= WalkthroughStep.RECONSTRUCTION:
            counters = self.solver.merged_counters()
        elif step >= WalkthroughStep.MEASUREMENT:
            counters = sim.counters
        else:
            counters = {}
        return GraphOverlay(
            show_weights=step == WalkthroughStep.WEIGHTS,
            spanning_edge_ids=self.spanning_edge_ids if step >= WalkthroughStep.SPANNING_TREE else [],
            instrumented_edge_ids=self.instrumented_edge_ids if step >= WalkthroughStep.INSTRUMENTATION else [],
            counters=counters,
            current_node_id=sim.current_node_id if step >= WalkthroughStep.MEASUREMENT else None,
            current_edge_id=sim.current_edge_id if step >= WalkthroughStep.MEASUREMENT else None,
            show_edge_ids=step >= WalkthroughStep.RECONSTRUCTION,
        )
