"""
Edge profiling

Reconstructs per-edge execution counts of a flow graph from a small set of
measured edges, using flow conservation at every node:

    graph -> spanning tree -> instrumented edges -> simulated counters
          -> tree-edge counts recovered by balance equations
"""

__version__ = "0.1.0"

from .models import (
    NodeKind,
    EdgeKind,
    GraphNode,
    GraphEdge,
    FlowGraph,
    ensure_sentinels,
    is_sentinel_edge,
    ENTRY_SENTINEL_ID,
    EXIT_SENTINEL_ID,
    GHOST_IN_ID,
    GHOST_OUT_ID,
    ReconTerm,
    ReconStep,
)
from .models.exceptions import (
    InvalidGraphError,
    NodeNotFoundError,
    EdgeNotFoundError,
    ExampleNotFoundError,
    InvalidConfigError,
)
from .config import SimulationConfig, load_config
from .catalog import ExampleItem, ExamplesCatalog
from .managers import (
    compute_spanning_set,
    compute_instrumentation_set,
    WeightedEdgeSampler,
    ManualTickScheduler,
    BlockingTickScheduler,
    TraversalSimulator,
    SimulationStatus,
    SimulationSnapshot,
    ReconstructionSolver,
    ReconstructionSnapshot,
    ProfilingSession,
    WalkthroughStep,
    GraphOverlay,
)
