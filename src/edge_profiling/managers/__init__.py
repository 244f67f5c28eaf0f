from .spanning_selector import DisjointSet, compute_spanning_set
from .instrumentation import compute_instrumentation_set
from .edge_sampler import WeightedEdgeSampler
from .tick_scheduler import ManualTickScheduler, BlockingTickScheduler
from .traversal_simulator import TraversalSimulator, SimulationStatus, SimulationSnapshot
from .reconstruction_solver import ReconstructionSolver, ReconstructionSnapshot
from .profiling_session import ProfilingSession, WalkthroughStep, GraphOverlay
