from .graph import (
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
)
from .reconstruction import ReconTerm, ReconStep, render_balance_text
from .exceptions import (
    InvalidGraphError,
    NodeNotFoundError,
    EdgeNotFoundError,
    ExampleNotFoundError,
    InvalidConfigError,
)
