"""
Reconstruction solver.

Recovers the counts of spanning-tree edges from measured counters using flow
balance at a node (incoming total equals outgoing total), one equation at a
time.

Known counts are
    - the simulator counters (instrumented edges and the entry sentinel),
    - tree edges already reconstructed,
    - a virtual exit sentinel count equal to the entry sentinel count (every
      run that enters also leaves). It is used only in the arithmetic and
      never appears in merged_counters().

A node is solvable when exactly one of its incident tree edges is unknown and
every other incident edge is known or a sentinel. Nodes are scanned in graph
order and the first solvable one wins.

compute_next() returns None when nothing is solvable. That is either
completion (pending_tree_edge_ids() is empty) or missing information, for
example when some instrumented edge was never traversed.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..models.graph import FlowGraph, GraphEdge, ENTRY_SENTINEL_ID, EXIT_SENTINEL_ID
from ..models.reconstruction import ReconStep, ReconTerm, render_balance_text
from ..utils.logger import Logger


@dataclass(frozen=True)
class ReconstructionSnapshot:
    """Read-only view of the solver state."""
    merged_counters: Dict[str, int] = field(default_factory=dict)
    pending_tree_edge_ids: List[str] = field(default_factory=list)
    steps: List[ReconStep] = field(default_factory=list)
    cursor: int = -1

    @property
    def is_complete(self) -> bool:
        return not self.pending_tree_edge_ids


class ReconstructionSolver:
    """
    Args:
        graph: Sentinel-augmented flow graph (read only).
        spanning_ids: Spanning-tree edge ids of graph.
        counters_source: Returns the current measured counters; called on every query.
    """

    def __init__(
        self,
        graph: FlowGraph,
        spanning_ids: Iterable[str],
        counters_source: Callable[[], Mapping[str, int]],
    ):
        self.graph = graph
        self.spanning_ids = frozenset(spanning_ids)
        self._counters_source = counters_source
        self._tree_edges = [e for e in graph.edges if e.id in self.spanning_ids and not e.is_sentinel]
        self._reconstructed: Dict[str, int] = {}
        self._steps: List[ReconStep] = []
        self._cursor = -1

    def reset(self) -> None:
        self._reconstructed = {}
        self._steps = []
        self._cursor = -1

    # --- state queries --------------------------------------------------------

    @property
    def steps(self) -> List[ReconStep]:
        return list(self._steps)

    @property
    def cursor(self) -> int:
        """Index of the browsed step, -1 before any step exists."""
        return self._cursor

    @property
    def current_step(self) -> Optional[ReconStep]:
        if 0 <= self._cursor < len(self._steps):
            return self._steps[self._cursor]
        return None

    @property
    def reconstructed_counters(self) -> Dict[str, int]:
        return dict(self._reconstructed)

    def merged_counters(self) -> Dict[str, int]:
        """Measured counters overlaid with reconstructed tree-edge counts."""
        merged = dict(self._counters_source())
        merged.update(self._reconstructed)
        return merged

    def pending_tree_edge_ids(self) -> List[str]:
        """Tree edges (sentinels excluded) still without a count, in graph order."""
        return [e.id for e in self._tree_edges if e.id not in self._reconstructed]

    def is_complete(self) -> bool:
        return not self.pending_tree_edge_ids()

    def snapshot(self) -> ReconstructionSnapshot:
        return ReconstructionSnapshot(
            merged_counters=self.merged_counters(),
            pending_tree_edge_ids=self.pending_tree_edge_ids(),
            steps=list(self._steps),
            cursor=self._cursor,
        )

    # --- solving --------------------------------------------------------------

    def compute_next(self) -> Optional[ReconStep]:
        """Solve exactly one more tree edge, or return None when no node qualifies."""
        known = self._known_counts()
        candidate = self._find_solvable(known)
        if candidate is None:
            pending = self.pending_tree_edge_ids()
            if pending:
                Logger.log(f"ReconstructionSolver: no progress possible, pending={pending}",
                           Logger.LogPriority.WARNING)
            return None

        node_id, edge = candidate
        value, terms, unknown_is_incoming = self._solve_at_node(node_id, edge, known)
        self._reconstructed[edge.id] = value

        step = ReconStep(
            solved_edge_id=edge.id,
            value=value,
            node_id=node_id,
            parent_id=edge.target if edge.source == node_id else edge.source,
            equation=terms,
            unknown_is_incoming=unknown_is_incoming,
            text=render_balance_text(node_id, edge.id, unknown_is_incoming, terms, value),
        )
        self._steps.append(step)
        self._cursor = len(self._steps) - 1
        Logger.log(f"ReconstructionSolver: {edge.id} = {value} at node {node_id}", Logger.LogPriority.INFO)
        return step

    def solve_all(self) -> List[ReconStep]:
        """Call compute_next() until it returns None; return the new steps."""
        produced = []
        while True:
            step = self.compute_next()
            if step is None:
                return produced
            produced.append(step)

    # --- browsing -------------------------------------------------------------

    def prev(self) -> Optional[ReconStep]:
        if self._cursor <= 0:
            return None
        self._cursor -= 1
        return self._steps[self._cursor]

    def next(self) -> Optional[ReconStep]:
        if self._cursor + 1 >= len(self._steps):
            return None
        self._cursor += 1
        return self._steps[self._cursor]

    # --- internals ------------------------------------------------------------

    def _known_counts(self) -> Dict[str, int]:
        known = dict(self._counters_source())
        known.update(self._reconstructed)
        if ENTRY_SENTINEL_ID in known:
            known[EXIT_SENTINEL_ID] = known[ENTRY_SENTINEL_ID]
        return known

    def _find_solvable(self, known: Mapping[str, int]) -> Optional[Tuple[str, GraphEdge]]:
        unknown_tree = set(self.pending_tree_edge_ids())
        if not unknown_tree:
            return None

        for node in self.graph.nodes:
            incident = self.graph.incident_edges(node.id)
            unknown = [e for e in incident if e.id in unknown_tree]
            if len(unknown) != 1:
                continue
            others = [e for e in incident if e.id not in unknown_tree]
            if all(e.is_sentinel or e.id in known for e in others):
                return node.id, unknown[0]
        return None

    def _solve_at_node(self, node_id: str, unknown_edge: GraphEdge,
                       known: Mapping[str, int]) -> Tuple[int, List[ReconTerm], bool]:
        terms: List[ReconTerm] = []
        sum_in = 0
        sum_out = 0
        for edge in self.graph.incoming_edges(node_id):
            if edge.id in known:
                sum_in += known[edge.id]
                terms.append(ReconTerm(edge.id, +1, known[edge.id], edge.label or None))
        for edge in self.graph.outgoing_edges(node_id):
            if edge.id in known:
                sum_out += known[edge.id]
                terms.append(ReconTerm(edge.id, -1, known[edge.id], edge.label or None))

        unknown_is_incoming = unknown_edge.target == node_id
        if unknown_is_incoming:
            value = sum_out - sum_in
        else:
            value = sum_in - sum_out
        return value, terms, unknown_is_incoming
