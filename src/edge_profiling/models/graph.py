"""
Flow graph model.

A FlowGraph is an ordered collection of nodes and directed, weighted edges.
Weights are relative traversal probabilities. Node order is kept exactly as
inserted; the reconstruction solver scans nodes in that order.

Sentinel augmentation (ensure_sentinels) gives a graph with one entry node and
one exit node a uniform start and end point for counting:

    __ghost_in__ --__entry_sentinel__--> ENTRY ... EXIT --__exit_sentinel__--> __ghost_out__

Both sentinels and both ghost nodes carry weight 0, so they never take part in
the spanning tree. Sentinels are recognized by id, not by edge kind: ordinary
edges may be tagged "entry"/"exit" for display.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from ..utils.logger import Logger
from .exceptions import InvalidGraphError, NodeNotFoundError, EdgeNotFoundError

ENTRY_SENTINEL_ID = "__entry_sentinel__"
EXIT_SENTINEL_ID = "__exit_sentinel__"
GHOST_IN_ID = "__ghost_in__"
GHOST_OUT_ID = "__ghost_out__"

SENTINEL_EDGE_IDS = frozenset({ENTRY_SENTINEL_ID, EXIT_SENTINEL_ID})


class NodeKind(str, Enum):
    ENTRY = "entry"
    EXIT = "exit"
    NORMAL = "normal"
    DECISION = "decision"


class EdgeKind(str, Enum):
    NORMAL = "normal"
    ENTRY = "entry"
    EXIT = "exit"
    BACK = "back"
    CHORD = "chord"


@dataclass(frozen=True)
class GraphNode:
    """
    One node of a flow graph.

    metadata is free-form display data; no algorithm reads it.
    """
    id: str
    kind: NodeKind = NodeKind.NORMAL
    label: str = ""
    is_ghost: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "kind", NodeKind(self.kind))


@dataclass(frozen=True)
class GraphEdge:
    """
    One directed edge of a flow graph.

    weight=None means "no weight given" and behaves as 0.
    """
    id: str
    source: str
    target: str
    weight: Optional[float] = None
    kind: EdgeKind = EdgeKind.NORMAL
    label: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "kind", EdgeKind(self.kind))

    @property
    def effective_weight(self) -> float:
        return float(self.weight) if self.weight is not None else 0.0

    @property
    def is_sentinel(self) -> bool:
        return self.id in SENTINEL_EDGE_IDS


def is_sentinel_edge(edge: GraphEdge) -> bool:
    """True for the synthetic entry/exit sentinel edges."""
    return edge.id in SENTINEL_EDGE_IDS


class FlowGraph:
    """Ordered nodes and edges with id, reference and entry/exit validation."""

    def __init__(self, nodes: Optional[Iterable[GraphNode]] = None, edges: Optional[Iterable[GraphEdge]] = None):
        self._nodes: List[GraphNode] = []
        self._edges: List[GraphEdge] = []
        self._node_index: Dict[str, GraphNode] = {}
        self._edge_index: Dict[str, GraphEdge] = {}

        for node in nodes or []:
            self.add_node(node)
        for edge in edges or []:
            self.add_edge(edge)

    @property
    def nodes(self) -> List[GraphNode]:
        """Nodes in insertion order (a copy)."""
        return list(self._nodes)

    @property
    def edges(self) -> List[GraphEdge]:
        """Edges in insertion order (a copy)."""
        return list(self._edges)

    def add_node(self, node: GraphNode) -> None:
        """Add a node; ids must be unique and entry/exit kinds may appear once each."""
        if node.id in self._node_index:
            raise InvalidGraphError(f"Node with ID '{node.id}' already exists in the graph.")

        # AT MOST ONE ENTRY AND ONE EXIT NODE
        if node.kind in (NodeKind.ENTRY, NodeKind.EXIT):
            for existing in self._nodes:
                if existing.kind == node.kind:
                    raise InvalidGraphError(
                        f"Graph already has a {node.kind.value} node '{existing.id}'; cannot add '{node.id}'."
                    )

        self._nodes.append(node)
        self._node_index[node.id] = node

    def add_edge(self, edge: GraphEdge) -> None:
        """Add an edge between existing nodes with a non-negative weight."""
        if edge.id in self._edge_index:
            raise InvalidGraphError(f"Edge with ID '{edge.id}' already exists in the graph.")

        if edge.source not in self._node_index:
            raise InvalidGraphError(f"Edge '{edge.id}': source node '{edge.source}' does not exist in graph.")
        if edge.target not in self._node_index:
            raise InvalidGraphError(f"Edge '{edge.id}': target node '{edge.target}' does not exist in graph.")

        if edge.effective_weight < 0:
            raise InvalidGraphError(f"Edge '{edge.id}' has negative weight {edge.weight}.")

        self._edges.append(edge)
        self._edge_index[edge.id] = edge

    def has_node(self, node_id: str) -> bool:
        return node_id in self._node_index

    def has_edge(self, edge_id: str) -> bool:
        return edge_id in self._edge_index

    def get_node_by_id(self, node_id: str) -> GraphNode:
        """Return the node or raise NodeNotFoundError."""
        try:
            return self._node_index[node_id]
        except KeyError:
            raise NodeNotFoundError(f"Node '{node_id}' not found in graph.") from None

    def get_edge_by_id(self, edge_id: str) -> GraphEdge:
        """Return the edge or raise EdgeNotFoundError."""
        try:
            return self._edge_index[edge_id]
        except KeyError:
            raise EdgeNotFoundError(f"Edge '{edge_id}' not found in graph.") from None

    def entry_node(self) -> Optional[GraphNode]:
        return self._first_of_kind(NodeKind.ENTRY)

    def exit_node(self) -> Optional[GraphNode]:
        return self._first_of_kind(NodeKind.EXIT)

    def _first_of_kind(self, kind: NodeKind) -> Optional[GraphNode]:
        for node in self._nodes:
            if node.kind == kind:
                return node
        return None

    def outgoing_edges(self, node_id: str) -> List[GraphEdge]:
        return [e for e in self._edges if e.source == node_id]

    def incoming_edges(self, node_id: str) -> List[GraphEdge]:
        return [e for e in self._edges if e.target == node_id]

    def incident_edges(self, node_id: str) -> List[GraphEdge]:
        return [e for e in self._edges if e.source == node_id or e.target == node_id]

    def real_edges(self) -> List[GraphEdge]:
        """Edges other than the two sentinels."""
        return [e for e in self._edges if not e.is_sentinel]

    def visible_nodes(self) -> List[GraphNode]:
        """Nodes other than the ghost endpoints of the sentinels."""
        return [n for n in self._nodes if not n.is_ghost]

    @property
    def is_augmented(self) -> bool:
        return ENTRY_SENTINEL_ID in self._edge_index and EXIT_SENTINEL_ID in self._edge_index

    def copy(self) -> "FlowGraph":
        return FlowGraph(self._nodes, self._edges)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        """Plain-dict form accepted by from_dict()."""
        return {
            "nodes": [
                {"id": n.id, "label": n.label, "kind": n.kind.value, "ghost": n.is_ghost, "data": dict(n.metadata)}
                for n in self._nodes
            ],
            "edges": [
                {
                    "id": e.id,
                    "source": e.source,
                    "target": e.target,
                    "weight": e.weight,
                    "kind": e.kind.value,
                    "label": e.label,
                    "data": dict(e.metadata),
                }
                for e in self._edges
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FlowGraph":
        """
        Build a graph from {"nodes": [...], "edges": [...]}.

        Nodes need "id"; edges need "id", "source" and "target". Optional keys:
        label, kind, weight, ghost and a "data" dict copied into metadata.

        Raises:
            InvalidGraphError: for a wrong shape, unknown kinds or invariant violations.
        """
        if not isinstance(data, dict) or not isinstance(data.get("nodes"), list) or not isinstance(data.get("edges"), list):
            raise InvalidGraphError("Graph data must be a dict with 'nodes' and 'edges' lists.")

        graph = cls()
        for raw in data["nodes"]:
            if not isinstance(raw, dict) or not isinstance(raw.get("id"), str):
                raise InvalidGraphError(f"Invalid node entry: {raw!r}")
            try:
                node = GraphNode(
                    id=raw["id"],
                    kind=raw.get("kind") or NodeKind.NORMAL,
                    label=raw.get("label") or "",
                    is_ghost=bool(raw.get("ghost", False)),
                    metadata=dict(raw.get("data") or {}),
                )
            except ValueError as e:
                raise InvalidGraphError(f"Invalid node '{raw['id']}': {e}") from e
            graph.add_node(node)

        for raw in data["edges"]:
            if not isinstance(raw, dict) or not all(isinstance(raw.get(k), str) for k in ("id", "source", "target")):
                raise InvalidGraphError(f"Invalid edge entry: {raw!r}")
            weight = raw.get("weight")
            if weight is not None and not isinstance(weight, (int, float)):
                raise InvalidGraphError(f"Edge '{raw['id']}' weight must be a number, got {weight!r}.")
            try:
                edge = GraphEdge(
                    id=raw["id"],
                    source=raw["source"],
                    target=raw["target"],
                    weight=weight,
                    kind=raw.get("kind") or EdgeKind.NORMAL,
                    label=raw.get("label") or "",
                    metadata=dict(raw.get("data") or {}),
                )
            except ValueError as e:
                raise InvalidGraphError(f"Invalid edge '{raw['id']}': {e}") from e
            graph.add_edge(edge)

        return graph

    def __repr__(self):
        return f"FlowGraph(nodes={len(self._nodes)}, edges={len(self._edges)})"


def ensure_sentinels(graph: FlowGraph) -> FlowGraph:
    """
    Return a copy of graph with ghost nodes and sentinel edges added.

    Idempotent. A graph without both an entry and an exit node comes back as a
    plain copy.
    """
    result = graph.copy()
    entry = result.entry_node()
    exit_ = result.exit_node()
    if entry is None or exit_ is None:
        Logger.log("ensure_sentinels: entry or exit node missing, graph left unaugmented")
        return result

    if not result.has_node(GHOST_IN_ID):
        result.add_node(GraphNode(id=GHOST_IN_ID, is_ghost=True))
    if not result.has_node(GHOST_OUT_ID):
        result.add_node(GraphNode(id=GHOST_OUT_ID, is_ghost=True))

    if not result.has_edge(ENTRY_SENTINEL_ID):
        result.add_edge(GraphEdge(id=ENTRY_SENTINEL_ID, source=GHOST_IN_ID, target=entry.id, weight=0, kind=EdgeKind.ENTRY))
    if not result.has_edge(EXIT_SENTINEL_ID):
        result.add_edge(GraphEdge(id=EXIT_SENTINEL_ID, source=exit_.id, target=GHOST_OUT_ID, weight=0, kind=EdgeKind.EXIT))

    Logger.log(f"ensure_sentinels: augmented graph around entry '{entry.id}' and exit '{exit_.id}'")
    return result
