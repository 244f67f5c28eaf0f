"""
Built-in example flow graphs.

Each example models a small program shape. Weights are relative branch
frequencies. Every graph is sentinel-augmented once when the catalog is built.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..models.exceptions import ExampleNotFoundError
from ..models.graph import EdgeKind, FlowGraph, GraphEdge, GraphNode, NodeKind, ensure_sentinels


@dataclass(frozen=True)
class ExampleItem:
    id: str
    title: str
    description: str
    graph: FlowGraph


def _n(node_id: str, label: Optional[str] = None, kind: NodeKind = NodeKind.NORMAL) -> GraphNode:
    return GraphNode(id=node_id, label=label if label is not None else node_id, kind=kind)


def _e(edge_id: str, source: str, target: str, weight: float, label: str = "",
       kind: EdgeKind = EdgeKind.NORMAL) -> GraphEdge:
    return GraphEdge(id=edge_id, source=source, target=target, weight=weight, label=label, kind=kind)


def linear_flow() -> ExampleItem:
    graph = FlowGraph(
        nodes=[_n("ENTRY", kind=NodeKind.ENTRY), _n("A"), _n("B"), _n("C"), _n("EXIT", kind=NodeKind.EXIT)],
        edges=[
            _e("e0", "ENTRY", "A", 20, kind=EdgeKind.ENTRY),
            _e("e1", "A", "B", 60),
            _e("e2", "B", "C", 50),
            _e("e3", "C", "EXIT", 70, kind=EdgeKind.EXIT),
        ],
    )
    return ExampleItem("linear-flow", "Linear flow", "Simplest case, no branching.", graph)


def if_else() -> ExampleItem:
    graph = FlowGraph(
        nodes=[
            _n("ENTRY", kind=NodeKind.ENTRY), _n("S"), _n("D", kind=NodeKind.DECISION),
            _n("T"), _n("F"), _n("M"), _n("EXIT", kind=NodeKind.EXIT),
        ],
        edges=[
            _e("e0", "ENTRY", "S", 22, kind=EdgeKind.ENTRY),
            _e("e1", "S", "D", 66),
            _e("e2", "D", "T", 55, "true"),
            _e("e3", "D", "F", 33, "false"),
            _e("e4", "T", "M", 40),
            _e("e5", "F", "M", 30),
            _e("e6", "M", "EXIT", 77, kind=EdgeKind.EXIT),
        ],
    )
    return ExampleItem("if-else", "If / Else", "A branch whose paths merge again.", graph)


def while_loop() -> ExampleItem:
    graph = FlowGraph(
        nodes=[_n("ENTRY", kind=NodeKind.ENTRY), _n("I"), _n("D", kind=NodeKind.DECISION), _n("B"),
               _n("EXIT", kind=NodeKind.EXIT)],
        edges=[
            _e("e0", "ENTRY", "I", 18, kind=EdgeKind.ENTRY),
            _e("e1", "I", "D", 66),
            _e("e2", "D", "B", 55, "true"),
            _e("e3", "B", "D", 33, kind=EdgeKind.BACK),
            _e("e4", "D", "EXIT", 44, "false", kind=EdgeKind.EXIT),
        ],
    )
    return ExampleItem("while-loop", "Simple loop", "While loop with a back edge.", graph)


def nested_loop() -> ExampleItem:
    graph = FlowGraph(
        nodes=[
            _n("ENTRY", kind=NodeKind.ENTRY), _n("P"), _n("D1", kind=NodeKind.DECISION),
            _n("D2", kind=NodeKind.DECISION), _n("B"), _n("EXIT", kind=NodeKind.EXIT),
        ],
        edges=[
            _e("e0", "ENTRY", "P", 20, kind=EdgeKind.ENTRY),
            _e("e1", "P", "D1", 60),
            _e("e2", "D1", "D2", 50, "true"),
            _e("e3", "D2", "B", 30, "true"),
            _e("e4", "B", "D2", 30, kind=EdgeKind.BACK),
            _e("e5", "D2", "D1", 30, "false", kind=EdgeKind.BACK),
            _e("e6", "D1", "EXIT", 70, "false", kind=EdgeKind.EXIT),
        ],
    )
    return ExampleItem("nested-loop", "Nested loop", "Two loops, one inside the other.", graph)


def switch_three() -> ExampleItem:
    graph = FlowGraph(
        nodes=[
            _n("ENTRY", kind=NodeKind.ENTRY), _n("D", kind=NodeKind.DECISION), _n("B0", "B0 = 0"),
            _n("B1", "B1 = 1"), _n("B2"), _n("M"), _n("EXIT", kind=NodeKind.EXIT),
        ],
        edges=[
            _e("e0", "ENTRY", "D", 22, kind=EdgeKind.ENTRY),
            _e("e1", "D", "B0", 66, "=0"),
            _e("e2", "D", "B1", 55, "=1"),
            _e("e3", "D", "B2", 33, "else"),
            _e("e4", "B0", "M", 35),
            _e("e5", "B1", "M", 25),
            _e("e6", "B2", "M", 20),
            _e("e7", "M", "EXIT", 77, kind=EdgeKind.EXIT),
        ],
    )
    return ExampleItem("switch-three", "Three outcomes", "Three-way branch that merges.", graph)


def loop_with_if() -> ExampleItem:
    graph = FlowGraph(
        nodes=[
            _n("ENTRY", kind=NodeKind.ENTRY), _n("Dloop", kind=NodeKind.DECISION), _n("Body"),
            _n("Dif", kind=NodeKind.DECISION), _n("T"), _n("F"), _n("EXIT", kind=NodeKind.EXIT),
        ],
        edges=[
            _e("e0", "ENTRY", "Dloop", 21, kind=EdgeKind.ENTRY),
            _e("e1", "Dloop", "Body", 61, "true"),
            _e("e2", "Body", "Dif", 36),
            _e("e3", "Dif", "T", 34, "true"),
            _e("e4", "Dif", "F", 27, "false"),
            _e("e5", "T", "Dloop", 28, kind=EdgeKind.BACK),
            _e("e6", "F", "Dloop", 26, kind=EdgeKind.BACK),
            _e("e7", "Dloop", "EXIT", 72, "false", kind=EdgeKind.EXIT),
        ],
    )
    return ExampleItem("loop-if", "Loop + if", "An if/else inside a loop.", graph)


_BUILDERS = (linear_flow, if_else, while_loop, nested_loop, switch_three, loop_with_if)


class ExamplesCatalog:
    """Read-only list of example graphs, augmented with sentinels."""

    def __init__(self, items: Optional[List[ExampleItem]] = None):
        raw = items if items is not None else [build() for build in _BUILDERS]
        self._items: List[ExampleItem] = [
            ExampleItem(it.id, it.title, it.description, ensure_sentinels(it.graph)) for it in raw
        ]
        self._by_id: Dict[str, ExampleItem] = {it.id: it for it in self._items}

    def list(self) -> List[ExampleItem]:
        return list(self._items)

    def ids(self) -> List[str]:
        return [it.id for it in self._items]

    def get(self, example_id: str) -> ExampleItem:
        try:
            return self._by_id[example_id]
        except KeyError:
            raise ExampleNotFoundError(f"Unknown example '{example_id}'. Available: {', '.join(self.ids())}") from None

    def get_default(self) -> ExampleItem:
        return self._items[0]
