"""
Records produced by the reconstruction solver.

Each ReconStep explains how one spanning-tree edge count was obtained from the
flow balance at a single node:

    sum(incoming counts) = sum(outgoing counts)

Terms carry sign +1 for edges entering the node and -1 for edges leaving it.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class ReconTerm:
    """A known edge count used in a balance equation."""
    edge_id: str
    sign: int  # +1 incoming, -1 outgoing
    value: int
    label: Optional[str] = None


@dataclass(frozen=True)
class ReconStep:
    """
    One solved spanning-tree edge.

    Attributes:
        solved_edge_id: Tree edge whose count was computed.
        value: The computed count.
        node_id: Node at which the balance equation was applied.
        parent_id: The other endpoint of the solved edge.
        equation: Known terms entering the equation.
        unknown_is_incoming: Whether the solved edge enters node_id.
        text: Human-readable explanation.
    """
    solved_edge_id: str
    value: int
    node_id: str
    parent_id: str
    equation: List[ReconTerm] = field(default_factory=list)
    unknown_is_incoming: bool = False
    text: str = ""


def render_balance_text(node_id: str, edge_id: str, unknown_is_incoming: bool,
                        terms: List[ReconTerm], value: int) -> str:
    """Render the balance equation behind one step as a short paragraph."""
    incoming = [t for t in terms if t.sign > 0]
    outgoing = [t for t in terms if t.sign < 0]

    def side(items, with_unknown):
        parts = [f"{_term_name(t)}={t.value}" for t in items]
        if with_unknown:
            parts.append(f"x({edge_id})")
        return " + ".join(parts) if parts else "0"

    lhs = side(incoming, unknown_is_incoming)
    rhs = side(outgoing, not unknown_is_incoming)
    direction = "incoming" if unknown_is_incoming else "outgoing"

    return (
        f"Balance at node {node_id}: sum(in) = sum(out)\n"
        f"  {lhs} = {rhs}\n"
        f"Unknown tree edge {edge_id} is {direction}, so x({edge_id}) = {value}."
    )


def _term_name(term: ReconTerm) -> str:
    if term.label:
        return f"{term.label} ({term.edge_id})"
    return term.edge_id
