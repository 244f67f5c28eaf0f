from typing import Iterable, List

from ..models.graph import FlowGraph, ENTRY_SENTINEL_ID, EXIT_SENTINEL_ID
from ..utils.logger import Logger


def compute_instrumentation_set(graph: FlowGraph, spanning_ids: Iterable[str]) -> List[str]:
    """
    Edges whose counts are measured directly, in graph edge order.

    Every positive-weight edge outside the spanning set, plus the entry
    sentinel when the graph has one. The exit sentinel is never measured.
    """
    tree = set(spanning_ids)
    result: List[str] = []
    seen = set()

    for edge in graph.edges:
        if edge.is_sentinel or edge.id in tree or edge.id in seen:
            continue
        if edge.effective_weight > 0:
            result.append(edge.id)
            seen.add(edge.id)

    if graph.has_edge(ENTRY_SENTINEL_ID) and ENTRY_SENTINEL_ID not in seen:
        result.append(ENTRY_SENTINEL_ID)

    result = [edge_id for edge_id in result if edge_id != EXIT_SENTINEL_ID]
    Logger.log(f"compute_instrumentation_set: {result}")
    return result
