"""
Maximum-weight spanning forest over the undirected view of a flow graph.

Kruskal's algorithm: edges sorted by weight descending (ties by ascending edge
id, so the result never depends on input order), accepted when they join two
different components. Sentinels and zero-weight edges never qualify.

The stopping bound counts every node, ghost nodes included. Ghost nodes touch
only zero-weight sentinels and are never unioned, so in practice the loop ends
by running out of edges; the result is the same as with the tight bound.
"""

from typing import Dict, Hashable, List

from ..models.graph import FlowGraph
from ..utils.logger import Logger


class DisjointSet:
    """Union-find with path compression and union by size, keyed by node id."""

    def __init__(self):
        self._parent: Dict[Hashable, Hashable] = {}
        self._size: Dict[Hashable, int] = {}

    def find(self, item):
        if item not in self._parent:
            self._parent[item] = item
            self._size[item] = 1
            return item

        root = item
        while self._parent[root] != root:
            root = self._parent[root]

        # second pass: point every node on the path straight at the root
        while item != root:
            next_item = self._parent[item]
            self._parent[item] = root
            item = next_item
        return root

    def union(self, a, b) -> bool:
        """Merge the components of a and b. Returns False if already joined."""
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return False
        if self._size[root_a] > self._size[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_a] = root_b
        self._size[root_b] += self._size[root_a]
        return True


def compute_spanning_set(graph: FlowGraph) -> List[str]:
    """
    Return the spanning-tree edge ids in the order they were accepted.

    An empty or disconnected graph yields a forest; this is not an error.
    """
    Logger.log(f"start compute_spanning_set({graph})")

    candidates = [e for e in graph.edges if not e.is_sentinel and e.effective_weight > 0]
    candidates.sort(key=lambda e: (-e.effective_weight, e.id))

    bound = len(graph.nodes) - 1
    dsu = DisjointSet()
    picked: List[str] = []
    for edge in candidates:
        if dsu.union(edge.source, edge.target):
            picked.append(edge.id)
        if len(picked) >= bound:
            break

    Logger.log(f"end compute_spanning_set: picked {picked}")
    return picked
