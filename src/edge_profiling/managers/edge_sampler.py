"""
Weighted choice of the next edge during a traversal.

The probability of picking an outgoing edge is its weight divided by the sum
of candidate weights. When every candidate weight is zero or missing the
choice is uniform.

Determinism: given the same seed and the same sequence of candidate lists,
the same edges are picked.
"""

from typing import Optional, Sequence

import numpy as np

from ..models.graph import GraphEdge


class WeightedEdgeSampler:
    """Edge picker backed by an explicitly seeded numpy Generator."""

    def __init__(self, seed: Optional[int] = None):
        self._seed = seed
        self._rng = np.random.Generator(np.random.PCG64(seed))
        self._draw_count = 0

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    @property
    def draw_count(self) -> int:
        """Number of random draws made since the last reset."""
        return self._draw_count

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Restart the random stream.

        Args:
            seed: New seed; the current seed is reused when None.
        """
        if seed is not None:
            self._seed = seed
        self._rng = np.random.Generator(np.random.PCG64(self._seed))
        self._draw_count = 0

    def pick(self, edges: Sequence[GraphEdge]) -> GraphEdge:
        """Pick one of edges (must be non-empty) with probability proportional to weight."""
        if not edges:
            raise ValueError("pick() needs at least one candidate edge")

        weights = [e.effective_weight for e in edges]
        total = sum(weights)
        self._draw_count += 1

        if total <= 0:
            idx = int(self._rng.integers(len(edges)))
            return edges[idx]

        r = self._rng.random() * total
        for edge, w in zip(edges, weights):
            if r < w:
                return edge
            r -= w
        return edges[-1]
