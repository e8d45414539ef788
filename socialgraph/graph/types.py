"""Immutable undirected graph used by every analysis engine."""

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np
import scipy.sparse


class MalformedGraphError(ValueError):
    """Raised when graph input references unknown nodes or is inconsistent."""


@dataclass(frozen=True)
class Graph:
    """Read-only view of an undirected, unweighted graph.

    Nodes are the integers 0..n-1. The adjacency matrix is symmetric, binary
    and has a zero diagonal. Uses frozen=True but omits slots=True since
    scipy objects don't interact well with __slots__. Build instances through
    build_graph() so these invariants hold.
    """

    adjacency: scipy.sparse.csr_matrix  # symmetric 0/1 (n x n), sorted indices
    labels: tuple[str, ...] | None = None

    def node_count(self) -> int:
        return self.adjacency.shape[0]

    def edge_count(self) -> int:
        return self.adjacency.nnz // 2

    def nodes(self) -> range:
        return range(self.node_count())

    def edges(self) -> Iterator[tuple[int, int]]:
        """Yield each undirected edge once as (u, v) with u < v."""
        upper = scipy.sparse.triu(self.adjacency, k=1).tocoo()
        order = np.lexsort((upper.col, upper.row))
        for u, v in zip(upper.row[order], upper.col[order]):
            yield int(u), int(v)

    def neighbors(self, node: int) -> frozenset[int]:
        self._check_node(node)
        start, end = self.adjacency.indptr[node], self.adjacency.indptr[node + 1]
        return frozenset(int(v) for v in self.adjacency.indices[start:end])

    def has_edge(self, a: int, b: int) -> bool:
        self._check_node(a)
        self._check_node(b)
        start, end = self.adjacency.indptr[a], self.adjacency.indptr[a + 1]
        row = self.adjacency.indices[start:end]
        pos = np.searchsorted(row, b)
        return bool(pos < len(row) and row[pos] == b)

    def degrees(self) -> np.ndarray:
        """Integer degree per node, shape (n,)."""
        return np.diff(self.adjacency.indptr).astype(np.int64)

    def density(self) -> float:
        """Fraction of the n(n-1)/2 node pairs that are edges (0 for n < 2)."""
        n = self.node_count()
        if n < 2:
            return 0.0
        return self.edge_count() / (n * (n - 1) / 2)

    def to_adjacency_matrix(self) -> np.ndarray:
        """Dense float64 copy of the adjacency matrix."""
        return self.adjacency.toarray().astype(np.float64)

    def label(self, node: int) -> str:
        """Human-readable label, falling back to the node id."""
        self._check_node(node)
        if self.labels is None:
            return str(node)
        return self.labels[node]

    def _check_node(self, node: int) -> None:
        if not 0 <= node < self.node_count():
            raise KeyError(f"Unknown node id {node} (graph has {self.node_count()} nodes)")
