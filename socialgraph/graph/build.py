"""Graph construction from node counts, edge lists and labeled edge pairs."""

import logging
from collections.abc import Iterable, Sequence
from numbers import Integral

import numpy as np
import scipy.sparse

from socialgraph.graph.types import Graph, MalformedGraphError

log = logging.getLogger(__name__)


def _check_endpoint(node: object, n: int, edge_index: int) -> int:
    if isinstance(node, bool) or not isinstance(node, Integral):
        raise MalformedGraphError(
            f"Edge {edge_index} has non-integer endpoint {node!r}"
        )
    if not 0 <= node < n:
        raise MalformedGraphError(
            f"Edge {edge_index} references unknown node {node} "
            f"(valid ids are 0..{n - 1})"
        )
    return int(node)


def build_graph(
    n: int,
    edges: Iterable[tuple[int, int]],
    labels: Sequence[str] | None = None,
) -> Graph:
    """Build an immutable undirected Graph.

    Parallel edges collapse into one. Self-loops are dropped with a warning
    so the adjacency diagonal stays zero.

    Args:
        n: Number of nodes; ids are 0..n-1.
        edges: Unordered node-id pairs.
        labels: Optional human-readable label per node.

    Returns:
        Graph with a symmetric binary CSR adjacency matrix.

    Raises:
        MalformedGraphError: If an edge references an unknown node id or the
            label count does not match n.
    """
    if n < 0:
        raise MalformedGraphError(f"Node count must be >= 0, got {n}")
    if labels is not None and len(labels) != n:
        raise MalformedGraphError(
            f"Got {len(labels)} labels for {n} nodes"
        )

    rows: list[int] = []
    cols: list[int] = []
    self_loops = 0
    for idx, edge in enumerate(edges):
        if len(edge) != 2:
            raise MalformedGraphError(
                f"Edge {idx} must have exactly two endpoints, got {edge!r}"
            )
        u = _check_endpoint(edge[0], n, idx)
        v = _check_endpoint(edge[1], n, idx)
        if u == v:
            self_loops += 1
            continue
        rows.extend((u, v))
        cols.extend((v, u))

    if self_loops:
        log.warning("Dropped %d self-loop(s) from graph input", self_loops)

    data = np.ones(len(rows), dtype=np.float64)
    adj = scipy.sparse.coo_matrix(
        (data, (np.asarray(rows, dtype=np.int64), np.asarray(cols, dtype=np.int64))),
        shape=(n, n),
    ).tocsr()
    adj.sum_duplicates()
    # Collapse parallel edges to a single 0/1 entry
    adj.data[:] = 1.0
    adj.sort_indices()

    graph = Graph(
        adjacency=adj,
        labels=tuple(str(label) for label in labels) if labels is not None else None,
    )
    log.debug("Built graph with %d nodes and %d edges", n, graph.edge_count())
    return graph


def graph_from_labeled_edges(
    edges: Iterable[tuple[str, str]],
    isolated: Iterable[str] = (),
) -> Graph:
    """Build a Graph from label pairs, assigning ids by first appearance.

    Args:
        edges: (label, label) pairs.
        isolated: Labels of nodes that have no edges but must be included.
            They receive ids after every node seen in an edge.

    Returns:
        Graph whose labels tuple maps node id -> label.
    """
    index: dict[str, int] = {}
    pairs: list[tuple[int, int]] = []
    for a, b in edges:
        for label in (a, b):
            if label not in index:
                index[label] = len(index)
        pairs.append((index[a], index[b]))
    for label in isolated:
        if label not in index:
            index[label] = len(index)

    labels = sorted(index, key=index.__getitem__)
    return build_graph(len(labels), pairs, labels=labels)
