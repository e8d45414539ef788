"""Plain-text edge list loading."""

import logging
from pathlib import Path

from socialgraph.graph.build import graph_from_labeled_edges
from socialgraph.graph.types import Graph, MalformedGraphError

log = logging.getLogger(__name__)


def read_edge_list(path: str | Path) -> Graph:
    """Read a whitespace-separated two-column edge list.

    Each non-blank line names the two endpoints of one edge. Text after a
    ``#`` is a comment. A line holding a single token declares an isolated
    node. Node ids are assigned in order of first appearance and the tokens
    become node labels.

    Raises:
        MalformedGraphError: On a line with more than two tokens.
    """
    path = Path(path)
    edges: list[tuple[str, str]] = []
    isolated: list[str] = []
    with open(path) as f:
        for lineno, line in enumerate(f, start=1):
            tokens = line.split("#", 1)[0].split()
            if not tokens:
                continue
            if len(tokens) == 1:
                isolated.append(tokens[0])
            elif len(tokens) == 2:
                edges.append((tokens[0], tokens[1]))
            else:
                raise MalformedGraphError(
                    f"{path}:{lineno}: expected 1 or 2 columns, got {len(tokens)}"
                )

    graph = graph_from_labeled_edges(edges, isolated=isolated)
    log.info(
        "Loaded %s: %d nodes, %d edges",
        path, graph.node_count(), graph.edge_count(),
    )
    return graph
