"""Immutable graph representation, construction and generators."""

from socialgraph.graph.build import build_graph, graph_from_labeled_edges
from socialgraph.graph.generators import (
    build_probability_matrix,
    clique_pair_graph,
    complete_graph,
    empty_graph,
    erdos_renyi_graph,
    path_graph,
    planted_partition_graph,
    sample_undirected,
    star_graph,
)
from socialgraph.graph.io import read_edge_list
from socialgraph.graph.types import Graph, MalformedGraphError

__all__ = [
    "Graph",
    "MalformedGraphError",
    "build_graph",
    "build_probability_matrix",
    "clique_pair_graph",
    "complete_graph",
    "empty_graph",
    "erdos_renyi_graph",
    "graph_from_labeled_edges",
    "path_graph",
    "planted_partition_graph",
    "read_edge_list",
    "sample_undirected",
    "star_graph",
]
