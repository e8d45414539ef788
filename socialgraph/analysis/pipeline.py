"""Full structural analysis of one graph: centrality, transitivity, block model.

The graph is handed read-only to each engine. Centrality and transitivity are
independent of each other; the block model shares only the node indexing.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any

from socialgraph.analysis.baseline import (
    TransitivityBaseline,
    random_transitivity_baseline,
)
from socialgraph.centrality.measures import betweenness, closeness, degree
from socialgraph.config.analysis import AnalysisConfig
from socialgraph.graph.types import Graph
from socialgraph.results.types import Notice, NodeVector
from socialgraph.sbm.selection import select_block_model
from socialgraph.sbm.types import SBMFit, SBMSelection
from socialgraph.transitivity.clustering import (
    average_clustering,
    global_clustering,
    local_clustering,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Every computed attribute of one analysis run."""

    graph: Graph
    config: AnalysisConfig
    degree: NodeVector
    betweenness: NodeVector
    closeness: NodeVector
    local_clustering: NodeVector
    global_transitivity: float
    average_clustering: float
    baseline: TransitivityBaseline
    sbm: SBMSelection | None  # None for graphs with fewer than 2 nodes

    @property
    def node_vectors(self) -> tuple[NodeVector, ...]:
        return (self.degree, self.betweenness, self.closeness, self.local_clustering)

    def notices(self) -> list[Notice]:
        found: list[Notice] = [n for v in self.node_vectors for n in v.notices]
        if self.sbm is not None:
            found.extend(self.sbm.notices())
        return found

    def metrics_dict(self) -> dict[str, Any]:
        """Per-node mappings (zero-substituted), summaries and rankings."""
        top_k = self.config.centrality.top_k
        metrics: dict[str, Any] = {}
        for vector in self.node_vectors:
            metrics[vector.metric] = {
                "values": vector.values.tolist(),
                "summary": vector.summary(),
                "top": [[node, score] for node, score in vector.top(top_k)],
            }
        metrics["global_transitivity"] = self.global_transitivity
        metrics["average_clustering"] = self.average_clustering
        metrics["transitivity_baseline"] = {
            **asdict(self.baseline),
            "ratio": self.baseline.ratio,
        }
        return metrics

    def sbm_dict(self) -> dict[str, Any] | None:
        if self.sbm is None:
            return None
        return {
            "selected_k": self.sbm.best_k,
            "seed": self.sbm.seed,
            "icl_by_k": {str(K): icl for K, icl in self.sbm.icl_by_k.items()},
            "block_assignment": self.sbm.best.block_assignment.tolist(),
            "fits": {
                str(K): _fit_dict(fit) for K, fit in sorted(self.sbm.fits.items())
            },
        }


def _fit_dict(fit: SBMFit) -> dict[str, Any]:
    return {
        "icl": fit.icl,
        "log_likelihood": fit.log_likelihood,
        "lower_bound": fit.lower_bound,
        "converged": fit.converged,
        "iterations": fit.iterations,
        "restart": fit.restart,
        "restart_bounds": list(fit.restart_bounds),
        "connectivity": fit.connectivity.tolist(),
        "proportions": fit.proportions.tolist(),
        "block_sizes": fit.block_sizes(),
        "memberships": fit.memberships.tolist(),
    }


def analyze_graph(graph: Graph, config: AnalysisConfig) -> AnalysisResult:
    """Run every engine over graph.

    Args:
        graph: Immutable input graph.
        config: Analysis configuration.

    Returns:
        AnalysisResult with all vectors, scalars and the block model selection.
    """
    n = graph.node_count()
    log.info("Analyzing graph: %d nodes, %d edges", n, graph.edge_count())

    deg = degree(graph)
    btw = betweenness(graph, normalized=config.centrality.normalized_betweenness)
    clo = closeness(graph)

    local = local_clustering(graph)
    transitivity = global_clustering(graph)
    mean_clustering = average_clustering(graph)
    baseline = random_transitivity_baseline(graph, config.baseline, transitivity)

    if n >= 2:
        sbm = select_block_model(graph, config.sbm)
    else:
        log.warning("Skipping block model: graph has %d node(s)", n)
        sbm = None

    return AnalysisResult(
        graph=graph,
        config=config,
        degree=deg,
        betweenness=btw,
        closeness=clo,
        local_clustering=local,
        global_transitivity=transitivity,
        average_clustering=mean_clustering,
        baseline=baseline,
        sbm=sbm,
    )
