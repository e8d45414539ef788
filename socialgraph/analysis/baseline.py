"""Random-graph baseline for global transitivity.

Compares the observed transitivity with Erdős–Rényi graphs of the same node
count and density. In G(n, p) the expected transitivity is about p, so a
ratio well above 1 indicates clustering beyond what density alone explains.
"""

import logging
from dataclasses import dataclass

import numpy as np

from socialgraph.config.analysis import BaselineConfig
from socialgraph.graph.generators import erdos_renyi_graph
from socialgraph.graph.types import Graph
from socialgraph.transitivity.clustering import global_clustering

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransitivityBaseline:
    observed: float
    density: float
    random_mean: float
    random_std: float
    n_samples: int

    @property
    def ratio(self) -> float | None:
        """observed / random_mean, None when the random mean is 0."""
        if self.random_mean == 0.0:
            return None
        return self.observed / self.random_mean


def random_transitivity_baseline(
    graph: Graph, config: BaselineConfig, observed: float | None = None
) -> TransitivityBaseline:
    """Sample G(n, density) graphs and summarize their global transitivity.

    Args:
        graph: Observed graph.
        config: Sample count and seed.
        observed: Precomputed transitivity of graph, if available.

    Returns:
        TransitivityBaseline. With n_samples=0 the random statistics fall
        back to the analytical expectation (the density) with zero spread.
    """
    if observed is None:
        observed = global_clustering(graph)
    n = graph.node_count()
    density = graph.density()

    if config.n_samples == 0:
        return TransitivityBaseline(observed, density, density, 0.0, 0)

    rng = np.random.default_rng(config.seed)
    samples = np.array(
        [
            global_clustering(erdos_renyi_graph(n, density, rng))
            for _ in range(config.n_samples)
        ]
    )
    baseline = TransitivityBaseline(
        observed=observed,
        density=density,
        random_mean=float(samples.mean()),
        random_std=float(samples.std()),
        n_samples=config.n_samples,
    )
    log.info(
        "Transitivity %.4f vs random %.4f +/- %.4f (%d samples)",
        observed, baseline.random_mean, baseline.random_std, config.n_samples,
    )
    return baseline
