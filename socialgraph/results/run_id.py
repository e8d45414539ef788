"""Run ID generation with scannable parameter slug format."""

from datetime import datetime, timezone

from socialgraph.config.analysis import AnalysisConfig
from socialgraph.graph.types import Graph


def generate_run_id(config: AnalysisConfig, graph: Graph) -> str:
    """Generate a scannable run ID from graph size and estimator settings.

    Format: n{n}_m{m}_k{k_min}-{k_max}_s{seed}_{YYYYMMDD}_{HHMMSS}
    Example: n34_m78_k1-auto_s42_20260224_143012

    k_max reads "auto" when the range is chosen heuristically, and the seed
    reads "none" for unseeded runs.
    """
    sbm = config.sbm
    k_max = "auto" if sbm.k_max is None else str(sbm.k_max)
    seed = "none" if sbm.random_seed is None else str(sbm.random_seed)
    ts = datetime.now(timezone.utc)
    return (
        f"n{graph.node_count()}"
        f"_m{graph.edge_count()}"
        f"_k{sbm.k_min}-{k_max}"
        f"_s{seed}"
        f"_{ts.strftime('%Y%m%d_%H%M%S')}"
    )
