"""End-to-end graph analysis and the random-graph transitivity baseline."""

from socialgraph.analysis.baseline import (
    TransitivityBaseline,
    random_transitivity_baseline,
)
from socialgraph.analysis.pipeline import AnalysisResult, analyze_graph

__all__ = [
    "AnalysisResult",
    "TransitivityBaseline",
    "analyze_graph",
    "random_transitivity_baseline",
]
