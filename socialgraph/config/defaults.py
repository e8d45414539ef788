"""Default configuration: single source of truth for default analysis parameters."""

from socialgraph.config.analysis import AnalysisConfig

# All-default values: k_min=1, heuristic k_max capped at 10, 5 restarts,
# 100 EM iterations, tolerance 1e-6, epsilon 1e-10, seed 42.
DEFAULT_CONFIG = AnalysisConfig()
