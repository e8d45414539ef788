"""Result values, notices, schema validation, writing and run IDs."""

from socialgraph.results.run_id import generate_run_id
from socialgraph.results.schema import (
    build_result,
    load_result,
    validate_result,
    write_result,
)
from socialgraph.results.types import (
    DegenerateBlockWarning,
    NodeVector,
    NonConvergenceNotice,
    Notice,
    UndefinedMetricWarning,
)

__all__ = [
    "DegenerateBlockWarning",
    "NodeVector",
    "NonConvergenceNotice",
    "Notice",
    "UndefinedMetricWarning",
    "build_result",
    "generate_run_id",
    "load_result",
    "validate_result",
    "write_result",
]
