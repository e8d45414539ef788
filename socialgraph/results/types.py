"""Per-node result vectors and the non-fatal notices attached to results.

Notices are plain records carried on result values. They are logged when
created but never raised, so aggregation downstream always proceeds.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UndefinedMetricWarning:
    """A per-node metric has no defined value for some nodes.

    Those entries read as 0 through every NodeVector accessor.
    """

    metric: str
    nodes: tuple[int, ...]
    reason: str


@dataclass(frozen=True, slots=True)
class NonConvergenceNotice:
    """Variational EM stopped before reaching the convergence tolerance."""

    K: int
    restart: int
    iterations: int
    reason: str  # "iteration_cap" or "time_budget"


@dataclass(frozen=True, slots=True)
class DegenerateBlockWarning:
    """Connectivity entries pinned at the epsilon clip boundary."""

    K: int
    pairs: tuple[tuple[int, int], ...]  # (p, q) with p <= q


Notice = UndefinedMetricWarning | NonConvergenceNotice | DegenerateBlockWarning


@dataclass(frozen=True)
class NodeVector:
    """Mapping node id -> real score, with undefined entries made explicit.

    ``raw`` keeps NaN where the metric is undefined. Every other accessor
    applies zero-substitution, so NaN never reaches an aggregate.
    """

    metric: str
    raw: np.ndarray  # float64, shape (n,)
    notices: tuple[UndefinedMetricWarning, ...] = field(default=())

    @classmethod
    def from_raw(cls, metric: str, raw: np.ndarray, reason: str) -> "NodeVector":
        """Wrap raw scores, attaching a notice for any NaN entries."""
        undefined = np.flatnonzero(np.isnan(raw))
        if len(undefined) == 0:
            return cls(metric=metric, raw=raw)
        log.warning(
            "%s undefined for %d node(s) (%s); substituting 0",
            metric, len(undefined), reason,
        )
        notice = UndefinedMetricWarning(
            metric=metric,
            nodes=tuple(int(i) for i in undefined),
            reason=reason,
        )
        return cls(metric=metric, raw=raw, notices=(notice,))

    @property
    def undefined(self) -> np.ndarray:
        """Boolean mask of undefined entries."""
        return np.isnan(self.raw)

    @property
    def values(self) -> np.ndarray:
        """Zero-substituted copy of the scores."""
        return np.nan_to_num(self.raw, nan=0.0)

    def __len__(self) -> int:
        return len(self.raw)

    def __getitem__(self, node: int) -> float:
        return float(self.values[node])

    def as_dict(self) -> dict[int, float]:
        return {i: float(v) for i, v in enumerate(self.values)}

    def top(self, k: int) -> list[tuple[int, float]]:
        """The k highest-scoring nodes, ties broken by the lower node id."""
        values = self.values
        order = np.lexsort((np.arange(len(values)), -values))
        return [(int(i), float(values[i])) for i in order[:k]]

    def summary(self) -> dict[str, float]:
        """Distribution summary over the zero-substituted scores."""
        values = self.values
        if len(values) == 0:
            return {
                "mean": 0.0, "std": 0.0, "min": 0.0, "median": 0.0,
                "max": 0.0, "n_undefined": 0,
            }
        return {
            "mean": float(values.mean()),
            "std": float(values.std()),
            "min": float(values.min()),
            "median": float(np.median(values)),
            "max": float(values.max()),
            "n_undefined": int(self.undefined.sum()),
        }
