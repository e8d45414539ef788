"""Block model fit results."""

from dataclasses import dataclass, field

import numpy as np

from socialgraph.results.types import DegenerateBlockWarning, NonConvergenceNotice


@dataclass(frozen=True)
class SBMFit:
    """Best variational fit of a K-block Bernoulli SBM.

    Holds the winning restart's membership and connectivity estimates, its
    ICL score, and the notices raised while fitting it. Uses frozen=True but
    omits slots=True since numpy arrays don't interact well with __slots__.
    """

    K: int
    memberships: np.ndarray  # Z, float64 (n, K), rows sum to 1
    connectivity: np.ndarray  # pi, float64 (K, K), symmetric, clipped
    proportions: np.ndarray  # float64 (K,), column means of Z
    icl: float
    log_likelihood: float  # expected complete-data log-likelihood
    lower_bound: float  # variational lower bound at the last iteration
    converged: bool
    iterations: int
    restart: int  # index of the winning restart
    restart_bounds: tuple[float, ...] = ()  # final lower bound of every restart
    notices: tuple[NonConvergenceNotice | DegenerateBlockWarning, ...] = field(
        default=()
    )

    @property
    def not_converged(self) -> bool:
        return not self.converged

    @property
    def degenerate(self) -> bool:
        return any(isinstance(n, DegenerateBlockWarning) for n in self.notices)

    @property
    def block_assignment(self) -> np.ndarray:
        """Most probable block per node; np.argmax keeps the lowest index on ties."""
        return np.argmax(self.memberships, axis=1)

    def assignment_dict(self) -> dict[int, int]:
        return {i: int(b) for i, b in enumerate(self.block_assignment)}

    def block_sizes(self) -> list[int]:
        return np.bincount(self.block_assignment, minlength=self.K).tolist()


@dataclass(frozen=True)
class SBMSelection:
    """All per-K fits of a run and the K chosen by maximal ICL."""

    fits: dict[int, SBMFit]
    best_k: int
    seed: int  # resolved master seed, reproduces the run when reused

    @property
    def best(self) -> SBMFit:
        return self.fits[self.best_k]

    @property
    def icl_by_k(self) -> dict[int, float]:
        return {K: fit.icl for K, fit in sorted(self.fits.items())}

    def block_assignment(self) -> dict[int, int]:
        return self.best.assignment_dict()

    def notices(self) -> list[NonConvergenceNotice | DegenerateBlockWarning]:
        return [n for _, fit in sorted(self.fits.items()) for n in fit.notices]
