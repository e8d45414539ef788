"""Variational EM for the Bernoulli stochastic block model.

The posterior over block labels is approximated by independent per-node
distributions Z[i] (mean field). The E-step updates nodes one at a time
(coordinate ascent), each using the latest rows of every other node, so the
lower bound never decreases. The M-step maximizes the bound in closed form.

Notation: A is the n x n adjacency, Z the n x K memberships, pi the K x K
connectivity, s = Z.sum(axis=0) the expected block sizes.
"""

import logging
import time
from dataclasses import dataclass

import numpy as np
from scipy.special import logsumexp, xlogy

log = logging.getLogger(__name__)

MEMBERSHIP_FLOOR = 1e-12  # keeps every block reachable from every node
PAIR_FLOOR = 1e-12  # block pairs with less expected mass count as empty


@dataclass(frozen=True)
class RestartResult:
    """Outcome of one EM run from one initialization."""

    K: int
    restart: int
    memberships: np.ndarray  # (n, K)
    connectivity: np.ndarray  # clipped pi (K, K)
    raw_connectivity: np.ndarray  # pi before clipping (K, K)
    log_proportions: np.ndarray | None  # log alpha (K,) or None
    lower_bound: float
    converged: bool
    iterations: int
    stop_reason: str  # "converged", "iteration_cap" or "time_budget"


def _pair_sums(
    adjacency: np.ndarray, Z: np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    """Expected edge and dyad counts per block pair over ordered i != j."""
    s = Z.sum(axis=0)
    edges = Z.T @ (adjacency @ Z)
    pairs = np.outer(s, s) - Z.T @ Z
    return edges, pairs


def m_step(
    adjacency: np.ndarray, Z: np.ndarray, epsilon: float, fallback: float
) -> tuple[np.ndarray, np.ndarray]:
    """Closed-form connectivity update.

    pi[p,q] = sum_{i!=j} Z[i,p] Z[j,q] A[i,j] / sum_{i!=j} Z[i,p] Z[j,q]

    Args:
        adjacency: Dense symmetric 0/1 matrix.
        Z: Current memberships.
        epsilon: Clip distance from 0 and 1.
        fallback: Value for block pairs with no expected dyads.

    Returns:
        (clipped pi, raw pi); both symmetric.
    """
    edges, pairs = _pair_sums(adjacency, Z)
    raw = np.divide(
        edges,
        pairs,
        out=np.full_like(edges, fallback),
        where=pairs > PAIR_FLOOR,
    )
    raw = 0.5 * (raw + raw.T)
    return np.clip(raw, epsilon, 1.0 - epsilon), raw


def log_proportions(Z: np.ndarray, epsilon: float) -> np.ndarray:
    alpha = Z.mean(axis=0)
    return np.log(np.clip(alpha, epsilon, 1.0))


def e_step(
    adjacency: np.ndarray,
    Z: np.ndarray,
    connectivity: np.ndarray,
    log_alpha: np.ndarray | None = None,
) -> np.ndarray:
    """One sequential sweep of mean-field updates over all nodes.

    Z[i,p] is set proportional to
    exp(sum_{j!=i} sum_q Z[j,q] (A[i,j] log pi[p,q] + (1-A[i,j]) log(1-pi[p,q])))
    (times alpha_p when log_alpha is given), then the row is renormalized.

    Returns:
        Updated copy of Z.
    """
    log_pi = np.log(connectivity)
    log_not_pi = np.log1p(-connectivity)

    Z = Z.copy()
    s = Z.sum(axis=0)
    for i in range(Z.shape[0]):
        linked = adjacency[i] @ Z
        unlinked = s - Z[i] - linked
        logits = log_pi @ linked + log_not_pi @ unlinked
        if log_alpha is not None:
            logits += log_alpha
        row = np.exp(logits - logsumexp(logits))
        row = np.maximum(row, MEMBERSHIP_FLOOR)
        row /= row.sum()
        s += row - Z[i]
        Z[i] = row
    return Z


def expected_log_likelihood(
    adjacency: np.ndarray, Z: np.ndarray, connectivity: np.ndarray
) -> float:
    """E_Z[log p(A | labels, pi)] over unordered pairs i < j."""
    edges, pairs = _pair_sums(adjacency, Z)
    non_edges = pairs - edges
    total = np.sum(edges * np.log(connectivity)) + np.sum(
        non_edges * np.log1p(-connectivity)
    )
    return 0.5 * float(total)


def lower_bound(
    adjacency: np.ndarray,
    Z: np.ndarray,
    connectivity: np.ndarray,
    log_alpha: np.ndarray | None = None,
) -> float:
    """Variational lower bound: expected log-likelihood plus entropy of Z."""
    bound = expected_log_likelihood(adjacency, Z, connectivity)
    if log_alpha is not None:
        bound += float(Z.sum(axis=0) @ log_alpha)
    entropy = -float(np.sum(xlogy(Z, Z)))
    return bound + entropy


def run_variational_em(
    adjacency: np.ndarray,
    Z0: np.ndarray,
    *,
    restart: int,
    max_iterations: int,
    tolerance: float,
    epsilon: float,
    estimate_proportions: bool = False,
    time_budget: float | None = None,
) -> RestartResult:
    """Alternate E and M steps from an initial membership matrix.

    Stops when the lower bound changes by less than tolerance, or no
    membership moves by more than tolerance, or max_iterations is reached,
    or time_budget seconds have elapsed. The last two return the current
    state flagged as not converged.

    Args:
        adjacency: Dense symmetric 0/1 matrix (n x n), read only.
        Z0: Initial memberships (n x K), rows summing to 1.
        restart: Restart index, recorded on the result.
        max_iterations: E/M iteration cap.
        tolerance: Convergence tolerance.
        epsilon: Clip distance of pi from 0 and 1.
        estimate_proportions: Include block proportions alpha in the model.
        time_budget: Optional wall-clock budget in seconds.

    Returns:
        RestartResult for this run.
    """
    n, K = Z0.shape
    density = float(adjacency.sum() / (n * (n - 1))) if n > 1 else 0.0
    deadline = None if time_budget is None else time.monotonic() + time_budget

    Z = Z0
    pi, raw_pi = m_step(adjacency, Z, epsilon, density)
    log_alpha = log_proportions(Z, epsilon) if estimate_proportions else None
    bound = lower_bound(adjacency, Z, pi, log_alpha)

    stop_reason = "iteration_cap"
    iteration = 0
    for iteration in range(1, max_iterations + 1):
        Z_new = e_step(adjacency, Z, pi, log_alpha)
        pi, raw_pi = m_step(adjacency, Z_new, epsilon, density)
        if estimate_proportions:
            log_alpha = log_proportions(Z_new, epsilon)
        new_bound = lower_bound(adjacency, Z_new, pi, log_alpha)

        z_change = float(np.abs(Z_new - Z).max())
        bound_change = abs(new_bound - bound)
        log.debug(
            "K=%d restart=%d iter=%d: bound=%.6f (delta %.3g), max dZ=%.3g",
            K, restart, iteration, new_bound, bound_change, z_change,
        )
        Z, bound = Z_new, new_bound

        if bound_change < tolerance or z_change < tolerance:
            stop_reason = "converged"
            break
        if deadline is not None and time.monotonic() >= deadline:
            stop_reason = "time_budget"
            break

    return RestartResult(
        K=K,
        restart=restart,
        memberships=Z,
        connectivity=pi,
        raw_connectivity=raw_pi,
        log_proportions=log_alpha,
        lower_bound=bound,
        converged=stop_reason == "converged",
        iterations=iteration,
        stop_reason=stop_reason,
    )
