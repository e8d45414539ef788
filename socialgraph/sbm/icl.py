"""Integrated Completed Likelihood for Bernoulli SBM order selection.

Uses the penalty of Daudin, Picard & Robin (2008):

    ICL(K) = loglik - 1/2 * K(K+1)/2 * log(n(n-1)/2) - 1/2 * (K-1) * log(n)

The first term penalizes the K(K+1)/2 free connectivity parameters against
the number of observed dyads, the second the K-1 free block proportions
against the number of nodes.
"""

import math

import numpy as np

from socialgraph.sbm.variational import expected_log_likelihood


def icl_penalty(n: int, K: int) -> float:
    """Complexity penalty for a K-block model on n >= 2 nodes."""
    if n < 2:
        raise ValueError(f"ICL needs at least 2 nodes, got {n}")
    n_dyads = n * (n - 1) / 2.0
    n_connectivity = K * (K + 1) / 2.0
    return 0.5 * n_connectivity * math.log(n_dyads) + 0.5 * (K - 1) * math.log(n)


def integrated_completed_likelihood(
    adjacency: np.ndarray,
    memberships: np.ndarray,
    connectivity: np.ndarray,
    log_proportions: np.ndarray | None = None,
) -> tuple[float, float]:
    """ICL of a fitted model.

    Args:
        adjacency: Dense symmetric 0/1 matrix (n x n).
        memberships: Z (n x K).
        connectivity: Clipped pi (K x K).
        log_proportions: log alpha (K,) when block proportions are part of
            the model; adds the sum_i sum_p Z[i,p] log alpha_p term.

    Returns:
        (icl, log_likelihood)
    """
    n, K = memberships.shape
    loglik = expected_log_likelihood(adjacency, memberships, connectivity)
    if log_proportions is not None:
        loglik += float(memberships.sum(axis=0) @ log_proportions)
    return loglik - icl_penalty(n, K), loglik
